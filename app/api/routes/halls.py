from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.core.config import HALLS_CACHE_TTL
from app.core.dependencies import get_db, require_admin
from app.core.logging_config import get_logger
from app.core.redis import delete_cache, get_cache, set_cache
from app.models.hall import Hall
from app.models.user import User
from app.schemas.hall import (
    AvailabilityCheck,
    AvailabilityOut,
    BookedDatesOut,
    HallCreate,
    HallEnvelope,
    HallList,
    HallOut,
    HallUpdate,
)
from app.services.availability import booked_dates, is_available
from app.services.bookings import get_active_hall

router = APIRouter(prefix="/halls", tags=["Halls"])
logger = get_logger()

ALL_HALLS_CACHE_KEY = "halls:all"


def hall_cache_key(hall_id: int) -> str:
    return f"halls:{hall_id}"


def hall_json(hall: Hall) -> dict:
    return HallOut.model_validate(hall).model_dump(mode="json", by_alias=True)


# =====================================================================
# LIST HALLS (Guest / User)
# =====================================================================
@router.get("", response_model=HallList)
def list_halls(
    location: Optional[str] = None,
    amenity: Optional[str] = None,
    min_capacity: Optional[int] = Query(default=None, alias="minCapacity", ge=1),
    max_price: Optional[float] = Query(default=None, alias="maxPrice", gt=0),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
    db: Session = Depends(get_db),
):
    unfiltered = not any([location, amenity, min_capacity, max_price]) and page == 1

    if unfiltered:
        cached = get_cache(ALL_HALLS_CACHE_KEY)
        if cached is not None:
            return {"halls": cached[:limit], "count": len(cached[:limit])}

    query = db.query(Hall).filter(Hall.deleted == False)

    if location:
        query = query.filter(Hall.location.ilike(f"%{location}%"))
    if min_capacity:
        query = query.filter(Hall.capacity >= min_capacity)
    if max_price:
        query = query.filter(Hall.price_per_day <= max_price)

    halls = query.order_by(Hall.id).all()

    # Amenities live in a JSON list, so match them in Python
    if amenity:
        wanted = amenity.strip().lower()
        halls = [h for h in halls if wanted in (a.lower() for a in (h.amenities or []))]

    if unfiltered:
        set_cache(ALL_HALLS_CACHE_KEY, [hall_json(h) for h in halls], ttl=HALLS_CACHE_TTL)

    halls = halls[(page - 1) * limit: page * limit]
    return {"halls": [HallOut.model_validate(h) for h in halls], "count": len(halls)}


# =====================================================================
# CHECK AVAILABILITY
# =====================================================================
@router.post("/check-availability", response_model=AvailabilityOut)
def check_availability(data: AvailabilityCheck, db: Session = Depends(get_db)):
    hall = get_active_hall(db, data.hall_id)
    return {"is_available": is_available(db, hall.id, data.start_date, data.end_date)}


# =====================================================================
# HALL DETAILS
# =====================================================================
@router.get("/{hall_id}", response_model=HallEnvelope)
def get_hall(hall_id: int, db: Session = Depends(get_db)):
    cached = get_cache(hall_cache_key(hall_id))
    if cached is not None:
        return {"hall": cached}

    hall = get_active_hall(db, hall_id)
    set_cache(hall_cache_key(hall_id), hall_json(hall), ttl=HALLS_CACHE_TTL)
    return {"hall": HallOut.model_validate(hall)}


# =====================================================================
# BOOKED DATES FOR A MONTH
# =====================================================================
@router.get("/{hall_id}/booked-dates", response_model=BookedDatesOut)
def hall_booked_dates(hall_id: int, month: str, db: Session = Depends(get_db)):
    try:
        year, month_num = map(int, month.split("-"))
        start_date = date(year, month_num, 1)
        end_date = (date(year + month_num // 12, (month_num % 12) + 1, 1)
                    - timedelta(days=1))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid month format (YYYY-MM)")

    hall = get_active_hall(db, hall_id)

    return {
        "hall_id": hall.id,
        "month": month,
        "booked_dates": booked_dates(db, hall.id, start_date, end_date),
    }


# =====================================================================
# CREATE HALL (Admin Only)
# =====================================================================
@router.post("", response_model=HallEnvelope, status_code=status.HTTP_201_CREATED)
def create_hall(
    data: HallCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    hall = Hall(**data.model_dump(), deleted=False)

    db.add(hall)
    db.commit()
    db.refresh(hall)

    delete_cache(ALL_HALLS_CACHE_KEY)
    logger.bind(log_type="admin").info(f"Hall Created | Hall={hall.id} | Admin={admin.id}")

    return {"hall": HallOut.model_validate(hall)}


# =====================================================================
# EDIT HALL (Admin Only)
# =====================================================================
@router.patch("/{hall_id}", response_model=HallEnvelope)
def update_hall(
    hall_id: int,
    data: HallUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    hall = get_active_hall(db, hall_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(hall, field, value)

    db.commit()
    db.refresh(hall)

    delete_cache(ALL_HALLS_CACHE_KEY, hall_cache_key(hall.id))
    logger.bind(log_type="admin").info(f"Hall Updated | Hall={hall.id} | Admin={admin.id}")

    return {"hall": HallOut.model_validate(hall)}


# =====================================================================
# DELETE HALL (Admin Only, soft delete)
# =====================================================================
@router.delete("/{hall_id}")
def delete_hall(
    hall_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    hall = get_active_hall(db, hall_id)

    # Bookings keep pointing at the hall, so it is only hidden
    hall.deleted = True
    db.commit()

    delete_cache(ALL_HALLS_CACHE_KEY, hall_cache_key(hall.id))
    logger.bind(log_type="admin").info(f"Hall Deleted | Hall={hall.id} | Admin={admin.id}")

    return {"message": "Hall removed"}

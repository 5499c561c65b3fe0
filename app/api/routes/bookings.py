from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_user, get_db, require_admin
from app.models.enums import BookingStatus
from app.models.user import User
from app.schemas.booking import BookingCreate, BookingEnvelope, BookingList, BookingOut, BookingStatusUpdate
from app.services import bookings as booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def booking_list(bookings) -> dict:
    return {"bookings": [BookingOut.model_validate(b) for b in bookings], "count": len(bookings)}


# ---------------------------------------------------------------------
# ADMIN: ALL BOOKINGS
# ---------------------------------------------------------------------
@router.get("/admin", response_model=BookingList)
def admin_bookings(
    status: Optional[BookingStatus] = None,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return booking_list(booking_service.list_all_bookings(db, status))


# ---------------------------------------------------------------------
# USER: MY BOOKINGS
# ---------------------------------------------------------------------
@router.get("/my-bookings", response_model=BookingList)
def my_bookings(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return booking_list(booking_service.list_user_bookings(db, user))


# ---------------------------------------------------------------------
# SINGLE BOOKING
# ---------------------------------------------------------------------
@router.get("/{booking_id}", response_model=BookingEnvelope)
def get_booking(booking_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    booking = booking_service.get_booking(db, booking_id, user)
    return {"booking": BookingOut.model_validate(booking)}


# ---------------------------------------------------------------------
# CREATE BOOKING
# ---------------------------------------------------------------------
@router.post("", response_model=BookingEnvelope, status_code=201)
def create_booking(data: BookingCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    booking = booking_service.create_booking(
        db,
        user,
        hall_id=data.hall_id,
        start_date=data.start_date,
        guest_count=data.guest_count,
        special_requests=data.special_requests,
    )
    return {"booking": BookingOut.model_validate(booking)}


# ---------------------------------------------------------------------
# UPDATE STATUS (Admin)
# ---------------------------------------------------------------------
@router.patch("/{booking_id}/status", response_model=BookingEnvelope)
def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    booking = booking_service.update_status(db, booking_id, data.status, admin)
    return {"booking": BookingOut.model_validate(booking)}


# ---------------------------------------------------------------------
# CANCEL BOOKING (Owner or Admin)
# ---------------------------------------------------------------------
@router.patch("/{booking_id}/cancel", response_model=BookingEnvelope)
def cancel_booking(booking_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    booking = booking_service.cancel_booking(db, booking_id, user)
    return {"booking": BookingOut.model_validate(booking)}

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.dependencies import get_db, require_admin
from app.core.logging_config import get_logger
from app.models.booking import Booking
from app.models.enums import BookingStatus, PaymentStatus, UserRole
from app.models.hall import Hall
from app.models.payment import Payment
from app.models.user import User
from app.schemas.admin import DashboardOut, HallRevenue
from app.schemas.booking import BookingOut
from app.schemas.payment import PaymentOut
from app.schemas.user import UserList, UserOut

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = get_logger()

RECENT_LIMIT = 5


# ==================================================
# DASHBOARD
# ==================================================
@router.get("/dashboard", response_model=DashboardOut)
def dashboard(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    status_counts = dict(
        db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
    )

    total_revenue = db.query(func.sum(Payment.amount)).filter(
        Payment.status == PaymentStatus.COMPLETED
    ).scalar()

    recent_bookings = (
        db.query(Booking)
        .options(joinedload(Booking.hall), joinedload(Booking.user))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )

    recent_payments = (
        db.query(Payment)
        .options(joinedload(Payment.booking))
        .filter(Payment.status == PaymentStatus.COMPLETED)
        .order_by(Payment.paid_at.desc(), Payment.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )

    logger.bind(log_type="admin").info(f"Admin viewed dashboard | Admin={admin.id}")

    return {
        "stats": {
            "total_users": db.query(User).filter(User.role == UserRole.CUSTOMER).count(),
            "total_halls": db.query(Hall).filter(Hall.deleted == False).count(),
            "total_bookings": sum(status_counts.values()),
            "pending_bookings": status_counts.get(BookingStatus.PENDING, 0),
            "confirmed_bookings": status_counts.get(BookingStatus.CONFIRMED, 0),
            "cancelled_bookings": status_counts.get(BookingStatus.CANCELLED, 0),
            "completed_bookings": status_counts.get(BookingStatus.COMPLETED, 0),
            "total_revenue": float(total_revenue or 0),
        },
        "recent_bookings": [BookingOut.model_validate(b) for b in recent_bookings],
        "recent_payments": [PaymentOut.model_validate(p) for p in recent_payments],
    }


# ==================================================
# CUSTOMERS
# ==================================================
@router.get("/users", response_model=UserList)
def list_customers(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    users = db.query(User).filter(User.role == UserRole.CUSTOMER).order_by(User.id).all()
    return {"users": [UserOut.model_validate(u) for u in users], "count": len(users)}


# ==================================================
# REVENUE PER HALL
# ==================================================
@router.get("/revenue/halls", response_model=list[HallRevenue])
def revenue_per_hall(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    results = (
        db.query(
            Hall.id,
            Hall.name,
            func.sum(Payment.amount).label("revenue"),
        )
        .join(Booking, Booking.hall_id == Hall.id)
        .join(Payment, Payment.booking_id == Booking.id)
        .filter(Payment.status == PaymentStatus.COMPLETED)
        .group_by(Hall.id, Hall.name)
        .order_by(func.sum(Payment.amount).desc())
        .all()
    )

    logger.bind(log_type="admin").info("Admin checked revenue per hall")

    return [
        {"hall_id": r.id, "hall_name": r.name, "revenue": float(r.revenue or 0)}
        for r in results
    ]

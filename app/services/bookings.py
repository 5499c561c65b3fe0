"""
Booking lifecycle: creation, status changes and cancellation.

Status moves only along ``ALLOWED_TRANSITIONS``::

    pending -> confirmed -> completed
    pending | confirmed -> cancelled

A non-cancelled booking holds one ``BookingDay`` row per day it covers.
Those rows carry a (hall_id, day) unique constraint, so two overlapping
bookings can never both commit even when both pass ``is_available``.
"""

from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.core.logging_config import get_logger
from app.models.booking import Booking, BookingDay
from app.models.enums import BookingStatus, NotificationType, RelatedModel
from app.models.hall import Hall
from app.models.user import User
from app.services.availability import is_available
from app.services.notifications import NotificationEvent, dispatch
from app.utils.pricing import booking_end_date, calculate_total_amount, days_in_range

logger = get_logger()

SPECIAL_REQUESTS_MAX_LENGTH = 500

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}


def validate_transition(current: BookingStatus, target: BookingStatus):
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(current.value, target.value)


def can_access(booking: Booking, actor: User) -> bool:
    return actor.is_admin or booking.user_id == actor.id


def get_active_hall(db: Session, hall_id: int) -> Hall:
    hall = db.query(Hall).filter(Hall.id == hall_id, Hall.deleted == False).first()
    if not hall:
        raise NotFoundError(f"No hall with id: {hall_id}")
    return hall


def _get_booking(db: Session, booking_id: int) -> Booking:
    booking = (
        db.query(Booking)
        .options(joinedload(Booking.hall), joinedload(Booking.user))
        .filter(Booking.id == booking_id)
        .first()
    )
    if not booking:
        raise NotFoundError(f"No booking with id: {booking_id}")
    return booking


def _release_days(booking: Booking):
    booking.days.clear()


# ---------------------------------------------------------------------
# CREATE
# ---------------------------------------------------------------------
def create_booking(
    db: Session,
    actor: User,
    hall_id: int,
    start_date: date,
    guest_count: int,
    special_requests: Optional[str] = None,
) -> Booking:
    hall = get_active_hall(db, hall_id)

    end_date = booking_end_date(start_date)
    total_amount = calculate_total_amount(hall.price_per_day, start_date, end_date)

    # ---- GUESTS ----
    if guest_count < 1:
        raise ValidationError("Guest count must be at least 1")

    if guest_count > hall.capacity:
        raise ValidationError(
            f"Guest count {guest_count} exceeds hall capacity of {hall.capacity}"
        )

    if special_requests and len(special_requests) > SPECIAL_REQUESTS_MAX_LENGTH:
        raise ValidationError(
            f"Special requests cannot be more than {SPECIAL_REQUESTS_MAX_LENGTH} characters"
        )

    # ---- AVAILABILITY ----
    if not hall.availability:
        raise ConflictError(f"{hall.name} is not accepting bookings")

    if not is_available(db, hall.id, start_date, end_date):
        raise ConflictError("Hall is not available for the selected dates")

    booking = Booking(
        user_id=actor.id,
        hall_id=hall.id,
        start_date=start_date,
        end_date=end_date,
        guest_count=guest_count,
        total_amount=total_amount,
        special_requests=special_requests,
        status=BookingStatus.PENDING,
    )
    booking.days = [BookingDay(hall_id=hall.id, day=d) for d in days_in_range(start_date, end_date)]

    db.add(booking)
    try:
        db.commit()
    except IntegrityError:
        # Lost the race to a concurrent booking for the same days
        db.rollback()
        logger.bind(log_type="booking").warning(
            f"Booking Conflict | User={actor.id} | Hall={hall.id} | Start={start_date}"
        )
        raise ConflictError("Hall is not available for the selected dates")

    db.refresh(booking)

    logger.bind(log_type="booking").info(
        f"Booking Created | Booking={booking.id} | User={actor.id} | Hall={hall.id} | Amount={total_amount}"
    )

    dispatch(db, NotificationEvent(
        type=NotificationType.BOOKING,
        owner_id=actor.id,
        owner_title="Booking Created",
        owner_message=(
            f"Your booking for {hall.name} has been created successfully. "
            "Please complete the payment to confirm your booking."
        ),
        admin_title="New Booking",
        admin_message=f"A new booking has been created for {hall.name}.",
        related_model=RelatedModel.BOOKING,
        related_id=booking.id,
    ))

    return booking


# ---------------------------------------------------------------------
# STATUS CHANGES
# ---------------------------------------------------------------------
def update_status(db: Session, booking_id: int, new_status: BookingStatus, actor: User) -> Booking:
    if not actor.is_admin:
        raise ForbiddenError("Only admins can change booking status")

    booking = _get_booking(db, booking_id)
    previous = booking.status
    validate_transition(previous, new_status)

    booking.status = new_status
    if new_status == BookingStatus.CANCELLED:
        _release_days(booking)

    db.commit()
    db.refresh(booking)

    logger.bind(log_type="admin").info(
        f"Booking Status Updated | Booking={booking.id} | {previous.value} -> {new_status.value} | Admin={actor.id}"
    )

    dispatch(db, NotificationEvent(
        type=NotificationType.BOOKING,
        owner_id=booking.user_id,
        owner_title="Booking Status Updated",
        owner_message=f"Your booking for {booking.hall.name} has been {new_status.value}.",
        related_model=RelatedModel.BOOKING,
        related_id=booking.id,
    ))

    return booking


def cancel_booking(db: Session, booking_id: int, actor: User) -> Booking:
    booking = _get_booking(db, booking_id)

    if not can_access(booking, actor):
        raise ForbiddenError("Not authorized to cancel this booking")

    if booking.status == BookingStatus.COMPLETED:
        raise InvalidStateError("Cannot cancel a completed booking")

    validate_transition(booking.status, BookingStatus.CANCELLED)

    booking.status = BookingStatus.CANCELLED
    _release_days(booking)
    db.commit()
    db.refresh(booking)

    logger.bind(log_type="booking").info(
        f"Booking Cancelled | Booking={booking.id} | By={actor.id} ({actor.role.value})"
    )

    dispatch(db, NotificationEvent(
        type=NotificationType.BOOKING,
        owner_id=booking.user_id,
        owner_title="Booking Cancelled",
        owner_message="Your booking has been cancelled successfully.",
        admin_title="Booking Cancelled",
        admin_message="A booking has been cancelled.",
        related_model=RelatedModel.BOOKING,
        related_id=booking.id,
    ))

    return booking


# ---------------------------------------------------------------------
# READS
# ---------------------------------------------------------------------
def get_booking(db: Session, booking_id: int, actor: User) -> Booking:
    booking = _get_booking(db, booking_id)
    if not can_access(booking, actor):
        raise ForbiddenError("Not authorized to access this booking")
    return booking


def list_user_bookings(db: Session, user: User):
    return (
        db.query(Booking)
        .options(joinedload(Booking.hall))
        .filter(Booking.user_id == user.id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )


def list_all_bookings(db: Session, status: Optional[BookingStatus] = None):
    query = db.query(Booking).options(joinedload(Booking.hall), joinedload(Booking.user))
    if status:
        query = query.filter(Booking.status == status)
    return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

from datetime import date

from sqlalchemy.orm import Session

from app.models.booking import Booking
from app.models.enums import BookingStatus
from app.utils.pricing import days_in_range


def overlapping_bookings(db: Session, hall_id: int, start_date: date, end_date: date):
    """Non-cancelled bookings of a hall whose dates touch [start_date, end_date].

    Both bounds are inclusive, so a booking ending on the day another starts
    counts as overlapping.
    """
    return db.query(Booking).filter(
        Booking.hall_id == hall_id,
        Booking.status != BookingStatus.CANCELLED,
        Booking.start_date <= end_date,
        Booking.end_date >= start_date,
    )


def is_available(db: Session, hall_id: int, start_date: date, end_date: date) -> bool:
    conflict = overlapping_bookings(db, hall_id, start_date, end_date).with_entities(Booking.id).first()
    return conflict is None


def booked_dates(db: Session, hall_id: int, start_date: date, end_date: date) -> list[date]:
    """Days of [start_date, end_date] already held by a non-cancelled booking."""
    booked = set()

    for b in overlapping_bookings(db, hall_id, start_date, end_date).all():
        d = max(b.start_date, start_date)
        last = min(b.end_date, end_date)
        booked.update(days_in_range(d, last))

    return sorted(booked)

"""
Unit tests for the booking lifecycle: creation, status changes, cancellation.
"""

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.models.booking import Booking, BookingDay
from app.models.enums import BookingStatus, NotificationType, RelatedModel, UserRole
from app.models.notification import Notification
from app.services import bookings as booking_service
from app.services import notifications as notification_service
from conftest import make_hall, make_user


def non_cancelled(db, hall):
    return db.query(Booking).filter(
        Booking.hall_id == hall.id,
        Booking.status != BookingStatus.CANCELLED,
    ).all()


class TestCreateBooking:

    def test_create_booking_success(self, db, customer, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 80, "Flowers please")

        assert booking.id is not None
        assert booking.status == BookingStatus.PENDING
        assert booking.start_date == event_day
        assert booking.end_date == event_day + timedelta(days=1)
        assert booking.total_amount == 5000
        assert booking.special_requests == "Flowers please"
        assert sorted(d.day for d in booking.days) == [event_day, event_day + timedelta(days=1)]

    def test_unknown_hall_is_not_found(self, db, customer, event_day):
        with pytest.raises(NotFoundError):
            booking_service.create_booking(db, customer, 999, event_day, 10)

    def test_deleted_hall_is_not_found(self, db, customer, event_day):
        hall = make_hall(db, deleted=True)

        with pytest.raises(NotFoundError):
            booking_service.create_booking(db, customer, hall.id, event_day, 10)

    def test_guest_count_above_capacity_is_rejected(self, db, customer, hall, event_day):
        with pytest.raises(ValidationError):
            booking_service.create_booking(db, customer, hall.id, event_day, hall.capacity + 1)

        assert db.query(Booking).count() == 0

    def test_guest_count_equal_to_capacity_is_allowed(self, db, customer, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, hall.capacity)
        assert booking.guest_count == hall.capacity

    def test_zero_guests_is_rejected(self, db, customer, hall, event_day):
        with pytest.raises(ValidationError):
            booking_service.create_booking(db, customer, hall.id, event_day, 0)

    def test_fixed_calendar_date_flow(self, db, customer, other_customer, hall):
        first = booking_service.create_booking(db, customer, hall.id, date(2025, 6, 1), 10)

        assert first.status == BookingStatus.PENDING
        assert first.end_date == date(2025, 6, 2)
        assert first.total_amount == 5000

        with pytest.raises(ConflictError):
            booking_service.create_booking(db, other_customer, hall.id, date(2025, 6, 1), 10)

        booking_service.cancel_booking(db, first.id, customer)

        second = booking_service.create_booking(db, other_customer, hall.id, date(2025, 6, 1), 10)
        assert second.status == BookingStatus.PENDING
        assert second.total_amount == 5000

    def test_too_long_special_requests_are_rejected(self, db, customer, hall, event_day):
        with pytest.raises(ValidationError):
            booking_service.create_booking(db, customer, hall.id, event_day, 10, "x" * 501)

    def test_switched_off_hall_refuses_bookings(self, db, customer, event_day):
        hall = make_hall(db, availability=False)

        with pytest.raises(ConflictError):
            booking_service.create_booking(db, customer, hall.id, event_day, 10)

    def test_same_day_twice_conflicts_until_cancelled(self, db, customer, other_customer, hall, event_day):
        first = booking_service.create_booking(db, customer, hall.id, event_day, 50)

        with pytest.raises(ConflictError):
            booking_service.create_booking(db, other_customer, hall.id, event_day, 50)

        booking_service.cancel_booking(db, first.id, customer)

        second = booking_service.create_booking(db, other_customer, hall.id, event_day, 50)
        assert second.status == BookingStatus.PENDING

    def test_back_to_back_days_conflict(self, db, customer, hall, event_day):
        booking_service.create_booking(db, customer, hall.id, event_day, 50)

        with pytest.raises(ConflictError):
            booking_service.create_booking(db, customer, hall.id, event_day + timedelta(days=1), 50)

    def test_storage_constraint_blocks_race(self, db, customer, other_customer, hall, event_day, monkeypatch):
        """Both requests pass the read check, only the first can commit."""
        monkeypatch.setattr(booking_service, "is_available", lambda *args: True)

        booking_service.create_booking(db, customer, hall.id, event_day, 50)

        with pytest.raises(ConflictError):
            booking_service.create_booking(db, other_customer, hall.id, event_day, 50)

        with pytest.raises(ConflictError):
            booking_service.create_booking(db, other_customer, hall.id, event_day + timedelta(days=1), 50)

        assert len(non_cancelled(db, hall)) == 1
        assert db.query(BookingDay).count() == 2

    def test_non_cancelled_bookings_never_overlap(self, db, customer, hall, event_day):
        for offset in range(6):
            try:
                booking_service.create_booking(db, customer, hall.id, event_day + timedelta(days=offset), 10)
            except ConflictError:
                pass

        bookings = non_cancelled(db, hall)
        assert len(bookings) == 3
        for a in bookings:
            for b in bookings:
                if a.id != b.id:
                    assert not (a.start_date <= b.end_date and a.end_date >= b.start_date)

    def test_notifies_owner_and_every_admin(self, db, customer, admin, hall, event_day):
        second_admin = make_user(db, name="Admin 2", email="admin2@example.com", role=UserRole.ADMIN)

        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)

        owner_rows = db.query(Notification).filter(Notification.recipient_id == customer.id).all()
        assert [n.title for n in owner_rows] == ["Booking Created"]
        assert owner_rows[0].type == NotificationType.BOOKING
        assert owner_rows[0].related_model == RelatedModel.BOOKING
        assert owner_rows[0].related_id == booking.id

        admin_rows = db.query(Notification).filter(Notification.title == "New Booking").all()
        assert sorted(n.recipient_id for n in admin_rows) == sorted([admin.id, second_admin.id])

    def test_notification_failure_does_not_block_booking(self, db, customer, admin, hall, event_day, monkeypatch):
        def broken_insert(*args, **kwargs):
            raise SQLAlchemyError("notifications table is gone")

        monkeypatch.setattr(notification_service, "insert", broken_insert)

        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)

        assert db.query(Booking).filter(Booking.id == booking.id).count() == 1
        assert db.query(Notification).count() == 0


class TestCancelBooking:

    def test_owner_cancels_pending_booking(self, db, customer, admin, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)

        cancelled = booking_service.cancel_booking(db, booking.id, customer)

        assert cancelled.status == BookingStatus.CANCELLED
        assert db.query(BookingDay).filter(BookingDay.booking_id == booking.id).count() == 0
        assert db.query(Notification).filter(
            Notification.recipient_id == customer.id,
            Notification.title == "Booking Cancelled",
        ).count() == 1
        assert db.query(Notification).filter(
            Notification.recipient_id == admin.id,
            Notification.title == "Booking Cancelled",
        ).count() == 1

    def test_admin_cancels_confirmed_booking(self, db, customer, admin, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)
        booking_service.update_status(db, booking.id, BookingStatus.CONFIRMED, admin)

        cancelled = booking_service.cancel_booking(db, booking.id, admin)

        assert cancelled.status == BookingStatus.CANCELLED

    def test_other_customer_is_forbidden(self, db, customer, other_customer, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)

        with pytest.raises(ForbiddenError):
            booking_service.cancel_booking(db, booking.id, other_customer)

        db.refresh(booking)
        assert booking.status == BookingStatus.PENDING

    def test_completed_booking_cannot_be_cancelled(self, db, customer, admin, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)
        booking_service.update_status(db, booking.id, BookingStatus.CONFIRMED, admin)
        booking_service.update_status(db, booking.id, BookingStatus.COMPLETED, admin)

        with pytest.raises(InvalidStateError):
            booking_service.cancel_booking(db, booking.id, customer)

        db.refresh(booking)
        assert booking.status == BookingStatus.COMPLETED

    def test_cancelling_twice_is_invalid(self, db, customer, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)
        booking_service.cancel_booking(db, booking.id, customer)

        with pytest.raises(InvalidTransitionError):
            booking_service.cancel_booking(db, booking.id, customer)

    def test_missing_booking_is_not_found(self, db, customer):
        with pytest.raises(NotFoundError):
            booking_service.cancel_booking(db, 12345, customer)


class TestUpdateStatus:

    def test_full_happy_path(self, db, customer, admin, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)

        booking = booking_service.update_status(db, booking.id, BookingStatus.CONFIRMED, admin)
        assert booking.status == BookingStatus.CONFIRMED

        booking = booking_service.update_status(db, booking.id, BookingStatus.COMPLETED, admin)
        assert booking.status == BookingStatus.COMPLETED

        titles = [
            n.title for n in db.query(Notification).filter(Notification.recipient_id == customer.id)
        ]
        assert titles.count("Booking Status Updated") == 2

    @pytest.mark.parametrize("start, target", [
        (BookingStatus.PENDING, BookingStatus.COMPLETED),
        (BookingStatus.PENDING, BookingStatus.PENDING),
        (BookingStatus.CANCELLED, BookingStatus.PENDING),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED),
        (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
        (BookingStatus.COMPLETED, BookingStatus.CONFIRMED),
    ])
    def test_illegal_transitions_are_rejected(self, db, customer, admin, hall, event_day, start, target):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)
        booking.status = start
        db.commit()

        with pytest.raises(InvalidTransitionError):
            booking_service.update_status(db, booking.id, target, admin)

        db.refresh(booking)
        assert booking.status == start

    def test_customer_cannot_change_status(self, db, customer, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)

        with pytest.raises(ForbiddenError):
            booking_service.update_status(db, booking.id, BookingStatus.CONFIRMED, customer)

    def test_cancel_through_status_frees_the_dates(self, db, customer, other_customer, admin, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)

        booking_service.update_status(db, booking.id, BookingStatus.CANCELLED, admin)

        again = booking_service.create_booking(db, other_customer, hall.id, event_day, 10)
        assert again.status == BookingStatus.PENDING


class TestReads:

    def test_owner_and_admin_can_read(self, db, customer, admin, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)

        assert booking_service.get_booking(db, booking.id, customer).id == booking.id
        assert booking_service.get_booking(db, booking.id, admin).id == booking.id

    def test_stranger_cannot_read(self, db, customer, other_customer, hall, event_day):
        booking = booking_service.create_booking(db, customer, hall.id, event_day, 10)

        with pytest.raises(ForbiddenError):
            booking_service.get_booking(db, booking.id, other_customer)

    def test_list_user_bookings_only_returns_own(self, db, customer, other_customer, hall, event_day):
        booking_service.create_booking(db, customer, hall.id, event_day, 10)
        booking_service.create_booking(db, other_customer, hall.id, event_day + timedelta(days=5), 10)

        mine = booking_service.list_user_bookings(db, customer)
        assert [b.user_id for b in mine] == [customer.id]
        assert len(booking_service.list_all_bookings(db)) == 2
        assert len(booking_service.list_all_bookings(db, BookingStatus.CANCELLED)) == 0

"""
Unit tests for notification fan-out and the recipient-side operations.
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import ForbiddenError, NotFoundError
from app.models.enums import NotificationType, RelatedModel, UserRole
from app.models.notification import Notification
from app.services import notifications as notification_service
from app.services.notifications import NotificationEvent, dispatch, notify
from conftest import make_user


class TestDispatch:

    def test_event_fans_out_to_owner_and_admins(self, db, customer, admin):
        other_admin = make_user(db, name="Second Admin", email="second@example.com", role=UserRole.ADMIN)

        written = dispatch(db, NotificationEvent(
            type=NotificationType.BOOKING,
            owner_id=customer.id,
            owner_title="Booking Created",
            owner_message="Your booking was created.",
            admin_title="New Booking",
            admin_message="A booking was created.",
            related_model=RelatedModel.BOOKING,
            related_id=7,
        ))

        assert written == 3
        rows = db.query(Notification).order_by(Notification.recipient_id).all()
        assert {(n.recipient_id, n.title) for n in rows} == {
            (customer.id, "Booking Created"),
            (admin.id, "New Booking"),
            (other_admin.id, "New Booking"),
        }
        assert all(n.read is False for n in rows)
        assert all(n.related_id == 7 for n in rows)

    def test_owner_only_event(self, db, customer, admin):
        written = dispatch(db, NotificationEvent(
            type=NotificationType.BOOKING,
            owner_id=customer.id,
            owner_title="Booking Status Updated",
            owner_message="Your booking has been confirmed.",
        ))

        assert written == 1
        assert db.query(Notification).filter(Notification.recipient_id == admin.id).count() == 0

    def test_no_admins_means_owner_only(self, db, customer):
        written = dispatch(db, NotificationEvent(
            type=NotificationType.PAYMENT,
            owner_id=customer.id,
            owner_title="Payment Successful",
            owner_message="Paid.",
            admin_title="New Payment",
            admin_message="Someone paid.",
        ))

        assert written == 1

    def test_write_failure_is_swallowed_and_logged(self, db, customer, monkeypatch):
        def broken_insert(*args, **kwargs):
            raise SQLAlchemyError("boom")

        monkeypatch.setattr(notification_service, "insert", broken_insert)

        written = notify(db, customer.id, "Hello", "World")

        assert written == 0
        assert db.query(Notification).count() == 0

    def test_notify_defaults_to_system_type(self, db, customer):
        notify(db, customer.id, "Maintenance", "Scheduled downtime tonight")

        row = db.query(Notification).one()
        assert row.type == NotificationType.SYSTEM
        assert row.related_model is None


class TestRecipientOperations:

    def test_list_is_newest_first_and_scoped(self, db, customer, other_customer):
        notify(db, customer.id, "First", "1")
        notify(db, customer.id, "Second", "2")
        notify(db, other_customer.id, "Not yours", "3")

        titles = [n.title for n in notification_service.list_notifications(db, customer)]
        assert titles == ["Second", "First"]

    def test_mark_read(self, db, customer):
        notify(db, customer.id, "Hello", "World")
        row = db.query(Notification).one()

        updated = notification_service.mark_read(db, row.id, customer)

        assert updated.read is True
        assert notification_service.unread_count(db, customer) == 0

    def test_mark_read_of_someone_else_is_forbidden(self, db, customer, other_customer):
        notify(db, customer.id, "Hello", "World")
        row = db.query(Notification).one()

        with pytest.raises(ForbiddenError):
            notification_service.mark_read(db, row.id, other_customer)

    def test_mark_read_of_missing_notification(self, db, customer):
        with pytest.raises(NotFoundError):
            notification_service.mark_read(db, 404, customer)

    def test_mark_all_read_only_touches_own(self, db, customer, other_customer):
        notify(db, customer.id, "A", "a")
        notify(db, customer.id, "B", "b")
        notify(db, other_customer.id, "C", "c")

        assert notification_service.mark_all_read(db, customer) == 2
        assert notification_service.unread_count(db, customer) == 0
        assert notification_service.unread_count(db, other_customer) == 1

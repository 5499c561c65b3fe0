"""
Notification dispatch and the recipient-side read operations.

Lifecycle operations describe what happened as one ``NotificationEvent``;
``dispatch`` resolves it to one row per recipient (the booking owner and,
when an admin message is set, every admin) and writes them in a single
bulk insert. Dispatch is best-effort: it runs after the primary operation
has committed and a failing write is logged, never raised.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import ForbiddenError, NotFoundError
from app.core.logging_config import get_logger
from app.models.enums import NotificationType, RelatedModel, UserRole
from app.models.notification import Notification
from app.models.user import User

logger = get_logger()


@dataclass
class NotificationEvent:
    type: NotificationType
    owner_id: Optional[int] = None
    owner_title: Optional[str] = None
    owner_message: Optional[str] = None
    admin_title: Optional[str] = None
    admin_message: Optional[str] = None
    related_model: Optional[RelatedModel] = None
    related_id: Optional[int] = None


def _row(recipient_id, title, message, type_, related_model, related_id):
    return {
        "recipient_id": recipient_id,
        "title": title,
        "message": message,
        "type": type_,
        "read": False,
        "related_model": related_model,
        "related_id": related_id,
    }


def admin_ids(db: Session) -> list[int]:
    return [uid for (uid,) in db.query(User.id).filter(User.role == UserRole.ADMIN).all()]


def resolve_recipients(db: Session, event: NotificationEvent) -> list[dict]:
    rows = []

    if event.owner_id is not None and event.owner_title:
        rows.append(_row(
            event.owner_id, event.owner_title, event.owner_message,
            event.type, event.related_model, event.related_id,
        ))

    if event.admin_title:
        for aid in admin_ids(db):
            rows.append(_row(
                aid, event.admin_title, event.admin_message,
                event.type, event.related_model, event.related_id,
            ))

    return rows


def _write(db: Session, rows: list[dict], label: str) -> int:
    if not rows:
        return 0

    try:
        db.execute(insert(Notification), rows)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.bind(log_type="infra").error(f"Notification write failed | {label} | {e}")
        return 0

    return len(rows)


def dispatch(db: Session, event: NotificationEvent) -> int:
    """Write one notification per recipient of ``event``; returns rows written."""
    try:
        rows = resolve_recipients(db, event)
    except SQLAlchemyError as e:
        db.rollback()
        logger.bind(log_type="infra").error(f"Notification fan-out failed | {event.owner_title} | {e}")
        return 0

    written = _write(db, rows, event.owner_title or event.admin_title)
    logger.debug(f"Notification dispatched | {event.type.value} | recipients={written}")
    return written


def notify(
    db: Session,
    recipient_id: int,
    title: str,
    message: str,
    type_: NotificationType = NotificationType.SYSTEM,
    related_to: Optional[tuple[RelatedModel, int]] = None,
) -> int:
    related_model, related_id = related_to if related_to else (None, None)
    return _write(db, [_row(recipient_id, title, message, type_, related_model, related_id)], title)


# ---------------------------------------------------------------------
# RECIPIENT SIDE
# ---------------------------------------------------------------------
def list_notifications(db: Session, user: User):
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )


def unread_count(db: Session, user: User) -> int:
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == user.id, Notification.read == False)
        .count()
    )


def mark_read(db: Session, notification_id: int, user: User) -> Notification:
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        raise NotFoundError(f"No notification with id: {notification_id}")

    if notification.recipient_id != user.id:
        raise ForbiddenError("Not authorized to update this notification")

    notification.read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_read(db: Session, user: User) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.recipient_id == user.id, Notification.read == False)
        .update({"read": True}, synchronize_session=False)
    )
    db.commit()
    return updated

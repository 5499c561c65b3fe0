from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_user, get_db
from app.models.user import User
from app.schemas.notification import NotificationEnvelope, NotificationList, NotificationOut, UnreadCount
from app.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationList)
def my_notifications(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    notifications = notification_service.list_notifications(db, user)
    return {
        "notifications": [NotificationOut.model_validate(n) for n in notifications],
        "count": len(notifications),
    }


# Polled by the client for the unread badge
@router.get("/unread-count", response_model=UnreadCount)
def unread_count(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"count": notification_service.unread_count(db, user)}


@router.patch("/read-all")
def mark_all_read(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    updated = notification_service.mark_all_read(db, user)
    return {"message": "All notifications marked as read", "updated": updated}


@router.patch("/{notification_id}/read", response_model=NotificationEnvelope)
def mark_read(notification_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    notification = notification_service.mark_read(db, notification_id, user)
    return {"notification": NotificationOut.model_validate(notification)}

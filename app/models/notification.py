from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.session import Base, TimestampMixin
from app.models.enums import NotificationType, RelatedModel


class Notification(Base, TimestampMixin):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    message = Column(String, nullable=False)
    type = Column(
        Enum(NotificationType, name="notificationtype", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=NotificationType.SYSTEM,
    )
    read = Column(Boolean, nullable=False, default=False)

    # Optional pointer to the record the notification is about
    related_model = Column(
        Enum(RelatedModel, name="relatedmodel", values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    related_id = Column(Integer, nullable=True)

    recipient = relationship("User", back_populates="notifications")

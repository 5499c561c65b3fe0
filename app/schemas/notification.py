from datetime import datetime
from typing import List, Optional

from pydantic import Field, computed_field

from app.models.enums import NotificationType, RelatedModel
from app.schemas.base import CamelModel


class RelatedTo(CamelModel):
    model: RelatedModel
    id: int


class NotificationOut(CamelModel):
    id: int
    recipient_id: int
    title: str
    message: str
    type: NotificationType
    read: bool
    created_at: datetime

    related_model: Optional[RelatedModel] = Field(default=None, exclude=True)
    related_id: Optional[int] = Field(default=None, exclude=True)

    @computed_field(alias="relatedTo")
    @property
    def related_to(self) -> Optional[RelatedTo]:
        if self.related_model is None or self.related_id is None:
            return None
        return RelatedTo(model=self.related_model, id=self.related_id)


class NotificationEnvelope(CamelModel):
    notification: NotificationOut


class NotificationList(CamelModel):
    notifications: List[NotificationOut]
    count: int


class UnreadCount(CamelModel):
    count: int

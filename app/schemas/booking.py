from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from app.models.enums import BookingStatus
from app.schemas.base import CamelModel
from app.schemas.hall import HallSummary
from app.schemas.user import UserSummary


class BookingCreate(CamelModel):
    hall_id: int
    start_date: date
    # Accepted for client compatibility; every booking lasts one day
    end_date: Optional[date] = None
    guest_count: int
    special_requests: Optional[str] = Field(default=None, max_length=500)


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


class BookingOut(CamelModel):
    id: int
    user_id: int
    hall_id: int
    start_date: date
    end_date: date
    guest_count: int
    total_amount: float
    special_requests: Optional[str] = None
    status: BookingStatus
    created_at: datetime

    hall: Optional[HallSummary] = None
    user: Optional[UserSummary] = None


class BookingEnvelope(CamelModel):
    booking: BookingOut


class BookingList(CamelModel):
    bookings: List[BookingOut]
    count: int

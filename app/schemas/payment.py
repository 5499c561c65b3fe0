from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.enums import PaymentMethod, PaymentStatus
from app.schemas.base import CamelModel
from app.schemas.booking import BookingOut


class PaymentProcess(CamelModel):
    booking_id: int
    payment_method: PaymentMethod
    transaction_id: str = Field(min_length=1, max_length=100)


class PaymentOut(CamelModel):
    id: int
    booking_id: int
    amount: float
    payment_method: PaymentMethod
    transaction_id: str
    status: PaymentStatus
    paid_at: datetime

    booking: Optional[BookingOut] = None


class PaymentResult(CamelModel):
    payment: PaymentOut
    booking: BookingOut


class PaymentEnvelope(CamelModel):
    payment: PaymentOut


class PaymentList(CamelModel):
    payments: List[PaymentOut]
    count: int

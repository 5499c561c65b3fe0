from typing import List

from app.schemas.base import CamelModel
from app.schemas.booking import BookingOut
from app.schemas.payment import PaymentOut


class DashboardStats(CamelModel):
    total_users: int
    total_halls: int
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    cancelled_bookings: int
    completed_bookings: int
    total_revenue: float


class DashboardOut(CamelModel):
    stats: DashboardStats
    recent_bookings: List[BookingOut]
    recent_payments: List[PaymentOut]


class HallRevenue(CamelModel):
    hall_id: int
    hall_name: str
    revenue: float

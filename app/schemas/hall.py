from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, PositiveFloat, PositiveInt, model_validator

from app.schemas.base import CamelModel


class HallBase(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    capacity: PositiveInt
    price_per_day: PositiveFloat
    location: str = Field(min_length=1)
    amenities: List[str] = []
    images: List[str] = []
    availability: bool = True


class HallCreate(HallBase):
    pass


class HallUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    capacity: Optional[PositiveInt] = None
    price_per_day: Optional[PositiveFloat] = None
    location: Optional[str] = Field(default=None, min_length=1)
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    availability: Optional[bool] = None


class HallOut(HallBase):
    id: int
    created_at: datetime
    updated_at: datetime


class HallSummary(CamelModel):
    id: int
    name: str
    location: str
    price_per_day: float
    images: List[str] = []


class HallEnvelope(CamelModel):
    hall: HallOut


class HallList(CamelModel):
    halls: List[HallOut]
    count: int


# -------- AVAILABILITY --------
class AvailabilityCheck(CamelModel):
    hall_id: int
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class AvailabilityOut(CamelModel):
    is_available: bool


class BookedDatesOut(CamelModel):
    hall_id: int
    month: str
    booked_dates: List[date]

import math
from datetime import date, timedelta

# Every booking currently spans exactly one day
BOOKING_LENGTH = timedelta(days=1)


def booking_end_date(start_date: date) -> date:
    return start_date + BOOKING_LENGTH


def count_days(start_date, end_date) -> int:
    """Whole days between start and end, partial days rounded up."""
    return math.ceil((end_date - start_date).total_seconds() / 86400)


def calculate_total_amount(price_per_day: float, start_date, end_date) -> float:
    days = count_days(start_date, end_date)
    if days <= 0:
        raise ValueError("End date must be after start date")

    return round(days * price_per_day, 2)


def days_in_range(start_date: date, end_date: date) -> list[date]:
    """Every calendar day in [start_date, end_date], both ends included."""
    return [start_date + timedelta(days=i) for i in range((end_date - start_date).days + 1)]

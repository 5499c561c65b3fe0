from sqlalchemy import (
    Column, Date, Enum, Float, ForeignKey, Index, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.session import Base, TimestampMixin
from app.models.enums import BookingStatus


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    hall_id = Column(Integer, ForeignKey("halls.id"), nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    guest_count = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    special_requests = Column(String(500), nullable=True)

    status = Column(
        Enum(BookingStatus, name="bookingstatus", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BookingStatus.PENDING,
    )

    user = relationship("User", back_populates="bookings")
    hall = relationship("Hall", back_populates="bookings")
    payments = relationship("Payment", back_populates="booking")
    days = relationship("BookingDay", back_populates="booking", cascade="all, delete-orphan")

    __table_args__ = (
        # Backs the overlap query
        Index("ix_bookings_hall_dates", "hall_id", "start_date", "end_date"),
    )


class BookingDay(Base):
    """One calendar day of a hall held by a non-cancelled booking.

    The (hall_id, day) unique constraint is what actually prevents two
    overlapping bookings from both being committed.
    """

    __tablename__ = "booking_days"

    id = Column(Integer, primary_key=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    hall_id = Column(Integer, ForeignKey("halls.id"), nullable=False)
    day = Column(Date, nullable=False)

    booking = relationship("Booking", back_populates="days")

    __table_args__ = (UniqueConstraint("hall_id", "day", name="uq_booking_days_hall_day"),)

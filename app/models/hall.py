from sqlalchemy import JSON, Boolean, CheckConstraint, Column, Float, Integer, String
from sqlalchemy.orm import relationship

from app.db.session import Base, TimestampMixin


class Hall(Base, TimestampMixin):
    __tablename__ = "halls"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(100), nullable=False)
    description = Column(String(1000), nullable=False)
    capacity = Column(Integer, nullable=False)
    location = Column(String, nullable=False)

    # Pricing
    price_per_day = Column(Float, nullable=False)

    amenities = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list)

    # Global on/off switch, independent of date-based bookings
    availability = Column(Boolean, nullable=False, default=True)

    deleted = Column(Boolean, nullable=False, default=False)

    bookings = relationship("Booking", back_populates="hall")

    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_halls_capacity_positive"),
        CheckConstraint("price_per_day > 0", name="ck_halls_price_positive"),
    )

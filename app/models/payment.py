from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Index, Integer, String, func, text
from sqlalchemy.orm import relationship

from app.db.session import Base, TimestampMixin
from app.models.enums import PaymentMethod, PaymentStatus


class Payment(Base, TimestampMixin):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)

    amount = Column(Float, nullable=False)
    payment_method = Column(
        Enum(PaymentMethod, name="paymentmethod", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    transaction_id = Column(String, nullable=False)

    status = Column(
        Enum(PaymentStatus, name="paymentstatus", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    paid_at = Column(DateTime, nullable=False, server_default=func.now())

    booking = relationship("Booking", back_populates="payments")

    __table_args__ = (
        # At most one completed payment per booking
        Index(
            "uq_payments_completed_booking",
            "booking_id",
            unique=True,
            sqlite_where=text("status = 'completed'"),
            postgresql_where=text("status = 'completed'"),
        ),
    )

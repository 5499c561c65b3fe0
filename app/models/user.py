from sqlalchemy import Column, Enum, Integer, String
from sqlalchemy.orm import relationship

from app.db.session import Base, TimestampMixin
from app.models.enums import UserRole


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)

    role = Column(
        Enum(UserRole, name="userrole", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.CUSTOMER,
        index=True,
    )

    bookings = relationship("Booking", back_populates="user")
    notifications = relationship("Notification", back_populates="recipient")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import relationship

from wocuum.db import Base, utcnow


class BookingStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(DateTime, nullable=False, index=True)
    time_slot = Column(String, nullable=False)
    # "<address>, <City>", derived when the booking is created
    location = Column(String, nullable=False)
    status = Column(Enum(BookingStatus, name="booking_status"), nullable=False, default=BookingStatus.DRAFT)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="bookings")

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session, joinedload

from wocuum.errors import NotFound, ValidationFailed
from wocuum.models.booking import Booking, BookingStatus
from wocuum.schemas.booking import BookingCreate, BookingDetails
from wocuum.utils.validation_helpers import find_missing_fields, format_location, parse_booking_date

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("date", "timeSlot", "city", "address", "phoneNumber", "paymentMethod")


class BookingService:
    """Bookings owned by a single user."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, data: BookingCreate) -> Tuple[Booking, BookingDetails]:
        missing = find_missing_fields(data.model_dump(by_alias=True), REQUIRED_FIELDS)
        if missing:
            raise ValidationFailed("Missing required fields", missing=missing)

        booking_date = parse_booking_date(data.date)

        booking = Booking(
            user_id=user_id,
            date=booking_date,
            time_slot=data.time_slot,
            location=format_location(data.address, data.city),
            status=BookingStatus.CONFIRMED,
        )
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        logger.debug(f"Created booking {booking.id} for user {user_id} at {booking.location}")

        details = BookingDetails(
            city=data.city,
            address=data.address,
            phone_number=data.phone_number,
            payment_method=data.payment_method,
        )
        return booking, details

    def list_for_user(self, user_id: str) -> List[Booking]:
        bookings = (
            self.db.query(Booking)
            .options(joinedload(Booking.user))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.date.desc())
            .all()
        )
        logger.debug(f"Retrieved {len(bookings)} bookings for user {user_id}")
        return bookings

    def delete(self, user_id: str, booking_id: str) -> None:
        booking = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id, Booking.user_id == user_id)
            .first()
        )
        if booking is None:
            logger.error(f"Booking not found for user {user_id}: {booking_id}")
            raise NotFound("Booking not found")

        self.db.delete(booking)
        self.db.commit()
        logger.debug(f"Deleted booking: {booking_id}")

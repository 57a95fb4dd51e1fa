from datetime import datetime
from typing import List, Optional

from wocuum.models.booking import BookingStatus
from wocuum.schemas.user import CamelModel


class BookingCreate(CamelModel):
    # Presence is checked by the booking service so the error can name
    # every missing field at once.
    date: Optional[str] = None
    time_slot: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    payment_method: Optional[str] = None


class BookingUser(CamelModel):
    id: str
    email: str
    full_name: Optional[str] = None


class BookingResponse(CamelModel):
    id: str
    user_id: str
    date: datetime
    time_slot: str
    location: str
    status: BookingStatus
    created_at: datetime
    user: BookingUser


class BookingDetails(CamelModel):
    """Contact details echoed back on creation; they are not stored."""

    city: str
    address: str
    phone_number: str
    payment_method: str


class CreatedBookingResponse(BookingResponse):
    booking_details: BookingDetails


class BookingListResponse(CamelModel):
    ok: bool = True
    bookings: List[BookingResponse]


class DeleteBookingResponse(CamelModel):
    success: bool = True
    message: str
    deleted_booking_id: str

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from wocuum.db import get_db
from wocuum.schemas.booking import (
    BookingCreate,
    BookingResponse,
    CreatedBookingResponse,
    DeleteBookingResponse,
)
from wocuum.services.bookings import BookingService
from wocuum.utils.auth import require_auth
from wocuum.utils.sanitization import sanitize_path_params
from wocuum.utils.sessions import RequestContext

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
    dependencies=[Depends(sanitize_path_params)],
)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


@router.post(
    "",
    response_model=CreatedBookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Book a car cleaning for a future date. Requires authentication.",
)
def create_booking(
    booking: BookingCreate,
    context: RequestContext = Depends(require_auth),
    bookings: BookingService = Depends(get_booking_service),
):
    """
    Create a new booking for the logged-in user.
    Requires authentication.

    - **date**: ISO 8601 date, strictly in the future.
    - **timeSlot**: Selected time slot label.
    - **city**: City; the first letter is capitalized in the stored location.
    - **address**: Street address.
    - **phoneNumber**: Contact phone number (not stored).
    - **paymentMethod**: Payment method (not stored).

    Returns the stored booking plus the submitted contact details under **bookingDetails**.
    """
    logger.debug(f"Creating booking for user: {context.email}")
    db_booking, details = bookings.create(context.user_id, booking)
    return CreatedBookingResponse(
        **BookingResponse.model_validate(db_booking).model_dump(),
        booking_details=details,
    )


@router.get(
    "",
    response_model=List[BookingResponse],
    summary="List own bookings",
    description="Bookings of the logged-in user, newest date first. Requires authentication.",
)
def get_bookings(
    context: RequestContext = Depends(require_auth),
    bookings: BookingService = Depends(get_booking_service),
):
    return bookings.list_for_user(context.user_id)


@router.delete(
    "/{booking_id}",
    response_model=DeleteBookingResponse,
    summary="Delete a booking",
    description="Permanently delete a booking. Requires authentication and ownership.",
)
def delete_booking(
    booking_id: str,
    context: RequestContext = Depends(require_auth),
    bookings: BookingService = Depends(get_booking_service),
):
    """
    Delete a booking owned by the logged-in user.

    - **booking_id**: ID of the booking to delete.

    Another user's booking is reported as not found.
    """
    bookings.delete(context.user_id, booking_id)
    return DeleteBookingResponse(message="Booking deleted successfully", deleted_booking_id=booking_id)

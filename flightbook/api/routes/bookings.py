"""
Bookings API: creation after payment, lookup, cancellation and itinerary PDF
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from ...database import get_session
from ...integrations.email_service import EmailService, get_email_service
from ...integrations.itinerary_pdf import generate_booking_pdf
from ...models import Booking
from ...schemas import BookingCreateRequest, CancelBookingRequest
from ...services.booking import BookingAlreadyCancelledError, BookingService, serialize_booking
from ...services.booking_reference import is_valid_booking_reference

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Bookings"])

NOT_FOUND_OR_INVALID = "Booking not found or invalid credentials"


async def _find_booking(service: BookingService, reference: str, last_name: Optional[str]) -> Booking:
    """
    Resolve a booking for a caller. When a last name is given, a wrong name
    and an unknown reference get the same 404 body.
    """
    if not is_valid_booking_reference(reference):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid booking reference format"
        )

    booking = await service.get_booking(reference)
    if last_name and (not booking or not service.matches_last_name(booking, last_name)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_OR_INVALID)

    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")

    return booking


@router.post("/bookings/create")
async def create_booking(
    booking_request: BookingCreateRequest,
    session: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email_service)
):
    """
    Persist a booking after successful payment.

    The booking and all of its passengers are written in one transaction;
    the confirmation email is sent afterwards and never fails the request.
    """
    if not booking_request.passengers:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one passenger is required"
        )

    try:
        service = BookingService(session, email_service)
        booking = await service.create_booking(booking_request)
        return {"success": True, "booking": serialize_booking(booking)}

    except Exception as e:
        logger.error(f"Error creating booking: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to create booking", "message": "Please try again later"}
        )


@router.get("/bookings/{reference}")
async def get_booking(
    reference: str,
    lastName: Optional[str] = Query(None, description="Passenger last name"),
    session: AsyncSession = Depends(get_session)
):
    try:
        booking = await _find_booking(BookingService(session), reference, lastName)
        return {"success": True, "booking": serialize_booking(booking)}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error retrieving booking {reference}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to retrieve booking", "message": "Please try again later"}
        )


@router.post("/bookings/{reference}/cancel")
async def cancel_booking(
    reference: str,
    cancel_request: CancelBookingRequest,
    session: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email_service)
):
    """
    Cancel a booking. The fee comes from the fare rules when the flight
    has one, otherwise 20% of the amount paid is retained.
    """
    try:
        if not is_valid_booking_reference(reference):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid booking reference format"
            )
        if not cancel_request.last_name or not cancel_request.last_name.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Last name is required for authentication"
            )

        service = BookingService(session, email_service)
        booking = await _find_booking(service, reference, cancel_request.last_name)

        try:
            fee, refund = await service.cancel_booking(booking)
        except BookingAlreadyCancelledError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Booking is already cancelled"
            )

        return {
            "success": True,
            "message": "Booking cancelled successfully",
            "cancellationFee": float(fee),
            "refundAmount": float(refund),
            "currency": booking.currency,
            "booking": {
                "reference": booking.reference,
                "status": booking.status.value,
                "paymentStatus": booking.payment_status.value,
            },
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error cancelling booking {reference}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to cancel booking", "message": "Please try again later"}
        )


@router.get("/bookings/{reference}/pdf")
async def download_booking_pdf(
    reference: str,
    lastName: Optional[str] = Query(None, description="Passenger last name"),
    session: AsyncSession = Depends(get_session)
):
    try:
        booking = await _find_booking(BookingService(session), reference, lastName)
        pdf = generate_booking_pdf(serialize_booking(booking))
        return Response(
            content=pdf,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="booking-{reference}.pdf"'},
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error generating PDF for {reference}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to generate PDF", "message": "Please try again later"}
        )

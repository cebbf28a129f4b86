"""
Booking Service
Persists paid bookings with their passengers, looks them up by
reference and handles cancellation with refund calculation.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..integrations.email_service import EmailService
from ..models import Booking, BookingStatus, Gender, Passenger, PassengerType, PaymentStatus
from ..schemas import BookingCreateRequest
from .booking_reference import MAX_ATTEMPTS, BookingReferenceError, generate_unique_booking_reference

logger = logging.getLogger(__name__)

DEFAULT_CANCELLATION_RATE = Decimal("0.20")
CENTS = Decimal("0.01")


class BookingAlreadyCancelledError(Exception):
    pass


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def serialize_passenger(passenger: Passenger) -> Dict[str, Any]:
    return {
        "id": passenger.id,
        "bookingId": passenger.booking_id,
        "type": passenger.type.value,
        "firstName": passenger.first_name,
        "lastName": passenger.last_name,
        "dateOfBirth": _iso(passenger.date_of_birth),
        "gender": passenger.gender.value,
        "passportNumber": passenger.passport_number,
        "passportExpiry": _iso(passenger.passport_expiry),
        "nationality": passenger.nationality,
        "email": passenger.email,
        "phone": passenger.phone,
        "countryCode": passenger.country_code,
    }


def serialize_booking(booking: Booking) -> Dict[str, Any]:
    return {
        "id": booking.id,
        "reference": booking.reference,
        "status": booking.status.value,
        "flightData": booking.flight_data,
        "passengers": [serialize_passenger(p) for p in booking.passengers],
        "seats": booking.seats or {},
        "extras": booking.extras or {},
        "totalAmount": f"{Decimal(booking.total_amount):.2f}",
        "currency": booking.currency,
        "paymentId": booking.payment_id,
        "paymentStatus": booking.payment_status.value,
        "createdAt": _iso(booking.created_at),
        "updatedAt": _iso(booking.updated_at),
    }


def _rekey(selection: Dict[str, Any], id_map: Dict[str, str]) -> Dict[str, Any]:
    """Swap client-side passenger ids for persisted passenger ids."""
    return {id_map.get(key, key): value for key, value in (selection or {}).items()}


def calculate_cancellation(booking: Booking) -> Tuple[Decimal, Decimal]:
    """
    Fee is the fare rule's cancellation fee when the flight carries one,
    otherwise 20% of the amount paid. Returns (fee, refund).
    """
    total = Decimal(booking.total_amount)
    fare_rules = (booking.flight_data or {}).get("fareRules") or {}
    rule_fee = fare_rules.get("cancellationFee")

    if rule_fee is not None:
        fee = min(Decimal(str(rule_fee)), total)
    else:
        fee = total * DEFAULT_CANCELLATION_RATE

    fee = fee.quantize(CENTS, rounding=ROUND_HALF_UP)
    return fee, (total - fee).quantize(CENTS, rounding=ROUND_HALF_UP)


class BookingService:
    """Service for creating, retrieving and cancelling bookings."""

    def __init__(self, session: AsyncSession, email_service: Optional[EmailService] = None):
        self.session = session
        self.email_service = email_service

    def _build_booking(self, request: BookingCreateRequest, reference: str) -> Booking:
        id_map = {}
        passengers = []
        for info in request.passengers:
            passenger_id = str(uuid.uuid4())
            if info.id:
                id_map[info.id] = passenger_id
            passengers.append(Passenger(
                id=passenger_id,
                type=PassengerType(info.type.value.upper()),
                first_name=info.first_name,
                last_name=info.last_name,
                date_of_birth=info.date_of_birth,
                gender=Gender(info.gender.value.upper()),
                passport_number=info.passport.number if info.passport else None,
                passport_expiry=info.passport.expiry_date if info.passport else None,
                nationality=info.passport.nationality if info.passport else None,
                email=str(info.contact.email) if info.contact else None,
                phone=info.contact.phone if info.contact else None,
                country_code=info.contact.country_code if info.contact else None,
            ))

        extras = dict(request.extras or {"baggage": {}, "meals": {}, "insurance": None, "loungeAccess": None})
        extras["baggage"] = _rekey(extras.get("baggage"), id_map)
        extras["meals"] = _rekey(extras.get("meals"), id_map)

        return Booking(
            reference=reference,
            status=BookingStatus.CONFIRMED,
            flight_id=str(request.flight["id"]),
            flight_data=request.flight,
            seats=_rekey(request.seats, id_map),
            extras=extras,
            total_amount=Decimal(str(request.total_amount)).quantize(CENTS, rounding=ROUND_HALF_UP),
            currency=request.currency,
            payment_id=request.payment_id,
            payment_status=PaymentStatus.COMPLETED,
            passengers=passengers,
        )

    async def create_booking(self, request: BookingCreateRequest) -> Booking:
        """
        Persist a paid booking and its passengers in one transaction.

        A reference that collides at insert time (another request took it
        after our uniqueness check) is regenerated and the insert retried.
        """
        for attempt in range(1, MAX_ATTEMPTS + 1):
            reference = await generate_unique_booking_reference(self.session)
            booking = self._build_booking(request, reference)
            self.session.add(booking)
            try:
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                logger.warning(f"Reference {reference} taken at insert (attempt {attempt}), retrying")
                continue

            await self.session.refresh(booking, attribute_names=["passengers"])
            logger.info(f"✈️ Booking {reference} created with {len(booking.passengers)} passenger(s)")
            await self._notify(self._send_confirmation, booking)
            return booking

        raise BookingReferenceError(f"Failed to store booking after {MAX_ATTEMPTS} attempts")

    async def get_booking(self, reference: str) -> Optional[Booking]:
        result = await self.session.execute(select(Booking).where(Booking.reference == reference))
        return result.scalar_one_or_none()

    @staticmethod
    def matches_last_name(booking: Booking, last_name: str) -> bool:
        needle = last_name.strip().lower()
        return any(p.last_name.lower() == needle for p in booking.passengers)

    async def cancel_booking(self, booking: Booking) -> Tuple[Decimal, Decimal]:
        if booking.status == BookingStatus.CANCELLED:
            raise BookingAlreadyCancelledError(booking.reference)

        fee, refund = calculate_cancellation(booking)
        booking.status = BookingStatus.CANCELLED
        booking.payment_status = PaymentStatus.REFUNDED
        await self.session.commit()
        await self.session.refresh(booking)

        logger.info(f"🛑 Booking {booking.reference} cancelled, refund {booking.currency} {refund}")
        await self._notify(self._send_cancellation, booking, fee, refund)
        return fee, refund

    async def _send_confirmation(self, booking: Booking):
        await self.email_service.send_booking_confirmation(serialize_booking(booking), db=self.session)

    async def _send_cancellation(self, booking: Booking, fee: Decimal, refund: Decimal):
        await self.email_service.send_booking_cancellation(
            serialize_booking(booking), float(fee), float(refund), db=self.session
        )

    async def _notify(self, sender, booking: Booking, *args):
        """Emails never affect the outcome of a booking operation."""
        if not self.email_service:
            return
        try:
            await sender(booking, *args)
        except Exception as e:
            logger.error(f"Failed to send email for booking {booking.reference}: {e}")

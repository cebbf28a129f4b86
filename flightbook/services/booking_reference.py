"""
Booking reference generation and validation.
References are 6 characters from A-Z and 0-9 (36^6 combinations).
"""
import re
import secrets
import string
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Booking

logger = logging.getLogger(__name__)

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_LENGTH = 6
MAX_ATTEMPTS = 10
REFERENCE_PATTERN = re.compile(r"^[A-Z0-9]{6}$")


class BookingReferenceError(Exception):
    """Raised when no unused reference could be found."""


def generate_booking_reference() -> str:
    return "".join(secrets.choice(REFERENCE_ALPHABET) for _ in range(REFERENCE_LENGTH))


def is_valid_booking_reference(reference) -> bool:
    return isinstance(reference, str) and REFERENCE_PATTERN.fullmatch(reference) is not None


async def reference_exists(session: AsyncSession, reference: str) -> bool:
    result = await session.execute(select(Booking.id).where(Booking.reference == reference))
    return result.scalar_one_or_none() is not None


async def generate_unique_booking_reference(session: AsyncSession, max_attempts: int = MAX_ATTEMPTS) -> str:
    """
    Generate a reference not yet present in the bookings table.

    This pre-check only narrows the race; the unique index on
    bookings.reference stays the final arbiter at insert time.
    """
    for attempt in range(1, max_attempts + 1):
        reference = generate_booking_reference()
        if not await reference_exists(session, reference):
            return reference
        logger.warning(f"Booking reference collision on attempt {attempt}: {reference}")

    raise BookingReferenceError(f"Failed to generate a unique booking reference after {max_attempts} attempts")

"""
Booking session persistence.

Sessions live in Redis under booking:session:{id} with a sliding TTL and
are mirrored into the sessions table, which serves reads when Redis is
unavailable or has evicted the key.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import logging
import os
import secrets
import string
import time

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import BookingSession
from ..redis_service import RedisService
from .booking_flow import BookingFlow, initial_state

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "booking:session:"
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_MINUTES", "30")) * 60

_BASE36 = string.digits + string.ascii_lowercase


def generate_session_id() -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(13))
    return f"session_{int(time.time() * 1000)}_{suffix}"


def session_key(session_id: str) -> str:
    return f"{SESSION_KEY_PREFIX}{session_id}"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionStore:
    """Load and save booking-flow state keyed by session id."""

    def __init__(self, redis: RedisService, db: AsyncSession, ttl_seconds: int = SESSION_TTL_SECONDS):
        self.redis = redis
        self.db = db
        self.ttl_seconds = ttl_seconds

    async def create(self) -> Dict[str, Any]:
        await self.purge_expired()
        state = initial_state(generate_session_id())
        await self.save(state)
        logger.info(f"🧳 Booking session {state['sessionId']} created")
        return state

    async def _get_row(self, session_id: str) -> Optional[BookingSession]:
        result = await self.db.execute(select(BookingSession).where(BookingSession.session_id == session_id))
        return result.scalar_one_or_none()

    async def save(self, state: Dict[str, Any]) -> Dict[str, Any]:
        """Write state to Redis and the database; every save restarts the TTL."""
        session_id = state["sessionId"]
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=self.ttl_seconds)
        state["expiresAt"] = expires_at.isoformat()

        await self.redis.set_json(session_key(session_id), state, expire=self.ttl_seconds)

        row = await self._get_row(session_id)
        if row is None:
            row = BookingSession(session_id=session_id)
            self.db.add(row)
        row.search_criteria = state["searchCriteria"]
        row.selected_flight = state["selectedFlight"]
        row.selected_seats = state["selectedSeats"]
        row.passengers = state["passengers"]
        row.selected_extras = state["selectedExtras"]
        row.current_step = state["currentStep"]
        row.booking_reference = state["bookingReference"]
        row.expires_at = expires_at
        await self.db.commit()
        return state

    async def load(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Return the session state, or None when unknown or expired."""
        state = await self.redis.get_json(session_key(session_id))
        if state is not None:
            return state

        row = await self._get_row(session_id)
        if row is None:
            return None

        now = datetime.now(timezone.utc)
        expires_at = _as_utc(row.expires_at)
        if expires_at <= now:
            await self.db.delete(row)
            await self.db.commit()
            logger.info(f"Expired booking session {session_id} removed")
            return None

        flow = BookingFlow(initial_state(session_id))
        flow.state.update(
            searchCriteria=row.search_criteria,
            selectedFlight=row.selected_flight,
            selectedSeats=row.selected_seats or {},
            passengers=row.passengers or [],
            selectedExtras=row.selected_extras or flow.state["selectedExtras"],
            currentStep=row.current_step,
            bookingReference=row.booking_reference,
            expiresAt=expires_at.isoformat(),
        )
        flow.calculate_price()

        # Repopulate the cache for the remaining lifetime
        remaining = int((expires_at - now).total_seconds())
        if remaining > 0:
            await self.redis.set_json(session_key(session_id), flow.state, expire=remaining)
        logger.info(f"Booking session {session_id} restored from database")
        return flow.state

    async def clear(self, session_id: str) -> bool:
        """Delete a session; False when it was unknown or already expired."""
        state = await self.load(session_id)
        await self.redis.delete(session_key(session_id))
        await self.db.execute(delete(BookingSession).where(BookingSession.session_id == session_id))
        await self.db.commit()
        return state is not None

    async def purge_expired(self) -> int:
        result = await self.db.execute(
            delete(BookingSession).where(BookingSession.expires_at <= datetime.now(timezone.utc))
        )
        await self.db.commit()
        if result.rowcount:
            logger.info(f"Purged {result.rowcount} expired booking sessions")
        return result.rowcount

    async def extend(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Restart the TTL of a live session; None if it has already expired."""
        state = await self.load(session_id)
        if state is None:
            return None
        return await self.save(state)

"""
Seat map and extras catalog API
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
import logging

from ...data.extras import extras_catalog
from ...data.seat_maps import seat_map_for_aircraft, seat_map_for_flight
from ...redis_service import RedisService, get_redis
from ...services.cache import CACHE_TTL, generate_cache_key, with_cache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Seats"])


@router.get("/seats/{flight_id}")
async def get_seat_map(
    flight_id: str,
    aircraft: Optional[str] = Query(None, description="Aircraft type, overrides the flight lookup"),
    redis: RedisService = Depends(get_redis)
):
    """
    Seat map for a flight.

    Known demo flights map to a fixed aircraft; any other flight id gets
    the default narrow-body layout unless an aircraft is given.
    """
    if not flight_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Flight ID is required"
        )

    try:
        async def compute():
            if aircraft:
                return seat_map_for_aircraft(aircraft)
            return seat_map_for_flight(flight_id)

        cache_key = generate_cache_key("seat-map", {"flightId": flight_id, "aircraft": aircraft})
        seat_map = await with_cache(redis, cache_key, CACHE_TTL["SEAT_MAP"], compute)
        return {"flightId": flight_id, "seatMap": seat_map}

    except Exception as e:
        logger.error(f"Error fetching seat map for {flight_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch seat map"
        )


@router.get("/extras")
async def get_extras_catalog():
    """Baggage, meal, insurance and lounge options with prices."""
    return extras_catalog()

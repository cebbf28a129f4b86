"""
Flight search and airport lookup API
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from typing import Optional
import asyncio
import logging
import os
import random
import string
import time

from ...data.mock_flights import generate_mock_flights
from ...data.reference import get_airport_by_code, search_airports
from ...redis_service import RedisService, get_redis
from ...schemas import SearchCriteria
from ...services.cache import CACHE_TTL, generate_cache_key, with_cache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Flights"])

# Simulated upstream latency for mock search results
FLIGHT_SEARCH_DELAY_MS = int(os.getenv("FLIGHT_SEARCH_DELAY_MS", "500"))


def new_search_id() -> str:
    suffix = "".join(random.choices(string.digits + string.ascii_lowercase, k=6))
    return f"search-{int(time.time() * 1000)}-{suffix}"


@router.post("/flights/search")
async def search_flights(
    criteria: SearchCriteria,
    redis: RedisService = Depends(get_redis)
):
    """
    Search flights for the first segment of the itinerary.

    Results are cached per canonical criteria for five minutes, so
    repeated identical searches return the same offers.
    """
    try:
        segment = criteria.segments[0]
        origin = get_airport_by_code(segment.origin.code) or segment.origin.model_dump()
        destination = get_airport_by_code(segment.destination.code) or segment.destination.model_dump()

        async def compute():
            return generate_mock_flights(origin, destination, segment.departure_date, criteria.cabin_class.value)

        cache_key = generate_cache_key("flight-search", criteria.model_dump(mode="json", by_alias=True))
        flights = await with_cache(redis, cache_key, CACHE_TTL["FLIGHT_SEARCH"], compute)

        if FLIGHT_SEARCH_DELAY_MS > 0:
            await asyncio.sleep(FLIGHT_SEARCH_DELAY_MS / 1000)

        logger.info(f"🔎 {segment.origin.code} → {segment.destination.code} {segment.departure_date}: {len(flights)} flights")
        return {
            "flights": flights,
            "searchId": new_search_id(),
            "totalResults": len(flights),
        }

    except Exception as e:
        logger.error(f"Flight search error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while searching for flights"
        )


@router.get("/flights/search")
async def search_flights_get():
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={
            "error": "Method not allowed",
            "message": "Use POST method to search for flights",
        },
        headers={"Allow": "POST"},
    )


@router.get("/airports/search")
async def airport_search(
    q: Optional[str] = Query(None, description="City, airport name or IATA code"),
    redis: RedisService = Depends(get_redis)
):
    """Airport autocomplete; queries shorter than two characters match nothing."""
    if not q:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query parameter 'q' is required"
        )

    if len(q) < 2:
        return {"airports": []}

    try:
        async def compute():
            return search_airports(q)

        cache_key = generate_cache_key("airport-search", {"query": q.lower()})
        airports = await with_cache(redis, cache_key, CACHE_TTL["AIRPORTS"], compute)
        return {"airports": airports}

    except Exception as e:
        logger.error(f"Airport search error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while searching for airports"
        )

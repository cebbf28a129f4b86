"""
Mock flight offer generator.
Produces realistic-looking, randomized offers for a search; nothing is persisted.
"""
import random
import time
from datetime import date, datetime, time as dt_time, timedelta, timezone
from typing import Any, Dict, List, Optional

from .reference import (
    AIRCRAFT_TYPES,
    AIRLINES,
    AIRLINE_HUBS,
    DEFAULT_HUBS,
    PREMIUM_AIRLINES,
    get_airport_by_code,
)

CABIN_MULTIPLIERS = {"economy": 1, "business": 3, "first": 5}
TAX_RATE = 0.15
FEE_RATE = 0.05
DIRECT_SHARE = 0.4
CURRENCY = "USD"

FARE_RULES = {
    "economy": {
        "changeFee": 100,
        "cancellationFee": None,
        "refundable": False,
        "changePolicy": "Changes allowed up to 24 hours before departure for a fee",
        "cancellationPolicy": "20% of the fare is retained on cancellation",
    },
    "business": {
        "changeFee": 0,
        "cancellationFee": 150,
        "refundable": True,
        "changePolicy": "Free changes up to 2 hours before departure",
        "cancellationPolicy": "Refundable less a fixed cancellation fee",
    },
    "first": {
        "changeFee": 0,
        "cancellationFee": 0,
        "refundable": True,
        "changePolicy": "Free changes up to 2 hours before departure",
        "cancellationPolicy": "Fully refundable",
    },
}


def calculate_flight_duration(origin: Dict, destination: Dict, rng: random.Random) -> int:
    """Duration in minutes: 3-13 hours base plus a stable per-route offset."""
    base_minutes = 180 + rng.random() * 600
    route_hash = sum(ord(char) for char in origin["code"] + destination["code"])
    variation = (route_hash % 120) - 60
    return round(base_minutes + variation)


def calculate_price(duration: int, cabin_class: str, airline: Dict, stops: int, rng: random.Random) -> int:
    base_price = 200 + (duration / 60) * 50
    base_price *= CABIN_MULTIPLIERS.get(cabin_class, 1)

    if airline["code"] in PREMIUM_AIRLINES:
        base_price *= 1.2

    if stops == 0:
        base_price *= 1.15
    else:
        base_price *= 1 - stops * 0.1

    base_price *= 0.9 + rng.random() * 0.2
    return round(base_price)


def _terminal(rng: random.Random) -> str:
    return str(rng.randint(1, 5))


def _departure_time(day: date, first_hour: int, last_hour: int, rng: random.Random) -> datetime:
    hour = rng.randint(first_hour, last_hour)
    minute = rng.randint(0, 11) * 5
    return datetime.combine(day, dt_time(hour, minute), tzinfo=timezone.utc)


def _segment(origin: Dict, destination: Dict, departure: datetime, duration: int, airline: Dict, rng: random.Random) -> Dict[str, Any]:
    arrival = departure + timedelta(minutes=duration)
    return {
        "departure": {"airport": origin, "dateTime": departure.isoformat(), "terminal": _terminal(rng)},
        "arrival": {"airport": destination, "dateTime": arrival.isoformat(), "terminal": _terminal(rng)},
        "duration": duration,
        "aircraft": rng.choice(AIRCRAFT_TYPES),
        "operatingAirline": airline,
    }


def _hub_airport(airline: Dict, origin: Dict, destination: Dict, rng: random.Random) -> Dict:
    hubs = AIRLINE_HUBS.get(airline["code"], DEFAULT_HUBS)
    # A hub equal to either endpoint would make a degenerate connection
    candidates = [code for code in hubs if code not in (origin["code"], destination["code"])]
    if not candidates:
        candidates = [code for code in DEFAULT_HUBS if code not in (origin["code"], destination["code"])]
    return get_airport_by_code(rng.choice(candidates))


def generate_flight(
    origin: Dict,
    destination: Dict,
    departure_date: date,
    cabin_class: str,
    airline: Dict,
    stops: int = 0,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """Generate a single flight offer"""
    rng = rng or random.Random()
    segments = []

    if stops == 0:
        duration = calculate_flight_duration(origin, destination, rng)
        departure = _departure_time(departure_date, 4, 23, rng)
        segments.append(_segment(origin, destination, departure, duration, airline, rng))
    else:
        hub = _hub_airport(airline, origin, destination, rng)

        first_departure = _departure_time(departure_date, 4, 19, rng)
        first_duration = int(calculate_flight_duration(origin, hub, rng) * 0.6)
        segments.append(_segment(origin, hub, first_departure, first_duration, airline, rng))

        layover_minutes = 60 + rng.randint(0, 179)
        second_departure = datetime.fromisoformat(segments[0]["arrival"]["dateTime"]) + timedelta(minutes=layover_minutes)
        second_duration = int(calculate_flight_duration(hub, destination, rng) * 0.6)
        segments.append(_segment(hub, destination, second_departure, second_duration, airline, rng))

    total_duration = sum(segment["duration"] for segment in segments)
    base_fare = calculate_price(total_duration, cabin_class, airline, stops, rng)
    taxes = round(base_fare * TAX_RATE)
    fees = round(base_fare * FEE_RATE)

    flight_number = f"{airline['code']}{rng.randint(1000, 9999)}"

    return {
        "id": f"{airline['code']}-{flight_number}-{int(time.time() * 1000)}-{rng.randint(0, 10**9)}",
        "airline": airline,
        "flightNumber": flight_number,
        "segments": segments,
        "stops": stops,
        "totalDuration": total_duration,
        "price": {
            "amount": base_fare + taxes + fees,
            "currency": CURRENCY,
            "breakdown": {"baseFare": base_fare, "taxes": taxes, "fees": fees},
        },
        "cabinClass": cabin_class,
        "availableSeats": rng.randint(10, 59),
        "fareRules": dict(FARE_RULES.get(cabin_class, FARE_RULES["economy"])),
    }


def generate_mock_flights(
    origin: Dict[str, str],
    destination: Dict[str, str],
    departure_date: date,
    cabin_class: str,
    rng: Optional[random.Random] = None,
) -> List[Dict[str, Any]]:
    """
    Generate 15-25 offers for a single origin/destination pair,
    roughly 40% direct and the rest one-stop through an airline hub.
    Offers are sorted by total price, cheapest first.
    """
    rng = rng or random.Random()
    num_flights = 15 + rng.randint(0, 10)
    direct_count = int(num_flights * DIRECT_SHARE)

    flights = []
    for index in range(num_flights):
        airline = rng.choice(AIRLINES)
        stops = 0 if index < direct_count else 1
        flights.append(generate_flight(origin, destination, departure_date, cabin_class, airline, stops, rng))

    flights.sort(key=lambda flight: flight["price"]["amount"])
    return flights

"""
Pricing Service
Builds the booking price breakdown from the selected flight, seats and extras.
Extras are priced from the catalog on the server, never from client input.
"""
from typing import Any, Dict, Optional
import logging

from ..data.extras import LOUNGE_ACCESS_PRICE, baggage_price, insurance_option, meal_price
from ..schemas import PassengerCount, SelectedExtras

logger = logging.getLogger(__name__)

BREAKDOWN_FIELDS = (
    "baseFare",
    "taxes",
    "fees",
    "seatFees",
    "extraBaggage",
    "meals",
    "insurance",
    "loungeAccess",
)


class InvalidExtraError(ValueError):
    """Raised for an extra that is not in the catalog."""


def empty_extras() -> Dict[str, Any]:
    return {"baggage": {}, "meals": {}, "insurance": None, "loungeAccess": None}


def empty_breakdown() -> Dict[str, float]:
    breakdown = {field: 0 for field in BREAKDOWN_FIELDS}
    breakdown["total"] = 0
    return breakdown


def price_extras(selection: SelectedExtras) -> Dict[str, Any]:
    """
    Attach catalog prices to a validated extras selection.

    Raises:
        InvalidExtraError: unknown baggage weight, meal or insurance type
    """
    priced = empty_extras()

    for passenger_id, baggage in selection.baggage.items():
        price = baggage_price(baggage.weight)
        if price is None:
            raise InvalidExtraError(f"Unsupported baggage weight: {baggage.weight}kg")
        priced["baggage"][passenger_id] = {"weight": baggage.weight, "price": price}

    for passenger_id, meal in selection.meals.items():
        price = meal_price(meal.type)
        if price is None:
            raise InvalidExtraError(f"Unsupported meal type: {meal.type}")
        priced["meals"][passenger_id] = {"type": meal.type, "price": price}

    if selection.insurance:
        option = insurance_option(selection.insurance.type)
        if option is None:
            raise InvalidExtraError(f"Unsupported insurance type: {selection.insurance.type}")
        priced["insurance"] = dict(option)

    if selection.lounge_access:
        priced["loungeAccess"] = {
            "airport": selection.lounge_access.airport.upper(),
            "price": LOUNGE_ACCESS_PRICE,
        }

    return priced


def calculate_total_price(
    flight: Optional[Dict[str, Any]],
    seats: Optional[Dict[str, Dict[str, Any]]],
    extras: Optional[Dict[str, Any]],
) -> Dict[str, float]:
    """
    Sum every booking component into a breakdown.

    Args:
        flight: Selected flight offer, or None
        seats: Seats by passenger id, each carrying a price
        extras: Priced extras (baggage and meals by passenger id,
            insurance, loungeAccess)
    """
    breakdown = empty_breakdown()
    extras = extras or empty_extras()

    if flight:
        fare = (flight.get("price") or {}).get("breakdown") or {}
        breakdown["baseFare"] = fare.get("baseFare", 0)
        breakdown["taxes"] = fare.get("taxes", 0)
        breakdown["fees"] = fare.get("fees", 0)

    breakdown["seatFees"] = sum(seat.get("price", 0) for seat in (seats or {}).values())
    breakdown["extraBaggage"] = sum(b.get("price", 0) for b in (extras.get("baggage") or {}).values())
    breakdown["meals"] = sum(m.get("price", 0) for m in (extras.get("meals") or {}).values())

    if extras.get("insurance"):
        breakdown["insurance"] = extras["insurance"].get("price", 0)
    if extras.get("loungeAccess"):
        breakdown["loungeAccess"] = extras["loungeAccess"].get("price", 0)

    breakdown["total"] = sum(breakdown[field] for field in BREAKDOWN_FIELDS)
    return breakdown


def price_per_passenger(total_price: float, passengers: PassengerCount) -> float:
    if passengers.total == 0:
        return 0
    return total_price / passengers.total


def base_fare_per_passenger(flight: Optional[Dict[str, Any]], passengers: PassengerCount) -> float:
    """Flight price only (fare, taxes and fees) split across travellers."""
    if not flight or passengers.total == 0:
        return 0
    fare = (flight.get("price") or {}).get("breakdown") or {}
    return (fare.get("baseFare", 0) + fare.get("taxes", 0) + fare.get("fees", 0)) / passengers.total

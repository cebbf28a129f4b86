"""
Booking Flow
Wizard state for one booking session and the rules for moving between steps.

State is a plain JSON-serializable dict (camelCase keys) so it can be
stored as-is in Redis and in the sessions table.
"""
from copy import deepcopy
from typing import Any, Dict, List, Optional
import logging

from ..schemas import PassengerCount
from .pricing import (
    base_fare_per_passenger,
    calculate_total_price,
    empty_breakdown,
    empty_extras,
    price_per_passenger,
)

logger = logging.getLogger(__name__)

STEP_ORDER = [
    "search",
    "results",
    "details",
    "seats",
    "passengers",
    "extras",
    "payment",
    "confirmation",
]


class UnknownStepError(ValueError):
    pass


class UnknownPassengerError(KeyError):
    pass


def initial_state(session_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "sessionId": session_id,
        "searchCriteria": None,
        "selectedFlight": None,
        "selectedSeats": {},
        "passengers": [],
        "selectedExtras": empty_extras(),
        "totalPrice": 0,
        "priceBreakdown": empty_breakdown(),
        "currentStep": "search",
        "bookingReference": None,
    }


class BookingFlow:
    """Mutations and navigation over a booking-session state dict."""

    def __init__(self, state: Optional[Dict[str, Any]] = None):
        self.state = deepcopy(state) if state else initial_state()

    @property
    def current_step(self) -> str:
        return self.state["currentStep"]

    @property
    def passenger_ids(self) -> List[str]:
        return [p["id"] for p in self.state["passengers"]]

    # Search and flight
    def set_search_criteria(self, criteria: Dict[str, Any]):
        self.state["searchCriteria"] = criteria

    def clear_search_criteria(self):
        self.state["searchCriteria"] = None

    def set_selected_flight(self, flight: Dict[str, Any]):
        changed = (self.state["selectedFlight"] or {}).get("id") != flight.get("id")
        self.state["selectedFlight"] = flight
        if changed:
            # Seat maps differ per flight
            self.state["selectedSeats"] = {}
        self.calculate_price()

    def clear_selected_flight(self):
        self.state["selectedFlight"] = None
        self.calculate_price()

    # Seats
    def set_seat(self, passenger_id: str, seat: Dict[str, Any]):
        if passenger_id not in self.passenger_ids:
            raise UnknownPassengerError(passenger_id)
        self.state["selectedSeats"][passenger_id] = dict(seat, status="selected")
        self.calculate_price()

    def remove_seat(self, passenger_id: str):
        self.state["selectedSeats"].pop(passenger_id, None)
        self.calculate_price()

    def clear_seats(self):
        self.state["selectedSeats"] = {}
        self.calculate_price()

    def seat_taken_by_other(self, passenger_id: str, seat_id: str) -> bool:
        return any(
            seat.get("id") == seat_id and owner != passenger_id
            for owner, seat in self.state["selectedSeats"].items()
        )

    # Passengers
    def set_passengers(self, passengers: List[Dict[str, Any]]):
        self.state["passengers"] = passengers
        self._drop_orphaned_selections()
        self.calculate_price()

    def update_passenger(self, passenger_id: str, passenger: Dict[str, Any]):
        """Replace one passenger's details; seats and extras keep their key."""
        if passenger_id not in self.passenger_ids:
            raise UnknownPassengerError(passenger_id)
        self.state["passengers"] = [
            dict(passenger, id=passenger_id) if p["id"] == passenger_id else p
            for p in self.state["passengers"]
        ]

    def clear_passengers(self):
        self.set_passengers([])

    def _drop_orphaned_selections(self):
        """Seats and per-passenger extras only exist for current passengers."""
        ids = set(self.passenger_ids)
        self.state["selectedSeats"] = {k: v for k, v in self.state["selectedSeats"].items() if k in ids}
        extras = self.state["selectedExtras"]
        extras["baggage"] = {k: v for k, v in extras["baggage"].items() if k in ids}
        extras["meals"] = {k: v for k, v in extras["meals"].items() if k in ids}

    # Extras
    def set_extras(self, extras: Dict[str, Any]):
        ids = set(self.passenger_ids)
        for passenger_id in list(extras["baggage"]) + list(extras["meals"]):
            if passenger_id not in ids:
                raise UnknownPassengerError(passenger_id)
        self.state["selectedExtras"] = extras
        self.calculate_price()

    def clear_extras(self):
        self.state["selectedExtras"] = empty_extras()
        self.calculate_price()

    def set_booking_reference(self, reference: Optional[str]):
        self.state["bookingReference"] = reference

    def calculate_price(self) -> Dict[str, float]:
        breakdown = calculate_total_price(
            self.state["selectedFlight"],
            self.state["selectedSeats"],
            self.state["selectedExtras"],
        )
        self.state["priceBreakdown"] = breakdown
        self.state["totalPrice"] = breakdown["total"]
        return breakdown

    # Navigation
    def missing_prerequisite(self, step: str) -> Optional[str]:
        """Return the step that must be completed before `step`, or None."""
        state = self.state
        has_flight = state["selectedFlight"] is not None
        has_passengers = len(state["passengers"]) > 0

        if step == "results" and state["searchCriteria"] is None:
            return "search"
        if step == "details" and not has_flight:
            return "search"
        if step == "passengers" and (not has_flight or state["searchCriteria"] is None):
            return "search"
        if step in ("seats", "extras", "payment"):
            if not has_flight:
                return "search"
            if not has_passengers:
                return "passengers"
        if step == "confirmation" and not state["bookingReference"]:
            return "payment"
        return None

    def go_to_step(self, step: str) -> str:
        """
        Move to `step`, or to the earliest step whose prerequisite is
        missing. Returns the step actually reached.
        """
        if step not in STEP_ORDER:
            raise UnknownStepError(step)

        target = step
        seen = set()
        while target not in seen:
            seen.add(target)
            redirect = self.missing_prerequisite(target)
            if redirect is None:
                break
            target = redirect

        if target != step:
            logger.info(f"Step {step} not reachable, redirected to {target}")
        self.state["currentStep"] = target
        return target

    def next_step(self) -> str:
        index = STEP_ORDER.index(self.current_step)
        if index < len(STEP_ORDER) - 1:
            return self.go_to_step(STEP_ORDER[index + 1])
        return self.current_step

    def previous_step(self) -> str:
        index = STEP_ORDER.index(self.current_step)
        if index > 0:
            self.state["currentStep"] = STEP_ORDER[index - 1]
        return self.current_step

    def can_proceed(self) -> bool:
        step = self.current_step
        if step == "search":
            return self.state["searchCriteria"] is not None
        if step in ("results", "details"):
            return self.state["selectedFlight"] is not None
        if step in ("seats", "extras"):
            return True
        if step == "passengers":
            return len(self.state["passengers"]) > 0
        if step == "payment":
            return self.state["totalPrice"] > 0
        return False

    def reset(self):
        self.state = initial_state(self.state.get("sessionId"))

    def traveller_count(self) -> Optional[PassengerCount]:
        criteria = self.state["searchCriteria"]
        if not criteria or not criteria.get("passengers"):
            return None
        return PassengerCount.model_validate(criteria["passengers"])

    def snapshot(self) -> Dict[str, Any]:
        """State plus derived figures for the client."""
        travellers = self.traveller_count()
        return dict(
            deepcopy(self.state),
            canProceed=self.can_proceed(),
            pricePerPassenger=price_per_passenger(self.state["totalPrice"], travellers) if travellers else 0,
            baseFarePerPassenger=base_fare_per_passenger(self.state["selectedFlight"], travellers) if travellers else 0,
        )

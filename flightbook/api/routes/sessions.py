"""
Booking session API.
Server-side wizard state for one booking, stored in Redis with a sliding
30 minute expiry and mirrored to the sessions table.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict
import logging
import uuid

from ...data.seat_maps import find_seat, seat_map_for_aircraft, seat_map_for_flight
from ...database import get_session
from ...redis_service import RedisService, get_redis
from ...schemas import PassengerInfo, SeatSelectionRequest, SessionUpdateRequest, StepRequest
from ...services.booking import BookingService
from ...services.booking_flow import BookingFlow, UnknownPassengerError, UnknownStepError
from ...services.pricing import InvalidExtraError, price_extras
from ...services.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])


async def get_session_store(
    redis: RedisService = Depends(get_redis),
    session: AsyncSession = Depends(get_session)
) -> SessionStore:
    return SessionStore(redis, session)


async def _load_flow(store: SessionStore, session_id: str) -> BookingFlow:
    state = await store.load(session_id)
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found or expired"
        )
    return BookingFlow(state)


async def _save(store: SessionStore, flow: BookingFlow) -> Dict[str, Any]:
    flow.state = await store.save(flow.state)
    return {"session": flow.snapshot()}


def _server_error(action: str, session_id: str, e: Exception) -> HTTPException:
    logger.error(f"Error {action} session {session_id}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action} session"
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_booking_session(store: SessionStore = Depends(get_session_store)):
    try:
        state = await store.create()
        return {"session": BookingFlow(state).snapshot()}
    except Exception as e:
        raise _server_error("create", "-", e)


@router.get("/{session_id}")
async def get_booking_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    try:
        flow = await _load_flow(store, session_id)
        return {"session": flow.snapshot()}
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("load", session_id, e)


@router.patch("/{session_id}")
async def update_booking_session(
    session_id: str,
    update: SessionUpdateRequest,
    store: SessionStore = Depends(get_session_store)
):
    """
    Apply any of searchCriteria, selectedFlight, passengers,
    selectedExtras and bookingReference. Extras are re-priced from the
    catalog.
    """
    try:
        flow = await _load_flow(store, session_id)
        fields = update.model_fields_set

        if "search_criteria" in fields:
            if update.search_criteria is None:
                flow.clear_search_criteria()
            else:
                flow.set_search_criteria(update.search_criteria.model_dump(mode="json", by_alias=True))

        if "selected_flight" in fields:
            if update.selected_flight is None:
                flow.clear_selected_flight()
            elif not update.selected_flight.get("id"):
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Flight id is required")
            else:
                flow.set_selected_flight(update.selected_flight)

        if "passengers" in fields:
            if not update.passengers:
                flow.clear_passengers()
            else:
                passengers = []
                for info in update.passengers:
                    passenger = info.model_dump(mode="json", by_alias=True)
                    passenger["id"] = info.id or str(uuid.uuid4())
                    passengers.append(passenger)
                flow.set_passengers(passengers)

        if "selected_extras" in fields:
            if update.selected_extras is None:
                flow.clear_extras()
            else:
                flow.set_extras(price_extras(update.selected_extras))

        if "booking_reference" in fields:
            reference = update.booking_reference
            if reference and not await BookingService(store.db).get_booking(reference):
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Booking not found")
            flow.set_booking_reference(reference)

        return await _save(store, flow)

    except InvalidExtraError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UnknownPassengerError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown passenger: {e.args[0]}"
        )
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("update", session_id, e)


@router.delete("/{session_id}")
async def delete_booking_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    try:
        if not await store.clear(session_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Session not found or expired"
            )
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("delete", session_id, e)


@router.put("/{session_id}/passengers/{passenger_id}")
async def update_passenger(
    session_id: str,
    passenger_id: str,
    passenger: PassengerInfo,
    store: SessionStore = Depends(get_session_store)
):
    """Edit one passenger's details without touching their seat or extras."""
    try:
        flow = await _load_flow(store, session_id)
        flow.update_passenger(passenger_id, passenger.model_dump(mode="json", by_alias=True))
        return await _save(store, flow)
    except UnknownPassengerError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Passenger not found")
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("update", session_id, e)


@router.put("/{session_id}/seats/{passenger_id}")
async def select_seat(
    session_id: str,
    passenger_id: str,
    seat_request: SeatSelectionRequest,
    store: SessionStore = Depends(get_session_store)
):
    """
    Assign a seat to one passenger. The seat must exist on the flight's
    aircraft, be available, and not be held by another passenger of the
    same session.
    """
    try:
        flow = await _load_flow(store, session_id)
        flight = flow.state["selectedFlight"]
        if not flight:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Select a flight first")
        if passenger_id not in flow.passenger_ids:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Passenger not found")

        segments = flight.get("segments") or []
        aircraft = seat_request.aircraft or (segments[0].get("aircraft") if segments else None)
        seat_map = seat_map_for_aircraft(aircraft) if aircraft else seat_map_for_flight(flight["id"])

        try:
            seat = find_seat(seat_map, seat_request.seat_id)
        except KeyError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Seat {seat_request.seat_id} does not exist on {seat_map['aircraft']}"
            )

        if seat["status"] != "available" or flow.seat_taken_by_other(passenger_id, seat["id"]):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Seat {seat['id']} is not available"
            )

        flow.set_seat(passenger_id, seat)
        return await _save(store, flow)

    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("update", session_id, e)


@router.delete("/{session_id}/seats")
async def clear_seats(session_id: str, store: SessionStore = Depends(get_session_store)):
    try:
        flow = await _load_flow(store, session_id)
        flow.clear_seats()
        return await _save(store, flow)
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("update", session_id, e)


@router.delete("/{session_id}/seats/{passenger_id}")
async def remove_seat(session_id: str, passenger_id: str, store: SessionStore = Depends(get_session_store)):
    try:
        flow = await _load_flow(store, session_id)
        flow.remove_seat(passenger_id)
        return await _save(store, flow)
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("update", session_id, e)


@router.post("/{session_id}/step")
async def go_to_step(
    session_id: str,
    step_request: StepRequest,
    store: SessionStore = Depends(get_session_store)
):
    """Jump to a step; an unmet prerequisite lands on the step that supplies it."""
    try:
        flow = await _load_flow(store, session_id)
        reached = flow.go_to_step(step_request.step)
        result = await _save(store, flow)
        result["requestedStep"] = step_request.step
        result["redirected"] = reached != step_request.step
        return result

    except UnknownStepError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown step: {step_request.step}"
        )
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("update", session_id, e)


@router.post("/{session_id}/next")
async def next_step(session_id: str, store: SessionStore = Depends(get_session_store)):
    try:
        flow = await _load_flow(store, session_id)
        flow.next_step()
        return await _save(store, flow)
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("update", session_id, e)


@router.post("/{session_id}/previous")
async def previous_step(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Step back without discarding any selection."""
    try:
        flow = await _load_flow(store, session_id)
        flow.previous_step()
        return await _save(store, flow)
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("update", session_id, e)


@router.post("/{session_id}/extend")
async def extend_booking_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    try:
        state = await store.extend(session_id)
        if state is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Session not found or expired"
            )
        return {"session": BookingFlow(state).snapshot()}
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("extend", session_id, e)


@router.post("/{session_id}/reset")
async def reset_booking_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    try:
        flow = await _load_flow(store, session_id)
        flow.reset()
        return await _save(store, flow)
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("reset", session_id, e)

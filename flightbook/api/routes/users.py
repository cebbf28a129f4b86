"""
User profiles and travel history API
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from ...database import get_session
from ...schemas import (
    RegisterRequest,
    TravelHistoryCreateRequest,
    TravelHistoryUpdateRequest,
    UserUpdateRequest,
)
from ...services.users import DuplicateUserError, TravelHistoryService, UserService, serialize_travel, serialize_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Users"])


def _server_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"{action} error: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error"
    )


def _user_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


def _entry_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Travel history not found")


# Users

@router.get("/users")
async def list_users(
    category: Optional[str] = Query(None),
    citizenship: Optional[str] = Query(None),
    uaeResident: Optional[bool] = Query(None),
    session: AsyncSession = Depends(get_session)
):
    try:
        users = await UserService(session).list_users(category, citizenship, uaeResident)
        return {"users": [serialize_user(u) for u in users]}
    except Exception as e:
        raise _server_error("Get users", e)


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    user_request: RegisterRequest,
    session: AsyncSession = Depends(get_session)
):
    try:
        user = await UserService(session).create_user(user_request)
        return {"user": serialize_user(user)}
    except Exception as e:
        raise _server_error("Create user", e)


@router.get("/users/{user_id}")
async def get_user(user_id: int, session: AsyncSession = Depends(get_session)):
    try:
        user = await UserService(session).get_user(user_id)
        if not user:
            raise _user_not_found()
        return {"user": serialize_user(user)}
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("Get user", e)


@router.put("/users/{user_id}")
async def update_user(
    user_id: int,
    user_request: UserUpdateRequest,
    session: AsyncSession = Depends(get_session)
):
    try:
        service = UserService(session)
        user = await service.get_user(user_id)
        if not user:
            raise _user_not_found()
        user = await service.update_user(user, user_request)
        return {"user": serialize_user(user)}
    except DuplicateUserError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this name already exists"
        )
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("Update user", e)


@router.delete("/users/{user_id}")
async def delete_user(user_id: int, session: AsyncSession = Depends(get_session)):
    """Deleting a user removes their travel history as well."""
    try:
        service = UserService(session)
        user = await service.get_user(user_id)
        if not user:
            raise _user_not_found()
        await service.delete_user(user)
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("Delete user", e)


# Travel history

@router.get("/travel-history")
async def list_travel_history(
    userId: Optional[int] = Query(None),
    destination: Optional[str] = Query(None, description="Case-insensitive substring"),
    purpose: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_session)
):
    try:
        entries = await TravelHistoryService(session).list_entries(userId, destination, purpose)
        return {"travelHistory": [serialize_travel(t, include_user=True) for t in entries]}
    except Exception as e:
        raise _server_error("Get travel history", e)


@router.post("/travel-history", status_code=status.HTTP_201_CREATED)
async def create_travel_history(
    travel_request: TravelHistoryCreateRequest,
    session: AsyncSession = Depends(get_session)
):
    try:
        if not await UserService(session).get_user(travel_request.user_id):
            raise _user_not_found()
        entry = await TravelHistoryService(session).create_entry(travel_request)
        return {"travelHistory": serialize_travel(entry, include_user=True)}
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("Create travel history", e)


@router.get("/travel-history/{travel_id}")
async def get_travel_history(travel_id: int, session: AsyncSession = Depends(get_session)):
    try:
        entry = await TravelHistoryService(session).get_entry(travel_id)
        if not entry:
            raise _entry_not_found()
        return {"travelHistory": serialize_travel(entry, include_user=True)}
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("Get travel history", e)


@router.put("/travel-history/{travel_id}")
async def update_travel_history(
    travel_id: int,
    travel_request: TravelHistoryUpdateRequest,
    session: AsyncSession = Depends(get_session)
):
    try:
        service = TravelHistoryService(session)
        entry = await service.get_entry(travel_id)
        if not entry:
            raise _entry_not_found()
        entry = await service.update_entry(entry, travel_request)
        return {"travelHistory": serialize_travel(entry, include_user=True)}
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("Update travel history", e)


@router.delete("/travel-history/{travel_id}")
async def delete_travel_history(travel_id: int, session: AsyncSession = Depends(get_session)):
    try:
        service = TravelHistoryService(session)
        entry = await service.get_entry(travel_id)
        if not entry:
            raise _entry_not_found()
        await service.delete_entry(entry)
        return {"success": True}
    except HTTPException:
        raise
    except Exception as e:
        raise _server_error("Delete travel history", e)

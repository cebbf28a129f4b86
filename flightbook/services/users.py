"""
User profile and travel history persistence
"""
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models import TravelHistory, UserInfo
from ..schemas import (
    RegisterRequest,
    TravelHistoryCreateRequest,
    TravelHistoryUpdateRequest,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)


class DuplicateUserError(Exception):
    pass


def serialize_travel(entry: TravelHistory, include_user: bool = False) -> Dict[str, Any]:
    data = {
        "id": entry.travel_id,
        "userId": entry.user_id,
        "destination": entry.destination,
        "travelDate": entry.travel_date.isoformat(),
        "purpose": entry.purpose,
        "createdAt": entry.created_at.isoformat() if entry.created_at else None,
    }
    if include_user and entry.user is not None:
        data["user"] = {
            "id": entry.user.user_id,
            "name": entry.user.name,
            "category": entry.user.category,
            "citizenship": entry.user.citizenship,
        }
    return data


def serialize_user(user: UserInfo, include_history: bool = True) -> Dict[str, Any]:
    data = {
        "id": user.user_id,
        "category": user.category,
        "name": user.name,
        "citizenship": user.citizenship,
        "uaeResident": user.uae_resident,
        "details": user.details,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }
    if include_history:
        data["travelHistory"] = [serialize_travel(t) for t in user.travel_history]
    return data


class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_users(
        self,
        category: Optional[str] = None,
        citizenship: Optional[str] = None,
        uae_resident: Optional[bool] = None,
    ) -> List[UserInfo]:
        query = select(UserInfo)
        if category:
            query = query.where(UserInfo.category == category)
        if citizenship:
            query = query.where(UserInfo.citizenship == citizenship)
        if uae_resident is not None:
            query = query.where(UserInfo.uae_resident == uae_resident)

        result = await self.session.execute(query.order_by(UserInfo.created_at.desc(), UserInfo.user_id.desc()))
        return list(result.scalars().all())

    async def get_user(self, user_id: int) -> Optional[UserInfo]:
        result = await self.session.execute(select(UserInfo).where(UserInfo.user_id == user_id))
        return result.scalar_one_or_none()

    async def find_by_name(self, name: str) -> Optional[UserInfo]:
        """Case-insensitive exact name match."""
        result = await self.session.execute(
            select(UserInfo).where(func.lower(UserInfo.name) == name.strip().lower()).limit(1)
        )
        return result.scalars().first()

    async def create_user(self, data: RegisterRequest, unique_name: bool = False) -> UserInfo:
        if unique_name and await self.find_by_name(data.name):
            raise DuplicateUserError(data.name)

        user = UserInfo(
            category=data.category,
            name=data.name,
            citizenship=data.citizenship,
            uae_resident=data.uae_resident,
            details=data.details or None,
        )
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user, attribute_names=["travel_history"])
        logger.info(f"👤 User {user.user_id} ({user.category}) created")
        return user

    async def update_user(self, user: UserInfo, data: UserUpdateRequest) -> UserInfo:
        if data.name:
            existing = await self.find_by_name(data.name)
            if existing and existing.user_id != user.user_id:
                raise DuplicateUserError(data.name)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        await self.session.commit()
        return user

    async def delete_user(self, user: UserInfo):
        await self.session.delete(user)
        await self.session.commit()
        logger.info(f"🗑️ User {user.user_id} deleted")


class TravelHistoryService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_entries(
        self,
        user_id: Optional[int] = None,
        destination: Optional[str] = None,
        purpose: Optional[str] = None,
    ) -> List[TravelHistory]:
        query = select(TravelHistory).options(selectinload(TravelHistory.user))
        if user_id:
            query = query.where(TravelHistory.user_id == user_id)
        if destination:
            query = query.where(func.lower(TravelHistory.destination).contains(destination.lower()))
        if purpose:
            query = query.where(TravelHistory.purpose == purpose)

        result = await self.session.execute(query.order_by(TravelHistory.travel_date.desc()))
        return list(result.scalars().all())

    async def get_entry(self, travel_id: int) -> Optional[TravelHistory]:
        result = await self.session.execute(
            select(TravelHistory)
            .options(selectinload(TravelHistory.user))
            .where(TravelHistory.travel_id == travel_id)
        )
        return result.scalar_one_or_none()

    async def create_entry(self, data: TravelHistoryCreateRequest) -> TravelHistory:
        entry = TravelHistory(
            user_id=data.user_id,
            destination=data.destination,
            travel_date=data.travel_date,
            purpose=data.purpose or None,
        )
        self.session.add(entry)
        await self.session.commit()
        await self.session.refresh(entry, attribute_names=["user"])
        return entry

    async def update_entry(self, entry: TravelHistory, data: TravelHistoryUpdateRequest) -> TravelHistory:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(entry, field, value)
        await self.session.commit()
        await self.session.refresh(entry, attribute_names=["user"])
        return entry

    async def delete_entry(self, entry: TravelHistory):
        await self.session.delete(entry)
        await self.session.commit()

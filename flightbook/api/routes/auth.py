"""
Auth API: register, login, current user, token hand-off and logout
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, Optional
import logging

from ...auth import clear_auth_cookie, create_token, get_auth_token, get_current_user, set_auth_cookie
from ...database import get_session
from ...schemas import LoginRequest, RegisterRequest
from ...services.users import DuplicateUserError, UserService, serialize_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    register_request: RegisterRequest,
    response: Response,
    session: AsyncSession = Depends(get_session)
):
    try:
        user = await UserService(session).create_user(register_request, unique_name=True)
        set_auth_cookie(response, create_token(user.user_id, user.name, user.category))
        return {"user": serialize_user(user, include_history=False)}

    except DuplicateUserError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this name already exists"
        )
    except Exception as e:
        logger.error(f"Registration error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )


@router.post("/login")
async def login(
    login_request: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_session)
):
    """Log in by user id, or by name (case-insensitive) when no id is given."""
    try:
        service = UserService(session)
        if login_request.user_id:
            user = await service.get_user(login_request.user_id)
        else:
            user = await service.find_by_name(login_request.name)

        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found"
            )

        set_auth_cookie(response, create_token(user.user_id, user.name, user.category))
        logger.info(f"🔑 User {user.user_id} logged in")
        return {"user": serialize_user(user, include_history=False)}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )


@router.get("/me")
async def me(
    current_user: Optional[Dict[str, Any]] = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    if not current_user:
        return {"user": None}

    try:
        user = await UserService(session).get_user(current_user.get("userId"))
        return {"user": serialize_user(user, include_history=False) if user else None}

    except Exception as e:
        logger.error(f"Get current user error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )


@router.get("/token")
async def token(auth_token: str = Depends(get_auth_token)):
    """Hand the cookie token to a client that cannot read HTTP-only cookies."""
    return {"token": auth_token}


@router.post("/logout")
async def logout(response: Response):
    clear_auth_cookie(response)
    return {"success": True}

"""
Cookie-based authentication.
The auth-token cookie carries a signed JWT with the user's id, name and category.
"""

import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Cookie, HTTPException, Response, status
from jose import JWTError, jwt
from dotenv import load_dotenv

load_dotenv()
logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "auth-token"
SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")

JWT_SECRET = os.getenv("JWT_SECRET", "flightbook-dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
if JWT_ALGORITHM not in SUPPORTED_ALGORITHMS:
    JWT_ALGORITHM = "HS256"
JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", "7"))
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")


def create_token(user_id: int, name: str, category: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=JWT_EXPIRES_DAYS)
    payload = {
        "userId": user_id,
        "name": name,
        "category": category,
        "iat": datetime.now(timezone.utc),
        "exp": expire,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def set_auth_cookie(response: Response, token: str):
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=ENVIRONMENT == "production",
        samesite="lax",
        max_age=60 * 60 * 24 * JWT_EXPIRES_DAYS,
        path="/",
    )


def clear_auth_cookie(response: Response):
    response.delete_cookie(key=AUTH_COOKIE_NAME, path="/")


# FastAPI dependencies
async def get_current_user(
    auth_token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
) -> Optional[Dict[str, Any]]:
    """Decoded token payload, or None when the cookie is missing or invalid."""
    if not auth_token:
        return None
    return decode_token(auth_token)


async def get_auth_token(
    auth_token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
) -> str:
    if not auth_token or decode_token(auth_token) is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return auth_token

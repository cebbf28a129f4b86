"""
Service banner and health check
"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime, timezone
import logging

from ...database import get_session
from ...redis_service import RedisService, get_redis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])

API_VERSION = "1.0.0"


@router.get("/")
async def root():
    return {"message": "FlightBook API", "status": "running", "version": API_VERSION}


@router.get("/health")
async def health_check(
    session: AsyncSession = Depends(get_session),
    redis: RedisService = Depends(get_redis)
):
    """Database and Redis reachability"""
    try:
        await session.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "unhealthy"

    redis_status = "healthy" if await redis.ping() else "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" and redis_status == "healthy" else "unhealthy",
        "database": db_status,
        "redis": redis_status,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

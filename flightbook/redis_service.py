"""
Redis Service for FlightBook
Handles response caching and booking-session storage
"""

import redis.asyncio as aioredis
import json
import os
from typing import Any, Optional, List
import logging
from dotenv import load_dotenv

load_dotenv()
logger = logging.getLogger(__name__)


class RedisService:
    def __init__(self, redis_client: Optional[aioredis.Redis] = None):
        self.redis_url = os.getenv('REDIS_URL', 'redis://localhost:6379/0')
        self.redis_client = redis_client

    async def connect(self):
        """Connect to Redis"""
        try:
            self.redis_client = aioredis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True
            )
            await self.redis_client.ping()
            logger.info("✅ Connected to Redis")
        except Exception as e:
            # Cache and sessions degrade to misses, requests keep working
            logger.error(f"❌ Failed to connect to Redis: {e}")

    async def disconnect(self):
        """Disconnect from Redis"""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
            logger.info("📴 Disconnected from Redis")

    async def ping(self) -> bool:
        try:
            return bool(await self.redis_client.ping())
        except Exception as e:
            logger.error(f"Redis ping failed: {e}")
            return False

    async def get(self, key: str) -> Optional[str]:
        """Get value from Redis"""
        try:
            return await self.redis_client.get(key)
        except Exception as e:
            logger.error(f"Error getting key {key}: {e}")
            return None

    async def set(self, key: str, value: str, expire: Optional[int] = None) -> bool:
        """Set value in Redis with optional expiration"""
        try:
            if expire:
                return bool(await self.redis_client.setex(key, expire, value))
            return bool(await self.redis_client.set(key, value))
        except Exception as e:
            logger.error(f"Error setting key {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        """Delete key from Redis"""
        try:
            result = await self.redis_client.delete(key)
            return result > 0
        except Exception as e:
            logger.error(f"Error deleting key {key}: {e}")
            return False

    async def keys(self, pattern: str) -> List[str]:
        try:
            return await self.redis_client.keys(pattern)
        except Exception as e:
            logger.error(f"Error listing keys for {pattern}: {e}")
            return []

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching pattern, returns number removed"""
        try:
            keys = await self.keys(pattern)
            if not keys:
                return 0
            deleted = await self.redis_client.delete(*keys)
            logger.info(f"🗑️ Invalidated {deleted} cache entries for {pattern}")
            return deleted
        except Exception as e:
            logger.error(f"Error deleting pattern {pattern}: {e}")
            return 0

    # JSON helpers
    async def set_json(self, key: str, value: Any, expire: Optional[int] = None) -> bool:
        try:
            json_str = json.dumps(value, default=str)
            return await self.set(key, json_str, expire)
        except Exception as e:
            logger.error(f"Error setting JSON key {key}: {e}")
            return False

    async def get_json(self, key: str) -> Optional[Any]:
        try:
            value = await self.get(key)
            if value:
                return json.loads(value)
            return None
        except Exception as e:
            logger.error(f"Error getting JSON key {key}: {e}")
            return None


# Global Redis service instance
redis_service = RedisService()


# FastAPI dependency
async def get_redis() -> RedisService:
    """Dependency for FastAPI to get Redis service"""
    if not redis_service.redis_client:
        await redis_service.connect()
    return redis_service

"""
Cache-aside helpers on top of RedisService.

Cache failures never fail a request: RedisService already logs and
swallows store errors, so a broken Redis behaves like a permanent miss.
Concurrent misses on the same key each compute; the last write wins.
"""
import base64
import json
import logging
from typing import Any, Awaitable, Callable, Dict

from ..redis_service import RedisService

logger = logging.getLogger(__name__)

CACHE_TTL = {
    "FLIGHT_SEARCH": 300,  # 5 minutes
    "AIRPORTS": 86400,  # 24 hours
    "AIRLINES": 86400,
    "SEAT_MAP": 600,  # 10 minutes
}


def _canonicalize(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    if isinstance(value, dict):
        return {k: _canonicalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonicalize(v) for v in value]
    return value


def generate_cache_key(prefix: str, params: Dict[str, Any]) -> str:
    """
    Build a deterministic cache key: equivalent parameter objects
    (any key order, any string case) map to the same key.
    """
    payload = json.dumps(_canonicalize(params), sort_keys=True, separators=(",", ":"), default=str)
    encoded = base64.urlsafe_b64encode(payload.encode()).decode()
    return f"{prefix}:{encoded}"


async def with_cache(
    redis: RedisService,
    key: str,
    ttl_seconds: int,
    compute: Callable[[], Awaitable[Any]],
) -> Any:
    """Return the cached value for key, computing and storing it on a miss."""
    cached = await redis.get_json(key)
    if cached is not None:
        logger.debug(f"Cache hit: {key}")
        return cached

    value = await compute()
    await redis.set_json(key, value, expire=ttl_seconds)
    return value


async def invalidate_cache(redis: RedisService, pattern: str) -> int:
    return await redis.delete_pattern(pattern)

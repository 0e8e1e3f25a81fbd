"""
Redis caching service for the public catalog listings.

CACHING STRATEGY
================

What we cache:
  - Coach and program listing responses (JSON-serialized)
  - Cache key pattern: "catalog:{kind}:list"

Why:
  - The marketing pages hit these listings on every page view
  - The data only changes when an admin edits the catalog

Invalidation strategy:
  - On coach/program create, update or deactivate: delete every key under
    "catalog:{kind}:", after the write has committed
  - TTL-based expiry as safety net (5 minutes)

What we never cache:
  - Slot availability and anything else derived from bookings. A stale
    "free" slot would send parents into a booking that then conflicts.

Failure policy:
  Redis is advisory. When it is disabled or unreachable every call degrades
  to a cache miss and the database answers.
"""

import json
import time
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError
from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

_redis_client: Optional[redis.Redis] = None
# After a failed connect, listings skip Redis until this monotonic time
_retry_after: float = 0.0


async def get_redis() -> Optional[redis.Redis]:
    """
    Shared client, or None while Redis is disabled or recently unreachable.
    A failed connect is retried at most every REDIS_RETRY_SECONDS so an
    outage does not add a connect timeout to every catalog request.
    """
    global _redis_client, _retry_after

    if not settings.REDIS_ENABLED:
        return None
    if _redis_client is not None:
        return _redis_client
    if time.monotonic() < _retry_after:
        return None

    client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
    try:
        await client.ping()
    except RedisError as e:
        _retry_after = time.monotonic() + settings.REDIS_RETRY_SECONDS
        logger.error("redis_connection_failed", error=str(e), retry_in=settings.REDIS_RETRY_SECONDS)
        await client.aclose()
        return None

    logger.info("redis_connected", url=settings.REDIS_URL)
    _redis_client = client
    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client, _retry_after
    _retry_after = 0.0
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _make_list_key(kind: str) -> str:
    return f"catalog:{kind}:list"


async def get_cached_list(kind: str) -> Optional[list]:
    """Retrieve a cached catalog listing ("coaches" or "programs")."""
    client = await get_redis()
    if not client:
        return None

    key = _make_list_key(kind)
    try:
        data = await client.get(key)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_list(kind: str, data: list) -> None:
    """Cache a catalog listing with TTL."""
    client = await get_redis()
    if not client:
        return

    key = _make_list_key(kind)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_catalog_cache(kind: str) -> None:
    """Delete every cached key for one catalog kind."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"catalog:{kind}:*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", kind=kind, keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", kind=kind, error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}

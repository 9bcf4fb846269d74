"""
Redis caching service for vendor listings.

CACHING STRATEGY
================

What we cache:
  - Vendor listing responses (filtered, JSON-serialized)
  - Cache key pattern: "vendors:list:category={c}&city={city}&min={min}&max={max}"

Why:
  - Vendor browsing is the most frequent anonymous read
  - Listings only change when a profile is created or a rating is re-aggregated

Invalidation strategy:
  - On vendor profile creation: delete all vendor list keys
  - On rating aggregation: delete all vendor list keys (sort order is by rating)
  - TTL-based expiry as safety net

  All vendor list keys share the "vendors:list:" prefix so we can SCAN and
  delete them.

Failure mode:
  The cache is advisory. If Redis is disabled or unreachable every call
  degrades to a miss and the database answers.
"""

import json
from typing import Optional

import redis.asyncio as redis
from weddinghub.core.config import get_settings
from weddinghub.core.logging import get_logger
from weddinghub.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

VENDOR_LIST_PREFIX = "vendors:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def make_vendor_list_key(
    category: Optional[str],
    city: Optional[str],
    min_price: Optional[float],
    max_price: Optional[float],
) -> str:
    city_key = city.lower() if city else None
    return f"{VENDOR_LIST_PREFIX}category={category}&city={city_key}&min={min_price}&max={max_price}"


async def get_cached_vendors(key: str) -> Optional[list]:
    client = await get_redis()
    if not client:
        return None

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


async def set_cached_vendors(key: str, data: list) -> None:
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_vendor_cache() -> None:
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{VENDOR_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


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

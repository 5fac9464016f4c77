"""Redis store for distributed locks.

Redis is optional. When REDIS_URL is empty, init_redis() is a no-op and the
lock helpers raise RuntimeError, which callers treat as "no cross-process
coordination available".
"""

import logging

import redis.asyncio as redis

from app.settings import get_settings

# Key prefixes
PREFIX_LOCK = "lock:"

TTL_DEFAULT_LOCK = 60  # 1 minute

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    if not settings.redis_url:
        return
    client = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await client.ping()
    _redis = client
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


async def acquire_lock(key: str, ttl: int = TTL_DEFAULT_LOCK) -> bool:
    """Acquire a distributed lock.

    Args:
        key: Lock key (e.g., "schema-init").
        ttl: Lock timeout in seconds.

    Returns:
        True if lock acquired, False if already locked.
    """
    lock_key = f"{PREFIX_LOCK}{key}"
    # SET NX (only if not exists) with TTL
    result = await _get_redis().set(lock_key, "1", nx=True, ex=ttl)
    return result is not None


async def release_lock(key: str) -> None:
    """Release a distributed lock.

    Args:
        key: Lock key.
    """
    await _get_redis().delete(f"{PREFIX_LOCK}{key}")


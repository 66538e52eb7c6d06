"""Redis cache layer for engine state.

Provides persistence for:
- The signal history log
- Daily metric snapshots
- The last notified signal

Uses orjson for fast serialization/deserialization.
"""

from __future__ import annotations

import logging
from typing import Any

import orjson
import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from app.config import get_settings

logger = logging.getLogger(__name__)

# Global connection pool
_pool: ConnectionPool | None = None
_client: redis.Redis | None = None


# =============================================================================
# Keys for different data types
# =============================================================================

KEY_HISTORY = "history:signals"              # JSON list of history entries
KEY_PREFIX_SNAPSHOT = "history:snapshot:"    # Daily snapshot: history:snapshot:{date}
KEY_LAST_NOTIFICATION = "notify:last"        # Last notified signal record


# =============================================================================
# Connection management
# =============================================================================

async def init_cache() -> None:
    """Initialize Redis connection pool."""
    global _pool, _client

    if _client is not None:
        return

    settings = get_settings()
    _pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=10,
        decode_responses=False,  # We handle encoding ourselves with orjson
    )
    _client = redis.Redis(connection_pool=_pool)

    # Test connection
    try:
        await _client.ping()
        logger.info(f"Redis connected: {settings.redis_url}")
    except (redis.ConnectionError, OSError) as e:
        logger.warning(f"Redis connection failed: {e}. Persistence will be disabled.")
        _client = None
        _pool = None


async def close_cache() -> None:
    """Close Redis connection pool."""
    global _pool, _client

    if _client is not None:
        await _client.aclose()
        _client = None

    if _pool is not None:
        await _pool.disconnect()
        _pool = None

    logger.info("Redis connection closed")


def is_cache_available() -> bool:
    """Check if cache is available."""
    return _client is not None


# =============================================================================
# Basic operations
# =============================================================================

async def get(key: str) -> bytes | None:
    """Get a value from cache.

    Args:
        key: Cache key

    Returns:
        Raw bytes or None if not found/cache unavailable
    """
    if _client is None:
        return None

    try:
        return await _client.get(key)
    except redis.RedisError as e:
        logger.warning(f"Redis GET error: {e}")
        return None


async def set(
    key: str,
    value: bytes,
    ttl: int | None = None,
) -> bool:
    """Set a value in cache.

    Args:
        key: Cache key
        value: Raw bytes to store
        ttl: Time-to-live in seconds (None for no expiry)

    Returns:
        True if successful, False otherwise
    """
    if _client is None:
        return False

    try:
        if ttl:
            await _client.setex(key, ttl, value)
        else:
            await _client.set(key, value)
        return True
    except redis.RedisError as e:
        logger.warning(f"Redis SET error: {e}")
        return False


async def delete(key: str) -> bool:
    """Delete a key from cache.

    Returns:
        True if deleted, False otherwise
    """
    if _client is None:
        return False

    try:
        await _client.delete(key)
        return True
    except redis.RedisError as e:
        logger.warning(f"Redis DELETE error: {e}")
        return False


# =============================================================================
# JSON operations (using orjson)
# =============================================================================

async def get_json(key: str) -> Any | None:
    """Get a JSON value from cache.

    Returns:
        Deserialized object or None
    """
    data = await get(key)
    if data is None:
        return None

    try:
        return orjson.loads(data)
    except orjson.JSONDecodeError as e:
        logger.warning(f"JSON decode error for key {key}: {e}")
        return None


async def set_json(
    key: str,
    value: Any,
    ttl: int | None = None,
) -> bool:
    """Set a JSON value in cache.

    Args:
        key: Cache key
        value: Object to serialize and store
        ttl: Time-to-live in seconds

    Returns:
        True if successful, False otherwise
    """
    try:
        data = orjson.dumps(value)
        return await set(key, data, ttl)
    except (TypeError, orjson.JSONEncodeError) as e:
        logger.warning(f"JSON encode error for key {key}: {e}")
        return False


async def scan_json(pattern: str) -> dict[str, Any]:
    """Load every JSON value whose key matches a pattern.

    Returns:
        Dict mapping key -> deserialized value (empty if unavailable)
    """
    if _client is None:
        return {}

    values: dict[str, Any] = {}
    try:
        async for key in _client.scan_iter(match=pattern):
            key_str = key.decode() if isinstance(key, bytes) else key
            value = await get_json(key_str)
            if value is not None:
                values[key_str] = value
        return values
    except redis.RedisError as e:
        logger.warning(f"Redis SCAN error: {e}")
        return {}


async def delete_pattern(pattern: str) -> int:
    """Delete all keys matching a pattern.

    Args:
        pattern: Key pattern (e.g., "history:snapshot:*")

    Returns:
        Number of keys deleted
    """
    if _client is None:
        return 0

    try:
        keys = []
        async for key in _client.scan_iter(match=pattern):
            keys.append(key)

        if keys:
            return await _client.delete(*keys)
        return 0
    except redis.RedisError as e:
        logger.warning(f"Redis DELETE pattern error: {e}")
        return 0


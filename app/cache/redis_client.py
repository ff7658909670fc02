"""
Redis Client

Async Redis connection and a small key-prefixed cache helper.
"""

from typing import Optional

import redis.asyncio as redis
from redis.asyncio import Redis

from app.config.settings import settings
from app.core.logging import logger


class _RedisState:
    """Container for Redis connection state."""

    pool: Optional[Redis] = None


_state = _RedisState()


async def init_redis() -> None:
    """Initialize Redis connection pool."""
    logger.info("Initializing Redis connection")
    try:
        _state.pool = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            max_connections=settings.REDIS_POOL_SIZE,
        )
        await _state.pool.ping()
        logger.info("Redis connection established")
    except Exception as e:
        logger.error("Failed to connect to Redis", error=str(e))
        raise


async def close_redis() -> None:
    """Close Redis connection pool."""
    if _state.pool:
        logger.info("Closing Redis connection")
        await _state.pool.aclose()
        _state.pool = None
        logger.info("Redis connection closed")


def is_redis_initialized() -> bool:
    """Whether init_redis() has run and the pool is open."""
    return _state.pool is not None


def get_redis() -> Redis:
    """Get Redis connection.

    Returns:
        Redis client instance

    Raises:
        RuntimeError: If Redis not initialized
    """
    if _state.pool is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _state.pool


class RedisCache:
    """Helper class for common Redis cache operations."""

    def __init__(self, prefix: str = "", client: Optional[Redis] = None) -> None:
        """Initialize cache with optional key prefix.

        Args:
            prefix: Prefix for all keys (e.g., "snapshot:")
            client: Explicit client; the shared pool is used when omitted
        """
        self.prefix = prefix
        self._client = client

    @property
    def client(self) -> Redis:
        """Client bound at construction, or the shared pool."""
        return self._client if self._client is not None else get_redis()

    def _key(self, key: str) -> str:
        """Build full key with prefix."""
        return f"{self.prefix}{key}" if self.prefix else key

    async def get(self, key: str) -> Optional[str]:
        """Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        return await self.client.get(self._key(key))

    async def set(
        self,
        key: str,
        value: str,
        ttl: Optional[int] = None,
    ) -> None:
        """Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time-to-live in seconds
        """
        if ttl:
            await self.client.setex(self._key(key), ttl, value)
        else:
            await self.client.set(self._key(key), value)

    async def delete(self, key: str) -> None:
        """Delete key from cache.

        Args:
            key: Cache key
        """
        await self.client.delete(self._key(key))

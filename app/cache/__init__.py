"""Cache module for Redis operations."""

from app.cache.redis_client import (
    close_redis,
    get_redis,
    init_redis,
    is_redis_initialized,
)
from app.cache.snapshot_cache import SnapshotCache

__all__ = [
    "SnapshotCache",
    "close_redis",
    "get_redis",
    "init_redis",
    "is_redis_initialized",
]

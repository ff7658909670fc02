"""
Snapshot Cache

Last compiled policy snapshot per connector, kept in Redis so connector polls
do not recompile on every request.

Keys:
    snapshot:{connector_id} → PolicySnapshot JSON, expires after
                              SNAPSHOT_CACHE_TTL_SECONDS

A cached snapshot is only a shortcut. The policy compiler checks its version
against the ledger before serving it, so a stale entry is never returned.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis

from app.cache.redis_client import RedisCache
from app.config.settings import settings
from app.core.logging import logger
from app.schemas.policy import PolicySnapshot


class SnapshotCache(RedisCache):
    """Cache for compiled policy snapshots."""

    def __init__(self, client: Optional[Redis] = None) -> None:
        super().__init__(prefix="snapshot:", client=client)

    async def get_snapshot(self, connector_id: str) -> Optional[PolicySnapshot]:
        """Get the cached snapshot of a connector.

        Args:
            connector_id: Connector identifier

        Returns:
            Cached snapshot, or None on a miss or an unreadable entry
        """
        cached = await self.get(connector_id)
        if not cached:
            logger.debug("Snapshot cache miss", connector_id=connector_id)
            return None

        try:
            snapshot = PolicySnapshot.model_validate_json(cached)
        except PydanticValidationError:
            logger.warning("Discarding unreadable cached snapshot", connector_id=connector_id)
            await self.delete(connector_id)
            return None

        logger.debug(
            "Snapshot cache hit",
            connector_id=connector_id,
            policy_version=snapshot.policy_version,
        )
        return snapshot

    async def set_snapshot(self, snapshot: PolicySnapshot) -> None:
        """Cache a freshly compiled snapshot.

        Args:
            snapshot: Snapshot to cache under its connector id
        """
        await self.set(
            snapshot.connector_id,
            snapshot.model_dump_json(),
            ttl=settings.SNAPSHOT_CACHE_TTL_SECONDS,
        )
        logger.debug(
            "Snapshot cached",
            connector_id=snapshot.connector_id,
            policy_version=snapshot.policy_version,
        )

    async def invalidate(self, connector_id: str) -> None:
        """Drop the cached snapshot of a connector.

        Args:
            connector_id: Connector identifier
        """
        await self.delete(connector_id)
        logger.info("Invalidated snapshot cache", connector_id=connector_id)

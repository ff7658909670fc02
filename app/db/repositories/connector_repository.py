"""
Connector Repository

Database operations specific to the Connector model.

Common Operations:
==================
- record_heartbeat()        → Store the connector's self-reported policy version

Heartbeat Bookkeeping:
======================
    record_heartbeat("con-...", last_policy_version=3) runs:

        UPDATE connectors
        SET last_policy_version = 3,
            last_seen_at = now(),
            status = 'online',
            installed = true
        WHERE id = 'con-...'

    The version ledger is never written here; the connector's reported
    version and the ledger's current version are independent values.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.constants import ConnectorStatus
from app.core.utils import utc_now
from app.db.repositories.base import BaseRepository
from app.models.connector import Connector


class ConnectorRepository(BaseRepository[Connector]):
    """Repository for Connector database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Connector, session)

    async def record_heartbeat(
        self,
        connector_id: str,
        last_policy_version: int,
    ) -> Connector | None:
        """
        Record a heartbeat from a connector.

        Args:
            connector_id: Connector identifier
            last_policy_version: Policy version the connector reports having applied

        Returns:
            Updated connector, or None if not found
        """
        connector = await self.get(connector_id)
        if not connector:
            return None

        connector.last_policy_version = last_policy_version
        connector.last_seen_at = utc_now()
        connector.status = ConnectorStatus.ONLINE.value
        connector.installed = True

        await self.session.flush()
        await self.session.refresh(connector)
        return connector

"""
Policy Version Repository

Row-level access to the connector_policy_versions ledger table.

Writes are compare-and-swap:
============================
    First compile of a connector (no row yet):

        INSERT INTO connector_policy_versions (connector_id, version, ...)
        VALUES ('con-...', 1, ...)

        A concurrent first compile makes one of the two inserts fail on the
        primary key; the loser gets False.

    Every later compile:

        UPDATE connector_policy_versions
        SET version = 5, policy_hash = '...', compiled_at = now()
        WHERE connector_id = 'con-...' AND version = 4

        rowcount 0 means another compile advanced the version first.

Reads select plain columns rather than ORM entities so a retry after a lost
race sees the committed row instead of a stale identity-map copy.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import logger
from app.models.policy_version import ConnectorPolicyVersion


class PolicyVersionRepository:
    """Repository for ConnectorPolicyVersion rows."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_entry(self, connector_id: str) -> Row[Any] | None:
        """
        Get the ledger row of a connector.

        Args:
            connector_id: Connector identifier

        Returns:
            Row with version, policy_hash and compiled_at, or None
        """
        result = await self.session.execute(
            select(
                ConnectorPolicyVersion.version,
                ConnectorPolicyVersion.policy_hash,
                ConnectorPolicyVersion.compiled_at,
            ).where(ConnectorPolicyVersion.connector_id == connector_id)
        )
        return result.first()

    async def insert(
        self,
        connector_id: str,
        version: int,
        policy_hash: str,
        compiled_at: datetime,
    ) -> bool:
        """
        Insert the first ledger row of a connector.

        Args:
            connector_id: Connector identifier
            version: Version to record
            policy_hash: Hash of that version
            compiled_at: Compilation time

        Returns:
            True if inserted, False if a row already existed
        """
        try:
            await self.session.execute(
                insert(ConnectorPolicyVersion).values(
                    connector_id=connector_id,
                    version=version,
                    policy_hash=policy_hash,
                    compiled_at=compiled_at,
                )
            )
        except IntegrityError:
            logger.info("Ledger insert lost race", connector_id=connector_id)
            return False
        return True

    async def compare_and_swap(
        self,
        connector_id: str,
        expected_version: int,
        version: int,
        policy_hash: str,
        compiled_at: datetime,
    ) -> bool:
        """
        Advance a ledger row only if it still holds the expected version.

        Args:
            connector_id: Connector identifier
            expected_version: Version the caller read
            version: Version to record
            policy_hash: Hash of that version
            compiled_at: Compilation time

        Returns:
            True if the row was updated, False if the version had moved on
        """
        result = await self.session.execute(
            update(ConnectorPolicyVersion)
            .where(
                ConnectorPolicyVersion.connector_id == connector_id,
                ConnectorPolicyVersion.version == expected_version,
            )
            .values(version=version, policy_hash=policy_hash, compiled_at=compiled_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

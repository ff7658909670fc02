"""
Version Ledger

Per-connector record of the latest compiled policy version and its hash.

Versions start at 1 on a connector's first compile and only ever grow by
one. A connector with no record is at version 0.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.constants import INITIAL_POLICY_VERSION
from app.core.utils import ensure_utc
from app.db.repositories import PolicyVersionRepository


@dataclass(frozen=True)
class LedgerEntry:
    """Latest compiled version of one connector."""

    connector_id: str
    version: int
    policy_hash: str
    compiled_at: datetime


class VersionLedger:
    """Read and advance ledger entries."""

    def __init__(self, session: AsyncSession) -> None:
        self.repo = PolicyVersionRepository(session)

    async def get_version(self, connector_id: str) -> Optional[LedgerEntry]:
        """Get the ledger entry of a connector.

        Args:
            connector_id: Connector identifier

        Returns:
            LedgerEntry, or None if the connector was never compiled
        """
        row = await self.repo.get_entry(connector_id)
        if row is None:
            return None
        return LedgerEntry(
            connector_id=connector_id,
            version=row.version,
            policy_hash=row.policy_hash,
            compiled_at=ensure_utc(row.compiled_at),
        )

    async def current_version(self, connector_id: str) -> int:
        """Latest compiled version, or 0 if the connector was never compiled."""
        entry = await self.get_version(connector_id)
        return entry.version if entry else INITIAL_POLICY_VERSION

    async def record_version(
        self,
        connector_id: str,
        version: int,
        policy_hash: str,
        compiled_at: datetime,
        *,
        expected_version: int,
    ) -> bool:
        """Advance a connector's entry from expected_version to version.

        Args:
            connector_id: Connector identifier
            version: New version, must be greater than expected_version
            policy_hash: Hash of the new version's resource list
            compiled_at: Compilation time
            expected_version: Version read before compiling (0 for no entry)

        Returns:
            True if recorded, False if another compile got there first

        Raises:
            ValueError: If version does not advance past expected_version
        """
        if version <= expected_version:
            raise ValueError(
                f"Policy version must increase: {expected_version} -> {version}"
            )

        if expected_version == INITIAL_POLICY_VERSION:
            return await self.repo.insert(connector_id, version, policy_hash, compiled_at)

        return await self.repo.compare_and_swap(
            connector_id,
            expected_version,
            version,
            policy_hash,
            compiled_at,
        )

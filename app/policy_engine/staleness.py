"""
Staleness Check

Tells a connector whether the policy it has applied is behind the ledger.

    update_available = reported_version < current_version

Read-only with respect to the ledger: checking never compiles and never
writes a version. A connector whose network changed since the last compile
is not reported stale until something triggers a compile.
"""

from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConnectorNotFoundError, StoreUnavailableError
from app.core.logging import logger
from app.db.repositories import ConnectorRepository
from app.policy_engine.version_ledger import VersionLedger


@dataclass(frozen=True)
class StalenessResult:
    """Outcome of a staleness check."""

    update_available: bool
    current_version: int


def is_stale(reported_version: int, current_version: int) -> bool:
    """Whether a connector at reported_version should fetch current_version."""
    return reported_version < current_version


class StalenessChecker:
    """Compare connector-reported versions with the ledger."""

    def __init__(self, session: AsyncSession) -> None:
        self.connector_repo = ConnectorRepository(session)
        self.ledger = VersionLedger(session)

    async def check_staleness(
        self,
        connector_id: str,
        reported_version: int,
    ) -> StalenessResult:
        """Check whether a connector's applied version is behind.

        Args:
            connector_id: Connector identifier
            reported_version: Version the connector reports having applied

        Returns:
            StalenessResult

        Raises:
            ConnectorNotFoundError: If the connector does not exist
            StoreUnavailableError: If the store fails
        """
        try:
            if not await self.connector_repo.exists(connector_id):
                raise ConnectorNotFoundError(connector_id)
            current_version = await self.ledger.current_version(connector_id)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                "Policy store unavailable during staleness check",
                original_error=e,
                details={"connector_id": connector_id},
            ) from e

        return StalenessResult(
            update_available=is_stale(reported_version, current_version),
            current_version=current_version,
        )

    async def record_heartbeat(
        self,
        connector_id: str,
        last_policy_version: int,
    ) -> StalenessResult:
        """Store a connector heartbeat, then check its staleness.

        Updates the connector's reported version, last-seen time and status.
        The ledger is not touched.

        Args:
            connector_id: Connector identifier
            last_policy_version: Version the connector reports having applied

        Returns:
            StalenessResult for the reported version

        Raises:
            ConnectorNotFoundError: If the connector does not exist
            StoreUnavailableError: If the store fails
        """
        try:
            connector = await self.connector_repo.record_heartbeat(
                connector_id,
                last_policy_version,
            )
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                "Policy store unavailable during heartbeat",
                original_error=e,
                details={"connector_id": connector_id},
            ) from e

        if connector is None:
            raise ConnectorNotFoundError(connector_id)

        result = await self.check_staleness(connector_id, last_policy_version)
        logger.info(
            "Connector heartbeat",
            connector_id=connector_id,
            last_policy_version=last_policy_version,
            current_version=result.current_version,
            update_available=result.update_available,
        )
        return result

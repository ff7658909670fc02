"""
Policy Compiler

Derives the policy a connector must enforce and advances its version when
the derived content changes.

Compile steps (fixed order):
============================
    1. Load the connector                     → ConnectorNotFoundError if absent
    2. Read the ledger entry                  → pins the expected version
    3. Load its network's resources           → ascending by id
    4. Per resource: allowed identities       → sorted, empty kept (deny all)
    5. Hash the canonical resource list
    6. No entry or different hash             → version + 1, compare-and-swap write
       Same hash, ledger not moved            → ledger untouched
       Same hash, ledger moved                → retry
    7. Return the signed snapshot

Transactions:
=============
The compiler owns its transaction. It commits after a ledger write and rolls
back on a lost race (then re-reads and recompiles) or on any store error.
A failed compile never changes the ledger.

    compile("con-1")
        │
        ├── attempt 1: ledger at v3, hash differs, UPDATE ... WHERE version = 3
        │                → rowcount 0 (another compile wrote v4) → rollback
        │
        └── attempt 2: ledger at v4, hash equals → no write → snapshot v4
"""

from typing import Optional

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache.snapshot_cache import SnapshotCache
from app.config.constants import INITIAL_POLICY_VERSION
from app.config.settings import settings
from app.core.exceptions import (
    ConnectorNotFoundError,
    PolicyVersionConflictError,
    StoreUnavailableError,
)
from app.core.logging import logger
from app.core.utils import utc_now
from app.db.repositories import ConnectorRepository, ResourceRepository
from app.policy_engine.identity_resolver import IdentityResolver
from app.policy_engine.rule_evaluator import RuleEvaluator
from app.policy_engine.snapshot import (
    build_entry,
    build_snapshot,
    compute_policy_hash,
    is_expired,
)
from app.policy_engine.version_ledger import VersionLedger
from app.schemas.policy import PolicySnapshot, ResourcePolicyEntry


class PolicyCompiler:
    """Compile connector policies and serve them to connectors."""

    def __init__(
        self,
        session: AsyncSession,
        cache: Optional[SnapshotCache] = None,
    ) -> None:
        """Initialize the compiler.

        Args:
            session: Database session; the compiler commits and rolls it back
            cache: Snapshot cache used by fetch_latest, disabled when None
        """
        self.session = session
        self.cache = cache
        self.connector_repo = ConnectorRepository(session)
        self.resource_repo = ResourceRepository(session)
        self.ledger = VersionLedger(session)

    # ═══════════════════════════════════════════════════════════════════════════
    # ENTRY POINTS
    # ═══════════════════════════════════════════════════════════════════════════

    async def compile(self, connector_id: str) -> PolicySnapshot:
        """Compile the current policy of a connector.

        Args:
            connector_id: Connector identifier

        Returns:
            Signed snapshot at the connector's current version

        Raises:
            ConnectorNotFoundError: If the connector does not exist
            PolicyVersionConflictError: If every attempt lost a ledger race
            StoreUnavailableError: If the store fails; the ledger is unchanged
        """
        max_attempts = max(1, settings.POLICY_COMPILE_MAX_RETRIES)

        for attempt in range(1, max_attempts + 1):
            try:
                snapshot = await self._compile_once(connector_id)
            except SQLAlchemyError as e:
                await self._rollback()
                logger.exception(
                    "Store error during policy compile",
                    connector_id=connector_id,
                    attempt=attempt,
                )
                raise StoreUnavailableError(
                    "Policy store unavailable during compile",
                    original_error=e,
                    details={"connector_id": connector_id},
                ) from e
            except ConnectorNotFoundError:
                await self._rollback()
                raise

            if snapshot is not None:
                await self._cache_snapshot(snapshot)
                return snapshot

            logger.warning(
                "Policy version conflict, retrying compile",
                connector_id=connector_id,
                attempt=attempt,
                max_attempts=max_attempts,
            )

        raise PolicyVersionConflictError(connector_id, attempts=max_attempts)

    async def fetch_latest(self, connector_id: str) -> PolicySnapshot:
        """Latest snapshot for a polling connector.

        Serves the cached snapshot when it matches the ledger's current
        version and is still valid; compiles otherwise.

        Args:
            connector_id: Connector identifier

        Returns:
            Signed snapshot at the connector's current version
        """
        cached = await self._cached_snapshot(connector_id)
        if cached is not None:
            try:
                connector = await self.connector_repo.get(connector_id)
                current_version = await self.ledger.current_version(connector_id)
            except SQLAlchemyError as e:
                await self._rollback()
                raise StoreUnavailableError(
                    "Policy store unavailable",
                    original_error=e,
                    details={"connector_id": connector_id},
                ) from e

            if connector is None:
                await self._drop_cached_snapshot(connector_id)
                raise ConnectorNotFoundError(connector_id)

            if cached.policy_version == current_version and not is_expired(cached):
                logger.info(
                    "Serving cached policy snapshot",
                    connector_id=connector_id,
                    policy_version=cached.policy_version,
                )
                return cached

        return await self.compile(connector_id)

    # ═══════════════════════════════════════════════════════════════════════════
    # COMPILATION
    # ═══════════════════════════════════════════════════════════════════════════

    async def _compile_once(self, connector_id: str) -> Optional[PolicySnapshot]:
        """One compile attempt. Returns None when another compile moved the ledger."""
        connector = await self.connector_repo.get(connector_id)
        if connector is None:
            raise ConnectorNotFoundError(connector_id)

        # Ledger first: a compile committed after this read fails our CAS
        entry = await self.ledger.get_version(connector_id)

        entries = await self._build_entries(connector.remote_network_id)
        policy_hash = compute_policy_hash(entries)

        if entry is not None and entry.policy_hash == policy_hash:
            if await self.ledger.current_version(connector_id) != entry.version:
                await self._rollback()
                return None
            # Unchanged content keeps its version and original compile time
            await self.session.commit()
            logger.info(
                "Policy compiled",
                connector_id=connector_id,
                policy_version=entry.version,
                changed=False,
                resources=len(entries),
            )
            return build_snapshot(
                connector_id,
                entry.version,
                entry.compiled_at,
                policy_hash,
                entries,
            )

        expected_version = entry.version if entry else INITIAL_POLICY_VERSION
        new_version = expected_version + 1
        compiled_at = utc_now()

        recorded = await self.ledger.record_version(
            connector_id,
            new_version,
            policy_hash,
            compiled_at,
            expected_version=expected_version,
        )
        if not recorded:
            await self._rollback()
            return None

        await self.session.commit()
        logger.info(
            "Policy compiled",
            connector_id=connector_id,
            policy_version=new_version,
            previous_version=expected_version,
            changed=True,
            resources=len(entries),
        )
        return build_snapshot(
            connector_id,
            new_version,
            compiled_at,
            policy_hash,
            entries,
            now=compiled_at,
        )

    async def _build_entries(
        self,
        remote_network_id: str,
    ) -> list[ResourcePolicyEntry]:
        """Policy entries for every resource of a network, ascending by id."""
        resources = await self.resource_repo.list_by_remote_network(remote_network_id)
        evaluator = RuleEvaluator(self.session, IdentityResolver(self.session))

        entries = []
        for resource in sorted(resources, key=lambda r: r.id):
            identities = await evaluator.allowed_identities(resource.id)
            entries.append(build_entry(resource, identities))
        return entries

    async def _rollback(self) -> None:
        """Roll back the session, logging rather than masking the original error."""
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed after policy compile error")

    # ═══════════════════════════════════════════════════════════════════════════
    # CACHE
    # ═══════════════════════════════════════════════════════════════════════════

    async def _cached_snapshot(self, connector_id: str) -> Optional[PolicySnapshot]:
        """Cached snapshot of a connector; cache errors count as a miss."""
        if self.cache is None:
            return None
        try:
            return await self.cache.get_snapshot(connector_id)
        except RedisError as e:
            logger.warning("Snapshot cache read failed", connector_id=connector_id, error=str(e))
            return None

    async def _drop_cached_snapshot(self, connector_id: str) -> None:
        """Drop a cached snapshot; cache errors are logged, not raised."""
        try:
            await self.cache.invalidate(connector_id)
        except RedisError as e:
            logger.warning(
                "Snapshot cache invalidation failed",
                connector_id=connector_id,
                error=str(e),
            )

    async def _cache_snapshot(self, snapshot: PolicySnapshot) -> None:
        """Store a compiled snapshot; cache errors are logged, not raised."""
        if self.cache is None:
            return
        try:
            await self.cache.set_snapshot(snapshot)
        except RedisError as e:
            logger.warning(
                "Snapshot cache write failed",
                connector_id=snapshot.connector_id,
                error=str(e),
            )

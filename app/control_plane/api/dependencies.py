"""
API Dependencies

Common dependencies for Control Plane APIs.
"""

from typing import Annotated, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache.redis_client import is_redis_initialized
from app.cache.snapshot_cache import SnapshotCache
from app.config.settings import settings
from app.db.session import get_db
from app.policy_engine import PolicyCompiler, RuleEvaluator, StalenessChecker


def get_snapshot_cache() -> Optional[SnapshotCache]:
    """Snapshot cache, or None when disabled or Redis was never initialized."""
    if not settings.SNAPSHOT_CACHE_ENABLED or not is_redis_initialized():
        return None
    return SnapshotCache()


DbSession = Annotated[AsyncSession, Depends(get_db)]
SnapshotCacheDep = Annotated[Optional[SnapshotCache], Depends(get_snapshot_cache)]


def get_policy_compiler(db: DbSession, cache: SnapshotCacheDep) -> PolicyCompiler:
    """Policy compiler bound to the request session."""
    return PolicyCompiler(db, cache=cache)


def get_staleness_checker(db: DbSession) -> StalenessChecker:
    """Staleness checker bound to the request session."""
    return StalenessChecker(db)


def get_rule_evaluator(db: DbSession) -> RuleEvaluator:
    """Rule evaluator bound to the request session."""
    return RuleEvaluator(db)


# Type aliases for cleaner signatures
Compiler = Annotated[PolicyCompiler, Depends(get_policy_compiler)]
Staleness = Annotated[StalenessChecker, Depends(get_staleness_checker)]
Evaluator = Annotated[RuleEvaluator, Depends(get_rule_evaluator)]

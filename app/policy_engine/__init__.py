"""
Policy Engine

Compiles the allow-list policy each connector enforces.

    IdentityResolver  group → certificate identities
    RuleEvaluator     resource → identities granted by enabled rules
    PolicyCompiler    connector → versioned, signed PolicySnapshot
    VersionLedger     connector → (version, policy_hash, compiled_at)
    StalenessChecker  reported version vs ledger version
"""

from app.policy_engine.compiler import PolicyCompiler
from app.policy_engine.identity_resolver import IdentityResolver
from app.policy_engine.rule_evaluator import RuleEvaluator
from app.policy_engine.snapshot import (
    build_snapshot,
    compute_policy_hash,
    is_expired,
    verify_snapshot,
)
from app.policy_engine.staleness import StalenessChecker, StalenessResult, is_stale
from app.policy_engine.version_ledger import LedgerEntry, VersionLedger

__all__ = [
    "IdentityResolver",
    "LedgerEntry",
    "PolicyCompiler",
    "RuleEvaluator",
    "StalenessChecker",
    "StalenessResult",
    "VersionLedger",
    "build_snapshot",
    "compute_policy_hash",
    "is_expired",
    "is_stale",
    "verify_snapshot",
]

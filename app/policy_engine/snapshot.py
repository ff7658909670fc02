"""
Policy Snapshot Assembly

Builds the canonical resource list of a snapshot, hashes it, and signs the
finished snapshot.

Hash input:
    canonical_json({"resources": [entry, ...]})

    entries ascending by resource_id, allowed_identities sorted, keys sorted.
    Version, timestamps and the signature are not part of the hash, so an
    unchanged policy always hashes the same.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from app.config.constants import Protocol
from app.config.settings import settings
from app.core.security import content_hash, sign_payload, verify_payload_signature
from app.core.utils import utc_now
from app.models.resource import Resource
from app.schemas.policy import PolicySnapshot, ResourcePolicyEntry


def build_entry(resource: Resource, identities: Iterable[str]) -> ResourcePolicyEntry:
    """Policy entry of one resource with its allow-list sorted."""
    return ResourcePolicyEntry(
        resource_id=resource.id,
        address=resource.address,
        protocol=Protocol(resource.protocol),
        port_from=resource.port_from,
        port_to=resource.port_to,
        allowed_identities=sorted(set(identities)),
    )


def compute_policy_hash(entries: list[ResourcePolicyEntry]) -> str:
    """SHA-256 hex digest of the canonical resource list.

    Args:
        entries: Policy entries in any order

    Returns:
        64 character hex digest
    """
    ordered = sorted(entries, key=lambda entry: entry.resource_id)
    return content_hash({"resources": [entry.canonical() for entry in ordered]})


def build_snapshot(
    connector_id: str,
    policy_version: int,
    compiled_at: datetime,
    policy_hash: str,
    entries: list[ResourcePolicyEntry],
    *,
    now: Optional[datetime] = None,
    signing_key: Optional[str] = None,
) -> PolicySnapshot:
    """Assemble and sign a snapshot.

    Args:
        connector_id: Connector the snapshot is for
        policy_version: Ledger version of this content
        compiled_at: When this content was first compiled
        policy_hash: Hash of entries
        entries: Resource entries, ascending by resource_id
        now: Issue time the validity window starts from (defaults to now)
        signing_key: Overrides settings.POLICY_SIGNING_KEY

    Returns:
        Signed PolicySnapshot
    """
    issued_at = now or utc_now()
    snapshot = PolicySnapshot(
        connector_id=connector_id,
        policy_version=policy_version,
        compiled_at=compiled_at,
        valid_until=issued_at + timedelta(seconds=settings.POLICY_SNAPSHOT_TTL_SECONDS),
        policy_hash=policy_hash,
        resources=entries,
    )
    snapshot.signature = sign_payload(snapshot.signing_payload(), signing_key)
    return snapshot


def verify_snapshot(snapshot: PolicySnapshot, signing_key: Optional[str] = None) -> bool:
    """Check a snapshot's signature and that its hash matches its resources.

    Args:
        snapshot: Snapshot as received
        signing_key: Overrides settings.POLICY_SIGNING_KEY

    Returns:
        True if the snapshot is authentic and internally consistent
    """
    if compute_policy_hash(snapshot.resources) != snapshot.policy_hash:
        return False
    return verify_payload_signature(snapshot.signing_payload(), snapshot.signature, signing_key)


def is_expired(snapshot: PolicySnapshot, now: Optional[datetime] = None) -> bool:
    """Whether a snapshot's validity window has closed."""
    return (now or utc_now()) >= snapshot.valid_until

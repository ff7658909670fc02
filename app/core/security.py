"""
Security Utilities

Canonical serialization, content hashing and snapshot signing.

Canonical form:
    json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    encoded as UTF-8. Two payloads with equal content always produce equal
    bytes, regardless of dict insertion order.
"""

import hashlib
import hmac
import json
from typing import Any, Optional

from app.config.settings import settings


def canonical_json(payload: Any) -> bytes:
    """Serialize a JSON-compatible payload into its canonical byte form.

    Args:
        payload: Dicts, lists, strings, numbers, booleans or None

    Returns:
        UTF-8 encoded canonical JSON
    """
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def content_hash(payload: Any) -> str:
    """SHA-256 hex digest of a payload's canonical form.

    Args:
        payload: JSON-compatible payload

    Returns:
        64 character hex digest
    """
    return hashlib.sha256(canonical_json(payload)).hexdigest()


def sign_payload(payload: Any, key: Optional[str] = None) -> str:
    """HMAC-SHA256 signature of a payload's canonical form.

    Args:
        payload: JSON-compatible payload (must not contain its own signature)
        key: Signing key, defaults to settings.POLICY_SIGNING_KEY

    Returns:
        Hex-encoded signature
    """
    signing_key = (key or settings.POLICY_SIGNING_KEY).encode("utf-8")
    return hmac.new(signing_key, canonical_json(payload), hashlib.sha256).hexdigest()


def verify_payload_signature(
    payload: Any,
    signature: str,
    key: Optional[str] = None,
) -> bool:
    """Check a signature produced by sign_payload in constant time.

    Args:
        payload: JSON-compatible payload the signature claims to cover
        signature: Hex-encoded signature
        key: Signing key, defaults to settings.POLICY_SIGNING_KEY

    Returns:
        True if the signature matches
    """
    expected = sign_payload(payload, key)
    return hmac.compare_digest(expected, signature)

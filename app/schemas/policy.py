"""
Policy Schemas

Wire shapes of compiled policy snapshots and the connector-facing endpoints.

Snapshot layout:
    {
        "connector_id": "con-...",
        "policy_version": 4,
        "compiled_at": "2026-02-20T10:31:12Z",
        "valid_until": "2026-02-20T11:31:12Z",
        "policy_hash": "3f1c...",
        "signature": "9ab0...",
        "resources": [
            {
                "resource_id": "res-...",
                "address": "10.0.1.20",
                "protocol": "TCP",
                "port_from": 5432,
                "port_to": null,
                "allowed_identities": ["identity-usr_1", "identity-usr_2"]
            }
        ]
    }

Only "resources" contributes to policy_hash. The signature covers every
other field.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from app.config.constants import INITIAL_POLICY_VERSION, Protocol
from app.schemas.common import BaseSchema


class ResourcePolicyEntry(BaseSchema):
    """One resource a connector must enforce, with its allow-list."""

    resource_id: str
    address: str
    protocol: Protocol
    port_from: Optional[int] = None
    port_to: Optional[int] = None
    allowed_identities: list[str] = Field(
        default_factory=list,
        description="Sorted certificate identities; empty means deny all",
    )

    def canonical(self) -> dict[str, Any]:
        """Plain dict used for hashing, with the protocol as its string value."""
        return {
            "resource_id": self.resource_id,
            "address": self.address,
            "protocol": self.protocol.value,
            "port_from": self.port_from,
            "port_to": self.port_to,
            "allowed_identities": list(self.allowed_identities),
        }


class PolicySnapshot(BaseSchema):
    """Compiled policy for one connector."""

    connector_id: str
    policy_version: int = Field(..., ge=1)
    compiled_at: datetime
    valid_until: datetime
    policy_hash: str = Field(..., min_length=64, max_length=64)
    signature: str = ""
    resources: list[ResourcePolicyEntry] = Field(default_factory=list)

    def signing_payload(self) -> dict[str, Any]:
        """Snapshot content covered by the signature (everything but the signature)."""
        return {
            "connector_id": self.connector_id,
            "policy_version": self.policy_version,
            "compiled_at": self.compiled_at.isoformat(),
            "valid_until": self.valid_until.isoformat(),
            "policy_hash": self.policy_hash,
            "resources": [entry.canonical() for entry in self.resources],
        }


class StalenessResponse(BaseModel):
    """Result of comparing a connector's reported version to the ledger."""

    update_available: bool
    current_version: int = Field(..., ge=INITIAL_POLICY_VERSION)


class HeartbeatRequest(BaseModel):
    """Heartbeat body sent by a connector."""

    last_policy_version: int = Field(
        ...,
        ge=INITIAL_POLICY_VERSION,
        description="Policy version the connector has applied (0 if none)",
    )


class IdentityCountResponse(BaseModel):
    """Number of distinct identities a rule resolves to."""

    rule_id: str
    count: int = Field(..., ge=0)

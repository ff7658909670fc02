"""
Connector Model

A Connector is the enforcement point deployed inside a remote network. It
fetches the compiled policy for its network, enforces it, and reports back
the version it applied on every heartbeat.

SAMPLE CONNECTOR:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id                    │ con-1a2b3c4d5e6f                                     │
│ name                  │ "AWS-Prod-Connector-1"                               │
│ hostname              │ "ip-172-31-0-1.ec2.internal"                         │
│ status                │ "online"                                             │
│ remote_network_id     │ net-0a1b2c3d4e5f                                     │
│ last_policy_version   │ 3   (version it last fetched and applied)            │
│ last_seen_at          │ 2026-02-20T10:30:00Z                                 │
│ installed             │ true                                                 │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.config.constants import (
    CONNECTOR_ID_PREFIX,
    INITIAL_POLICY_VERSION,
    ConnectorStatus,
)
from app.core.utils import id_factory
from app.models.base import Base, EnumValidationMixin, TimestampMixin

if TYPE_CHECKING:
    from app.models.policy_version import ConnectorPolicyVersion
    from app.models.remote_network import RemoteNetwork


class Connector(Base, TimestampMixin, EnumValidationMixin):
    """
    Connector deployed in a remote network.

    Attributes:
        id: Unique identifier
        name: Display name
        hostname: Host the connector runs on
        status: Last reported liveness (online, offline)
        remote_network_id: Network this connector serves (required)
        last_policy_version: Policy version the connector reports having applied
        last_seen_at: Time of the last heartbeat
        installed: Whether the connector has ever checked in

    Relationships:
        remote_network: Parent network
        policy_version: Ledger entry for this connector (None before first compile)
    """

    __tablename__ = "connectors"

    _enum_fields: ClassVar[dict[str, type[Enum]]] = {
        "status": ConnectorStatus,
    }

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=id_factory(CONNECTOR_ID_PREFIX),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    hostname: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=ConnectorStatus.OFFLINE.value,
        nullable=False,
    )

    remote_network_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("remote_networks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    last_policy_version: Mapped[int] = mapped_column(
        Integer,
        default=INITIAL_POLICY_VERSION,
        nullable=False,
    )

    last_seen_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    installed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    remote_network: Mapped["RemoteNetwork"] = relationship(
        "RemoteNetwork",
        back_populates="connectors",
    )

    policy_version: Mapped["ConnectorPolicyVersion | None"] = relationship(
        "ConnectorPolicyVersion",
        back_populates="connector",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False,
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Connector(id={self.id}, name={self.name})>"

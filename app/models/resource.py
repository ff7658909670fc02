"""
Resource Model

A Resource is a protected network destination: an address plus protocol and
an optional port range. Connectors enforce resources of their own network.

Port range semantics:
    port_from=NULL, port_to=NULL   → all ports
    port_from=5432, port_to=NULL   → single port 5432
    port_from=5432, port_to=5432   → single port 5432
    port_from=8000, port_to=8100   → inclusive range 8000-8100

SAMPLE RESOURCE:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id                    │ res-1a2b3c4d5e6f                                     │
│ name                  │ "Database Server"                                    │
│ type                  │ "STANDARD"                                           │
│ address               │ "db.internal.company.com"                            │
│ protocol              │ "TCP"                                                │
│ port_from / port_to   │ 5432 / 5432                                          │
│ remote_network_id     │ net-0a1b2c3d4e5f (NULL once the network is deleted)  │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.config.constants import (
    MAX_PORT,
    MIN_PORT,
    RESOURCE_ID_PREFIX,
    Protocol,
    ResourceType,
)
from app.core.utils import id_factory
from app.models.base import Base, EnumValidationMixin, TimestampMixin

if TYPE_CHECKING:
    from app.models.access_rule import AccessRule
    from app.models.remote_network import RemoteNetwork


class Resource(Base, TimestampMixin, EnumValidationMixin):
    """
    Protected network resource.

    Attributes:
        id: Unique identifier
        name: Display name
        type: Access style (STANDARD, BROWSER, BACKGROUND)
        address: Hostname, IP or CIDR
        protocol: TCP or UDP
        port_from: First port of the range, NULL for all ports
        port_to: Last port of the range (inclusive), NULL for single port / all ports
        alias: Optional friendly DNS alias
        description: Free-form description
        remote_network_id: Owning network, NULL when detached

    Relationships:
        remote_network: Owning network
        access_rules: Rules granting groups access to this resource
    """

    __tablename__ = "resources"

    _enum_fields: ClassVar[dict[str, type[Enum]]] = {
        "type": ResourceType,
        "protocol": Protocol,
    }

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=id_factory(RESOURCE_ID_PREFIX),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    type: Mapped[str] = mapped_column(
        String(20),
        default=ResourceType.STANDARD.value,
        nullable=False,
    )

    address: Mapped[str] = mapped_column(String(255), nullable=False)

    protocol: Mapped[str] = mapped_column(
        String(8),
        default=Protocol.TCP.value,
        server_default=Protocol.TCP.value,
        nullable=False,
    )

    port_from: Mapped[int | None] = mapped_column(Integer, nullable=True)

    port_to: Mapped[int | None] = mapped_column(Integer, nullable=True)

    alias: Mapped[str | None] = mapped_column(String(255), nullable=True)

    description: Mapped[str] = mapped_column(Text, default="", nullable=False)

    remote_network_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("remote_networks.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    remote_network: Mapped["RemoteNetwork | None"] = relationship(
        "RemoteNetwork",
        back_populates="resources",
    )

    access_rules: Mapped[list["AccessRule"]] = relationship(
        "AccessRule",
        back_populates="resource",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            f"port_from IS NULL OR (port_from >= {MIN_PORT} AND port_from <= {MAX_PORT})",
            name="port_from_range",
        ),
        CheckConstraint(
            f"port_to IS NULL OR (port_to >= {MIN_PORT} AND port_to <= {MAX_PORT})",
            name="port_to_range",
        ),
        CheckConstraint(
            "port_from IS NULL OR port_to IS NULL OR port_to >= port_from",
            name="port_order",
        ),
        CheckConstraint(
            "port_to IS NULL OR port_from IS NOT NULL",
            name="port_to_requires_port_from",
        ),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Resource(id={self.id}, address={self.address})>"

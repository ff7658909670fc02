"""
Remote Network Model

A Remote Network is a private network segment (a VPC, an office LAN) that
connectors are deployed into and resources live in. The resources of a
network define the policy every connector of that network enforces.

Deleting a network removes its connectors but only detaches its resources
(resources.remote_network_id is set to NULL).
"""

from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.config.constants import REMOTE_NETWORK_ID_PREFIX, NetworkLocation
from app.core.utils import id_factory
from app.models.base import Base, EnumValidationMixin, TimestampMixin

if TYPE_CHECKING:
    from app.models.connector import Connector
    from app.models.resource import Resource


class RemoteNetwork(Base, TimestampMixin, EnumValidationMixin):
    """
    Remote network.

    Attributes:
        id: Unique identifier
        name: Display name
        location: Location tag (AWS, GCP, AZURE, ON_PREM, OTHER)

    Relationships:
        connectors: Connectors deployed in this network
        resources: Resources reachable through this network
    """

    __tablename__ = "remote_networks"

    _enum_fields: ClassVar[dict[str, type[Enum]]] = {
        "location": NetworkLocation,
    }

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=id_factory(REMOTE_NETWORK_ID_PREFIX),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    location: Mapped[str] = mapped_column(
        String(20),
        default=NetworkLocation.OTHER.value,
        nullable=False,
    )

    connectors: Mapped[list["Connector"]] = relationship(
        "Connector",
        back_populates="remote_network",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # No cascade: the database sets resources.remote_network_id to NULL
    resources: Mapped[list["Resource"]] = relationship(
        "Resource",
        back_populates="remote_network",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<RemoteNetwork(id={self.id}, name={self.name})>"

"""
Connector Policy Version Model

The version ledger: one row per connector holding the latest compiled policy
version and the content hash of that version.

Only the policy compiler writes this table. A row is created on the first
compile of a connector and updated (never deleted) afterwards; it disappears
only together with its connector.

SAMPLE ENTRY:
┌──────────────────────────────────────────────────────────────────────────────┐
│ connector_id          │ con-1a2b3c4d5e6f                                     │
│ version               │ 4                                                    │
│ policy_hash           │ "3f1c…e9a0" (sha256 of the canonical resource list)  │
│ compiled_at           │ 2026-02-20T10:31:12Z                                 │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.config.constants import POLICY_HASH_LENGTH
from app.models.base import Base

if TYPE_CHECKING:
    from app.models.connector import Connector


class ConnectorPolicyVersion(Base):
    """
    Ledger entry for a connector.

    Attributes:
        connector_id: Connector this entry belongs to (primary key, one per connector)
        version: Latest compiled version, starts at 1 on first compile
        policy_hash: SHA-256 hex digest of that version's resource list
        compiled_at: When this version's content was compiled
    """

    __tablename__ = "connector_policy_versions"

    connector_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("connectors.id", ondelete="CASCADE"),
        primary_key=True,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    policy_hash: Mapped[str] = mapped_column(String(POLICY_HASH_LENGTH), nullable=False)

    compiled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    connector: Mapped["Connector"] = relationship(
        "Connector",
        back_populates="policy_version",
    )

    __table_args__ = (
        CheckConstraint("version >= 1", name="version_positive"),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<ConnectorPolicyVersion(connector_id={self.connector_id}, "
            f"version={self.version})>"
        )

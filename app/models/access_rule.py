"""
Access Rule Model

An Access Rule grants one or more groups access to exactly one resource.
The model is allow-list only: there is no subject type and no ALLOW/DENY
effect. A disabled rule is excluded from compilation entirely.

SAMPLE RULE:
┌──────────────────────────────────────────────────────────────────────────────┐
│ id                    │ rule-1a2b3c4d5e6f                                    │
│ name                  │ "Engineering DB Access"                              │
│ resource_id           │ res-1a2b3c4d5e6f                                     │
│ enabled               │ true                                                 │
│ groups (bindings)     │ grp-engineering, grp-dba                             │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.config.constants import ACCESS_RULE_ID_PREFIX
from app.core.utils import id_factory
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.group import Group
    from app.models.resource import Resource


class AccessRule(Base, TimestampMixin):
    """
    Access rule binding groups to a resource.

    Attributes:
        id: Unique identifier
        name: Human-readable rule name
        resource_id: Resource this rule grants access to
        enabled: Disabled rules contribute nothing to compiled policy

    Relationships:
        resource: Target resource
        group_bindings: (rule, group) pairs
    """

    __tablename__ = "access_rules"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=id_factory(ACCESS_RULE_ID_PREFIX),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    resource_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("resources.id", ondelete="CASCADE"),
        nullable=False,
    )

    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    resource: Mapped["Resource"] = relationship(
        "Resource",
        back_populates="access_rules",
    )

    group_bindings: Mapped[list["AccessRuleGroup"]] = relationship(
        "AccessRuleGroup",
        back_populates="rule",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        # Hot path for compilation: enabled rules of one resource
        Index("ix_access_rules_resource_enabled", "resource_id", "enabled"),
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<AccessRule(id={self.id}, name={self.name}, enabled={self.enabled})>"


class AccessRuleGroup(Base):
    """(rule, group) binding. One rule may name several groups and vice versa."""

    __tablename__ = "access_rule_groups"

    rule_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("access_rules.id", ondelete="CASCADE"),
        primary_key=True,
    )

    group_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    rule: Mapped["AccessRule"] = relationship(
        "AccessRule",
        back_populates="group_bindings",
    )

    group: Mapped["Group"] = relationship("Group", back_populates="rule_bindings")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<AccessRuleGroup(rule_id={self.rule_id}, group_id={self.group_id})>"

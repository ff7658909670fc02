"""
Group Model

Groups collect users. They neither own users nor resources: membership
(group_members) and access (access_rule_groups) are separate join tables,
so a group can be edited or deleted without touching either side.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.config.constants import GROUP_ID_PREFIX
from app.core.utils import id_factory
from app.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.access_rule import AccessRuleGroup
    from app.models.user import User


class Group(Base, TimestampMixin):
    """
    Group of users.

    Attributes:
        id: Unique identifier
        name: Group name
        description: Free-form description

    Relationships:
        memberships: Users in this group
        rule_bindings: Access rules naming this group
    """

    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=id_factory(GROUP_ID_PREFIX),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str] = mapped_column(Text, default="", nullable=False)

    memberships: Mapped[list["GroupMembership"]] = relationship(
        "GroupMembership",
        back_populates="group",
        cascade="all, delete-orphan",
    )

    rule_bindings: Mapped[list["AccessRuleGroup"]] = relationship(
        "AccessRuleGroup",
        back_populates="group",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Group(id={self.id}, name={self.name})>"


class GroupMembership(Base):
    """(group, user) pair. The composite primary key forbids duplicates."""

    __tablename__ = "group_members"

    group_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("groups.id", ondelete="CASCADE"),
        primary_key=True,
    )

    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    group: Mapped["Group"] = relationship("Group", back_populates="memberships")

    user: Mapped["User"] = relationship("User", back_populates="memberships")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<GroupMembership(group_id={self.group_id}, user_id={self.user_id})>"

"""
User Model

A User is a human identity that can be granted access to resources through
group membership. Users become policy principals only once a certificate has
been issued to them: the certificate identity is the string connectors match
peers against.

SAMPLE USERS:

┌──────────────────────────────────────────────────────────────────────────────┐
│ id                    │ usr-1a2b3c4d5e6f                                     │
│ name                  │ "Alice Johnson"                                      │
│ email                 │ "alice@company.com"                                  │
│ status                │ "active"                                             │
│ certificate_identity  │ "identity-usr_1"                                     │
└──────────────────────────────────────────────────────────────────────────────┘
┌──────────────────────────────────────────────────────────────────────────────┐
│ id                    │ usr-9f8e7d6c5b4a                                     │
│ name                  │ "Eve Newhire"                                        │
│ email                 │ "eve@company.com"                                    │
│ status                │ "active"                                             │
│ certificate_identity  │ null  (no certificate issued yet, never in policy)  │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.config.constants import USER_ID_PREFIX, UserStatus
from app.core.utils import id_factory
from app.models.base import Base, EnumValidationMixin, TimestampMixin

if TYPE_CHECKING:
    from app.models.group import GroupMembership


class User(Base, TimestampMixin, EnumValidationMixin):
    """
    User identity.

    Attributes:
        id: Unique identifier
        name: Display name
        email: Contact email
        status: Lifecycle status (active, inactive)
        certificate_identity: Globally unique cryptographic principal, NULL until issued

    Relationships:
        memberships: Group memberships of this user
    """

    __tablename__ = "users"

    _enum_fields: ClassVar[dict[str, type[Enum]]] = {
        "status": UserStatus,
    }

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=id_factory(USER_ID_PREFIX),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=UserStatus.ACTIVE.value,
        nullable=False,
    )

    # Unique when present; several users may have none
    certificate_identity: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
        doc="Certificate-bound principal used in compiled policy",
    )

    memberships: Mapped[list["GroupMembership"]] = relationship(
        "GroupMembership",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<User(id={self.id}, email={self.email})>"

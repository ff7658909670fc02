"""
Base Model Classes

This module provides the foundational classes for all SQLAlchemy models in Portcullis.
It includes the declarative base and common mixins for timestamps and enum validation.

Every table in the entity store uses opaque string identifiers (e.g. "res-1a2b3c4d5e6f")
rather than database-native UUIDs, so the same schema runs on PostgreSQL and SQLite
and identifiers sort the same way everywhere they are compared.
"""

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from sqlalchemy import DateTime, MetaData, event
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.functions import now

# Deterministic constraint names so alembic migrations are portable
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    All models in the application should inherit from this class either
    directly or through one of the mixin classes.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class TimestampMixin:
    """
    Mixin that adds automatic timestamp tracking to models.

    Provides two timestamp columns that are automatically managed:
    - created_at: Set when the record is first inserted
    - updated_at: Updated whenever the record is modified

    Usage:
        class MyModel(Base, TimestampMixin):
            __tablename__ = "my_table"
            id: Mapped[str] = mapped_column(primary_key=True)
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=now(),
        onupdate=now(),
        nullable=False,
    )


class EnumValidationMixin:
    """
    Mixin that provides automatic enum validation for model fields.

    Models using this mixin should define an `_enum_fields` class variable
    that maps field names to their corresponding Enum classes.

    Example:
        from app.config.constants import Protocol

        class Resource(Base, EnumValidationMixin):
            _enum_fields: ClassVar[dict[str, type[Enum]]] = {
                "protocol": Protocol,
            }

            protocol: Mapped[str] = mapped_column(String(8), default="TCP")

    The validation is triggered automatically before insert/update operations,
    ensuring invalid enum values cannot be written to the database.
    """

    _enum_fields: ClassVar[dict[str, type[Enum]]] = {}

    def validate_enum_fields(self) -> None:
        """
        Validate all enum fields have valid values.

        Raises:
            ValueError: If any enum field has an invalid value
        """
        for field_name, enum_class in self._enum_fields.items():
            value = getattr(self, field_name, None)
            if value is not None:
                valid_values = {e.value for e in enum_class}
                if value not in valid_values:
                    raise ValueError(
                        f"Invalid value '{value}' for field '{field_name}'. "
                        f"Must be one of: {', '.join(sorted(valid_values))}"
                    )

    @classmethod
    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Register validation event listeners when subclass is created."""
        super().__init_subclass__(**kwargs)

        if cls._enum_fields:
            # Signature: (mapper, connection, target) - we only need target
            @event.listens_for(cls, "before_insert", propagate=True)
            def validate_before_insert(*args: Any) -> None:
                target = args[2]
                target.validate_enum_fields()

            @event.listens_for(cls, "before_update", propagate=True)
            def validate_before_update(*args: Any) -> None:
                target = args[2]
                target.validate_enum_fields()

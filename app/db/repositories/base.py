"""
Base Repository

This module provides a generic base repository with common CRUD operations.
All entity-specific repositories inherit from this class.

What This Provides:
===================
- get(id)        → Fetch single record by identifier
- exists()       → Check if record exists
- create()       → Create new record
- update()       → Update existing record
- delete()       → Hard delete record

Generic Type Pattern:
=====================
    class ResourceRepository(BaseRepository[Resource]):
        pass

    repo = ResourceRepository(db)
    resource = await repo.get(resource_id)  # Returns Resource, not Any

flush() vs commit():
====================
- flush(): Sends SQL to database but doesn't commit transaction
  - Changes are visible within the same session
  - Can be rolled back if error occurs later

- commit(): Permanently saves all changes
  - Called by get_db() after the request handler completes, or by the
    policy compiler which owns its own transaction boundary
  - Repository methods only flush
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.functions import count

from app.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing common CRUD operations.

    Type Parameter:
        ModelType: The SQLAlchemy model class this repository manages

    Attributes:
        model: The SQLAlchemy model class
        session: The async database session
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        """
        Initialize the repository.

        Args:
            model: SQLAlchemy model class (e.g., Resource, Group, Connector)
            session: Async database session from get_db()
        """
        self.model = model
        self.session = session

    # ═══════════════════════════════════════════════════════════════════════════
    # READ OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get(self, entity_id: str) -> ModelType | None:
        """
        Get a single record by its identifier.

        Args:
            entity_id: The identifier of the record to fetch

        Returns:
            The model instance if found, None otherwise

        SQL Generated:
            SELECT * FROM resources WHERE id = 'res-...'
        """
        result = await self.session.execute(
            select(self.model).where(self.model.id == entity_id)
        )
        return result.scalar_one_or_none()

    async def exists(self, entity_id: str) -> bool:
        """
        Check if a record exists without loading it.

        Args:
            entity_id: The identifier to check

        Returns:
            True if record exists, False otherwise
        """
        result = await self.session.execute(
            select(count()).select_from(self.model).where(self.model.id == entity_id)
        )
        return (result.scalar() or 0) > 0

    # ═══════════════════════════════════════════════════════════════════════════
    # WRITE OPERATIONS
    # ═══════════════════════════════════════════════════════════════════════════

    async def create(self, **kwargs: Any) -> ModelType:
        """
        Create a new record.

        Args:
            **kwargs: Field values for the new record

        Returns:
            The created model instance with all DB-generated values
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, entity_id: str, **kwargs: Any) -> ModelType | None:
        """
        Update a record by identifier.

        Only fields that are provided and not None are changed.

        Args:
            entity_id: Identifier of the record to update
            **kwargs: Fields to update (None values are ignored)

        Returns:
            Updated model instance, or None if not found
        """
        instance = await self.get(entity_id)
        if not instance:
            return None

        for field, value in kwargs.items():
            if hasattr(instance, field) and value is not None:
                setattr(instance, field, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, entity_id: str) -> bool:
        """
        Hard delete a record by identifier.

        Args:
            entity_id: Identifier of the record to delete

        Returns:
            True if deleted, False if not found
        """
        instance = await self.get(entity_id)
        if not instance:
            return False

        await self.session.delete(instance)
        await self.session.flush()
        return True

"""
Resource Repository

Database operations specific to the Resource model.

Common Operations:
==================
- list_by_remote_network()  → Resources a network's connectors enforce, ordered by id
- detach_from_network()     → Clear a resource's network (resource is kept)
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repositories.base import BaseRepository
from app.models.resource import Resource


class ResourceRepository(BaseRepository[Resource]):
    """Repository for Resource database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Resource, session)

    async def list_by_remote_network(self, remote_network_id: str) -> list[Resource]:
        """
        Get every resource belonging to a remote network, ascending by id.

        Args:
            remote_network_id: Network identifier

        Returns:
            Resources ordered by id

        SQL Generated:
            SELECT * FROM resources
            WHERE remote_network_id = 'net-...'
            ORDER BY id ASC
        """
        result = await self.session.execute(
            select(Resource)
            .where(Resource.remote_network_id == remote_network_id)
            .order_by(Resource.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def detach_from_network(self, resource_id: str) -> Resource | None:
        """
        Detach a resource from its network without deleting it.

        Args:
            resource_id: Resource identifier

        Returns:
            Updated resource, or None if not found
        """
        resource = await self.get(resource_id)
        if not resource:
            return None

        resource.remote_network_id = None
        await self.session.flush()
        await self.session.refresh(resource)
        return resource

"""
Remote Network Repository

Database operations specific to the RemoteNetwork model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repositories.base import BaseRepository
from app.models.remote_network import RemoteNetwork


class RemoteNetworkRepository(BaseRepository[RemoteNetwork]):
    """Repository for RemoteNetwork database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(RemoteNetwork, session)

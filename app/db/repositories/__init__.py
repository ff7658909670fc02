"""
Repository Pattern Implementations

Repositories encapsulate database queries and provide a clean API for data access.

Repository Hierarchy:
=====================
    BaseRepository[ModelType]               ← Generic CRUD operations
         │
         ├── UserRepository                 ← Users and their certificate identities
         ├── GroupRepository                ← Groups and memberships
         ├── RemoteNetworkRepository        ← Remote networks
         ├── ConnectorRepository            ← Connectors and heartbeats
         ├── ResourceRepository             ← Resources by network
         └── AccessRuleRepository           ← Rules and rule-group bindings

    PolicyVersionRepository                 ← Version ledger rows (compare-and-swap)

Key Concepts:
=============
- Repositories only flush; the caller owns the transaction
- Only the policy compiler writes the version ledger
- Every list used by policy compilation is ordered by id

Usage Example:
==============
    from app.db.repositories import ConnectorRepository, ResourceRepository

    async def resources_for(db: AsyncSession, connector_id: str):
        connector = await ConnectorRepository(db).get(connector_id)
        if not connector:
            raise ConnectorNotFoundError(connector_id)
        return await ResourceRepository(db).list_by_remote_network(
            connector.remote_network_id
        )
"""

from app.db.repositories.access_rule_repository import AccessRuleRepository
from app.db.repositories.base import BaseRepository
from app.db.repositories.connector_repository import ConnectorRepository
from app.db.repositories.group_repository import GroupRepository
from app.db.repositories.policy_version_repository import PolicyVersionRepository
from app.db.repositories.remote_network_repository import RemoteNetworkRepository
from app.db.repositories.resource_repository import ResourceRepository
from app.db.repositories.user_repository import UserRepository

__all__ = [
    # Base class
    "BaseRepository",
    # Entity-specific repositories
    "UserRepository",
    "GroupRepository",
    "RemoteNetworkRepository",
    "ConnectorRepository",
    "ResourceRepository",
    "AccessRuleRepository",
    "PolicyVersionRepository",
]

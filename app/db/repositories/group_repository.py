"""
Group Repository

Database operations for groups and group membership.

Common Operations:
==================
- add_member() / remove_member()     → Mutate the group_members join table
- get_member_identities()            → Certificate identities of a group's members
- get_existing_ids()                 → Which of a set of group ids still exist

Identity Lookup:
================
    get_member_identities("grp-engineering") runs:

        SELECT DISTINCT users.certificate_identity
        FROM group_members
        JOIN users ON users.id = group_members.user_id
        WHERE group_members.group_id = 'grp-engineering'
          AND users.certificate_identity IS NOT NULL
          AND users.certificate_identity != ''

    Users without an issued certificate never appear.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repositories.base import BaseRepository
from app.models.group import Group, GroupMembership
from app.models.user import User


class GroupRepository(BaseRepository[Group]):
    """Repository for Group and GroupMembership database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Group, session)

    # ═══════════════════════════════════════════════════════════════════════════
    # MEMBERSHIP
    # ═══════════════════════════════════════════════════════════════════════════

    async def add_member(self, group_id: str, user_id: str) -> bool:
        """
        Add a user to a group.

        Args:
            group_id: Group identifier
            user_id: User identifier

        Returns:
            True if added, False if the user already was a member
        """
        existing = await self.session.get(GroupMembership, (group_id, user_id))
        if existing:
            return False

        self.session.add(GroupMembership(group_id=group_id, user_id=user_id))
        await self.session.flush()
        return True

    async def remove_member(self, group_id: str, user_id: str) -> bool:
        """
        Remove a user from a group.

        Args:
            group_id: Group identifier
            user_id: User identifier

        Returns:
            True if removed, False if the user was not a member
        """
        result = await self.session.execute(
            delete(GroupMembership).where(
                GroupMembership.group_id == group_id,
                GroupMembership.user_id == user_id,
            )
        )
        await self.session.flush()
        return result.rowcount > 0

    async def get_member_identities(self, group_id: str) -> set[str]:
        """
        Get the certificate identities of a group's members.

        Args:
            group_id: Group identifier

        Returns:
            Set of certificate identities (empty for unknown or empty groups)
        """
        result = await self.session.execute(
            select(User.certificate_identity)
            .join(GroupMembership, GroupMembership.user_id == User.id)
            .where(
                GroupMembership.group_id == group_id,
                User.certificate_identity.is_not(None),
                User.certificate_identity != "",
            )
            .distinct()
        )
        return set(result.scalars().all())

    # ═══════════════════════════════════════════════════════════════════════════
    # REFERENTIAL CHECKS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_existing_ids(self, group_ids: list[str]) -> set[str]:
        """
        Filter a list of group ids down to those that still exist.

        Args:
            group_ids: Candidate group identifiers

        Returns:
            Subset of ids present in the groups table
        """
        if not group_ids:
            return set()

        result = await self.session.execute(
            select(Group.id).where(Group.id.in_(group_ids))
        )
        return set(result.scalars().all())

"""
Identity Resolver

Maps a group to the certificate identities of its members.

Only users holding a certificate identity are policy principals; members
without one are silently dropped. Unknown or empty groups resolve to an
empty set, never an error.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repositories import GroupRepository


class IdentityResolver:
    """Resolve groups to certificate identities.

    Results are memoised for the lifetime of the instance. The compiler builds
    a fresh resolver for every compile attempt, so memoised values never
    outlive the store state they were read from.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.group_repo = GroupRepository(session)
        self._resolved: dict[str, frozenset[str]] = {}

    async def resolve_identities(self, group_id: str) -> set[str]:
        """Get the certificate identities of a group's members.

        Args:
            group_id: Group identifier

        Returns:
            Set of certificate identities (a fresh copy the caller may mutate)
        """
        if group_id not in self._resolved:
            identities = await self.group_repo.get_member_identities(group_id)
            self._resolved[group_id] = frozenset(identities)
        return set(self._resolved[group_id])

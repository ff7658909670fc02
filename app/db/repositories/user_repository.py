"""
User Repository

Database operations specific to the User model.

Common Operations:
==================
- issue_certificate_identity()   → Attach a certificate identity to a user
- revoke_certificate_identity()  → Remove it (user drops out of compiled policy)
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repositories.base import BaseRepository
from app.models.user import User


class UserRepository(BaseRepository[User]):
    """Repository for User database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(User, session)

    async def issue_certificate_identity(
        self,
        user_id: str,
        certificate_identity: str,
    ) -> User | None:
        """
        Attach a certificate identity to a user.

        Args:
            user_id: User identifier
            certificate_identity: Principal to attach

        Returns:
            Updated user, or None if not found

        Raises:
            sqlalchemy.exc.IntegrityError: If the identity is already issued
        """
        return await self.update(user_id, certificate_identity=certificate_identity)

    async def revoke_certificate_identity(self, user_id: str) -> User | None:
        """
        Remove a user's certificate identity.

        Args:
            user_id: User identifier

        Returns:
            Updated user, or None if not found
        """
        user = await self.get(user_id)
        if not user:
            return None

        # update() skips None values, so clear the column directly
        user.certificate_identity = None
        await self.session.flush()
        await self.session.refresh(user)
        return user

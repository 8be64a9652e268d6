"""
User Repository

Database operations for user accounts, plus the identity port the tenant
access guard uses to resolve callers.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import Identity
from app.modules.shared import normalize_uuid
from app.modules.users.models import User


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str | UUID) -> User | None:
        """
        Get a user by ID.

        Args:
            db: Database session
            user_id: User UUID (malformed ids return None)

        Returns:
            User instance or None if not found
        """
        user_id_str = normalize_uuid(user_id)
        if user_id_str is None:
            return None

        result = await db.execute(select(User).where(User.id == user_id_str))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_identity(db: AsyncSession, user_id: str | UUID) -> Identity | None:
        """
        Resolve a caller id to an identity for access decisions.

        Returns:
            Identity with the account's global role, or None if the
            account does not exist
        """
        user = await UserRepository.get_by_id(db, user_id)
        if user is None:
            return None
        return Identity(user_id=str(user.id), global_role=user.global_role)


class SqlIdentityPort:
    """IdentityPort backed by the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_identity(self, caller_id: str) -> Identity | None:
        return await UserRepository.get_identity(self.db, caller_id)

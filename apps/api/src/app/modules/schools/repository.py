"""
School Repository

Database operations for school memberships, plus the
membership port the tenant access guard uses.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import Membership
from app.modules.schools.models import SchoolUser
from app.modules.shared import normalize_uuid


class SchoolUserRepository:
    """Repository for school membership rows."""

    @staticmethod
    async def get(
        db: AsyncSession,
        user_id: str | UUID,
        school_id: str | UUID,
    ) -> SchoolUser | None:
        """
        Get the membership row for a (user, school) pair.

        Returns:
            SchoolUser instance or None if the user is not a member
            (or either id is malformed)
        """
        user_id_str = normalize_uuid(user_id)
        school_id_str = normalize_uuid(school_id)
        if user_id_str is None or school_id_str is None:
            return None

        result = await db.execute(
            select(SchoolUser).where(
                SchoolUser.user_id == user_id_str,
                SchoolUser.school_id == school_id_str,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_membership(
        db: AsyncSession,
        user_id: str | UUID,
        school_id: str | UUID,
    ) -> Membership | None:
        """Resolve a (user, school) pair to a membership for access decisions."""
        row = await SchoolUserRepository.get(db, user_id, school_id)
        if row is None:
            return None
        return Membership(
            user_id=str(row.user_id),
            tenant_id=str(row.school_id),
            role=row.role,
            status=row.status,
        )

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: str | UUID) -> list[SchoolUser]:
        """Get all memberships of a user, oldest first."""
        user_id_str = normalize_uuid(user_id)
        if user_id_str is None:
            return []

        result = await db.execute(
            select(SchoolUser)
            .where(SchoolUser.user_id == user_id_str)
            .order_by(SchoolUser.created_at.asc())
        )
        return list(result.scalars().all())


class SqlMembershipPort:
    """MembershipPort backed by the school_users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_membership(self, caller_id: str, tenant_id: str) -> Membership | None:
        return await SchoolUserRepository.get_membership(self.db, caller_id, tenant_id)

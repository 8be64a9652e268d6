"""
School Access Helpers

Binds the tenant access guard to the database-backed identity and
membership ports, and turns a denial into the matching service error.
Services call these instead of talking to the guard ports directly.
"""

from collections.abc import Collection

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import (
    READ_ROLES,
    AccessDecision,
    TenantRole,
    authorize,
    authorize_global,
    ensure_allowed,
)
from app.modules.schools.repository import SqlMembershipPort
from app.modules.users.repository import SqlIdentityPort


async def check_school_access(
    db: AsyncSession,
    caller_id: str,
    school_id: str,
    allowed_roles: Collection[TenantRole] = READ_ROLES,
) -> AccessDecision:
    """Decide whether the caller may act on the school."""
    return await authorize(
        caller_id,
        None,
        school_id,
        allowed_roles,
        identities=SqlIdentityPort(db),
        memberships=SqlMembershipPort(db),
    )


async def require_school_access(
    db: AsyncSession,
    caller_id: str,
    school_id: str,
    allowed_roles: Collection[TenantRole] = READ_ROLES,
) -> None:
    """
    Require access to a school.

    Raises:
        ResourceNotFoundError: Caller account does not exist
        AccessForbiddenError: No active membership or insufficient tenant role
    """
    ensure_allowed(await check_school_access(db, caller_id, school_id, allowed_roles))


async def require_platform_admin(db: AsyncSession, caller_id: str) -> None:
    """
    Require a privileged global role (super admin or system admin).

    Raises:
        ResourceNotFoundError: Caller account does not exist
        AccessForbiddenError: Caller is not a platform administrator
    """
    ensure_allowed(await authorize_global(caller_id, identities=SqlIdentityPort(db)))

"""
Tenant Access Guard

Single decision procedure for school-scoped (tenant) authorization. Every
service method that touches school data asks this module whether the caller
may proceed instead of repeating its own membership checks.

Two role layers exist:

- Global role, attached to the user account. Super admins and system admins
  are privileged and bypass tenant membership entirely.
- Tenant role, attached to the (user, school) membership together with an
  active/inactive status.

Decision order (first match wins):

1. Unknown caller                           -> Deny(not_found)
2. Privileged global role                   -> Allow
3. No membership, or membership not active  -> Deny(forbidden)
4. Allow-list given and role not in it      -> Deny(forbidden)
5. Otherwise                                -> Allow

The guard holds no state and caches nothing: membership can change between
requests, so a decision is computed fresh every time. Data access goes
through two small ports so the decision itself stays pure and testable.
"""

import logging
from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from app.core.exceptions import AccessForbiddenError, ResourceNotFoundError

logger = logging.getLogger(__name__)


class GlobalRole(str, Enum):
    """Account-level roles."""

    SUPER_ADMIN = "super_admin"
    SYSTEM_ADMIN = "system_admin"
    REGULAR = "regular"

    @classmethod
    def parse(cls, value: "GlobalRole | str | None") -> "GlobalRole":
        """Coerce a raw role value; unknown values are treated as REGULAR."""
        if isinstance(value, GlobalRole):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.REGULAR


class TenantRole(str, Enum):
    """Roles a user can hold inside a school."""

    SCHOOL_ADMIN = "school_admin"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"
    MEMBER = "member"


class MembershipStatus(str, Enum):
    """Status of a (user, school) membership."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class DenyReason(str, Enum):
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


PRIVILEGED_GLOBAL_ROLES: frozenset[GlobalRole] = frozenset(
    {GlobalRole.SUPER_ADMIN, GlobalRole.SYSTEM_ADMIN}
)

# Tenant roles allowed to mutate school data
TENANT_ADMIN_ROLES: frozenset[TenantRole] = frozenset({TenantRole.SCHOOL_ADMIN})

# Empty allow-list: any active member may read
READ_ROLES: frozenset[TenantRole] = frozenset()

# Stable, non-leaking denial messages
MSG_USER_NOT_FOUND = "User not found"
MSG_NO_TENANT_ACCESS = "No access to this school"
MSG_INSUFFICIENT_ROLE = "Insufficient permissions"
MSG_ADMIN_REQUIRED = "Admin access required"


@dataclass(frozen=True)
class Identity:
    """A known account as returned by the identity port."""

    user_id: str
    global_role: GlobalRole


@dataclass(frozen=True)
class Membership:
    """A (user, school) membership as returned by the membership port."""

    user_id: str
    tenant_id: str
    role: TenantRole
    status: MembershipStatus

    @property
    def is_active(self) -> bool:
        return self.status == MembershipStatus.ACTIVE


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an authorization check."""

    allowed: bool
    reason: DenyReason | None = None
    message: str | None = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str) -> "AccessDecision":
        return cls(allowed=False, reason=reason, message=message)


class IdentityPort(Protocol):
    """Looks up a caller's account by id."""

    async def get_identity(self, caller_id: str) -> Identity | None: ...


class MembershipPort(Protocol):
    """Looks up a caller's membership in a school."""

    async def get_membership(self, caller_id: str, tenant_id: str) -> Membership | None: ...


def decide(
    identity: Identity | None,
    membership: Membership | None,
    allowed_tenant_roles: Collection[TenantRole] = (),
    caller_global_role: GlobalRole | str | None = None,
) -> AccessDecision:
    """
    Decide access from already-loaded identity and membership data.

    Args:
        identity: Caller account, or None if the caller does not exist
        membership: Caller's membership in the target school, if any
        allowed_tenant_roles: Tenant roles permitted; empty means any active member
        caller_global_role: Global role to check; defaults to the identity's role

    Returns:
        AccessDecision
    """
    if identity is None:
        return AccessDecision.deny(DenyReason.NOT_FOUND, MSG_USER_NOT_FOUND)

    global_role = (
        identity.global_role if caller_global_role is None else GlobalRole.parse(caller_global_role)
    )
    if global_role in PRIVILEGED_GLOBAL_ROLES:
        return AccessDecision.allow()

    if membership is None or not membership.is_active:
        return AccessDecision.deny(DenyReason.FORBIDDEN, MSG_NO_TENANT_ACCESS)

    if allowed_tenant_roles and membership.role not in allowed_tenant_roles:
        return AccessDecision.deny(DenyReason.FORBIDDEN, MSG_INSUFFICIENT_ROLE)

    return AccessDecision.allow()


async def authorize(
    caller_id: str,
    caller_global_role: GlobalRole | str | None,
    tenant_id: str,
    allowed_tenant_roles: Collection[TenantRole] = (),
    *,
    identities: IdentityPort,
    memberships: MembershipPort,
) -> AccessDecision:
    """
    Authorize a caller against a school.

    The identity is resolved first; an unknown caller is denied before the
    membership lookup happens, and privileged callers never need one.

    Args:
        caller_id: Authenticated user id
        caller_global_role: Caller's global role, or None to use the role
            stored on the account
        tenant_id: Target school id
        allowed_tenant_roles: Tenant roles permitted; empty means any active member
        identities: Identity lookup port
        memberships: Membership lookup port

    Returns:
        AccessDecision
    """
    identity = await identities.get_identity(caller_id)

    membership = None
    if identity is not None:
        global_role = (
            identity.global_role
            if caller_global_role is None
            else GlobalRole.parse(caller_global_role)
        )
        if global_role not in PRIVILEGED_GLOBAL_ROLES:
            membership = await memberships.get_membership(caller_id, tenant_id)

    decision = decide(identity, membership, allowed_tenant_roles, caller_global_role)

    if not decision.allowed:
        logger.warning(
            f"Access denied: user={caller_id} school={tenant_id} "
            f"reason={decision.reason.value} ({decision.message})"
        )

    return decision


async def authorize_global(caller_id: str, *, identities: IdentityPort) -> AccessDecision:
    """
    Authorize a platform-level operation (not scoped to a school).

    Only privileged global roles are allowed.
    """
    identity = await identities.get_identity(caller_id)

    if identity is None:
        decision = AccessDecision.deny(DenyReason.NOT_FOUND, MSG_USER_NOT_FOUND)
    elif identity.global_role not in PRIVILEGED_GLOBAL_ROLES:
        decision = AccessDecision.deny(DenyReason.FORBIDDEN, MSG_ADMIN_REQUIRED)
    else:
        decision = AccessDecision.allow()

    if not decision.allowed:
        logger.warning(
            f"Platform access denied: user={caller_id} reason={decision.reason.value}"
        )

    return decision


def is_self(caller_id: str, owner_user_id: str | None) -> bool:
    """Whether the caller owns the record (self-service short-circuit)."""
    return owner_user_id is not None and str(caller_id) == str(owner_user_id)


def ensure_allowed(decision: AccessDecision) -> None:
    """
    Raise the boundary error for a denied decision.

    Raises:
        ResourceNotFoundError: Caller identity does not exist (404)
        AccessForbiddenError: Caller lacks access (403)
    """
    if decision.allowed:
        return

    if decision.reason == DenyReason.NOT_FOUND:
        raise ResourceNotFoundError(decision.message or MSG_USER_NOT_FOUND)

    raise AccessForbiddenError(decision.message or MSG_NO_TENANT_ACCESS)


__all__ = [
    "AccessDecision",
    "DenyReason",
    "GlobalRole",
    "Identity",
    "IdentityPort",
    "Membership",
    "MembershipPort",
    "MembershipStatus",
    "PRIVILEGED_GLOBAL_ROLES",
    "READ_ROLES",
    "TENANT_ADMIN_ROLES",
    "TenantRole",
    "authorize",
    "authorize_global",
    "decide",
    "ensure_allowed",
    "is_self",
]

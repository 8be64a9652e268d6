"""Authentication schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr

from app.core.access import GlobalRole, MembershipStatus, TenantRole


class MembershipResponse(BaseModel):
    """A school the caller belongs to."""

    school_id: UUID
    school_name: str
    role: TenantRole
    status: MembershipStatus


class MeResponse(BaseModel):
    """The authenticated caller's account and school memberships."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: EmailStr
    first_name: str
    last_name: str
    global_role: GlobalRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
    memberships: list[MembershipResponse] = []

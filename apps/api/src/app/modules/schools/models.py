"""
School Models

Database models for schools (tenants) and school memberships.
Each school is a tenant in the multi-tenant architecture; a user's access
to a school is defined by a SchoolUser membership row.
"""

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ENUM, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.access import MembershipStatus, TenantRole
from app.modules.shared import BaseModel

if TYPE_CHECKING:
    from app.modules.users.models import User


def _enum_values(enum: type[Enum]) -> list[str]:
    return [member.value for member in enum]


class SchoolStatus(str, Enum):
    """Status of a school tenant."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    DEACTIVATED = "deactivated"


class School(BaseModel):
    """
    School tenant model.

    All school-scoped data (students, memberships, ...) references this
    model via school_id.
    """

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )
    address: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    status: Mapped[SchoolStatus] = mapped_column(
        ENUM(SchoolStatus, name="school_status", create_type=True, values_callable=_enum_values),
        nullable=False,
        default=SchoolStatus.ACTIVE,
    )

    # Relationships
    members: Mapped[list["SchoolUser"]] = relationship(
        "SchoolUser",
        back_populates="school",
        lazy="noload",
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name}, status={self.status.value})>"


class SchoolUser(BaseModel):
    """
    Membership of a user in a school.

    One row per (user, school) pair. ``role`` is the user's role inside the
    school and ``status`` controls whether the membership currently grants
    access at all.
    """

    __tablename__ = "school_users"

    # ON DELETE CASCADE: memberships disappear with either side
    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    school_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[TenantRole] = mapped_column(
        ENUM(TenantRole, name="tenant_role", create_type=True, values_callable=_enum_values),
        nullable=False,
    )
    status: Mapped[MembershipStatus] = mapped_column(
        ENUM(
            MembershipStatus,
            name="membership_status",
            create_type=True,
            values_callable=_enum_values,
        ),
        nullable=False,
        default=MembershipStatus.ACTIVE,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="memberships",
    )
    school: Mapped["School"] = relationship(
        "School",
        back_populates="members",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "school_id", name="uq_school_users_user_school"),
    )

    def __repr__(self) -> str:
        return (
            f"<SchoolUser(user_id={self.user_id}, school_id={self.school_id}, "
            f"role={self.role.value}, status={self.status.value})>"
        )

"""
User Models

Database model for user accounts. Credentials live with the external
identity provider; this table mirrors the account and carries the
application-level global role.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, Text
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.access import GlobalRole
from app.modules.shared import BaseModel

if TYPE_CHECKING:
    from app.modules.schools.models import SchoolUser


class User(BaseModel):
    """
    User account.

    The id matches the identity provider's user id (the token ``sub``).
    School-specific roles are held in SchoolUser memberships; ``global_role``
    only distinguishes platform administrators from everyone else.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    phone_number: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
    )
    profile_image_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    global_role: Mapped[GlobalRole] = mapped_column(
        ENUM(
            GlobalRole,
            name="global_role",
            create_type=True,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=GlobalRole.REGULAR,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    # Relationships
    memberships: Mapped[list["SchoolUser"]] = relationship(
        "SchoolUser",
        back_populates="user",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.global_role.value})>"

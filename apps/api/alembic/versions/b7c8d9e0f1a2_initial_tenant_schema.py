"""initial tenant schema

Revision ID: b7c8d9e0f1a2
Revises:
Create Date: 2026-10-18 09:00:00.000000

This migration creates:
1. Enum types for global roles, tenant roles, membership, school and student status
2. users, schools and school_users (memberships)
3. students, scoped to a school and linked to a user
4. audit_logs

Tables are created parents first so foreign keys resolve.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "b7c8d9e0f1a2"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ENUMS = {
    "global_role": ("super_admin", "system_admin", "regular"),
    "tenant_role": ("school_admin", "teacher", "student", "parent", "member"),
    "membership_status": ("active", "inactive"),
    "school_status": ("active", "suspended", "deactivated"),
    "student_status": ("active", "inactive", "graduated", "transferred"),
}


def _enum(name: str) -> postgresql.ENUM:
    # Created explicitly below with checkfirst
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create the tenant schema."""
    bind = op.get_bind()
    for name in ENUMS:
        _enum(name).create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("phone_number", sa.String(length=20), nullable=True),
        sa.Column("profile_image_url", sa.Text(), nullable=True),
        sa.Column(
            "global_role", _enum("global_role"), nullable=False, server_default="regular"
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "schools",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("status", _enum("school_status"), nullable=False, server_default="active"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_schools_name"), "schools", ["name"], unique=False)

    op.create_table(
        "school_users",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("role", _enum("tenant_role"), nullable=False),
        sa.Column(
            "status", _enum("membership_status"), nullable=False, server_default="active"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "school_id", name="uq_school_users_user_school"),
    )
    op.create_index(op.f("ix_school_users_user_id"), "school_users", ["user_id"])
    op.create_index(op.f("ix_school_users_school_id"), "school_users", ["school_id"])

    op.create_table(
        "students",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        *_timestamps(),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("school_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("student_id", sa.String(length=50), nullable=False),
        sa.Column("grade_level", sa.String(length=20), nullable=True),
        sa.Column("status", _enum("student_status"), nullable=False, server_default="active"),
        sa.Column("enrollment_date", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("school_id", "student_id", name="uq_students_school_student_id"),
    )
    op.create_index(op.f("ix_students_user_id"), "students", ["user_id"])
    op.create_index(op.f("ix_students_school_id"), "students", ["school_id"])
    op.create_index(op.f("ix_students_grade_level"), "students", ["grade_level"])
    op.create_index(op.f("ix_students_status"), "students", ["status"])

    op.create_table(
        "audit_logs",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("resource_type", sa.String(length=100), nullable=False),
        sa.Column("resource_id", sa.String(length=100), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_resource_type", "audit_logs", ["resource_type"])
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])


def downgrade() -> None:
    """Drop the tenant schema."""
    op.drop_table("audit_logs")
    op.drop_table("students")
    op.drop_table("school_users")
    op.drop_table("schools")
    op.drop_table("users")

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        _enum(name).drop(bind, checkfirst=True)

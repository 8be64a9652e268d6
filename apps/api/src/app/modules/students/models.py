"""
Student Models

Database model for students enrolled in a school. A student is always
linked to a user account (name and email live there) and belongs to
exactly one school.
"""

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import ENUM, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.modules.shared import BaseModel

if TYPE_CHECKING:
    from app.modules.schools.models import School
    from app.modules.users.models import User


class StudentStatus(str, Enum):
    """Enrollment status of a student."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    GRADUATED = "graduated"
    TRANSFERRED = "transferred"


class Student(BaseModel):
    """Student enrollment record."""

    __tablename__ = "students"

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
    # School-assigned student number, unique within the school
    student_id: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    grade_level: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        index=True,
    )
    status: Mapped[StudentStatus] = mapped_column(
        ENUM(
            StudentStatus,
            name="student_status",
            create_type=True,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=StudentStatus.ACTIVE,
        index=True,
    )
    enrollment_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    # Relationships
    user: Mapped["User"] = relationship("User", lazy="selectin")
    school: Mapped["School"] = relationship("School", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("school_id", "student_id", name="uq_students_school_student_id"),
    )

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, student_id={self.student_id}, status={self.status.value})>"

"""
Student Repository

Database operations for student records.
"""

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.pagination import PageDirective, SortOrder, order_by_clauses, paginate
from app.modules.shared import escape_like, normalize_uuid
from app.modules.students.models import Student, StudentStatus
from app.modules.users.models import User

# Fields clients may sort by; names sort through the joined user
SORT_COLUMNS = {
    "first_name": User.first_name,
    "last_name": User.last_name,
    "student_id": Student.student_id,
    "grade_level": Student.grade_level,
    "enrollment_date": Student.enrollment_date,
    "created_at": Student.created_at,
}
DEFAULT_SORT_FIELD = "created_at"


def build_school_query(
    school_id: str,
    *,
    status: StudentStatus | None = StudentStatus.ACTIVE,
    grade_level: str | None = None,
    search: str | None = None,
) -> Select:
    """
    Build the filtered (unordered, unpaged) student query for one school.

    Args:
        school_id: School UUID
        status: Enrollment status filter; None matches every status
        grade_level: Exact grade level (optional)
        search: Case-insensitive match on first name, last name, email
                or student number (optional)
    """
    query = select(Student).join(User, Student.user_id == User.id).where(
        Student.school_id == school_id
    )

    if status is not None:
        query = query.where(Student.status == status)

    if grade_level:
        query = query.where(Student.grade_level == grade_level)

    if search:
        search_pattern = f"%{escape_like(search)}%"
        query = query.where(
            or_(
                User.first_name.ilike(search_pattern, escape="\\"),
                User.last_name.ilike(search_pattern, escape="\\"),
                User.email.ilike(search_pattern, escape="\\"),
                Student.student_id.ilike(search_pattern, escape="\\"),
            )
        )

    return query


async def list_by_school(
    db: AsyncSession,
    school_id: str,
    directive: PageDirective,
    order: dict[str, SortOrder],
    *,
    status: StudentStatus | None = StudentStatus.ACTIVE,
    grade_level: str | None = None,
    search: str | None = None,
) -> tuple[list[Student], int]:
    """
    Get one page of a school's students.

    Returns:
        Tuple of (students on the page, total count matching filters)
    """
    query = build_school_query(
        school_id, status=status, grade_level=grade_level, search=search
    )
    return await paginate(db, query, directive, order_by_clauses(order, SORT_COLUMNS))


async def get_by_id(db: AsyncSession, id: str) -> Student | None:
    """Get a student by ID. Malformed ids return None."""
    student_id = normalize_uuid(id)
    if student_id is None:
        return None

    result = await db.execute(select(Student).where(Student.id == student_id))
    return result.scalar_one_or_none()


async def update_status(db: AsyncSession, student: Student, status: StudentStatus) -> Student:
    """Set a student's enrollment status and persist it."""
    student.status = status

    await db.commit()
    await db.refresh(student)

    return student

"""
Student Service Layer

Business logic for student listing, lookup and enrollment status changes.
Every operation runs the tenant access guard against the student's school
before touching school data.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.access import TENANT_ADMIN_ROLES, is_self
from app.core.exceptions import ResourceNotFoundError
from app.core.pagination import PageRequest, PaginatedResponse, build_page_meta, resolve_sort
from app.modules.audit_logs import service as audit_service
from app.modules.schools.guard import require_school_access
from app.modules.students import repository
from app.modules.students.models import Student, StudentStatus
from app.modules.students.schemas import StudentProfileResponse, StudentResponse

logger = logging.getLogger(__name__)


async def _get_student_or_404(db: AsyncSession, student_id: str) -> Student:
    student = await repository.get_by_id(db, student_id)
    if student is None:
        logger.warning(f"Student not found: {student_id}")
        raise ResourceNotFoundError("Student not found")
    return student


async def list_students(
    db: AsyncSession,
    caller_id: str,
    school_id: str,
    page: PageRequest,
    *,
    search: str | None = None,
    grade_level: str | None = None,
    status: StudentStatus | None = StudentStatus.ACTIVE,
) -> PaginatedResponse[StudentResponse]:
    """
    Get a page of a school's students.

    Args:
        db: Database session
        caller_id: Authenticated user id
        school_id: School to list
        page: Paging and sorting request
        search: Case-insensitive search on name, email or student number
        grade_level: Exact grade level filter
        status: Enrollment status filter (default active)

    Returns:
        PaginatedResponse of students

    Raises:
        ResourceNotFoundError: Caller account does not exist
        AccessForbiddenError: Caller has no active membership in the school
    """
    await require_school_access(db, caller_id, school_id)

    directive = page.to_directive()
    order = resolve_sort(
        page.sort_by, page.sort_order, repository.SORT_COLUMNS, repository.DEFAULT_SORT_FIELD
    )

    logger.info(
        f"Listing students: school={school_id}, caller={caller_id}, status={status}, "
        f"grade_level={grade_level}, search={search!r}, page={directive.page}, "
        f"limit={directive.limit}, order={order}"
    )

    students, total = await repository.list_by_school(
        db,
        school_id,
        directive,
        order,
        status=status,
        grade_level=grade_level,
        search=search,
    )

    return PaginatedResponse[StudentResponse](
        data=[StudentResponse.model_validate(student) for student in students],
        pagination=build_page_meta(total, directive.page, directive.limit),
    )


async def get_student(db: AsyncSession, caller_id: str, student_id: str) -> StudentResponse:
    """
    Get a student by ID.

    Raises:
        ResourceNotFoundError: Student or caller account does not exist
        AccessForbiddenError: Caller has no active membership in the student's school
    """
    student = await _get_student_or_404(db, student_id)
    await require_school_access(db, caller_id, student.school_id)

    return StudentResponse.model_validate(student)


async def get_student_profile(
    db: AsyncSession, caller_id: str, student_id: str
) -> StudentProfileResponse:
    """
    Get a student's full profile.

    The student's own account may always read it; anyone else needs
    access to the student's school.
    """
    student = await _get_student_or_404(db, student_id)

    if not is_self(caller_id, student.user_id):
        await require_school_access(db, caller_id, student.school_id)

    return StudentProfileResponse.model_validate(student)


async def update_student_status(
    db: AsyncSession,
    caller_id: str,
    student_id: str,
    status: StudentStatus,
) -> StudentResponse:
    """
    Change a student's enrollment status.

    Restricted to school administrators (and platform administrators).
    The change is recorded in the audit log.

    Raises:
        ResourceNotFoundError: Student or caller account does not exist
        AccessForbiddenError: Caller is not an administrator of the school
    """
    student = await _get_student_or_404(db, student_id)
    await require_school_access(db, caller_id, student.school_id, TENANT_ADMIN_ROLES)

    previous_status = student.status
    student = await repository.update_status(db, student, status)

    logger.info(
        f"Student {student.id} status changed: {previous_status.value} -> {status.value} "
        f"by {caller_id}"
    )

    response = StudentResponse.model_validate(student)

    await audit_service.record(
        db,
        caller_id,
        "student.status_updated",
        "student",
        resource_id=str(student.id),
        details={
            "school_id": str(student.school_id),
            "previous_status": previous_status.value,
            "status": status.value,
        },
    )

    return response

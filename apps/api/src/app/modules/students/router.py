"""
Students Router

API endpoints for student records. All endpoints require authentication;
access to school data is checked against the caller's school membership.

Endpoints:
- GET /schools/{school_id}/students - List a school's students (paginated)
- GET /students/{id} - Get a student
- GET /students/{id}/profile - Get a student's full profile
- PATCH /students/{id}/status - Change enrollment status (school admins)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.pagination import PageRequest, PaginatedResponse, page_query
from app.core.rate_limit import list_rate_limit
from app.core.responses import ApiResponse
from app.modules.students import service
from app.modules.students.models import StudentStatus
from app.modules.students.schemas import (
    StudentProfileResponse,
    StudentResponse,
    UpdateStudentStatusRequest,
)

router = APIRouter()

_ACCESS_RESPONSES = {
    403: {"description": "No access to the school or insufficient permissions"},
    404: {"description": "Caller account or student not found"},
}


@router.get(
    "/schools/{school_id}/students",
    response_model=ApiResponse[PaginatedResponse[StudentResponse]],
    summary="List Students",
    description="""
List the students of a school.

**Filters:** `status` (default `active`), `gradeLevel`, `search`
(name, email or student number, case-insensitive)

**Sorting:** `sortBy` one of `first_name`, `last_name`, `student_id`,
`grade_level`, `enrollment_date`, `created_at` (default `created_at`).

**Paging:** `page` (default 1) and `limit` (default 10, max 100).
Malformed values are defaulted, never rejected.
""",
    responses={**_ACCESS_RESPONSES, 429: {"description": "Rate limit exceeded"}},
    dependencies=[Depends(list_rate_limit)],
)
async def list_students(
    school_id: UUID,
    search: str | None = Query(None, max_length=100),
    grade_level: str | None = Query(None, alias="gradeLevel", max_length=20),
    status: StudentStatus = Query(StudentStatus.ACTIVE),
    page: PageRequest = Depends(page_query),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PaginatedResponse[StudentResponse]]:
    result = await service.list_students(
        db,
        current_user.id,
        str(school_id),
        page,
        search=search,
        grade_level=grade_level,
        status=status,
    )
    return ApiResponse.ok(result, "Students retrieved successfully")


@router.get(
    "/students/{student_id}",
    response_model=ApiResponse[StudentResponse],
    summary="Get Student",
    responses=_ACCESS_RESPONSES,
)
async def get_student(
    student_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[StudentResponse]:
    student = await service.get_student(db, current_user.id, str(student_id))
    return ApiResponse.ok(student, "Student retrieved successfully")


@router.get(
    "/students/{student_id}/profile",
    response_model=ApiResponse[StudentProfileResponse],
    summary="Get Student Profile",
    description="Students may always read their own profile.",
    responses=_ACCESS_RESPONSES,
)
async def get_student_profile(
    student_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[StudentProfileResponse]:
    profile = await service.get_student_profile(db, current_user.id, str(student_id))
    return ApiResponse.ok(profile, "Student profile retrieved successfully")


@router.patch(
    "/students/{student_id}/status",
    response_model=ApiResponse[StudentResponse],
    summary="Update Student Status",
    description="Change a student's enrollment status. Requires the school admin role.",
    responses=_ACCESS_RESPONSES,
)
async def update_student_status(
    student_id: UUID,
    request: UpdateStudentStatusRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[StudentResponse]:
    student = await service.update_student_status(
        db, current_user.id, str(student_id), request.status
    )
    return ApiResponse.ok(student, "Student status updated successfully")

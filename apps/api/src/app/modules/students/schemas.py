"""
Student Schemas

Pydantic schemas for student responses and status updates.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.modules.students.models import StudentStatus


class StudentUserInfo(BaseModel):
    """Account details of the student."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: EmailStr
    first_name: str
    last_name: str
    phone_number: str | None = None
    profile_image_url: str | None = None


class StudentSchoolInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class StudentResponse(BaseModel):
    """Student as returned by list and detail endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    school_id: UUID
    student_id: str
    grade_level: str | None = None
    status: StudentStatus
    enrollment_date: date | None = None
    created_at: datetime
    updated_at: datetime
    user: StudentUserInfo


class StudentProfileResponse(StudentResponse):
    """Full student profile, including the school."""

    school: StudentSchoolInfo


class UpdateStudentStatusRequest(BaseModel):
    """Request body for PATCH /students/{id}/status."""

    status: StudentStatus = Field(..., description="New enrollment status")

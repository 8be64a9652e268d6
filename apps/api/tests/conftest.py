"""
Shared test fixtures.
"""

from collections.abc import AsyncGenerator
from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

import app.models  # noqa: F401  (registers every model)
from app.core.access import GlobalRole
from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.main import app as fastapi_app
from app.modules.schools.models import School
from app.modules.students.models import Student, StudentStatus
from app.modules.users.models import User


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock(spec=AsyncSession)
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.begin_nested = MagicMock()
    return db


@pytest.fixture
def caller_id():
    return str(uuid4())


@pytest.fixture
def school_id():
    return str(uuid4())


@pytest.fixture
def make_user():
    """Factory for user models with every response field populated."""

    def _make(user_id: str | None = None, global_role: GlobalRole = GlobalRole.REGULAR):
        user = MagicMock(spec=User)
        user.id = user_id or str(uuid4())
        user.email = "ama.mensah@school.com"
        user.first_name = "Ama"
        user.last_name = "Mensah"
        user.phone_number = None
        user.profile_image_url = None
        user.global_role = global_role
        user.is_active = True
        user.created_at = datetime(2026, 1, 10, tzinfo=UTC)
        user.updated_at = datetime(2026, 1, 10, tzinfo=UTC)
        return user

    return _make


@pytest.fixture
def make_student(make_user, school_id):
    """Factory for student models linked to a user and a school."""

    def _make(
        user_id: str | None = None,
        status: StudentStatus = StudentStatus.ACTIVE,
        student_school_id: str | None = None,
    ):
        school = MagicMock(spec=School)
        school.id = student_school_id or school_id
        school.name = "Harbor View Academy"

        student = MagicMock(spec=Student)
        student.id = str(uuid4())
        student.user_id = user_id or str(uuid4())
        student.school_id = school.id
        student.student_id = "STU-0001"
        student.grade_level = "Grade 7"
        student.status = status
        student.enrollment_date = date(2025, 9, 1)
        student.created_at = datetime(2025, 9, 1, tzinfo=UTC)
        student.updated_at = datetime(2025, 9, 1, tzinfo=UTC)
        student.user = make_user(student.user_id)
        student.school = school
        return student

    return _make


@pytest.fixture
def client(mock_db, caller_id):
    """TestClient with the database and caller dependencies overridden."""

    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        yield mock_db

    async def _get_current_user() -> CurrentUser:
        return CurrentUser(id=caller_id)

    fastapi_app.dependency_overrides[get_db] = _get_db
    fastapi_app.dependency_overrides[get_current_user] = _get_current_user

    yield TestClient(fastapi_app)

    fastapi_app.dependency_overrides.clear()

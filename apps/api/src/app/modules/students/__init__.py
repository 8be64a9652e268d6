"""Students module."""

from app.modules.students.models import Student, StudentStatus
from app.modules.students.router import router

__all__ = ["Student", "StudentStatus", "router"]

"""
Model registry.

Importing this module registers every ORM model on ``Base.metadata`` so
string relationship targets resolve and Alembic sees the full schema.
"""

from app.core.database import Base
from app.modules.audit_logs.models import AuditLog
from app.modules.schools.models import School, SchoolUser
from app.modules.students.models import Student
from app.modules.users.models import User

__all__ = ["AuditLog", "Base", "School", "SchoolUser", "Student", "User"]

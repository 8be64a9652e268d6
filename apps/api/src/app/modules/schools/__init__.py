"""
Schools module - School tenants and memberships.
"""

from app.modules.schools.models import School, SchoolStatus, SchoolUser
from app.modules.schools.repository import (
    SchoolUserRepository,
    SqlMembershipPort,
)

__all__ = [
    "School",
    "SchoolStatus",
    "SchoolUser",
    "SchoolUserRepository",
    "SqlMembershipPort",
]

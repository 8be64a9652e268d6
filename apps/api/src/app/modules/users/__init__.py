"""
Users module - User accounts and caller identity lookup.
"""

from app.modules.users.models import User
from app.modules.users.repository import SqlIdentityPort, UserRepository

__all__ = ["User", "UserRepository", "SqlIdentityPort"]

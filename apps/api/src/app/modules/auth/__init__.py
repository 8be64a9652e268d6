"""Authentication module."""

from app.modules.auth.router import router
from app.modules.auth.schemas import MembershipResponse, MeResponse

__all__ = ["router", "MembershipResponse", "MeResponse"]

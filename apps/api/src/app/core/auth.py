"""
Authentication Module

Provides the authentication dependency for FastAPI endpoints. Access tokens
are issued by the external identity provider; this module only validates
them and extracts the caller's identity.

Authentication answers "who is calling". Whether the caller may act on a
given school is decided by the tenant access guard (app.core.access) from
the account and membership records, never from token claims.

SECURITY NOTE:
- Development mode test tokens are ONLY accepted when PYTHON_ENV=development
- Production environments MUST set PYTHON_ENV=production
"""

import logging
import os
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.security import decode_token

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=False,
    description="Identity provider access token",
)


@dataclass
class CurrentUser:
    """
    The authenticated caller.

    Attributes:
        id: User id (the token's ``sub`` claim)
        email: Email claim, if present
    """

    id: str
    email: str | None = None

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, email={self.email})"


def _is_dev_mode_safe() -> bool:
    """
    Check if development test tokens may be accepted.

    Both the settings object and the raw environment variable must agree
    that this is not a production or staging deployment.
    """
    env_var = os.getenv("PYTHON_ENV", "").lower()

    is_safe = (
        settings.is_development
        and not settings.is_production
        and env_var not in ("production", "staging")
    )

    if is_safe:
        logger.warning(
            "SECURITY: Development auth mode is ENABLED. This MUST NOT be used in production!"
        )

    return is_safe


_DEVELOPMENT_MODE = _is_dev_mode_safe()


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _validate_token(token: str) -> CurrentUser:
    """
    Validate an access token and build the caller identity.

    Raises:
        HTTPException 401: If the token is invalid, expired or lacks a subject
    """
    # In development mode a bare UUID is accepted as the caller id
    if _DEVELOPMENT_MODE:
        try:
            return CurrentUser(id=str(UUID(token)))
        except ValueError:
            pass

    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired access token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    subject = payload.get("sub")
    if not subject:
        logger.warning("Access token is missing the 'sub' claim")
        raise _unauthorized("INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims.")

    return CurrentUser(id=str(subject), email=payload.get("email"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentUser:
    """
    FastAPI dependency that validates the bearer token and returns the caller.

    Usage:
        @router.get("/students/{student_id}")
        async def get_student(user: CurrentUser = Depends(get_current_user)):
            ...

    Raises:
        HTTPException 401: If the token is missing, invalid, or expired
    """
    if credentials is None:
        raise _unauthorized("NOT_AUTHENTICATED", "Authentication is required.")

    user = _validate_token(credentials.credentials)
    logger.debug(f"Authenticated caller: {user.id}")
    return user


__all__ = ["CurrentUser", "get_current_user"]

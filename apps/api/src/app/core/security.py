"""
Security Utilities

Verification of access tokens issued by the external identity provider.
This service never issues tokens; it only validates the ones it receives.
"""

import logging
from typing import Any

import jwt

from app.core.config import settings

logger = logging.getLogger(__name__)


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decode and verify an access token.

    Checks the signature, algorithm, expiry and (when configured) audience.

    Args:
        token: Encoded JWT from the Authorization header

    Returns:
        The token payload, or None if the token is invalid or expired
    """
    options = {"verify_aud": settings.jwt_audience is not None}

    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected invalid token: {e}")
        return None


__all__ = ["decode_token"]

"""
Rate Limiting Module

Per-caller rate limiting for API endpoints using Redis as the backend.
Falls back to in-memory storage if Redis is unavailable.

List endpoints run a count query plus a windowed fetch with optional
free-text search, so they are limited per authenticated caller.
"""

import logging
import time

from fastapi import Depends, HTTPException, Request, status
from redis.asyncio import Redis

from app.core.auth import CurrentUser, get_current_user
from app.core.config import settings
from app.core.redis import get_redis

logger = logging.getLogger(__name__)

# In-memory rate limit storage (fallback when Redis unavailable)
# Format: {key: [timestamp, ...]}
_memory_store: dict[str, list[float]] = {}


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(
    client: Redis,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using a Redis sorted-set sliding window.

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, window_start)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)

    results = await pipe.execute()
    current_count = results[1]

    return current_count < limit


def _prune_memory_store(window_start: float) -> None:
    """Drop keys whose every hit is older than the window."""
    stale = [key for key, hits in _memory_store.items() if not hits or hits[-1] <= window_start]
    for key in stale:
        del _memory_store[key]


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check rate limit using in-memory storage.

    Only accurate for a single server process.
    """
    now = time.time()
    window_start = now - window_seconds

    _prune_memory_store(window_start)

    hits = [ts for ts in _memory_store.get(key, []) if ts > window_start]

    if len(hits) >= limit:
        _memory_store[key] = hits
        return False

    hits.append(now)
    _memory_store[key] = hits
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check if a request is within rate limits.

    Tries Redis first, falls back to in-memory storage.

    Args:
        key: Unique key for this rate limit (e.g., "list:students:user_123")
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    client = get_redis()

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


async def list_rate_limit(
    request: Request,
    user: CurrentUser = Depends(get_current_user),
) -> None:
    """
    FastAPI dependency limiting list requests per caller and route.

    Raises:
        RateLimitExceeded: When the caller exceeded the configured budget (HTTP 429)
    """
    route = request.scope.get("route")
    path = getattr(route, "path", request.url.path)
    key = f"rate_limit:list:{user.id}:{path}"

    limit = settings.rate_limit_list_requests
    window = settings.rate_limit_window_seconds

    if not await check_rate_limit(key, limit, window):
        logger.warning(f"Rate limit exceeded for {key}: {limit}/{window}s")
        raise RateLimitExceeded(limit, window)


__all__ = ["RateLimitExceeded", "check_rate_limit", "list_rate_limit"]

"""
Redis Connection

The only Redis consumer is the list-endpoint rate limiter. When no client
is connected the limiter counts requests in process memory instead, and
``rate_limit_backend`` reports which of the two is in use.
"""

import logging

from redis.asyncio import Redis, from_url

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Redis | None = None


async def init_redis() -> Redis:
    """
    Connect to Redis at startup.

    The client is kept only once it answers a ping; on failure the
    connection is closed and the error propagates to the lifespan.
    """
    global _client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=settings.redis_connect_timeout_seconds,
    )
    try:
        await client.ping()
    except Exception:
        await client.aclose()
        raise
    _client = client
    return client


def get_redis() -> Redis | None:
    return _client


def rate_limit_backend() -> str:
    """Name of the store currently backing rate limits ("redis" or "memory")."""
    return "redis" if _client is not None else "memory"


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("Redis connection closed")

"""
Redis client initialization and connection management.

This module provides the Redis client used for token revocation.
"""

import logging
import redis.asyncio as redis
from backend.tracknship.core.config import settings

logger = logging.getLogger("tracknship.redis")

# Create async Redis client (connections are opened lazily)
redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """
    Get Redis client instance.

    Used as a FastAPI dependency so tests can override it.
    """
    return redis_client


async def ping_redis() -> bool:
    """
    Test Redis connection.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        return await redis_client.ping()
    except redis.RedisError as e:
        logger.warning("Redis ping failed: %s", e)
        return False


async def close_redis() -> None:
    """Close the process-wide Redis client on shutdown."""
    await redis_client.aclose()

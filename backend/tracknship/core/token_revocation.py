"""
Token Revocation System using Redis.

Implements token blacklisting so a logged-out token stops working before
its natural expiry.
"""

import logging
from redis.asyncio import Redis
from redis.exceptions import RedisError
from backend.tracknship.core.config import settings

logger = logging.getLogger("tracknship.auth")

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"


async def revoke_token(redis: Redis, token: str, email: str) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Args:
        redis: Redis client
        token: The JWT token string to revoke
        email: Identity that owns the token

    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        # Tokens auto-expire anyway; keep the entry as long as a token can live
        ttl_seconds = settings.access_token_expire_days * 24 * 60 * 60

        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        await redis.set(key, email, ex=ttl_seconds)
        return True
    except RedisError as e:
        logger.warning("Error revoking token for %s: %s", email, e)
        return False


async def is_token_revoked(redis: Redis, token: str) -> bool:
    """
    Check if a token has been revoked.

    Fails open: if Redis is unreachable the token is treated as live.

    Args:
        redis: Redis client
        token: JWT token string to check

    Returns:
        True if token is revoked, False otherwise
    """
    try:
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        exists = await redis.exists(key)
        return exists > 0
    except RedisError as e:
        logger.warning("Error checking token revocation: %s", e)
        return False

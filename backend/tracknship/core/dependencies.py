"""
Authentication dependencies for FastAPI.

This module provides the "is authenticated" dependency: it extracts the
credential from the request, verifies it and exposes the identity claim.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from redis.asyncio import Redis
from backend.tracknship.core.config import settings
from backend.tracknship.core.exceptions import AuthenticationError, TokenRevokedError
from backend.tracknship.core.jwt import IdentityClaim, verify_access_token
from backend.tracknship.core.redis_client import get_redis
from backend.tracknship.core.token_revocation import is_token_revoked

# HTTP Bearer security scheme; missing headers are handled below so the
# cookie transport can be tried and the response is always a 401
security = HTTPBearer(auto_error=False)


async def get_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """
    Extract the raw access token from the request.

    The Authorization header wins; the HTTP-only cookie is the fallback.
    """
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.token_cookie_name)


async def require_authenticated(
    request: Request,
    token: Optional[str] = Depends(get_token),
    redis: Redis = Depends(get_redis),
) -> IdentityClaim:
    """
    FastAPI dependency for JWT authentication.

    Checks:
    1. A credential is present (header or cookie)
    2. Signature, expiry and identity claim are valid
    3. The token has not been revoked by logout

    Returns:
        The verified identity claim, also attached to ``request.state.identity``

    Raises:
        AuthenticationError / TokenRevokedError (401)
    """
    if not token:
        raise AuthenticationError("Missing credentials")

    identity = verify_access_token(token)
    if identity is None:
        raise AuthenticationError("Could not validate credentials")

    if await is_token_revoked(redis, token):
        raise TokenRevokedError()

    request.state.identity = identity
    return identity

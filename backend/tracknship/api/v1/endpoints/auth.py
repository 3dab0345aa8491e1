"""
Authentication API endpoints.

Issues access tokens after the client signed the user in, and revokes them
on logout.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Response
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession
from backend.tracknship.core.config import settings
from backend.tracknship.core.dependencies import get_token
from backend.tracknship.core.jwt import create_access_token, verify_access_token
from backend.tracknship.core.redis_client import get_redis
from backend.tracknship.core.token_revocation import revoke_token
from backend.tracknship.db.session import get_db
from backend.tracknship.schemas.auth import TokenRequest, TokenResponse, LogoutResponse
from backend.tracknship.services.users import upsert_user

router = APIRouter(tags=["Authentication"])
logger = logging.getLogger("tracknship.auth")


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "strict",
    }


@router.post("/jwt", response_model=TokenResponse)
async def issue_token(
    payload: TokenRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Issue an access token for a signed-in user.

    Creates the user on first login (as a customer) and refreshes the profile
    otherwise. The token is returned in the body and set as an HTTP-only cookie.
    """
    user, created = await upsert_user(db, payload.email, payload.name, payload.photo_url)

    access_token = create_access_token(user.email)
    response.set_cookie(settings.token_cookie_name, access_token, **_cookie_options())

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user_id=user.id,
        email=user.email,
        role=user.role,
        created=created
    )


@router.get("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_token),
    redis: Redis = Depends(get_redis)
):
    """
    Log out: revoke the presented token (if any) and clear the cookie.
    """
    revoked = False
    if token:
        identity = verify_access_token(token)
        if identity is not None:
            revoked = await revoke_token(redis, token, identity.email)
            logger.info("Logout for %s (revoked=%s)", identity.email, revoked)

    response.delete_cookie(settings.token_cookie_name, **_cookie_options())
    return LogoutResponse(success=True, revoked=revoked)

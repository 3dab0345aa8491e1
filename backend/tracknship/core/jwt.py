"""
JWT token utilities for authentication.

This module issues and verifies the signed credential carrying a user's
identity claim (their email).
"""

from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from pydantic import BaseModel
from backend.tracknship.core.config import settings


class IdentityClaim(BaseModel):
    """Verified identity extracted from an access token."""
    email: str


def create_access_token(email: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token for a user identity.

    Args:
        email: Identity to embed in the token (stored as ``sub`` and ``email``)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string

    Example payload:
        {
            "sub": "someone@example.com",
            "email": "someone@example.com",
            "exp": 1234567890
        }

    Role is intentionally not embedded: guards always resolve it from the store.
    """
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(days=settings.access_token_expire_days)

    to_encode = {"sub": email, "email": email, "exp": expire}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def verify_access_token(token: str) -> Optional[IdentityClaim]:
    """
    Verify a JWT access token and extract its identity claim.

    Args:
        token: JWT token string to verify

    Returns:
        IdentityClaim if the token is valid, None if it is expired, malformed,
        wrongly signed or carries no identity
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    email = payload.get("email") or payload.get("sub")
    if not email:
        return None
    return IdentityClaim(email=email)

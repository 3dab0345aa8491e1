"""
Authentication Pydantic schemas.

Defines request and response schemas for token issuance.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from backend.tracknship.models.enums import UserRole


class TokenRequest(BaseModel):
    """
    Schema for POST /jwt.

    The client has already signed the user in with its identity provider;
    the backend upserts the profile and issues its own access token.
    """
    email: EmailStr = Field(..., description="User email address")
    name: Optional[str] = Field(None, max_length=150, description="Display name")
    photo_url: Optional[str] = Field(None, max_length=500, description="Avatar URL")


class TokenResponse(BaseModel):
    """
    Schema for JWT token response.

    The role is informational only; guards re-read it from the store.
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user_id: int = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    role: UserRole = Field(..., description="User role at issuance")
    created: bool = Field(default=False, description="True on first login")


class LogoutResponse(BaseModel):
    success: bool = True
    revoked: bool = False

"""
User Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from backend.tracknship.models.enums import UserRole, UserStatus


class UserResponse(BaseModel):
    """
    Schema for user information response.

    Used by GET /users/me and the admin listing.
    """
    id: int
    email: str
    name: Optional[str]
    photo_url: Optional[str]
    phone: Optional[str]
    role: UserRole
    status: Optional[UserStatus]
    delivered_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int
    page: int
    page_size: int


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=150)
    phone: Optional[str] = Field(None, max_length=30)
    photo_url: Optional[str] = Field(None, max_length=500)


class RoleUpdate(BaseModel):
    role: UserRole

"""
User API endpoints.

Self-service profile and delivery-man requests, plus admin role management.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from backend.tracknship.core.guards import get_current_user, require_admin, require_customer
from backend.tracknship.db.session import get_db
from backend.tracknship.models.enums import UserRole
from backend.tracknship.models.user import User
from backend.tracknship.schemas.user import UserResponse, UserListResponse, ProfileUpdate, RoleUpdate
from backend.tracknship.services import users as user_store

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user's profile, including their current role."""
    return UserResponse.model_validate(current_user)


@router.patch("/me", response_model=UserResponse)
async def update_me(
    changes: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update name, phone or photo of the authenticated user."""
    user = await user_store.update_profile(
        db, current_user,
        name=changes.name, phone=changes.phone, photo_url=changes.photo_url
    )
    return UserResponse.model_validate(user)


@router.patch("/me/status", response_model=UserResponse)
async def request_delivery_man_status(
    current_user: User = Depends(require_customer),
    db: AsyncSession = Depends(get_db)
):
    """Customer asks an admin to make them a delivery man."""
    user = await user_store.request_delivery_man_status(db, current_user)
    return UserResponse.model_validate(user)


@router.get("", response_model=UserListResponse)
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """List users (admin only), newest first."""
    users, total = await user_store.list_users(db, role=role, page=page, page_size=page_size)
    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        total=total,
        page=page,
        page_size=page_size
    )


@router.patch("/{user_id}/role", response_model=UserResponse)
async def change_role(
    update: RoleUpdate,
    user_id: int = Path(..., description="User ID"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Change a user's role (admin only).

    Takes effect on the user's next request, whatever token they hold.
    """
    user = await user_store.change_role(db, user_id, update.role)
    return UserResponse.model_validate(user)

"""
Security guards for role-based and ownership-based access control.

Roles are always resolved from the user store, never from the token, so a
role change takes effect on the very next request.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from backend.tracknship.core.dependencies import require_authenticated
from backend.tracknship.core.exceptions import InsufficientPermissionsError, ResourceNotFoundError
from backend.tracknship.core.jwt import IdentityClaim
from backend.tracknship.db.session import get_db
from backend.tracknship.models.enums import UserRole
from backend.tracknship.models.user import User
from backend.tracknship.services.users import resolve_user


def require_role(*allowed_roles: UserRole):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.post("/updateBooking/{booking_id}")
        async def assign(admin: User = Depends(require_role(UserRole.ADMIN))):
            ...

    Args:
        allowed_roles: Roles allowed to access the endpoint

    Returns:
        FastAPI dependency resolving the current User

    Raises:
        InsufficientPermissionsError (403) if the user record is absent or
        its current role is not allowed
    """
    async def role_checker(
        identity: IdentityClaim = Depends(require_authenticated),
        db: AsyncSession = Depends(get_db),
    ) -> User:
        user = await resolve_user(db, identity.email)

        if user is None:
            raise InsufficientPermissionsError("User record not found")

        if user.role not in allowed_roles:
            raise InsufficientPermissionsError(
                f"Access denied. Required role: {', '.join(r.value for r in allowed_roles)}",
                details={"role": user.role.value},
            )

        return user

    return role_checker


require_admin = require_role(UserRole.ADMIN)
require_deliveryman = require_role(UserRole.DELIVERYMAN)
require_customer = require_role(UserRole.CUSTOMER)


async def get_current_user(
    identity: IdentityClaim = Depends(require_authenticated),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the authenticated user regardless of role."""
    user = await resolve_user(db, identity.email)
    if user is None:
        raise ResourceNotFoundError("User", identity.email)
    return user


def verify_ownership(owner_email: str, user: User) -> bool:
    """
    Verify that the user owns the resource.

    Admins can access everything; everyone else only their own resources.
    """
    if user.role == UserRole.ADMIN:
        return True
    return user.email == owner_email


class OwnershipGuard:
    """
    Class-based ownership guard.

    Usage:
        ownership_guard = OwnershipGuard()
        ownership_guard.enforce(booking.owner_email, current_user, "booking")
    """

    def enforce(self, owner_email: str, user: User, resource_name: str = "resource"):
        """
        Enforce ownership validation.

        Raises:
            InsufficientPermissionsError (403) if ownership check fails
        """
        if not verify_ownership(owner_email, user):
            raise InsufficientPermissionsError(
                f"Access denied. You do not have permission to access this {resource_name}."
            )

"""
User store and role resolution.

Users are keyed by email: they are created on first login and afterwards
only mutated by themselves (profile, delivery-man request) or by an admin
(role changes).
"""

import logging
from typing import Optional, Tuple, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from backend.tracknship.core.exceptions import ResourceNotFoundError
from backend.tracknship.models.enums import UserRole, UserStatus
from backend.tracknship.models.user import User

logger = logging.getLogger("tracknship.users")


async def resolve_user(db: AsyncSession, email: str) -> Optional[User]:
    """
    Look up the current user record for a verified identity.

    This is the role resolver used by the guards: the returned record carries
    the role as stored right now, not as it was when the token was issued.
    """
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def upsert_user(
    db: AsyncSession,
    email: str,
    name: Optional[str] = None,
    photo_url: Optional[str] = None,
) -> Tuple[User, bool]:
    """
    Create the user on first login or refresh their profile fields.

    New users start as customers. The role of an existing user is never
    touched here.

    Returns:
        (user, created)
    """
    user = await resolve_user(db, email)
    if user is None:
        user = User(email=email, name=name, photo_url=photo_url, role=UserRole.CUSTOMER, delivered_count=0)
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            # Concurrent first login for the same email already inserted it
            await db.rollback()
            user = await resolve_user(db, email)
            if user is None:
                raise
        else:
            await db.refresh(user)
            logger.info("Created user %s", email)
            return user, True

    if name is not None:
        user.name = name
    if photo_url is not None:
        user.photo_url = photo_url
    await db.commit()
    await db.refresh(user)
    return user, False


async def update_profile(
    db: AsyncSession,
    user: User,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    photo_url: Optional[str] = None,
) -> User:
    """Overwrite the self-editable profile fields that were provided."""
    if name is not None:
        user.name = name
    if phone is not None:
        user.phone = phone
    if photo_url is not None:
        user.photo_url = photo_url
    await db.commit()
    await db.refresh(user)
    return user


async def list_users(
    db: AsyncSession,
    role: Optional[UserRole] = None,
    page: int = 1,
    page_size: int = 50,
) -> Tuple[List[User], int]:
    """Paginated user listing, newest first, optionally filtered by role."""
    count_query = select(func.count(User.id))
    query = select(User)
    if role is not None:
        count_query = count_query.where(User.role == role)
        query = query.where(User.role == role)

    total = (await db.execute(count_query)).scalar() or 0

    offset = (page - 1) * page_size
    result = await db.execute(
        query.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(page_size)
    )
    return list(result.scalars().all()), total


async def request_delivery_man_status(db: AsyncSession, user: User) -> User:
    """Record a customer's request to become a delivery man. Idempotent."""
    if user.status != UserStatus.REQUESTED:
        user.status = UserStatus.REQUESTED
        await db.commit()
        await db.refresh(user)
        logger.info("User %s requested delivery man status", user.email)
    return user


async def change_role(db: AsyncSession, user_id: int, role: UserRole) -> User:
    """
    Admin role change.

    Granting DELIVERYMAN approves a pending request; any other role clears the
    delivery-man status.

    Raises:
        ResourceNotFoundError if the user does not exist
    """
    user = await get_user_by_id(db, user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)

    previous = user.role
    user.role = role
    user.status = UserStatus.APPROVED if role == UserRole.DELIVERYMAN else None
    await db.commit()
    await db.refresh(user)

    logger.info("Role of %s changed from %s to %s", user.email, previous.value, role.value)
    return user

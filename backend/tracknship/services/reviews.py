"""
Review service.

Customers review the delivery man of their own delivered bookings, once per
booking. Reviews are never edited.
"""

import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from backend.tracknship.core.exceptions import (
    ConflictError,
    InsufficientPermissionsError,
    InvalidTransitionError,
    ResourceNotFoundError,
)
from backend.tracknship.models.booking_enums import BookingStatus
from backend.tracknship.models.review import Review
from backend.tracknship.models.user import User
from backend.tracknship.schemas.review import ReviewCreate
from backend.tracknship.services.booking_store import BookingStore

logger = logging.getLogger("tracknship.reviews")


async def create_review(db: AsyncSession, reviewer: User, data: ReviewCreate) -> Review:
    """
    Store a review for a delivered booking owned by ``reviewer``.

    Raises:
        ResourceNotFoundError: booking does not exist
        InsufficientPermissionsError: reviewer does not own the booking
        InvalidTransitionError: booking is not Delivered
        ConflictError: booking was already reviewed
    """
    booking = await BookingStore(db).get(data.booking_id)
    if booking is None:
        raise ResourceNotFoundError("Booking", data.booking_id)

    if booking.owner_email != reviewer.email:
        raise InsufficientPermissionsError("Only the owner can review this booking")

    if booking.status != BookingStatus.DELIVERED:
        raise InvalidTransitionError(booking.id, booking.status, "review")

    existing = await db.execute(select(Review.id).where(Review.booking_id == booking.id))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Booking has already been reviewed", details={"booking_id": booking.id})

    review = Review(
        booking_id=booking.id,
        delivery_man_id=booking.delivery_man_id,
        reviewer_email=reviewer.email,
        reviewer_name=reviewer.name,
        reviewer_photo_url=reviewer.photo_url,
        rating=data.rating,
        comment=data.comment,
    )
    db.add(review)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Booking has already been reviewed", details={"booking_id": booking.id})
    await db.refresh(review)

    logger.info("Booking %s reviewed by %s with rating %s", booking.id, reviewer.email, data.rating)
    return review


async def list_reviews_for_delivery_man(db: AsyncSession, delivery_man_id: int) -> List[Review]:
    """Reviews about a delivery man, most recent first."""
    result = await db.execute(
        select(Review)
        .where(Review.delivery_man_id == delivery_man_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(result.scalars().all())

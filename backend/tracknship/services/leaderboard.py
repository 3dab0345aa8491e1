"""
Leaderboard aggregator.

Read-only: joins delivery men with their delivered bookings and reviews.
Delivered counts are recomputed from bookings, which is authoritative even
when the maintained counter is stale.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from backend.tracknship.models.booking import Booking
from backend.tracknship.models.booking_enums import BookingStatus
from backend.tracknship.models.enums import UserRole
from backend.tracknship.models.review import Review
from backend.tracknship.models.user import User
from backend.tracknship.schemas.leaderboard import DeliveryManStats


class LeaderboardService:

    @staticmethod
    async def delivery_men_stats(db: AsyncSession) -> List[DeliveryManStats]:
        """
        Rank every delivery man by delivered count, then by average rating
        (both descending). Delivery men without reviews rate 0.
        """
        delivered = (
            select(
                Booking.delivery_man_id.label("delivery_man_id"),
                func.count(Booking.id).label("delivered"),
            )
            .where(Booking.status == BookingStatus.DELIVERED, Booking.delivery_man_id.isnot(None))
            .group_by(Booking.delivery_man_id)
            .subquery()
        )
        ratings = (
            select(
                Review.delivery_man_id.label("delivery_man_id"),
                func.avg(Review.rating).label("average_rating"),
                func.count(Review.id).label("review_count"),
            )
            .group_by(Review.delivery_man_id)
            .subquery()
        )

        query = (
            select(
                User,
                func.coalesce(delivered.c.delivered, 0),
                func.coalesce(ratings.c.average_rating, 0),
                func.coalesce(ratings.c.review_count, 0),
            )
            .outerjoin(delivered, delivered.c.delivery_man_id == User.id)
            .outerjoin(ratings, ratings.c.delivery_man_id == User.id)
            .where(User.role == UserRole.DELIVERYMAN)
        )
        rows = (await db.execute(query)).all()

        stats = [
            DeliveryManStats(
                delivery_man_id=user.id,
                name=user.name,
                email=user.email,
                photo_url=user.photo_url,
                phone=user.phone,
                delivered_count=int(delivered_count),
                counter_value=user.delivered_count,
                average_rating=float(average_rating),
                review_count=int(review_count),
            )
            for user, delivered_count, average_rating, review_count in rows
        ]
        stats.sort(key=lambda s: (-s.delivered_count, -s.average_rating, s.delivery_man_id))
        return stats

    @staticmethod
    async def top_delivery_men(db: AsyncSession, limit: int = 3) -> List[DeliveryManStats]:
        """Top ``limit`` delivery men; empty when there are none."""
        if limit <= 0:
            return []
        stats = await LeaderboardService.delivery_men_stats(db)
        return stats[:limit]

"""
Analytics Service.

Handles data aggregation for the admin dashboard.
Focused on READ-ONLY operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, case

from backend.tracknship.models.booking import Booking
from backend.tracknship.models.booking_enums import BookingStatus
from backend.tracknship.models.user import User
from backend.tracknship.models.enums import UserRole
from backend.tracknship.schemas.leaderboard import SystemStats, DailyBookingStats


class AnalyticsService:

    @staticmethod
    async def get_system_stats(db: AsyncSession) -> SystemStats:
        """Get system-wide totals and the per-date booking chart."""

        total_users = (await db.execute(select(func.count(User.id)))).scalar() or 0

        total_delivery_men = (await db.execute(
            select(func.count(User.id)).where(User.role == UserRole.DELIVERYMAN)
        )).scalar() or 0

        total_bookings = (await db.execute(select(func.count(Booking.id)))).scalar() or 0

        total_delivered = (await db.execute(
            select(func.count(Booking.id)).where(Booking.status == BookingStatus.DELIVERED)
        )).scalar() or 0

        total_cancelled = (await db.execute(
            select(func.count(Booking.id)).where(Booking.status == BookingStatus.CANCELLED)
        )).scalar() or 0

        # Booked vs delivered, grouped by requested delivery date
        delivered_flag = case((Booking.status == BookingStatus.DELIVERED, 1), else_=0)
        per_date = await db.execute(
            select(
                Booking.requested_delivery_date,
                func.count(Booking.id),
                func.sum(delivered_flag),
            )
            .group_by(Booking.requested_delivery_date)
            .order_by(Booking.requested_delivery_date)
        )

        return SystemStats(
            total_users=total_users,
            total_delivery_men=total_delivery_men,
            total_bookings=total_bookings,
            total_delivered=total_delivered,
            total_cancelled=total_cancelled,
            bookings_by_date=[
                DailyBookingStats(date=day, booked=booked, delivered=int(delivered or 0))
                for day, booked, delivered in per_date.all()
            ]
        )

"""
Booking store adapter.

CRUD, filtered queries and conditional writes over the bookings table.
Every status-changing write is conditional on the status the caller expects,
so two racing transitions cannot both succeed.
"""

from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete

from backend.tracknship.models.booking import Booking
from backend.tracknship.models.booking_enums import BookingStatus


class BookingStore:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, booking_id: int) -> Optional[Booking]:
        """Fetch a booking, bypassing any stale copy held by the session."""
        result = await self.db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def insert(self, **fields: Any) -> Booking:
        booking = Booking(**fields)
        self.db.add(booking)
        await self.db.commit()
        await self.db.refresh(booking)
        return booking

    async def find(
        self,
        owner_email: Optional[str] = None,
        delivery_man_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> List[Booking]:
        """
        Query bookings with equality filters and an inclusive range on the
        requested delivery date. Newest bookings first.
        """
        query = select(Booking)

        if owner_email is not None:
            query = query.where(Booking.owner_email == owner_email)
        if delivery_man_id is not None:
            query = query.where(Booking.delivery_man_id == delivery_man_id)
        if status is not None:
            query = query.where(Booking.status == status)
        if from_date is not None:
            query = query.where(Booking.requested_delivery_date >= from_date)
        if to_date is not None:
            query = query.where(Booking.requested_delivery_date <= to_date)

        result = await self.db.execute(
            query.order_by(Booking.created_at.desc(), Booking.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def update_if_status(
        self,
        booking_id: int,
        expected_status: BookingStatus,
        values: Dict[str, Any],
        assigned_to: Optional[int] = None,
        unpaid_only: bool = False,
    ) -> int:
        """
        Atomically update a booking only if it is still in ``expected_status``
        (and, when given, still assigned to ``assigned_to`` or still unpaid).

        Returns:
            Number of modified rows: 1 on success, 0 if the booking moved on
        """
        stmt = (
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == expected_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if assigned_to is not None:
            stmt = stmt.where(Booking.delivery_man_id == assigned_to)
        if unpaid_only:
            stmt = stmt.where(Booking.is_paid.is_(False))

        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount

    async def delete_if_status(self, booking_id: int, expected_status: BookingStatus) -> int:
        """
        Hard delete a booking only if it is still in ``expected_status`` and
        unpaid. Paid bookings keep their payment rows.
        """
        result = await self.db.execute(
            delete(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status == expected_status,
                Booking.is_paid.is_(False),
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount

"""
Delivery-man counter maintainer.

Keeps ``User.delivered_count`` in step with booking transitions using the
store's atomic single-row increment.
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import update

from backend.tracknship.models.user import User

logger = logging.getLogger("tracknship.counter")


class DeliveryCounter:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def adjust(self, delivery_man_id: Optional[int], delta: int) -> bool:
        """
        Apply ``delta`` (+1 or -1) to a delivery man's delivered count.

        The lifecycle engine calls this at most once per committed transition.
        A decrement never takes the counter below zero.

        Args:
            delivery_man_id: Assignee of the booking, None if never assigned
            delta: +1 or -1

        Returns:
            True if the counter moved or there was nothing to adjust,
            False if no row was updated

        Raises:
            ValueError: for any other delta
            SQLAlchemyError: if the store write fails
        """
        if delta not in (1, -1):
            raise ValueError(f"Counter delta must be +1 or -1, got {delta}")

        if delivery_man_id is None:
            return True

        stmt = (
            update(User)
            .where(User.id == delivery_man_id)
            .values(delivered_count=User.delivered_count + delta)
            .execution_options(synchronize_session=False)
        )
        if delta < 0:
            stmt = stmt.where(User.delivered_count > 0)

        result = await self.db.execute(stmt)
        await self.db.commit()

        if result.rowcount != 1:
            logger.warning(
                "Counter adjustment %+d for delivery man %s changed no row",
                delta, delivery_man_id
            )
            return False
        return True

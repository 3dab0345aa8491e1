"""
Booking lifecycle engine.

Validates and applies booking status transitions:

    Pending     --assign-->           On The Way   (admin)
    On The Way  --confirm_delivery--> Delivered    (assigned delivery man, counter +1)
    Pending /
    On The Way  --cancel-->           Cancelled    (admin or owner, counter -1 if assigned)
    Pending     --edit-->             Pending      (owner)
    Pending     --delete-->           (removed)    (owner)

Paid bookings can be neither deleted nor repriced.

The booking write is authoritative and commits first. The delivery-man counter
is adjusted afterwards; if that write fails the inconsistency is logged and
the transition still succeeds.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from backend.tracknship.core.exceptions import (
    AppException,
    ConflictError,
    InsufficientPermissionsError,
    InvalidAssigneeError,
    InvalidTransitionError,
    ResourceNotFoundError,
)
from backend.tracknship.core.guards import OwnershipGuard
from backend.tracknship.models.booking import Booking
from backend.tracknship.models.booking_enums import BookingStatus
from backend.tracknship.models.enums import UserRole
from backend.tracknship.models.user import User
from backend.tracknship.schemas.booking import TransitionResult
from backend.tracknship.services.booking_store import BookingStore
from backend.tracknship.services.counter import DeliveryCounter
from backend.tracknship.services.users import get_user_by_id

logger = logging.getLogger("tracknship.lifecycle")


class BookingAction:
    ASSIGN = "assign"
    CONFIRM_DELIVERY = "confirm delivery of"
    CANCEL = "cancel"
    EDIT = "edit"
    DELETE = "delete"


# Action -> statuses the booking may be in for the action to apply
ALLOWED_FROM: Dict[str, frozenset] = {
    BookingAction.ASSIGN: frozenset({BookingStatus.PENDING}),
    BookingAction.CONFIRM_DELIVERY: frozenset({BookingStatus.ON_THE_WAY}),
    BookingAction.CANCEL: frozenset(s for s in BookingStatus if not s.is_terminal),
    BookingAction.EDIT: frozenset({BookingStatus.PENDING}),
    BookingAction.DELETE: frozenset({BookingStatus.PENDING}),
}

EDITABLE_FIELDS = frozenset({
    "owner_phone", "parcel_type", "parcel_weight", "receiver_name", "receiver_phone",
    "delivery_address", "latitude", "longitude", "requested_delivery_date", "price",
})

# Fields frozen once the booking has been paid for
PAID_LOCKED_FIELDS = frozenset({"price"})


def is_allowed(action: str, current_status: BookingStatus) -> bool:
    """True if ``action`` may be applied to a booking in ``current_status``."""
    return current_status in ALLOWED_FROM.get(action, frozenset())


class BookingLifecycle:

    def __init__(
        self,
        db: AsyncSession,
        store: Optional[BookingStore] = None,
        counter: Optional[DeliveryCounter] = None,
    ):
        self.db = db
        self.store = store or BookingStore(db)
        self.counter = counter or DeliveryCounter(db)
        self.ownership_guard = OwnershipGuard()

    # --- helpers ---

    async def get_booking(self, booking_id: int) -> Booking:
        booking = await self.store.get(booking_id)
        if booking is None:
            raise ResourceNotFoundError("Booking", booking_id)
        return booking

    def _check_transition(self, booking: Booking, action: str) -> None:
        if not is_allowed(action, booking.status):
            raise InvalidTransitionError(booking.id, booking.status, action)

    @staticmethod
    def _already_paid(booking_id: int, action: str) -> ConflictError:
        return ConflictError(
            f"Cannot {action} booking {booking_id}: it has already been paid for",
            details={"booking_id": booking_id, "action": action},
        )

    def _check_unpaid(self, booking: Booking, action: str) -> None:
        if booking.is_paid:
            raise self._already_paid(booking.id, action)

    async def _lost_race(self, booking_id: int, action: str) -> AppException:
        """Build the error for a conditional write that matched no row."""
        current = await self.store.get(booking_id)
        if current is None:
            return InvalidTransitionError(booking_id, "deleted", action)
        if action in (BookingAction.EDIT, BookingAction.DELETE) and current.is_paid and is_allowed(action, current.status):
            return self._already_paid(booking_id, action)
        return InvalidTransitionError(booking_id, current.status, action)

    async def _adjust_counter(self, booking_id: int, delivery_man_id: Optional[int], delta: int) -> None:
        try:
            await self.counter.adjust(delivery_man_id, delta)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.error(
                "Booking %s changed status but delivered counter of delivery man %s "
                "could not be adjusted by %+d; counter is stale",
                booking_id, delivery_man_id, delta, exc_info=True
            )

    # --- creation and owner edits ---

    async def create(self, owner: User, data: Dict[str, Any]) -> Booking:
        """Book a parcel for ``owner``. New bookings always start Pending."""
        fields = {key: value for key, value in data.items() if key in EDITABLE_FIELDS}
        fields.update(
            owner_email=owner.email,
            owner_name=data.get("owner_name") or owner.name,
            owner_phone=data.get("owner_phone") or owner.phone,
            status=BookingStatus.PENDING,
            delivery_man_id=None,
            approximate_delivery_date=None,
            is_paid=False,
        )
        booking = await self.store.insert(**fields)
        logger.info("Booking %s created by %s", booking.id, owner.email)
        return booking

    async def edit(self, booking_id: int, user: User, changes: Dict[str, Any]) -> Booking:
        """Overwrite editable fields of the owner's booking while it is Pending."""
        booking = await self.get_booking(booking_id)
        if booking.owner_email != user.email:
            raise InsufficientPermissionsError("Only the owner can edit this booking")
        self._check_transition(booking, BookingAction.EDIT)

        values = {key: value for key, value in changes.items() if key in EDITABLE_FIELDS}
        touches_price = bool(PAID_LOCKED_FIELDS & values.keys())
        if touches_price:
            self._check_unpaid(booking, BookingAction.EDIT)

        if values:
            modified = await self.store.update_if_status(
                booking_id, BookingStatus.PENDING, values, unpaid_only=touches_price
            )
            if modified == 0:
                raise await self._lost_race(booking_id, BookingAction.EDIT)

        return await self.get_booking(booking_id)

    async def delete(self, booking_id: int, user: User) -> int:
        """Remove the owner's booking while it is still Pending."""
        booking = await self.get_booking(booking_id)
        if booking.owner_email != user.email:
            raise InsufficientPermissionsError("Only the owner can delete this booking")
        self._check_transition(booking, BookingAction.DELETE)
        self._check_unpaid(booking, BookingAction.DELETE)

        deleted = await self.store.delete_if_status(booking_id, BookingStatus.PENDING)
        if deleted == 0:
            raise await self._lost_race(booking_id, BookingAction.DELETE)

        logger.info("Booking %s deleted by %s", booking_id, user.email)
        return deleted

    # --- status transitions ---

    async def assign(self, booking_id: int, delivery_man_id: int, approximate_delivery_date: date) -> TransitionResult:
        """Admin assigns a delivery man: Pending -> On The Way."""
        booking = await self.get_booking(booking_id)
        self._check_transition(booking, BookingAction.ASSIGN)

        delivery_man = await get_user_by_id(self.db, delivery_man_id)
        if delivery_man is None:
            raise ResourceNotFoundError("Delivery man", delivery_man_id)
        if delivery_man.role != UserRole.DELIVERYMAN:
            raise InvalidAssigneeError(delivery_man_id)

        modified = await self.store.update_if_status(
            booking_id,
            BookingStatus.PENDING,
            {
                "status": BookingStatus.ON_THE_WAY,
                "delivery_man_id": delivery_man_id,
                "approximate_delivery_date": approximate_delivery_date,
            },
        )
        if modified == 0:
            raise await self._lost_race(booking_id, BookingAction.ASSIGN)

        logger.info("Booking %s assigned to delivery man %s", booking_id, delivery_man_id)
        return TransitionResult(
            booking_id=booking_id,
            status=BookingStatus.ON_THE_WAY,
            modified_count=modified,
            delivery_man_id=delivery_man_id,
        )

    async def confirm_delivery(self, booking_id: int, delivery_man: User) -> TransitionResult:
        """Assigned delivery man confirms delivery: On The Way -> Delivered, counter +1."""
        booking = await self.get_booking(booking_id)
        self._check_transition(booking, BookingAction.CONFIRM_DELIVERY)

        if booking.delivery_man_id != delivery_man.id:
            raise InsufficientPermissionsError(
                "Only the assigned delivery man can confirm this delivery",
                details={"booking_id": booking_id},
            )

        modified = await self.store.update_if_status(
            booking_id,
            BookingStatus.ON_THE_WAY,
            {"status": BookingStatus.DELIVERED},
            assigned_to=delivery_man.id,
        )
        if modified == 0:
            raise await self._lost_race(booking_id, BookingAction.CONFIRM_DELIVERY)

        await self._adjust_counter(booking_id, delivery_man.id, +1)

        logger.info("Booking %s delivered by %s", booking_id, delivery_man.email)
        return TransitionResult(
            booking_id=booking_id,
            status=BookingStatus.DELIVERED,
            modified_count=modified,
            delivery_man_id=delivery_man.id,
        )

    async def cancel(self, booking_id: int, actor: User) -> TransitionResult:
        """Admin or owner cancels a non-terminal booking; counter -1 if it was assigned."""
        booking = await self.get_booking(booking_id)
        self.ownership_guard.enforce(booking.owner_email, actor, "booking")
        self._check_transition(booking, BookingAction.CANCEL)

        previous_status = booking.status
        assignee = booking.delivery_man_id

        modified = await self.store.update_if_status(
            booking_id,
            previous_status,
            {"status": BookingStatus.CANCELLED},
        )
        if modified == 0:
            raise await self._lost_race(booking_id, BookingAction.CANCEL)

        await self._adjust_counter(booking_id, assignee, -1)

        logger.info("Booking %s cancelled by %s (was %s)", booking_id, actor.email, previous_status.value)
        return TransitionResult(
            booking_id=booking_id,
            status=BookingStatus.CANCELLED,
            modified_count=modified,
            delivery_man_id=assignee,
        )

    # --- queries ---

    async def get_visible_booking(self, booking_id: int, user: User) -> Booking:
        """A booking is visible to its owner, its assignee and admins."""
        booking = await self.get_booking(booking_id)
        if user.role == UserRole.ADMIN or booking.owner_email == user.email:
            return booking
        if user.role == UserRole.DELIVERYMAN and booking.delivery_man_id == user.id:
            return booking
        raise InsufficientPermissionsError(
            "Access denied. You do not have permission to access this booking."
        )

    async def list_for_owner(self, owner: User, status: Optional[BookingStatus] = None) -> List[Booking]:
        return await self.store.find(owner_email=owner.email, status=status)

    async def list_for_delivery_man(self, delivery_man: User, status: Optional[BookingStatus] = None) -> List[Booking]:
        return await self.store.find(delivery_man_id=delivery_man.id, status=status)

    async def list_all(
        self,
        status: Optional[BookingStatus] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> List[Booking]:
        return await self.store.find(status=status, from_date=from_date, to_date=to_date)

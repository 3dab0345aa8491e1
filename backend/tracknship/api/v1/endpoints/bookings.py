"""
Booking API Endpoints.

Customers book, edit and cancel parcels; admins assign delivery men and
cancel; delivery men confirm delivery. Status changes go through the
BookingLifecycle engine.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.tracknship.core.guards import (
    get_current_user, require_admin, require_customer, require_deliveryman, require_role
)
from backend.tracknship.db.session import get_db
from backend.tracknship.models.booking_enums import BookingStatus
from backend.tracknship.models.enums import UserRole
from backend.tracknship.models.user import User
from backend.tracknship.schemas.booking import (
    BookingCreate, BookingUpdate, BookingAssign, BookingResponse, BookingListResponse,
    TransitionResult, DeleteResult
)
from backend.tracknship.services.lifecycle import BookingLifecycle

router = APIRouter(tags=["Bookings"])


def get_lifecycle(db: AsyncSession = Depends(get_db)) -> BookingLifecycle:
    return BookingLifecycle(db)


def _as_list(bookings) -> BookingListResponse:
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=len(bookings)
    )


# --- Customer ---

@router.post("/bookParcel", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def book_parcel(
    booking_data: BookingCreate,
    current_user: User = Depends(require_customer),
    lifecycle: BookingLifecycle = Depends(get_lifecycle)
):
    """Book a parcel (customer only). New bookings start Pending."""
    booking = await lifecycle.create(current_user, booking_data.model_dump())
    return BookingResponse.model_validate(booking)


@router.get("/myParcel", response_model=BookingListResponse)
async def my_parcels(
    booking_status: Optional[BookingStatus] = Query(None, alias="status", description="Filter by status"),
    current_user: User = Depends(require_customer),
    lifecycle: BookingLifecycle = Depends(get_lifecycle)
):
    """List the customer's own bookings."""
    return _as_list(await lifecycle.list_for_owner(current_user, booking_status))


@router.patch("/bookings/{booking_id}", response_model=BookingResponse)
async def edit_booking(
    changes: BookingUpdate,
    booking_id: int = Path(..., description="Booking ID"),
    current_user: User = Depends(require_customer),
    lifecycle: BookingLifecycle = Depends(get_lifecycle)
):
    """Edit an own booking while it is still Pending."""
    booking = await lifecycle.edit(booking_id, current_user, changes.model_dump(exclude_unset=True))
    return BookingResponse.model_validate(booking)


@router.delete("/bookings/{booking_id}", response_model=DeleteResult)
async def delete_booking(
    booking_id: int = Path(..., description="Booking ID"),
    current_user: User = Depends(require_customer),
    lifecycle: BookingLifecycle = Depends(get_lifecycle)
):
    """Delete an own booking while it is still Pending."""
    deleted = await lifecycle.delete(booking_id, current_user)
    return DeleteResult(booking_id=booking_id, deleted_count=deleted)


# --- Admin ---

@router.get("/bookings", response_model=BookingListResponse)
async def list_bookings(
    booking_status: Optional[BookingStatus] = Query(None, alias="status", description="Filter by status"),
    from_date: Optional[date] = Query(None, description="Requested delivery date, inclusive lower bound"),
    to_date: Optional[date] = Query(None, description="Requested delivery date, inclusive upper bound"),
    admin: User = Depends(require_admin),
    lifecycle: BookingLifecycle = Depends(get_lifecycle)
):
    """List all bookings (admin only)."""
    return _as_list(await lifecycle.list_all(booking_status, from_date, to_date))


@router.post("/updateBooking/{booking_id}", response_model=TransitionResult)
async def assign_delivery_man(
    assignment: BookingAssign,
    booking_id: int = Path(..., description="Booking ID"),
    admin: User = Depends(require_admin),
    lifecycle: BookingLifecycle = Depends(get_lifecycle)
):
    """
    Assign a delivery man to a Pending booking (admin only).

    Moves the booking to On The Way.
    """
    return await lifecycle.assign(
        booking_id, assignment.delivery_man_id, assignment.approximate_delivery_date
    )


# --- Shared ---

@router.patch("/cancelParcel/{booking_id}", response_model=TransitionResult)
async def cancel_booking(
    booking_id: int = Path(..., description="Booking ID"),
    current_user: User = Depends(require_role(UserRole.ADMIN, UserRole.CUSTOMER)),
    lifecycle: BookingLifecycle = Depends(get_lifecycle)
):
    """Cancel a Pending or On The Way booking (admin or owning customer)."""
    return await lifecycle.cancel(booking_id, current_user)


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int = Path(..., description="Booking ID"),
    current_user: User = Depends(get_current_user),
    lifecycle: BookingLifecycle = Depends(get_lifecycle)
):
    """Get one booking (owner, assigned delivery man or admin)."""
    booking = await lifecycle.get_visible_booking(booking_id, current_user)
    return BookingResponse.model_validate(booking)


# --- Delivery man ---

@router.get("/myDeliveryList", response_model=BookingListResponse)
async def my_delivery_list(
    booking_status: Optional[BookingStatus] = Query(None, alias="status", description="Filter by status"),
    current_user: User = Depends(require_deliveryman),
    lifecycle: BookingLifecycle = Depends(get_lifecycle)
):
    """List bookings assigned to the delivery man."""
    return _as_list(await lifecycle.list_for_delivery_man(current_user, booking_status))


@router.patch("/deliverParcel/{booking_id}", response_model=TransitionResult)
async def confirm_delivery(
    booking_id: int = Path(..., description="Booking ID"),
    current_user: User = Depends(require_deliveryman),
    lifecycle: BookingLifecycle = Depends(get_lifecycle)
):
    """Confirm delivery of an On The Way booking (assigned delivery man only)."""
    return await lifecycle.confirm_delivery(booking_id, current_user)

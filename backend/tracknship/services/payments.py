"""
Payment service.

Creates Stripe payment intents for the client to confirm and records
completed payments against bookings.
"""

import logging
import stripe
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from starlette.concurrency import run_in_threadpool

from backend.tracknship.core.config import settings
from backend.tracknship.core.exceptions import (
    ConflictError,
    InsufficientPermissionsError,
    InvalidTransitionError,
    PaymentError,
    ResourceNotFoundError,
)
from backend.tracknship.models.booking_enums import BookingStatus
from backend.tracknship.models.payment import Payment
from backend.tracknship.models.user import User
from backend.tracknship.schemas.payment import PaymentCreate
from backend.tracknship.services.booking_store import BookingStore

logger = logging.getLogger("tracknship.payments")


async def create_payment_intent(price: float) -> str:
    """
    Create a Stripe PaymentIntent and return its client secret.

    The amount is sent in the smallest currency unit (cents).

    Raises:
        PaymentError: provider not configured or request rejected
    """
    if not settings.stripe_secret_key:
        raise PaymentError("Payment provider is not configured")

    amount_in_cents = int(round(price * 100))

    try:
        intent = await run_in_threadpool(
            stripe.PaymentIntent.create,
            amount=amount_in_cents,
            currency=settings.payment_currency,
            automatic_payment_methods={"enabled": True},
            api_key=settings.stripe_secret_key,
        )
    except stripe.StripeError as e:
        logger.warning("Stripe rejected payment intent for %s cents: %s", amount_in_cents, e)
        raise PaymentError(e.user_message or "Payment provider error")

    return intent.client_secret


async def record_payment(db: AsyncSession, payer: User, data: PaymentCreate) -> Payment:
    """
    Append a payment for the payer's booking and mark the booking as paid.

    Raises:
        ResourceNotFoundError: booking does not exist
        InsufficientPermissionsError: payer does not own the booking
        InvalidTransitionError: booking was cancelled
        ConflictError: transaction already recorded
    """
    booking = await BookingStore(db).get(data.booking_id)
    if booking is None:
        raise ResourceNotFoundError("Booking", data.booking_id)

    if booking.owner_email != payer.email:
        raise InsufficientPermissionsError("Only the owner can pay for this booking")

    if booking.status == BookingStatus.CANCELLED:
        raise InvalidTransitionError(booking.id, booking.status, "pay for")

    duplicate = await db.execute(
        select(Payment.id).where(Payment.transaction_id == data.transaction_id)
    )
    if duplicate.scalar_one_or_none() is not None:
        raise ConflictError("Transaction already recorded", details={"transaction_id": data.transaction_id})

    payment = Payment(
        booking_id=booking.id,
        payer_email=payer.email,
        amount=data.amount,
        transaction_id=data.transaction_id,
    )
    db.add(payment)
    booking.is_paid = True
    await db.commit()
    await db.refresh(payment)

    logger.info("Payment %s recorded for booking %s", data.transaction_id, booking.id)
    return payment

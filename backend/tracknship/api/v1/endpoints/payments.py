"""
Payment API Endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from backend.tracknship.core.dependencies import require_authenticated
from backend.tracknship.core.guards import require_customer
from backend.tracknship.core.jwt import IdentityClaim
from backend.tracknship.db.session import get_db
from backend.tracknship.models.user import User
from backend.tracknship.schemas.payment import (
    PaymentIntentRequest, PaymentIntentResponse, PaymentCreate, PaymentResponse
)
from backend.tracknship.services.payments import create_payment_intent, record_payment

router = APIRouter(tags=["Payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def payment_intent(
    request_data: PaymentIntentRequest,
    identity: IdentityClaim = Depends(require_authenticated)
):
    """Create a Stripe payment intent and return its client secret."""
    client_secret = await create_payment_intent(request_data.price)
    return PaymentIntentResponse(client_secret=client_secret)


@router.post("/payments", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def post_payment(
    payment_data: PaymentCreate,
    current_user: User = Depends(require_customer),
    db: AsyncSession = Depends(get_db)
):
    """Record a completed payment for an own booking."""
    payment = await record_payment(db, current_user, payment_data)
    return PaymentResponse.model_validate(payment)

"""
Payment Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime


class PaymentIntentRequest(BaseModel):
    price: float = Field(..., gt=0, description="Amount to charge in the configured currency")


class PaymentIntentResponse(BaseModel):
    client_secret: str


class PaymentCreate(BaseModel):
    """Schema for recording a completed payment."""
    booking_id: int
    amount: float = Field(..., gt=0)
    transaction_id: str = Field(..., min_length=1, max_length=255)


class PaymentResponse(BaseModel):
    id: int
    booking_id: int
    payer_email: str
    amount: float
    transaction_id: str
    created_at: datetime

    class Config:
        from_attributes = True

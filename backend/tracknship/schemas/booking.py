"""
Booking Pydantic schemas.

Defines request and response models for the booking lifecycle.
"""

from pydantic import BaseModel, Field
from datetime import datetime, date
from typing import Optional, List
from backend.tracknship.models.booking_enums import BookingStatus


class BookingCreate(BaseModel):
    """Schema for booking a parcel."""
    owner_name: Optional[str] = Field(None, max_length=150, description="Sender name (defaults to profile name)")
    owner_phone: Optional[str] = Field(None, max_length=30, description="Sender phone")
    parcel_type: str = Field(..., min_length=1, max_length=100, description="Kind of parcel")
    parcel_weight: float = Field(..., gt=0, description="Weight in kilograms")
    receiver_name: str = Field(..., min_length=1, max_length=150)
    receiver_phone: str = Field(..., min_length=1, max_length=30)
    delivery_address: str = Field(..., min_length=1, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    requested_delivery_date: date = Field(..., description="Date the customer wants the parcel delivered")
    price: float = Field(..., ge=0, description="Quoted price")


class BookingUpdate(BaseModel):
    """Schema for editing a booking before it is assigned."""
    owner_phone: Optional[str] = Field(None, max_length=30)
    parcel_type: Optional[str] = Field(None, min_length=1, max_length=100)
    parcel_weight: Optional[float] = Field(None, gt=0)
    receiver_name: Optional[str] = Field(None, min_length=1, max_length=150)
    receiver_phone: Optional[str] = Field(None, min_length=1, max_length=30)
    delivery_address: Optional[str] = Field(None, min_length=1, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    requested_delivery_date: Optional[date] = None
    price: Optional[float] = Field(None, ge=0)


class BookingAssign(BaseModel):
    """Schema for assigning a delivery man to a pending booking."""
    delivery_man_id: int = Field(..., description="User ID of the delivery man")
    approximate_delivery_date: date = Field(..., description="Estimated delivery date")


class BookingResponse(BaseModel):
    """Schema for booking response."""
    id: int
    owner_email: str
    owner_name: Optional[str]
    owner_phone: Optional[str]
    parcel_type: str
    parcel_weight: float
    receiver_name: str
    receiver_phone: str
    delivery_address: str
    latitude: Optional[float]
    longitude: Optional[float]
    requested_delivery_date: date
    approximate_delivery_date: Optional[date]
    price: float
    is_paid: bool
    status: BookingStatus
    delivery_man_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BookingListResponse(BaseModel):
    """Schema for booking list."""
    bookings: List[BookingResponse]
    total: int


class TransitionResult(BaseModel):
    """Outcome of a lifecycle transition."""
    booking_id: int
    status: BookingStatus
    modified_count: int
    delivery_man_id: Optional[int] = None


class DeleteResult(BaseModel):
    booking_id: int
    deleted_count: int

"""
Review Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List


class ReviewCreate(BaseModel):
    """Schema for reviewing a delivered booking."""
    booking_id: int
    rating: float = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewResponse(BaseModel):
    id: int
    booking_id: int
    delivery_man_id: int
    reviewer_email: str
    reviewer_name: Optional[str]
    reviewer_photo_url: Optional[str]
    rating: float
    comment: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class ReviewListResponse(BaseModel):
    reviews: List[ReviewResponse]
    total: int

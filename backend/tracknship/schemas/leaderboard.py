"""
Leaderboard and statistics schemas.
"""

from pydantic import BaseModel
from datetime import date
from typing import Optional, List


class DeliveryManStats(BaseModel):
    """Performance of one delivery man."""
    delivery_man_id: int
    name: Optional[str]
    email: str
    photo_url: Optional[str]
    phone: Optional[str]
    delivered_count: int  # recomputed from bookings
    counter_value: int  # maintained User.delivered_count
    average_rating: float
    review_count: int


class DailyBookingStats(BaseModel):
    date: date
    booked: int
    delivered: int


class SystemStats(BaseModel):
    """Admin dashboard totals."""
    total_users: int
    total_delivery_men: int
    total_bookings: int
    total_delivered: int
    total_cancelled: int
    bookings_by_date: List[DailyBookingStats]

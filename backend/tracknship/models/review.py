"""
Review database model.

One review per delivered booking, written by the booking's owner.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.sql import func
from backend.tracknship.db.session import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True)
    delivery_man_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    reviewer_email = Column(String(255), nullable=False)
    reviewer_name = Column(String(150), nullable=True)
    reviewer_photo_url = Column(String(500), nullable=True)

    rating = Column(Float, nullable=False)  # 1..5
    comment = Column(String(1000), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Review(id={self.id}, booking_id={self.booking_id}, rating={self.rating})>"

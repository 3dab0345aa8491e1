"""
Booking database model.

A booking is a customer's request to ship a parcel. Its status moves through
the lifecycle defined in BookingStatus.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, Date, Boolean
from sqlalchemy.sql import func
from backend.tracknship.db.session import Base
from backend.tracknship.models.booking_enums import BookingStatus


class Booking(Base):
    """
    Parcel booking model.

    ``delivery_man_id`` is null until an admin assigns the booking and is kept
    afterwards, including when an assigned booking is cancelled.
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Ownership (immutable after creation)
    owner_email = Column(String(255), nullable=False, index=True)
    owner_name = Column(String(150), nullable=True)
    owner_phone = Column(String(30), nullable=True)

    # Parcel
    parcel_type = Column(String(100), nullable=False)
    parcel_weight = Column(Float, nullable=False)

    # Receiver
    receiver_name = Column(String(150), nullable=False)
    receiver_phone = Column(String(30), nullable=False)
    delivery_address = Column(String(500), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    requested_delivery_date = Column(Date, nullable=False, index=True)

    # Pricing / payment marker
    price = Column(Float, nullable=False)
    is_paid = Column(Boolean, default=False, nullable=False)

    # Lifecycle
    status = Column(Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False, index=True)
    delivery_man_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    approximate_delivery_date = Column(Date, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Booking(id={self.id}, owner='{self.owner_email}', status='{self.status.value}')>"

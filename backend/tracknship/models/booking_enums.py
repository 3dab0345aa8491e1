"""
Booking Status Enumeration.
"""

import enum


class BookingStatus(str, enum.Enum):
    """
    Booking status enumeration.

    Status flow:
        PENDING → ON_THE_WAY → DELIVERED
        PENDING or ON_THE_WAY → CANCELLED
    DELIVERED and CANCELLED are terminal.
    """
    PENDING = "Pending"
    ON_THE_WAY = "On The Way"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.DELIVERED, BookingStatus.CANCELLED)

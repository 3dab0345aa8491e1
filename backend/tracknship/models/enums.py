"""
User role and status enumerations.

Defines the role types for the parcel delivery service.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        UNSET: No role granted yet, rejected by every role guard
        CUSTOMER: Books parcels and reviews deliveries (default on first login)
        ADMIN: Assigns delivery men, cancels bookings, manages users
        DELIVERYMAN: Delivers the parcels assigned to them
    """
    UNSET = "unset"
    CUSTOMER = "customer"
    ADMIN = "admin"
    DELIVERYMAN = "deliveryman"


class UserStatus(str, enum.Enum):
    """
    Delivery-man application status.

    A customer asks to become a delivery man (REQUESTED); the status flips to
    APPROVED when an admin grants the DELIVERYMAN role. None means no request.
    """
    REQUESTED = "Requested"
    APPROVED = "Approved"

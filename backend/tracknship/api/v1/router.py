"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.tracknship.api.v1.endpoints import (
    auth, users, bookings, reviews, payments, leaderboard
)

router = APIRouter()

# Token issuance / logout
router.include_router(auth.router)

# Profiles and role management
router.include_router(users.router)

# Booking lifecycle
router.include_router(bookings.router)

# Reviews and payments
router.include_router(reviews.router)
router.include_router(payments.router)

# Leaderboard and admin analytics
router.include_router(leaderboard.router)
router.include_router(leaderboard.admin_router)

"""
Leaderboard and statistics API Endpoints.

The top delivery men are public; the full ranking and system statistics
are admin only.
"""

from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from backend.tracknship.core.config import settings
from backend.tracknship.core.guards import require_admin
from backend.tracknship.db.session import get_db
from backend.tracknship.models.user import User
from backend.tracknship.schemas.leaderboard import DeliveryManStats, SystemStats
from backend.tracknship.services.analytics import AnalyticsService
from backend.tracknship.services.leaderboard import LeaderboardService

router = APIRouter(tags=["Leaderboard"])
admin_router = APIRouter(prefix="/admin", tags=["Admin - Analytics"])


@router.get("/deliverymen", response_model=List[DeliveryManStats])
async def top_delivery_men(
    limit: int = Query(settings.leaderboard_limit, ge=1, le=50, description="Number of delivery men"),
    db: AsyncSession = Depends(get_db)
):
    """Top delivery men by delivered parcels, then by average rating."""
    return await LeaderboardService.top_delivery_men(db, limit)


@admin_router.get("/deliverymen", response_model=List[DeliveryManStats])
async def all_delivery_men(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Every delivery man with delivered count, counter value and rating."""
    return await LeaderboardService.delivery_men_stats(db)


@admin_router.get("/statistics", response_model=SystemStats)
async def system_statistics(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """System-wide totals and bookings per requested delivery date."""
    return await AnalyticsService.get_system_stats(db)

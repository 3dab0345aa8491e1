"""
Review API Endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from backend.tracknship.core.guards import require_customer, require_deliveryman
from backend.tracknship.db.session import get_db
from backend.tracknship.models.user import User
from backend.tracknship.schemas.review import ReviewCreate, ReviewResponse, ReviewListResponse
from backend.tracknship.services.reviews import create_review, list_reviews_for_delivery_man

router = APIRouter(tags=["Reviews"])


@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def post_review(
    review_data: ReviewCreate,
    current_user: User = Depends(require_customer),
    db: AsyncSession = Depends(get_db)
):
    """Review the delivery man of an own, delivered booking. Once per booking."""
    review = await create_review(db, current_user, review_data)
    return ReviewResponse.model_validate(review)


@router.get("/myReviews", response_model=ReviewListResponse)
async def my_reviews(
    current_user: User = Depends(require_deliveryman),
    db: AsyncSession = Depends(get_db)
):
    """Reviews written about the authenticated delivery man."""
    reviews = await list_reviews_for_delivery_man(db, current_user.id)
    return ReviewListResponse(
        reviews=[ReviewResponse.model_validate(r) for r in reviews],
        total=len(reviews)
    )

"""
Review endpoints
Mounted at the API root because they span /products, /reviews and /user
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from app.core.database import get_db
from app.core.security import get_current_user
from app.models import User
from app.api.products.crud import get_product_or_404
from app.schemas.review import (
    ReviewCreate,
    ReviewUpdate,
    ReviewResponse,
    ReviewWithUserResponse,
    ReviewWithProductResponse,
    ReviewCheckResponse,
    RatingStatsResponse,
)
from .services import ReviewService

router = APIRouter(tags=["Reviews"])


@router.get("/products/{product_id}/reviews", response_model=List[ReviewWithUserResponse])
async def list_product_reviews(product_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    await get_product_or_404(db, product_id)
    return await ReviewService(db).get_product_reviews(product_id)


@router.get("/products/{product_id}/rating-stats", response_model=RatingStatsResponse)
async def get_rating_stats(product_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    await get_product_or_404(db, product_id)
    return await ReviewService(db).get_rating_stats(product_id)


@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ReviewService(db).create_review(current_user, review_data)


@router.put("/reviews/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: uuid.UUID,
    review_data: ReviewUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ReviewService(db).update_review(current_user, review_id, review_data)


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await ReviewService(db).delete_review(current_user, review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/user/reviews", response_model=List[ReviewWithProductResponse])
async def list_my_reviews(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ReviewService(db).get_user_reviews(current_user.id)


@router.get("/user/reviews/check/{product_id}", response_model=ReviewCheckResponse)
async def check_my_review(
    product_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    review = await ReviewService(db).get_user_review_for_product(current_user.id, product_id)
    return {"has_reviewed": review is not None, "review": review}

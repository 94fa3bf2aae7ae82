"""
Review service layer
Reviews, rating statistics and the cached product rating
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy import select, delete, func
from typing import Optional, List, Dict, Union
from decimal import Decimal, ROUND_HALF_UP
import logging
import uuid

from app.core.config import settings
from app.core.exceptions import ConflictException, ForbiddenException, ResourceNotFoundException
from app.middleware.security import sanitize_text
from app.models import Review, Product, User
from app.schemas.review import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)

class ReviewService:
    """Review aggregate operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_rating_stats(self, product_id: uuid.UUID) -> Dict[str, Union[float, int]]:
        """
        Mean rating and review count

        A product without reviews reports {"average": 0, "count": 0};
        count == 0 means "no reviews yet", not "rated zero".
        """
        result = await self.db.execute(
            select(func.avg(Review.rating), func.count(Review.id)).where(Review.product_id == product_id)
        )
        average, count = result.one()
        if not count:
            return {"average": 0.0, "count": 0}
        return {"average": round(float(average), 1), "count": count}

    async def refresh_product_rating(self, product_id: uuid.UUID) -> None:
        """Recompute Product.rating from its reviews; caller commits"""
        stats = await self.get_rating_stats(product_id)
        product = await self.db.get(Product, product_id)
        if product is None:
            return
        if stats["count"]:
            product.rating = Decimal(str(stats["average"])).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        else:
            product.rating = settings.DEFAULT_PRODUCT_RATING

    async def _get(self, review_id: uuid.UUID) -> Optional[Review]:
        result = await self.db.execute(
            select(Review).where(Review.id == review_id).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_product_reviews(self, product_id: uuid.UUID) -> List[Review]:
        result = await self.db.execute(
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.product_id == product_id)
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_user_reviews(self, user_id: uuid.UUID) -> List[Review]:
        result = await self.db.execute(
            select(Review)
            .options(selectinload(Review.product))
            .where(Review.user_id == user_id)
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_all_reviews(self) -> List[Review]:
        result = await self.db.execute(
            select(Review)
            .options(selectinload(Review.user))
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_user_review_for_product(self, user_id: uuid.UUID, product_id: uuid.UUID) -> Optional[Review]:
        result = await self.db.execute(
            select(Review).where(Review.user_id == user_id, Review.product_id == product_id)
        )
        return result.scalar_one_or_none()

    async def create_review(self, user: User, review_data: ReviewCreate) -> Review:
        """
        Create a review

        Raises:
            ResourceNotFoundException: Unknown product
            ConflictException: The user already reviewed this product
        """
        product = await self.db.get(Product, review_data.product_id)
        if not product:
            raise ResourceNotFoundException("Product", review_data.product_id)

        if await self.get_user_review_for_product(user.id, review_data.product_id):
            raise ConflictException("You have already reviewed this product", error_code="DUPLICATE_REVIEW")

        review = Review(
            user_id=user.id,
            product_id=review_data.product_id,
            rating=review_data.rating,
            review_text=sanitize_text(review_data.review_text, max_length=1000),
        )
        self.db.add(review)
        try:
            await self.db.flush()
        except IntegrityError:
            # Lost the race against a concurrent insert for the same pair
            await self.db.rollback()
            raise ConflictException("You have already reviewed this product", error_code="DUPLICATE_REVIEW")

        await self.refresh_product_rating(review_data.product_id)
        await self.db.commit()

        logger.info(f"Review {review.id} created by {user.id} for product {review.product_id}")
        return await self._get(review.id)

    async def _authorize(self, user: User, review_id: uuid.UUID) -> Review:
        review = await self._get(review_id)
        if not review:
            raise ResourceNotFoundException("Review", review_id)

        if not user.is_admin:
            own_ids = {r.id for r in await self.get_user_reviews(user.id)}
            if review.id not in own_ids:
                raise ForbiddenException("You can only modify your own reviews")
        return review

    async def update_review(self, user: User, review_id: uuid.UUID, review_data: ReviewUpdate) -> Review:
        review = await self._authorize(user, review_id)

        update_data = review_data.model_dump(exclude_unset=True)
        if update_data.get("rating") is not None:
            review.rating = update_data["rating"]
        if "review_text" in update_data:
            review.review_text = sanitize_text(update_data["review_text"], max_length=1000)

        await self.db.flush()
        await self.refresh_product_rating(review.product_id)
        await self.db.commit()

        return await self._get(review.id)

    async def delete_review(self, user: User, review_id: uuid.UUID) -> None:
        review = await self._authorize(user, review_id)
        product_id = review.product_id

        await self.db.execute(delete(Review).where(Review.id == review.id))
        await self.refresh_product_rating(product_id)
        await self.db.commit()
        logger.info(f"Review {review_id} deleted by {user.id}")

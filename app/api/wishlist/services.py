"""
Wishlist service layer
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy import select, delete
from typing import List
import logging
import uuid

from app.core.exceptions import ConflictException, ResourceNotFoundException
from app.models import WishlistItem, Product

logger = logging.getLogger(__name__)

class WishlistService:
    """Per-user saved products"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_items(self, user_id: uuid.UUID) -> List[WishlistItem]:
        result = await self.db.execute(
            select(WishlistItem)
            .options(selectinload(WishlistItem.product))
            .where(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.created_at.desc())
        )
        return list(result.scalars().all())

    async def contains(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            select(WishlistItem.id).where(
                WishlistItem.user_id == user_id, WishlistItem.product_id == product_id
            )
        )
        return result.first() is not None

    async def add(self, user_id: uuid.UUID, product_id: uuid.UUID) -> WishlistItem:
        """
        Save a product

        Raises:
            ResourceNotFoundException: Unknown product
            ConflictException: Already in the wishlist
        """
        if not await self.db.get(Product, product_id):
            raise ResourceNotFoundException("Product", product_id)

        if await self.contains(user_id, product_id):
            raise ConflictException("Product is already in your wishlist", error_code="ALREADY_IN_WISHLIST")

        item = WishlistItem(user_id=user_id, product_id=product_id)
        self.db.add(item)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("Product is already in your wishlist", error_code="ALREADY_IN_WISHLIST")

        result = await self.db.execute(
            select(WishlistItem)
            .options(selectinload(WishlistItem.product))
            .where(WishlistItem.id == item.id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def remove(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            delete(WishlistItem).where(
                WishlistItem.user_id == user_id, WishlistItem.product_id == product_id
            )
        )
        await self.db.commit()
        return result.rowcount > 0

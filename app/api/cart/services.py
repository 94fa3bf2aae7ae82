"""
Cart service layer
A cart belongs to a signed-in user or to a guest session id
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy import select, update, delete
from typing import Optional, List, Tuple
from decimal import Decimal
import logging
import uuid

from app.core.exceptions import ResourceNotFoundException, ValidationException
from app.models import CartItem, Product

logger = logging.getLogger(__name__)

class CartService:
    """Cart aggregate operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _owner_clause(user_id: Optional[uuid.UUID], session_id: Optional[str]):
        if user_id:
            return CartItem.user_id == user_id
        if session_id:
            return CartItem.session_id == session_id
        raise ValidationException("Cart owner is required")

    async def _get_item(self, item_id: uuid.UUID) -> Optional[CartItem]:
        result = await self.db.execute(
            select(CartItem)
            .options(selectinload(CartItem.product))
            .where(CartItem.id == item_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_items(self, user_id: Optional[uuid.UUID], session_id: Optional[str]) -> List[CartItem]:
        """Cart rows joined with the live product"""
        result = await self.db.execute(
            select(CartItem)
            .options(selectinload(CartItem.product))
            .where(self._owner_clause(user_id, session_id))
            .order_by(CartItem.created_at)
        )
        return list(result.scalars().all())

    async def _find_item_id(
        self,
        user_id: Optional[uuid.UUID],
        session_id: Optional[str],
        product_id: uuid.UUID
    ) -> Optional[uuid.UUID]:
        result = await self.db.execute(
            select(CartItem.id).where(self._owner_clause(user_id, session_id), CartItem.product_id == product_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def summarize(items: List[CartItem]) -> Tuple[int, Decimal]:
        """Item count and subtotal at current product prices"""
        count = sum(item.quantity for item in items)
        subtotal = sum((item.product.price * item.quantity for item in items), Decimal("0.00"))
        return count, subtotal

    async def add_to_cart(
        self,
        user_id: Optional[uuid.UUID],
        session_id: Optional[str],
        product_id: uuid.UUID,
        quantity: int = 1
    ) -> CartItem:
        """
        Add item to cart

        Args:
            user_id: User ID for authenticated users
            session_id: Session ID for guests
            product_id: Product to add
            quantity: Amount to add to any existing quantity

        Returns:
            Created or updated cart item

        Raises:
            ResourceNotFoundException: If product not found
        """
        if quantity < 1:
            raise ValidationException("Quantity must be at least 1", field="quantity")

        product = await self.db.get(Product, product_id)
        if not product:
            raise ResourceNotFoundException("Product", product_id)

        item_id = await self._find_item_id(user_id, session_id, product_id)

        if item_id is None:
            cart_item = CartItem(
                user_id=user_id,
                session_id=None if user_id else session_id,
                product_id=product_id,
                quantity=quantity,
            )
            self.db.add(cart_item)
            try:
                await self.db.commit()
                return await self._get_item(cart_item.id)
            except IntegrityError:
                # A concurrent request inserted the same (owner, product) row
                await self.db.rollback()
                item_id = await self._find_item_id(user_id, session_id, product_id)

        await self.db.execute(
            update(CartItem)
            .where(CartItem.id == item_id)
            .values(quantity=CartItem.quantity + quantity)
        )
        await self.db.commit()
        return await self._get_item(item_id)

    async def get_owned_item(
        self,
        user_id: Optional[uuid.UUID],
        session_id: Optional[str],
        item_id: uuid.UUID
    ) -> Optional[CartItem]:
        result = await self.db.execute(
            select(CartItem).where(CartItem.id == item_id, self._owner_clause(user_id, session_id))
        )
        return result.scalar_one_or_none()

    async def update_quantity(self, item_id: uuid.UUID, quantity: int) -> Optional[CartItem]:
        """
        Set the quantity of a cart row

        Returns:
            The updated row, or None when quantity <= 0 removed it

        Raises:
            ResourceNotFoundException: If item not found
        """
        if quantity <= 0:
            if not await self.remove_item(item_id):
                raise ResourceNotFoundException("Cart item", item_id)
            return None

        result = await self.db.execute(
            update(CartItem).where(CartItem.id == item_id).values(quantity=quantity)
        )
        if result.rowcount == 0:
            raise ResourceNotFoundException("Cart item", item_id)

        await self.db.commit()
        return await self._get_item(item_id)

    async def remove_item(self, item_id: uuid.UUID) -> bool:
        """Delete by id; False when nothing matched"""
        result = await self.db.execute(delete(CartItem).where(CartItem.id == item_id))
        await self.db.commit()
        return result.rowcount > 0

    async def clear(self, user_id: Optional[uuid.UUID], session_id: Optional[str]) -> int:
        """Remove every row for the owner"""
        result = await self.db.execute(
            delete(CartItem).where(self._owner_clause(user_id, session_id))
        )
        await self.db.commit()
        return result.rowcount

    async def merge_carts(self, user_id: uuid.UUID, session_id: str) -> int:
        """
        Fold a guest cart into the user's cart on login

        Quantities of products present in both carts are added together.

        Returns:
            Number of guest rows merged
        """
        result = await self.db.execute(
            select(CartItem).where(CartItem.session_id == session_id)
        )
        session_items = list(result.scalars().all())
        if not session_items:
            return 0

        for item in session_items:
            existing = await self.db.execute(
                select(CartItem.id).where(
                    CartItem.user_id == user_id,
                    CartItem.product_id == item.product_id
                )
            )
            existing_id = existing.scalar_one_or_none()

            if existing_id:
                await self.db.execute(
                    update(CartItem)
                    .where(CartItem.id == existing_id)
                    .values(quantity=CartItem.quantity + item.quantity)
                )
                await self.db.execute(delete(CartItem).where(CartItem.id == item.id))
            else:
                await self.db.execute(
                    update(CartItem)
                    .where(CartItem.id == item.id)
                    .values(user_id=user_id, session_id=None)
                )

        await self.db.commit()
        logger.info(f"Merged {len(session_items)} guest cart item(s) into user {user_id}")
        return len(session_items)

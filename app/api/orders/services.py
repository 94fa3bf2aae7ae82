"""
Order service layer
Order placement, status changes and deletion
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy import select, delete
from typing import Optional, List, Dict
from decimal import Decimal
import logging
import uuid

from app.core.config import settings
from app.core.exceptions import (
    InvalidStatusTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from app.models import Order, OrderItem, OrderItemAddOn, OrderStatus, Product, AddOn
from app.schemas.order import OrderCreate
from app.utils.helpers import to_money
from .state_machine import OrderStateMachine

logger = logging.getLogger(__name__)

ORDER_DETAIL_OPTIONS = (
    selectinload(Order.items).selectinload(OrderItem.product),
    selectinload(Order.items).selectinload(OrderItem.add_ons),
)

class OrderService:
    """Order aggregate operations"""

    def __init__(
        self,
        db: AsyncSession,
        price_policy: Optional[str] = None,
        status_policy: Optional[str] = None,
    ):
        self.db = db
        self.price_policy = price_policy or settings.ORDER_PRICE_POLICY
        self.state_machine = OrderStateMachine(status_policy or settings.ORDER_STATUS_POLICY)

    async def _load_products(self, product_ids: List[uuid.UUID]) -> Dict[uuid.UUID, Product]:
        result = await self.db.execute(select(Product).where(Product.id.in_(product_ids)))
        products = {p.id: p for p in result.scalars().all()}
        for product_id in product_ids:
            if product_id not in products:
                raise ResourceNotFoundException("Product", product_id)
        return products

    async def _load_add_ons(self, add_on_ids: List[uuid.UUID]) -> Dict[uuid.UUID, AddOn]:
        if not add_on_ids:
            return {}
        result = await self.db.execute(select(AddOn).where(AddOn.id.in_(add_on_ids)))
        add_ons = {a.id: a for a in result.scalars().all()}
        for add_on_id in add_on_ids:
            if add_on_id not in add_ons:
                raise ResourceNotFoundException("Add-on", add_on_id)
        return add_ons

    def _price_mismatches(
        self,
        order_data: OrderCreate,
        products: Dict[uuid.UUID, Product],
        add_ons: Dict[uuid.UUID, AddOn],
    ) -> List[Dict[str, str]]:
        """Compare submitted prices with the catalog"""
        errors = []
        lines_total = Decimal("0.00")

        for index, line in enumerate(order_data.items):
            product = products[line.product_id]
            if to_money(line.unit_price) != to_money(product.price):
                errors.append({
                    "field": f"items.{index}.unitPrice",
                    "message": f"Submitted {line.unit_price}, catalog price is {product.price}",
                })

            add_on_sum = sum((add_ons[a].additional_price for a in line.add_on_ids), Decimal("0.00"))
            expected_line = to_money(line.unit_price * line.quantity + add_on_sum)
            if to_money(line.line_total) != expected_line:
                errors.append({
                    "field": f"items.{index}.lineTotal",
                    "message": f"Submitted {line.line_total}, expected {expected_line}",
                })
            lines_total += line.line_total

        expected_total = to_money(lines_total + settings.DELIVERY_FEE)
        if to_money(order_data.total) != expected_total:
            errors.append({
                "field": "total",
                "message": f"Submitted {order_data.total}, expected {expected_total}",
            })
        return errors

    async def place_order(self, order_data: OrderCreate, user_id: Optional[uuid.UUID] = None) -> Order:
        """
        Create an order with its line items in one transaction

        Args:
            order_data: Validated checkout payload
            user_id: Set when the customer is signed in

        Returns:
            The created order (items not loaded)

        Raises:
            ResourceNotFoundException: Unknown product or add-on
            ValidationException: Price mismatch under the "verify" policy
        """
        product_ids = list(dict.fromkeys(line.product_id for line in order_data.items))
        add_on_ids = list(dict.fromkeys(a for line in order_data.items for a in line.add_on_ids))

        products = await self._load_products(product_ids)
        add_ons = await self._load_add_ons(add_on_ids)

        mismatches = self._price_mismatches(order_data, products, add_ons)
        if mismatches:
            if self.price_policy == "verify":
                raise ValidationException("Order prices do not match the catalog", errors=mismatches)
            logger.warning(
                f"Accepting client-submitted prices that differ from the catalog "
                f"({len(mismatches)} difference(s)) for {order_data.customer_email}"
            )

        order = Order(
            customer_name=order_data.customer_name,
            customer_email=order_data.customer_email,
            customer_phone=order_data.customer_phone,
            customer_address=order_data.customer_address,
            user_id=user_id,
            total=order_data.total,
            status=OrderStatus.PLACED,
        )

        try:
            self.db.add(order)
            await self.db.flush()

            for line in order_data.items:
                item = OrderItem(
                    order_id=order.id,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                )
                for add_on_id in line.add_on_ids:
                    add_on = add_ons[add_on_id]
                    item.add_ons.append(OrderItemAddOn(
                        add_on_id=add_on.id,
                        add_on_name=add_on.name,
                        add_on_price=add_on.additional_price,
                    ))
                self.db.add(item)

            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Order placement failed for {order_data.customer_email}: {str(e)}")
            raise

        await self.db.refresh(order)
        logger.info(f"Order {order.id} placed with {len(order_data.items)} item(s), total {order.total}")
        return order

    async def get_orders(self) -> List[Order]:
        """All orders with items, newest first"""
        result = await self.db.execute(
            select(Order).options(*ORDER_DETAIL_OPTIONS).order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_user_orders(self, user_id: uuid.UUID) -> List[Order]:
        result = await self.db.execute(
            select(Order)
            .options(*ORDER_DETAIL_OPTIONS)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_order(self, order_id: uuid.UUID) -> Optional[Order]:
        result = await self.db.execute(
            select(Order)
            .options(*ORDER_DETAIL_OPTIONS)
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def update_status(self, order_id: uuid.UUID, new_status: OrderStatus) -> Order:
        """
        Change order status

        Raises:
            ResourceNotFoundException: If order not found
            InvalidStatusTransitionException: Rejected by the strict policy
        """
        order = await self.db.get(Order, order_id)
        if not order:
            raise ResourceNotFoundException("Order", order_id)

        old_status = order.status
        if not self.state_machine.can_transition(old_status, new_status):
            raise InvalidStatusTransitionException(
                old_status.value,
                new_status.value,
                [s.value for s in self.state_machine.get_valid_transitions(old_status)],
            )

        order.status = new_status
        await self.db.commit()
        await self.db.refresh(order)

        logger.info(f"Order {order.id} status changed: {old_status.value} -> {new_status.value}")
        return order

    async def delete_order(self, order_id: uuid.UUID) -> bool:
        """Delete order; items and add-on snapshots go with it"""
        result = await self.db.execute(delete(Order).where(Order.id == order_id))
        await self.db.commit()

        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Order {order_id} deleted")
        return deleted

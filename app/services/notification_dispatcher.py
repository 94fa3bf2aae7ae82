"""Best-effort dispatch of order lifecycle emails"""

from typing import Optional, Dict, Any
from uuid import UUID
import asyncio
import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import get_db_context
from app.models import Order, OrderItem
from app.services.email_service import EmailService

logger = logging.getLogger(__name__)

class NotificationDispatcher:
    """Central service for dispatching notifications

    Every public method returns a success flag and never raises.
    """

    def __init__(self, email_service: Optional[EmailService] = None):
        self.email_service = email_service or EmailService()

    async def order_placed(self, order: Order) -> Dict[str, bool]:
        """Customer confirmation and admin alert, sent concurrently"""
        results = await asyncio.gather(
            self.email_service.send_order_confirmation(order),
            self.email_service.send_admin_order_alert(order),
            return_exceptions=True,
        )

        customer = results[0] is True
        admin = results[1] is True
        for channel, result in zip(("customer", "admin"), results):
            if isinstance(result, Exception):
                logger.error(f"Order {order.id}: {channel} notification raised: {str(result)}")

        success = customer or admin
        if not success:
            logger.error(f"Order {order.id}: no order-placed notification was delivered")
        elif not (customer and admin):
            logger.warning(f"Order {order.id}: partial notification (customer={customer}, admin={admin})")

        return {"customer": customer, "admin": admin, "success": success}

    async def order_status_changed(self, order: Order) -> bool:
        try:
            return await self.email_service.send_order_status_update(order)
        except Exception as e:
            logger.error(f"Order {order.id}: status notification failed: {str(e)}")
            return False

    async def contact_inquiry(self, inquiry: Dict[str, Any]) -> bool:
        try:
            return await self.email_service.send_contact_inquiry(inquiry)
        except Exception as e:
            logger.error(f"Contact inquiry from {inquiry.get('email')} failed: {str(e)}")
            return False

async def load_order_for_notification(db: AsyncSession, order_id: UUID) -> Optional[Order]:
    """Order joined with products and add-on snapshots"""
    result = await db.execute(
        select(Order)
        .options(
            selectinload(Order.items).selectinload(OrderItem.product),
            selectinload(Order.items).selectinload(OrderItem.add_ons),
        )
        .where(Order.id == order_id)
    )
    return result.scalar_one_or_none()

async def notify_order_placed(dispatcher: NotificationDispatcher, order_id: UUID) -> Dict[str, bool]:
    """Background task run after the order response has been sent"""
    try:
        async with get_db_context() as db:
            order = await load_order_for_notification(db, order_id)
            if order is None:
                logger.error(f"Order {order_id} vanished before notification")
                return {"customer": False, "admin": False, "success": False}
            return await dispatcher.order_placed(order)
    except Exception as e:
        logger.error(f"Order {order_id}: notification task failed: {str(e)}")
        return {"customer": False, "admin": False, "success": False}

async def notify_status_changed(dispatcher: NotificationDispatcher, order_id: UUID) -> bool:
    """Background task run after an admin status change"""
    try:
        async with get_db_context() as db:
            order = await load_order_for_notification(db, order_id)
            if order is None:
                logger.error(f"Order {order_id} vanished before status notification")
                return False
            return await dispatcher.order_status_changed(order)
    except Exception as e:
        logger.error(f"Order {order_id}: status notification task failed: {str(e)}")
        return False

def get_notification_dispatcher() -> NotificationDispatcher:
    """FastAPI dependency; overridden in tests"""
    return NotificationDispatcher()

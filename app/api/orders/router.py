"""
Checkout and customer order endpoints
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.database import get_db
from app.core.security import get_current_user, get_current_user_optional
from app.models import User
from app.schemas.order import OrderCreate, OrderResponse, OrderWithItemsResponse
from app.services.notification_dispatcher import (
    NotificationDispatcher,
    get_notification_dispatcher,
    notify_order_placed,
)
from .services import OrderService

router = APIRouter()


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place order",
    description="Guests may check out. Confirmation emails are sent after the response and never affect it.",
)
async def create_order(
    order_data: OrderCreate,
    background_tasks: BackgroundTasks,
    current_user: Optional[User] = Depends(get_current_user_optional),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    db: AsyncSession = Depends(get_db),
):
    service = OrderService(db)
    order = await service.place_order(order_data, user_id=current_user.id if current_user else None)

    background_tasks.add_task(notify_order_placed, dispatcher, order.id)
    return order


@router.get("/mine", response_model=List[OrderWithItemsResponse], summary="My orders")
async def list_my_orders(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService(db).get_user_orders(current_user.id)

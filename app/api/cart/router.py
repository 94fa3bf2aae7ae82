"""
Cart endpoints, scoped to the signed-in user or the guest session
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.database import get_db
from app.core.exceptions import ResourceNotFoundException
from app.core.security import RequestContext, get_request_context
from app.schemas.cart import (
    CartItemAdd,
    CartItemUpdate,
    CartItemResponse,
    CartItemUpdateResponse,
    CartResponse,
)
from .services import CartService

router = APIRouter()


@router.get("", response_model=CartResponse, summary="Get cart")
async def get_cart(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    service = CartService(db)
    items = await service.get_items(ctx.user_id, ctx.session_id)
    item_count, subtotal = service.summarize(items)
    return {"items": items, "item_count": item_count, "subtotal": subtotal}


@router.post(
    "",
    response_model=CartItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add to cart",
    description="Adding a product already in the cart increases its quantity",
)
async def add_to_cart(
    item: CartItemAdd,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    service = CartService(db)
    return await service.add_to_cart(ctx.user_id, ctx.session_id, item.product_id, item.quantity)


@router.patch("/{item_id}", response_model=CartItemUpdateResponse, summary="Update quantity")
async def update_cart_item(
    item_id: uuid.UUID,
    update_data: CartItemUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    service = CartService(db)
    if not await service.get_owned_item(ctx.user_id, ctx.session_id, item_id):
        raise ResourceNotFoundException("Cart item", item_id)

    item = await service.update_quantity(item_id, update_data.quantity)
    return {"removed": item is None, "item": item}


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove item")
async def remove_cart_item(
    item_id: uuid.UUID,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    service = CartService(db)
    if not await service.get_owned_item(ctx.user_id, ctx.session_id, item_id):
        raise ResourceNotFoundException("Cart item", item_id)

    await service.remove_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Clear cart")
async def clear_cart(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    await CartService(db).clear(ctx.user_id, ctx.session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Wishlist endpoints (signed-in users only)
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from app.core.database import get_db
from app.core.exceptions import NotFoundException
from app.core.security import get_current_user
from app.models import User
from app.schemas.wishlist import WishlistAdd, WishlistItemResponse, WishlistCheckResponse
from .services import WishlistService

router = APIRouter()


@router.get("", response_model=List[WishlistItemResponse])
async def get_wishlist(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await WishlistService(db).get_items(current_user.id)


@router.post("", response_model=WishlistItemResponse, status_code=status.HTTP_201_CREATED)
async def add_to_wishlist(
    data: WishlistAdd,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await WishlistService(db).add(current_user.id, data.product_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_wishlist(
    product_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await WishlistService(db).remove(current_user.id, product_id):
        raise NotFoundException("Product is not in your wishlist")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/check/{product_id}", response_model=WishlistCheckResponse)
async def check_wishlist(
    product_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"is_in_wishlist": await WishlistService(db).contains(current_user.id, product_id)}

"""
Public product endpoints
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.core.database import get_db
from app.schemas.product import ProductResponse, ProductDetailResponse
from . import crud

router = APIRouter()


@router.get(
    "",
    response_model=List[ProductResponse],
    summary="List products",
    description="Filter by category slug, free-text search or featured flag",
)
async def list_products(
    category: Optional[str] = Query(None, description="Category slug"),
    search: Optional[str] = Query(None, max_length=100),
    featured: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await crud.get_products(db, category_slug=category, search=search, featured=featured)


@router.get("/{product_id}", response_model=ProductDetailResponse, summary="Get product")
async def get_product(product_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await crud.get_product_or_404(db, product_id, with_details=True)

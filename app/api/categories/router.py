"""
Public category endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.exceptions import ResourceNotFoundException
from app.schemas.category import CategoryResponse
from . import crud

router = APIRouter()


@router.get("", response_model=List[CategoryResponse], summary="List categories")
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await crud.get_categories(db)


@router.get("/{slug}", response_model=CategoryResponse, summary="Get category by slug")
async def get_category(slug: str, db: AsyncSession = Depends(get_db)):
    category = await crud.get_category_by_slug(db, slug)
    if not category:
        raise ResourceNotFoundException("Category", slug)
    return category

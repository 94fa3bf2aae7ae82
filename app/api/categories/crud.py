"""
Category CRUD operations
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete, func
from typing import Optional, List
import logging
import uuid

from app.core.exceptions import ConflictException, DuplicateResourceException, ValidationException
from app.models import Category, Product
from app.schemas.category import CategoryCreate, CategoryUpdate
from app.utils.helpers import generate_slug

logger = logging.getLogger(__name__)


async def get_category_by_id(db: AsyncSession, category_id: uuid.UUID) -> Optional[Category]:
    """Get category by ID"""
    return await db.get(Category, category_id)


async def get_category_by_slug(db: AsyncSession, slug: str) -> Optional[Category]:
    """Get category by slug"""
    result = await db.execute(select(Category).where(Category.slug == slug))
    return result.scalar_one_or_none()


async def get_categories(db: AsyncSession) -> List[Category]:
    """All categories ordered by name"""
    result = await db.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def _ensure_unique_slug(db: AsyncSession, slug: str, exclude_id: Optional[uuid.UUID] = None) -> None:
    stmt = select(Category.id).where(Category.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise DuplicateResourceException("Category", "slug", slug)


async def create_category(db: AsyncSession, category_data: CategoryCreate) -> Category:
    """Create category, deriving the slug from the name when not given"""
    slug = generate_slug(category_data.slug or category_data.name)
    if not slug:
        raise ValidationException("Category slug cannot be empty", field="slug")

    await _ensure_unique_slug(db, slug)

    category = Category(
        name=category_data.name,
        slug=slug,
        description=category_data.description,
        icon=category_data.icon,
        cover_image=category_data.cover_image,
        item_count=0,
    )
    db.add(category)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateResourceException("Category", "slug", slug)

    await db.refresh(category)
    logger.info(f"Category created: {category.slug}")
    return category


async def update_category(db: AsyncSession, category: Category, category_data: CategoryUpdate) -> Category:
    """Apply a partial update"""
    update_data = category_data.model_dump(exclude_unset=True)

    if "slug" in update_data:
        update_data["slug"] = generate_slug(update_data["slug"] or category.name)
        await _ensure_unique_slug(db, update_data["slug"], exclude_id=category.id)

    for field, value in update_data.items():
        if value is None and field in ("name", "icon", "slug", "description"):
            continue
        setattr(category, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateResourceException("Category", "slug", update_data.get("slug"))

    await db.refresh(category)
    return category


async def delete_category(db: AsyncSession, category: Category) -> None:
    """Delete a category that no product references"""
    product_count = await db.scalar(
        select(func.count(Product.id)).where(Product.category_id == category.id)
    )
    if product_count:
        raise ConflictException(
            f"Category '{category.slug}' still has {product_count} product(s); move or delete them first",
            error_code="CATEGORY_IN_USE",
        )

    await db.execute(delete(Category).where(Category.id == category.id))
    await db.commit()
    logger.info(f"Category deleted: {category.slug}")


async def refresh_item_count(db: AsyncSession, category_id: uuid.UUID) -> None:
    """Recompute the cached product count; caller commits"""
    count = await db.scalar(
        select(func.count(Product.id)).where(Product.category_id == category_id)
    )
    category = await db.get(Category, category_id)
    if category is not None:
        category.item_count = count or 0

"""
Product catalog CRUD: products, gallery images, add-ons and their associations
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlalchemy import select, update, delete, func, or_, cast, String
from typing import Optional, List
import logging
import uuid

from app.core.exceptions import ConflictException, DuplicateResourceException, ResourceNotFoundException
from app.models import Product, ProductImage, AddOn, ProductAddOn, OrderItem, OrderItemAddOn
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductImageCreate,
    ProductImageUpdate,
    AddOnCreate,
    AddOnUpdate,
)
from app.api.categories.crud import get_category_by_id, get_category_by_slug, refresh_item_count

logger = logging.getLogger(__name__)

DETAIL_OPTIONS = (
    selectinload(Product.category),
    selectinload(Product.images),
    selectinload(Product.add_on_links).selectinload(ProductAddOn.add_on),
)


# Products

async def get_products(
    db: AsyncSession,
    category_slug: Optional[str] = None,
    search: Optional[str] = None,
    featured: Optional[bool] = None,
) -> List[Product]:
    """List products, newest first"""
    stmt = select(Product)

    if category_slug:
        category = await get_category_by_slug(db, category_slug)
        if not category:
            raise ResourceNotFoundException("Category", category_slug)
        stmt = stmt.where(Product.category_id == category.id)

    if search:
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                cast(Product.tags, String).ilike(pattern),
            )
        )

    if featured:
        stmt = stmt.where(Product.featured.is_(True))

    stmt = stmt.order_by(Product.created_at.desc(), Product.name)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_product(db: AsyncSession, product_id: uuid.UUID, with_details: bool = False) -> Optional[Product]:
    """Get product by ID, optionally with category, images and add-ons"""
    stmt = select(Product).where(Product.id == product_id)
    if with_details:
        stmt = stmt.options(*DETAIL_OPTIONS).execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_product_or_404(db: AsyncSession, product_id: uuid.UUID, with_details: bool = False) -> Product:
    product = await get_product(db, product_id, with_details=with_details)
    if not product:
        raise ResourceNotFoundException("Product", product_id)
    return product


def _warn_on_price(product: Product) -> None:
    if product.original_price is not None and product.original_price < product.price:
        logger.warning(
            f"Product {product.id} has original price {product.original_price} below price {product.price}"
        )


async def create_product(db: AsyncSession, product_data: ProductCreate) -> Product:
    if not await get_category_by_id(db, product_data.category_id):
        raise ResourceNotFoundException("Category", product_data.category_id)

    product = Product(**product_data.model_dump())
    db.add(product)
    await db.flush()
    _warn_on_price(product)

    await refresh_item_count(db, product.category_id)
    await db.commit()

    logger.info(f"Product created: {product.id} ({product.name})")
    return await get_product_or_404(db, product.id, with_details=True)


async def update_product(db: AsyncSession, product: Product, product_data: ProductUpdate) -> Product:
    update_data = product_data.model_dump(exclude_unset=True)
    old_category_id = product.category_id

    new_category_id = update_data.get("category_id")
    if new_category_id and new_category_id != old_category_id:
        if not await get_category_by_id(db, new_category_id):
            raise ResourceNotFoundException("Category", new_category_id)

    for field, value in update_data.items():
        if value is None and field not in ("original_price", "duration"):
            continue
        setattr(product, field, value)

    await db.flush()
    _warn_on_price(product)

    if product.category_id != old_category_id:
        await refresh_item_count(db, old_category_id)
        await refresh_item_count(db, product.category_id)

    await db.commit()
    return await get_product_or_404(db, product.id, with_details=True)


async def delete_product(db: AsyncSession, product: Product) -> None:
    """Delete a product that no order line references"""
    referenced = await db.scalar(
        select(func.count(OrderItem.id)).where(OrderItem.product_id == product.id)
    )
    if referenced:
        raise ConflictException(
            "Product is referenced by existing orders and cannot be deleted",
            error_code="PRODUCT_IN_USE",
        )

    category_id = product.category_id
    await db.execute(delete(Product).where(Product.id == product.id))
    await refresh_item_count(db, category_id)
    await db.commit()
    logger.info(f"Product deleted: {product.id}")


# Product images

async def get_product_images(db: AsyncSession, product_id: uuid.UUID) -> List[ProductImage]:
    result = await db.execute(
        select(ProductImage)
        .where(ProductImage.product_id == product_id)
        .order_by(ProductImage.position)
    )
    return list(result.scalars().all())


async def _ensure_free_position(
    db: AsyncSession, product_id: uuid.UUID, position: int, exclude_id: Optional[uuid.UUID] = None
) -> None:
    stmt = select(ProductImage.id).where(
        ProductImage.product_id == product_id, ProductImage.position == position
    )
    if exclude_id is not None:
        stmt = stmt.where(ProductImage.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise DuplicateResourceException("Product image", "position", position)


async def create_product_image(db: AsyncSession, image_data: ProductImageCreate) -> ProductImage:
    await get_product_or_404(db, image_data.product_id)
    await _ensure_free_position(db, image_data.product_id, image_data.position)

    image = ProductImage(**image_data.model_dump())
    db.add(image)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateResourceException("Product image", "position", image_data.position)

    await db.refresh(image)
    return image


async def update_product_image(db: AsyncSession, image_id: uuid.UUID, image_data: ProductImageUpdate) -> ProductImage:
    image = await db.get(ProductImage, image_id)
    if not image:
        raise ResourceNotFoundException("Product image", image_id)

    update_data = image_data.model_dump(exclude_unset=True, exclude_none=True)
    if "position" in update_data:
        await _ensure_free_position(db, image.product_id, update_data["position"], exclude_id=image.id)

    for field, value in update_data.items():
        setattr(image, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateResourceException("Product image", "position", update_data.get("position"))

    await db.refresh(image)
    return image


async def delete_product_image(db: AsyncSession, image_id: uuid.UUID) -> bool:
    result = await db.execute(delete(ProductImage).where(ProductImage.id == image_id))
    await db.commit()
    return result.rowcount > 0


# Add-ons

async def get_add_ons(db: AsyncSession) -> List[AddOn]:
    result = await db.execute(select(AddOn).order_by(AddOn.name))
    return list(result.scalars().all())


async def get_add_on_or_404(db: AsyncSession, add_on_id: uuid.UUID) -> AddOn:
    add_on = await db.get(AddOn, add_on_id)
    if not add_on:
        raise ResourceNotFoundException("Add-on", add_on_id)
    return add_on


async def create_add_on(db: AsyncSession, add_on_data: AddOnCreate) -> AddOn:
    add_on = AddOn(**add_on_data.model_dump())
    db.add(add_on)
    await db.commit()
    await db.refresh(add_on)
    return add_on


async def update_add_on(db: AsyncSession, add_on_id: uuid.UUID, add_on_data: AddOnUpdate) -> AddOn:
    """Rename or reprice; historical order snapshots are unaffected"""
    add_on = await get_add_on_or_404(db, add_on_id)
    for field, value in add_on_data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(add_on, field, value)
    await db.commit()
    await db.refresh(add_on)
    return add_on


async def delete_add_on(db: AsyncSession, add_on_id: uuid.UUID) -> bool:
    """
    Delete an add-on

    Order line snapshots keep their name and price; only their link
    to the live add-on is cleared.
    """
    await db.execute(
        update(OrderItemAddOn)
        .where(OrderItemAddOn.add_on_id == add_on_id)
        .values(add_on_id=None)
    )
    await db.execute(delete(ProductAddOn).where(ProductAddOn.add_on_id == add_on_id))
    result = await db.execute(delete(AddOn).where(AddOn.id == add_on_id))
    await db.commit()

    deleted = result.rowcount > 0
    if deleted:
        logger.info(f"Add-on deleted: {add_on_id}")
    return deleted


# Product <-> add-on associations

async def get_product_add_ons(db: AsyncSession, product_id: uuid.UUID) -> List[ProductAddOn]:
    result = await db.execute(
        select(ProductAddOn)
        .options(selectinload(ProductAddOn.add_on))
        .where(ProductAddOn.product_id == product_id)
    )
    return list(result.scalars().all())


async def _get_link(db: AsyncSession, link_id: uuid.UUID) -> Optional[ProductAddOn]:
    result = await db.execute(
        select(ProductAddOn)
        .options(selectinload(ProductAddOn.add_on))
        .where(ProductAddOn.id == link_id)
    )
    return result.scalar_one_or_none()


async def add_product_add_on(db: AsyncSession, product_id: uuid.UUID, add_on_id: uuid.UUID) -> ProductAddOn:
    await get_product_or_404(db, product_id)
    await get_add_on_or_404(db, add_on_id)

    existing = await db.execute(
        select(ProductAddOn.id).where(
            ProductAddOn.product_id == product_id, ProductAddOn.add_on_id == add_on_id
        )
    )
    if existing.first():
        raise ConflictException("Add-on is already linked to this product", error_code="DUPLICATE_RESOURCE")

    link = ProductAddOn(product_id=product_id, add_on_id=add_on_id)
    db.add(link)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictException("Add-on is already linked to this product", error_code="DUPLICATE_RESOURCE")

    return await _get_link(db, link.id)


async def set_product_add_ons(
    db: AsyncSession, product_id: uuid.UUID, add_on_ids: List[uuid.UUID]
) -> List[ProductAddOn]:
    """Replace every association of a product"""
    await get_product_or_404(db, product_id)

    unique_ids = list(dict.fromkeys(add_on_ids))
    if unique_ids:
        found = await db.execute(select(AddOn.id).where(AddOn.id.in_(unique_ids)))
        missing = set(unique_ids) - set(found.scalars().all())
        if missing:
            raise ResourceNotFoundException("Add-on", sorted(str(m) for m in missing)[0])

    await db.execute(delete(ProductAddOn).where(ProductAddOn.product_id == product_id))
    for add_on_id in unique_ids:
        db.add(ProductAddOn(product_id=product_id, add_on_id=add_on_id))
    await db.commit()

    return await get_product_add_ons(db, product_id)


async def delete_product_add_on(db: AsyncSession, link_id: uuid.UUID) -> bool:
    result = await db.execute(delete(ProductAddOn).where(ProductAddOn.id == link_id))
    await db.commit()
    return result.rowcount > 0

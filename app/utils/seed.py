"""
Starter catalog and admin account for a fresh database

Safe to run repeatedly: rows are matched by slug / name / email and
only created when missing.
"""

from decimal import Decimal
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict
import logging

from app.core.config import settings
from app.core.database import get_db_context, init_db
from app.core.security import SecurityUtils
from app.models import AddOn, Category, CategoryIcon, Product, ProductAddOn, User
from app.api.categories.crud import refresh_item_count
from .helpers import generate_slug

logger = logging.getLogger(__name__)

CATEGORIES = [
    ("Premium Cakes", CategoryIcon.BIRTHDAY_CAKE, "Layered celebration cakes baked to order"),
    ("Traditional Sweets", CategoryIcon.COOKIE, "Kavum, kokis and other festive favourites"),
    ("Custom Cakes", CategoryIcon.PALETTE, "Designed with you for your occasion"),
    ("Cupcakes", CategoryIcon.CUPCAKE, "Boxes of six and twelve"),
    ("Savories", CategoryIcon.BREAD_SLICE, "Patties, rolls and cutlets"),
    ("Cookies & Desserts", CategoryIcon.COOKIE_BITE, "Cookies, brownies and jar desserts"),
    ("Wedding Cakes", CategoryIcon.HEART, "Tiered cakes and structures"),
    ("Gift Hampers", CategoryIcon.GIFT, "Curated hampers for every season"),
]

PRODUCTS = [
    {
        "name": "Premium Chocolate Cake",
        "category": "premium-cakes",
        "price": Decimal("3500.00"),
        "duration": "1-2 days",
        "featured": True,
        "tags": ["chocolate", "birthday"],
        "description": "Rich chocolate sponge with ganache and chocolate curls.",
    },
    {
        "name": "Classic Vanilla Cake",
        "category": "premium-cakes",
        "price": Decimal("2000.00"),
        "original_price": Decimal("2500.00"),
        "duration": "1-2 days",
        "featured": True,
        "tags": ["vanilla", "classic"],
        "description": "Light vanilla sponge with buttercream frosting.",
    },
    {
        "name": "Ribbon Cake",
        "category": "premium-cakes",
        "price": Decimal("1800.00"),
        "duration": "1 day",
        "tags": ["ribbon", "classic"],
        "description": "Colourful layers of butter cake and icing.",
    },
    {
        "name": "Kavum & Kokis Platter",
        "category": "traditional-sweets",
        "price": Decimal("1500.00"),
        "duration": "2 days",
        "tags": ["avurudu", "traditional"],
        "description": "A festive selection of oil cakes and crispy kokis.",
    },
    {
        "name": "Red Velvet Cupcakes (6)",
        "category": "cupcakes",
        "price": Decimal("1200.00"),
        "duration": "1 day",
        "featured": True,
        "tags": ["red velvet", "cream cheese"],
        "description": "Six red velvet cupcakes with cream cheese frosting.",
    },
    {
        "name": "Chicken Patties (10)",
        "category": "savories",
        "price": Decimal("1000.00"),
        "duration": "1 day",
        "tags": ["chicken", "party"],
        "description": "Flaky pastry filled with spiced chicken.",
    },
    {
        "name": "Chocolate Chip Cookies",
        "category": "cookies-desserts",
        "price": Decimal("800.00"),
        "duration": "1 day",
        "tags": ["chocolate", "cookies"],
        "description": "A jar of twelve chewy chocolate chip cookies.",
    },
    {
        "name": "Three-Tier Wedding Cake",
        "category": "wedding-cakes",
        "price": Decimal("25000.00"),
        "duration": "1-2 weeks",
        "tags": ["wedding", "tiered"],
        "description": "Fondant-covered three-tier cake, design consultation included.",
    },
    {
        "name": "Festive Gift Hamper",
        "category": "gift-hampers",
        "price": Decimal("6500.00"),
        "duration": "2-3 days",
        "tags": ["gift", "hamper"],
        "description": "Cake slices, cookies and sweets packed in a keepsake box.",
    },
]

ADD_ONS = [
    ("Personalized Message", Decimal("200.00")),
    ("Extra Candles", Decimal("150.00")),
    ("Gift Wrapping", Decimal("300.00")),
    ("Fresh Flowers", Decimal("750.00")),
]

# Add-ons offered on every product in these categories
CATEGORY_ADD_ONS = {
    "premium-cakes": ["Personalized Message", "Extra Candles", "Fresh Flowers"],
    "cupcakes": ["Personalized Message", "Gift Wrapping"],
    "gift-hampers": ["Gift Wrapping"],
}

PLACEHOLDER_IMAGE = "https://images.unsplash.com/photo-1578985545062-69928b1d9587"

async def seed_categories(db: AsyncSession) -> Dict[str, Category]:
    categories = {}
    for name, icon, description in CATEGORIES:
        slug = generate_slug(name)
        result = await db.execute(select(Category).where(Category.slug == slug))
        category = result.scalar_one_or_none()
        if category is None:
            category = Category(name=name, slug=slug, icon=icon, description=description)
            db.add(category)
            logger.info(f"Seeded category {slug}")
        categories[slug] = category
    await db.flush()
    return categories

async def seed_add_ons(db: AsyncSession) -> Dict[str, AddOn]:
    add_ons = {}
    for name, price in ADD_ONS:
        result = await db.execute(select(AddOn).where(AddOn.name == name))
        add_on = result.scalar_one_or_none()
        if add_on is None:
            add_on = AddOn(name=name, additional_price=price)
            db.add(add_on)
            logger.info(f"Seeded add-on {name}")
        add_ons[name] = add_on
    await db.flush()
    return add_ons

async def seed_products(db: AsyncSession, categories: Dict[str, Category], add_ons: Dict[str, AddOn]) -> int:
    created = 0
    for data in PRODUCTS:
        result = await db.execute(select(Product).where(Product.name == data["name"]))
        if result.scalar_one_or_none() is not None:
            continue

        category = categories[data["category"]]
        product = Product(
            name=data["name"],
            description=data["description"],
            image=PLACEHOLDER_IMAGE,
            duration=data.get("duration"),
            category_id=category.id,
            tags=data.get("tags", []),
            price=data["price"],
            original_price=data.get("original_price"),
            featured=data.get("featured", False),
            in_stock=True,
            rating=settings.DEFAULT_PRODUCT_RATING,
        )
        db.add(product)
        await db.flush()

        for add_on_name in CATEGORY_ADD_ONS.get(data["category"], []):
            db.add(ProductAddOn(product_id=product.id, add_on_id=add_ons[add_on_name].id))
        created += 1

    await db.flush()
    for category in categories.values():
        await refresh_item_count(db, category.id)
    return created

async def ensure_admin(
    db: AsyncSession,
    username: str = None,
    email: str = None,
    password: str = None,
) -> User:
    """
    Create the administrator account, or restore its admin flag and password

    Admins are never created through registration; this is the only path.
    """
    username = username or settings.ADMIN_USERNAME
    email = (email or settings.ADMIN_EMAIL).lower()
    password = password or settings.ADMIN_PASSWORD

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        user = User(
            username=username,
            email=email,
            password_hash=SecurityUtils.hash_password(password),
            first_name="Admin",
            last_name="User",
            is_admin=True,
        )
        db.add(user)
        logger.info(f"Admin user created: {email}")
    else:
        user.username = username
        user.password_hash = SecurityUtils.hash_password(password)
        user.is_admin = True
        logger.info(f"Admin user updated: {email}")

    await db.flush()
    return user

async def seed_database(with_catalog: bool = True) -> None:
    """Create tables, the admin account and (optionally) the starter catalog"""
    await init_db()
    async with get_db_context() as db:
        await ensure_admin(db)
        if with_catalog:
            categories = await seed_categories(db)
            add_ons = await seed_add_ons(db)
            created = await seed_products(db, categories, add_ons)
            logger.info(f"Seeded {created} new product(s)")

"""Models package initialization"""

from .base import Base
from .user import User
from .category import Category, CategoryIcon, CATEGORY_ICON_GLYPHS
from .product import Product, ProductImage, AddOn, ProductAddOn
from .cart import CartItem
from .order import Order, OrderItem, OrderItemAddOn, OrderStatus
from .review import Review
from .wishlist import WishlistItem

# Export all models
__all__ = [
    "Base",
    "User",
    "Category",
    "CategoryIcon",
    "CATEGORY_ICON_GLYPHS",
    "Product",
    "ProductImage",
    "AddOn",
    "ProductAddOn",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderItemAddOn",
    "OrderStatus",
    "Review",
    "WishlistItem",
]

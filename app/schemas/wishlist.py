"""Wishlist schemas"""

from datetime import datetime
import uuid

from .base import BaseSchema
from .product import ProductResponse

class WishlistAdd(BaseSchema):
    product_id: uuid.UUID

class WishlistItemResponse(BaseSchema):
    id: uuid.UUID
    product_id: uuid.UUID
    created_at: datetime
    product: ProductResponse

class WishlistCheckResponse(BaseSchema):
    is_in_wishlist: bool

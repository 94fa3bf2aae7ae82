"""Cart schemas"""

from pydantic import Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

from .base import BaseSchema
from .product import ProductResponse

class CartItemAdd(BaseSchema):
    product_id: uuid.UUID
    quantity: int = Field(1, ge=1)

class CartItemUpdate(BaseSchema):
    # 0 removes the item
    quantity: int = Field(..., ge=0)

class CartItemResponse(BaseSchema):
    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    user_id: Optional[uuid.UUID] = None
    session_id: Optional[str] = None
    product: ProductResponse
    created_at: datetime

class CartItemUpdateResponse(BaseSchema):
    removed: bool
    item: Optional[CartItemResponse] = None

class CartResponse(BaseSchema):
    items: List[CartItemResponse]
    item_count: int
    subtotal: Decimal

"""
Order schemas for request/response validation
"""

from pydantic import EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

from app.models.order import OrderStatus
from .base import BaseSchema, strip_required
from .product import ProductResponse

class OrderItemCreate(BaseSchema):
    """Line item as submitted by checkout"""
    product_id: uuid.UUID
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    line_total: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    add_on_ids: List[uuid.UUID] = []

class OrderCreate(BaseSchema):
    """Checkout payload: contact snapshot, total and line items"""
    customer_name: str = Field(..., max_length=255)
    customer_email: EmailStr
    customer_phone: str = Field(..., max_length=50)
    customer_address: str = Field(..., max_length=2000)
    total: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    items: List[OrderItemCreate] = Field(..., min_length=1)

    @field_validator("customer_name", "customer_phone", "customer_address", mode="before")
    @classmethod
    def validate_contact(cls, v):
        if not isinstance(v, str):
            raise ValueError("This field is required")
        return strip_required(v)

class OrderStatusUpdate(BaseSchema):
    status: OrderStatus

class OrderItemAddOnResponse(BaseSchema):
    id: uuid.UUID
    add_on_id: Optional[uuid.UUID] = None
    add_on_name: str
    add_on_price: Decimal

class OrderItemResponse(BaseSchema):
    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    product: Optional[ProductResponse] = None
    add_ons: List[OrderItemAddOnResponse] = []

class OrderResponse(BaseSchema):
    """Order without line items"""
    id: uuid.UUID
    customer_name: str
    customer_email: str
    customer_phone: str
    customer_address: str
    user_id: Optional[uuid.UUID] = None
    total: Decimal
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

class OrderWithItemsResponse(OrderResponse):
    items: List[OrderItemResponse] = []

"""Product, product image and add-on schemas"""

from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

from .base import BaseSchema, strip_required, strip_optional
from .category import CategoryResponse

class AddOnResponse(BaseSchema):
    id: uuid.UUID
    name: str
    additional_price: Decimal

class ProductImageResponse(BaseSchema):
    id: uuid.UUID
    product_id: uuid.UUID
    url: str
    position: int

class ProductResponse(BaseSchema):
    """Product row without relationships"""
    id: uuid.UUID
    name: str
    description: str
    price: Decimal
    original_price: Optional[Decimal] = None
    on_sale: bool
    image: str
    duration: Optional[str] = None
    category_id: uuid.UUID
    featured: bool
    in_stock: bool
    rating: Decimal
    tags: List[str] = []
    created_at: datetime

class ProductDetailResponse(ProductResponse):
    category: Optional[CategoryResponse] = None
    images: List[ProductImageResponse] = []
    add_ons: List[AddOnResponse] = []

def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned

class ProductCreate(BaseSchema):
    name: str = Field(..., max_length=255)
    description: str = Field("", max_length=5000)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image: str = Field(..., max_length=500)
    duration: Optional[str] = Field(None, max_length=100)
    category_id: uuid.UUID
    featured: bool = False
    in_stock: bool = True
    tags: List[str] = []

    @field_validator("name", "image")
    @classmethod
    def validate_required(cls, v):
        return strip_required(v)

    @field_validator("duration")
    @classmethod
    def clean_optional(cls, v):
        return strip_optional(v)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)

class ProductUpdate(BaseSchema):
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image: Optional[str] = Field(None, max_length=500)
    duration: Optional[str] = Field(None, max_length=100)
    category_id: Optional[uuid.UUID] = None
    featured: Optional[bool] = None
    in_stock: Optional[bool] = None
    tags: Optional[List[str]] = None

    @field_validator("name", "image")
    @classmethod
    def validate_required(cls, v):
        return strip_required(v) if v is not None else v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)

class ProductImageCreate(BaseSchema):
    product_id: uuid.UUID
    url: str = Field(..., max_length=500)
    position: int = Field(0, ge=0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        return strip_required(v)

class ProductImageUpdate(BaseSchema):
    url: Optional[str] = Field(None, max_length=500)
    position: Optional[int] = Field(None, ge=0)

class AddOnCreate(BaseSchema):
    name: str = Field(..., max_length=255)
    additional_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return strip_required(v)

class AddOnUpdate(BaseSchema):
    name: Optional[str] = Field(None, max_length=255)
    additional_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

class ProductAddOnCreate(BaseSchema):
    product_id: uuid.UUID
    add_on_id: uuid.UUID

class ProductAddOnResponse(BaseSchema):
    id: uuid.UUID
    product_id: uuid.UUID
    add_on_id: uuid.UUID
    add_on: AddOnResponse

class ProductAddOnsReplace(BaseSchema):
    add_on_ids: List[uuid.UUID] = []

"""Category schemas"""

from pydantic import Field, field_validator
from typing import Optional
import uuid

from app.models.category import CategoryIcon
from .base import BaseSchema, strip_required, strip_optional

def parse_icon(value):
    if value is None:
        return value
    try:
        return CategoryIcon.parse(value)
    except (ValueError, AttributeError):
        allowed = ", ".join(icon.value for icon in CategoryIcon)
        raise ValueError(f"Unknown icon '{value}'. Allowed: {allowed}")

class CategoryResponse(BaseSchema):
    id: uuid.UUID
    name: str
    slug: str
    description: str
    icon: CategoryIcon
    glyph: str
    cover_image: Optional[str] = None
    item_count: int

class CategoryCreate(BaseSchema):
    name: str = Field(..., max_length=100)
    description: str = Field("", max_length=2000)
    icon: CategoryIcon
    cover_image: Optional[str] = Field(None, max_length=500)
    slug: Optional[str] = Field(None, max_length=120)

    @field_validator("icon", mode="before")
    @classmethod
    def validate_icon(cls, v):
        return parse_icon(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return strip_required(v)

    @field_validator("slug", "cover_image")
    @classmethod
    def clean_optional(cls, v):
        return strip_optional(v)

class CategoryUpdate(BaseSchema):
    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=2000)
    icon: Optional[CategoryIcon] = None
    cover_image: Optional[str] = Field(None, max_length=500)
    slug: Optional[str] = Field(None, max_length=120)

    @field_validator("icon", mode="before")
    @classmethod
    def validate_icon(cls, v):
        return parse_icon(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return strip_required(v) if v is not None else v

"""Review schemas"""

from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
import uuid

from .base import BaseSchema
from .product import ProductResponse
from .user import UserSummary

def _validate_text(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if len(v) < 10:
        raise ValueError("Review must be at least 10 characters")
    if len(v) > 1000:
        raise ValueError("Review must be at most 1000 characters")
    return v

class ReviewCreate(BaseSchema):
    product_id: uuid.UUID
    rating: int = Field(..., ge=1, le=5)
    review_text: Optional[str] = None

    @field_validator("review_text")
    @classmethod
    def validate_text(cls, v):
        return _validate_text(v)

class ReviewUpdate(BaseSchema):
    rating: Optional[int] = Field(None, ge=1, le=5)
    review_text: Optional[str] = None

    @field_validator("review_text")
    @classmethod
    def validate_text(cls, v):
        return _validate_text(v)

class ReviewResponse(BaseSchema):
    id: uuid.UUID
    user_id: uuid.UUID
    product_id: uuid.UUID
    rating: int
    review_text: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class ReviewWithUserResponse(ReviewResponse):
    user: UserSummary

class ReviewWithProductResponse(ReviewResponse):
    product: ProductResponse

class ReviewCheckResponse(BaseSchema):
    has_reviewed: bool
    review: Optional[ReviewResponse] = None

class RatingStatsResponse(BaseSchema):
    average: float
    count: int

"""Contact form schemas"""

from pydantic import EmailStr, Field, field_validator
from typing import Optional
import re

from .base import BaseSchema, strip_required, strip_optional

CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

class ContactInquiry(BaseSchema):
    name: str = Field(..., max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    event_type: Optional[str] = Field(None, max_length=100)
    event_date: Optional[str] = Field(None, max_length=50)
    guest_count: Optional[int] = Field(None, gt=0)
    message: Optional[str] = Field(None, max_length=5000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = strip_required(v)
        # Used in the mail Subject header
        if CONTROL_CHARS.search(v):
            raise ValueError("Name must not contain line breaks or control characters")
        return v

    @field_validator("phone", "event_type", "event_date", "message")
    @classmethod
    def clean_optional(cls, v):
        return strip_optional(v)

class ContactResponse(BaseSchema):
    success: bool
    message: str

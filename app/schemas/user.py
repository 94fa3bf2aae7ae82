"""User and account schemas"""

from pydantic import EmailStr, Field, field_validator
from typing import Optional
from datetime import date, datetime
import uuid

from app.core.config import settings
from .base import BaseSchema, DATE_PATTERN, strip_optional

class UserSummary(BaseSchema):
    """Public author info shown next to reviews"""
    id: uuid.UUID
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class UserResponse(BaseSchema):
    """User as returned by the API; never carries the password hash"""
    id: uuid.UUID
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    is_admin: bool
    created_at: datetime

class RegisterRequest(BaseSchema):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., max_length=128)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    # Accepted only so the attempt can be logged; never applied
    is_admin: Optional[bool] = Field(None, exclude=True)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        v = v.strip()
        if len(v) < 3:
            raise ValueError("Username must be at least 3 characters")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters")
        return v

    @field_validator("first_name", "last_name", "phone")
    @classmethod
    def clean_optional(cls, v):
        return strip_optional(v)

class LoginRequest(BaseSchema):
    username_or_email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class LoginResponse(BaseSchema):
    user: UserResponse
    redirect_to: str

class ProfileUpdateRequest(BaseSchema):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = Field(None, max_length=1000)
    date_of_birth: Optional[date] = None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def validate_date_format(cls, v):
        if v is None or isinstance(v, date):
            return v
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            if DATE_PATTERN.match(v):
                return v
        raise ValueError("Date of birth must be in YYYY-MM-DD format")

    @field_validator("first_name", "last_name", "phone", "address")
    @classmethod
    def clean_optional(cls, v):
        return strip_optional(v)

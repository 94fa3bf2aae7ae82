"""Base schema configuration shared by all request/response models"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
import re

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

class BaseSchema(BaseModel):
    """camelCase on the wire, snake_case in Python; reads ORM objects"""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

def strip_required(value: str) -> str:
    """Reject blank strings after trimming"""
    if value is None:
        raise ValueError("This field is required")
    value = value.strip()
    if not value:
        raise ValueError("This field is required")
    return value

def strip_optional(value: Optional[str]) -> Optional[str]:
    """Trim and turn empty strings into None"""
    if value is None:
        return None
    value = value.strip()
    return value or None

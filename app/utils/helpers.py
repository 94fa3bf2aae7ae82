"""
Helper utilities
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union
import slugify as python_slugify

from app.core.config import settings

TWO_PLACES = Decimal("0.01")

def generate_slug(text: str) -> str:
    """
    Generate URL-friendly slug from text

    Args:
        text: Input text

    Returns:
        Slug
    """
    return python_slugify.slugify(text)

def to_money(amount: Union[Decimal, int, float, str]) -> Decimal:
    """Quantize to two decimal places"""
    return Decimal(str(amount)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

def format_currency(amount: Union[Decimal, int, float, str], currency: str = None) -> str:
    """
    Format amount for emails, e.g. "LKR 3,500.00"

    Args:
        amount: Amount to format
        currency: Currency code, defaults to the store currency

    Returns:
        Formatted currency string
    """
    currency = currency or settings.CURRENCY
    return f"{currency} {to_money(amount):,.2f}"

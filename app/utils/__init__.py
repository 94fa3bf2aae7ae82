"""Utilities package"""

from .helpers import generate_slug, format_currency, to_money

__all__ = [
    "generate_slug",
    "format_currency",
    "to_money",
]

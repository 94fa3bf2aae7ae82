"""
User model
Handles authentication and profile information
"""

from sqlalchemy import Column, String, Boolean, Date, Text
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel

class User(Base, TimestampedModel, UUIDModel):
    """Storefront customer or administrator"""

    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile fields
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    address = Column(Text, nullable=True)
    date_of_birth = Column(Date, nullable=True)

    # Only set by server-side code paths (seed command, admin tooling)
    is_admin = Column(Boolean, default=False, nullable=False)

    # Relationships
    cart_items = relationship("CartItem", back_populates="user", passive_deletes=True)
    reviews = relationship("Review", back_populates="user", passive_deletes=True)
    wishlist_items = relationship("WishlistItem", back_populates="user", passive_deletes=True)
    orders = relationship("Order", back_populates="user", passive_deletes=True)

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or self.username

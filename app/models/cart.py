"""
Shopping cart model
Handles both authenticated and session-based carts
"""

from sqlalchemy import Column, String, Integer, ForeignKey, Index, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel

class CartItem(Base, TimestampedModel, UUIDModel):
    """Shopping cart items"""

    __tablename__ = "cart_items"

    # User or session
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    session_id = Column(String(255), nullable=True)

    # Product
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    # Relationships
    user = relationship("User", back_populates="cart_items")
    product = relationship("Product")

    # Constraints
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),
        UniqueConstraint("session_id", "product_id", name="uq_cart_session_product"),
        CheckConstraint("quantity > 0", name="check_positive_cart_quantity"),
        CheckConstraint("(user_id IS NOT NULL) OR (session_id IS NOT NULL)", name="check_user_or_session"),
        Index("idx_cart_items_session", "session_id"),
    )

"""
Wishlist model for saved products
"""

from sqlalchemy import Column, ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from .base import Base, CreatedAtModel, UUIDModel

class WishlistItem(Base, CreatedAtModel, UUIDModel):
    """Product saved by a signed-in user"""

    __tablename__ = "wishlists"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    # Relationships
    user = relationship("User", back_populates="wishlist_items")
    product = relationship("Product")

    # Constraints
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_user_product_wishlist"),
        Index("idx_wishlist_user", "user_id"),
    )

"""Product catalog models: products, gallery images and add-ons"""

from sqlalchemy import Column, String, Text, Numeric, Integer, Boolean, JSON, ForeignKey, Index, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, CreatedAtModel, UUIDModel

class Product(Base, TimestampedModel, UUIDModel):
    """Bakery product"""

    __tablename__ = "products"

    # Basic info
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    image = Column(String(500), nullable=False)
    duration = Column(String(100), nullable=True)  # prep time label, e.g. "2-3 days"

    # Categorization
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False)
    tags = Column(JSON, default=list, nullable=False)

    # Pricing
    price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=True)

    # Flags
    featured = Column(Boolean, default=False, nullable=False)
    in_stock = Column(Boolean, default=True, nullable=False)

    # Cached mean of review ratings
    rating = Column(Numeric(2, 1), default=5.0, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="products")
    images = relationship(
        "ProductImage",
        back_populates="product",
        order_by="ProductImage.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    add_on_links = relationship(
        "ProductAddOn",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reviews = relationship("Review", back_populates="product", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_product_price_positive"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="check_product_rating_range"),
        Index("idx_products_category", "category_id"),
        Index("idx_products_featured", "featured"),
    )

    @property
    def on_sale(self) -> bool:
        return self.original_price is not None

    @property
    def add_ons(self):
        return [link.add_on for link in self.add_on_links]

class ProductImage(Base, CreatedAtModel, UUIDModel):
    """Additional product gallery image"""

    __tablename__ = "product_images"

    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    url = Column(String(500), nullable=False)
    position = Column(Integer, default=0, nullable=False)

    # Relationships
    product = relationship("Product", back_populates="images")

    __table_args__ = (
        UniqueConstraint("product_id", "position", name="uq_product_image_position"),
    )

class AddOn(Base, CreatedAtModel, UUIDModel):
    """Optional extra that can be attached to a product (candles, message, ...)"""

    __tablename__ = "add_ons"

    name = Column(String(255), nullable=False)
    additional_price = Column(Numeric(10, 2), nullable=False)

    product_links = relationship(
        "ProductAddOn",
        back_populates="add_on",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("additional_price >= 0", name="check_add_on_price_positive"),
    )

class ProductAddOn(Base, CreatedAtModel, UUIDModel):
    """Association between a product and an add-on"""

    __tablename__ = "product_add_ons"

    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    add_on_id = Column(Uuid(as_uuid=True), ForeignKey("add_ons.id", ondelete="CASCADE"), nullable=False)

    product = relationship("Product", back_populates="add_on_links")
    add_on = relationship("AddOn", back_populates="product_links")

    __table_args__ = (
        UniqueConstraint("product_id", "add_on_id", name="uq_product_add_on"),
    )

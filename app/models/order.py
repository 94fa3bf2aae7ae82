"""Order aggregate: order, line items and add-on snapshots"""

from sqlalchemy import Column, String, Numeric, Integer, Enum, ForeignKey, Index, Text, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel

class OrderStatus(str, enum.Enum):
    PLACED = "placed"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELED = "canceled"

class Order(Base, TimestampedModel, UUIDModel):
    """Placed order with a snapshot of the customer's contact details"""

    __tablename__ = "orders"

    # Contact snapshot, independent of the users table
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50), nullable=False)
    customer_address = Column(Text, nullable=False)

    # Set when an authenticated customer checks out
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    total = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(
            OrderStatus,
            name="order_status",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=OrderStatus.PLACED,
        nullable=False,
        index=True,
    )

    # Relationships
    user = relationship("User", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_orders_user", "user_id"),
    )

    @property
    def short_id(self) -> str:
        return str(self.id)[:8].upper()

class OrderItem(Base, UUIDModel):
    """Line item with price snapshot"""

    __tablename__ = "order_items"

    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="RESTRICT"), nullable=False)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    line_total = Column(Numeric(10, 2), nullable=False)

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product")
    add_ons = relationship(
        "OrderItemAddOn",
        back_populates="order_item",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_positive_order_quantity"),
        Index("idx_order_items_order", "order_id"),
        Index("idx_order_items_product", "product_id"),
    )

class OrderItemAddOn(Base, UUIDModel):
    """Add-on chosen for a line item; name and price are kept even if the add-on is deleted"""

    __tablename__ = "order_item_add_ons"

    order_item_id = Column(Uuid(as_uuid=True), ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False)
    add_on_id = Column(Uuid(as_uuid=True), ForeignKey("add_ons.id", ondelete="SET NULL"), nullable=True)

    add_on_name = Column(String(255), nullable=False)
    add_on_price = Column(Numeric(10, 2), nullable=False)

    # Relationships
    order_item = relationship("OrderItem", back_populates="add_ons")
    add_on = relationship("AddOn")

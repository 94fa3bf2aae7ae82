"""
Category model for product categorization
"""

from sqlalchemy import Column, String, Integer, Text, Enum
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel

class CategoryIcon(str, enum.Enum):
    BIRTHDAY_CAKE = "birthday-cake"
    COOKIE = "cookie"
    PALETTE = "palette"
    CUPCAKE = "cupcake"
    BREAD_SLICE = "bread-slice"
    COOKIE_BITE = "cookie-bite"
    HEART = "heart"
    GIFT = "gift"

    @property
    def glyph(self) -> str:
        return CATEGORY_ICON_GLYPHS[self]

    @classmethod
    def parse(cls, value: str) -> "CategoryIcon":
        """Accept either 'cookie' or the 'fas fa-cookie' class string"""
        if isinstance(value, cls):
            return value
        normalized = value.strip().lower()
        for prefix in ("fas ", "fa-"):
            if normalized.startswith(prefix):
                normalized = normalized[len(prefix):].strip()
        return cls(normalized)

CATEGORY_ICON_GLYPHS = {
    CategoryIcon.BIRTHDAY_CAKE: "🎂",
    CategoryIcon.COOKIE: "🍪",
    CategoryIcon.PALETTE: "🎨",
    CategoryIcon.CUPCAKE: "🧁",
    CategoryIcon.BREAD_SLICE: "🍞",
    CategoryIcon.COOKIE_BITE: "🍪",
    CategoryIcon.HEART: "❤️",
    CategoryIcon.GIFT: "🎁",
}

class Category(Base, TimestampedModel, UUIDModel):
    """Product category"""

    __tablename__ = "categories"

    name = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    # Display
    icon = Column(
        Enum(
            CategoryIcon,
            name="category_icon",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    cover_image = Column(String(500), nullable=True)

    # Cached count of products in this category
    item_count = Column(Integer, default=0, nullable=False)

    # Relationships
    products = relationship("Product", back_populates="category")

    @property
    def glyph(self) -> str:
        return self.icon.glyph

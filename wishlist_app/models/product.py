"""Product model with its comment and reaction child records"""

from sqlalchemy import Column, String, Text, Numeric, JSON, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel, ReprMixin, utcnow

class ProductPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class ProductStatus(str, enum.Enum):
    WANTED = "wanted"
    PURCHASED = "purchased"
    UNAVAILABLE = "unavailable"

# Fixed reaction palette
REACTION_EMOJIS = ("❤️", "👍", "👎", "😍", "🤔", "💰", "🔥", "⭐")

COMMENT_MAX_LENGTH = 500

class Product(Base, TimestampedModel, UUIDModel):
    """Item on a wishlist"""

    __tablename__ = "products"

    # Basic info
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True)
    brand = Column(String(100), nullable=True)
    tags = Column(JSON, default=list, nullable=False)

    # Pricing
    price = Column(Numeric(10, 2), nullable=True)
    currency = Column(String(3), default="USD", nullable=False)

    # Links
    image_url = Column(String(500), nullable=True)
    product_url = Column(String(1000), nullable=True)

    # Ownership
    wishlist_id = Column(UUID(as_uuid=True), ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False)
    added_by_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    # State
    priority = Column(Enum(ProductPriority), default=ProductPriority.MEDIUM, nullable=False)
    status = Column(Enum(ProductStatus), default=ProductStatus.WANTED, nullable=False)
    purchased_by_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    purchased_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    wishlist = relationship("Wishlist", back_populates="products", lazy="selectin")
    added_by = relationship("User", foreign_keys=[added_by_id], lazy="selectin")
    purchased_by = relationship("User", foreign_keys=[purchased_by_id], lazy="selectin")
    comments = relationship(
        "ProductComment",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductComment.created_at",
        lazy="selectin"
    )
    reactions = relationship(
        "ProductReaction",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductReaction.created_at",
        lazy="selectin"
    )

    __table_args__ = (
        CheckConstraint("price IS NULL OR price >= 0", name="check_price_non_negative"),
        Index("idx_products_wishlist_status", "wishlist_id", "status"),
    )

    def __repr__(self):
        return f"<Product {self.name}>"

class ProductComment(Base, UUIDModel, ReprMixin):
    """Append-only comment on a product"""

    __tablename__ = "product_comments"

    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    text = Column(String(COMMENT_MAX_LENGTH), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    product = relationship("Product", back_populates="comments")
    user = relationship("User", lazy="selectin")

class ProductReaction(Base, UUIDModel, ReprMixin):
    """Emoji reaction; one per user per product"""

    __tablename__ = "product_reactions"

    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    emoji = Column(String(16), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    product = relationship("Product", back_populates="reactions")
    user = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="uq_product_reaction_user"),
    )

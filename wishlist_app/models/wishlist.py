"""
Wishlist aggregate: the list itself and its collaborator entries
"""

from sqlalchemy import Column, String, Text, Boolean, Numeric, JSON, DateTime, ForeignKey, Index, UniqueConstraint, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel, ReprMixin, utcnow

class CollaboratorRole(str, enum.Enum):
    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"

class Wishlist(Base, TimestampedModel, UUIDModel):
    """A shared list of wanted products"""

    __tablename__ = "wishlists"

    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    is_public = Column(Boolean, default=False, nullable=False)
    invite_code = Column(String(64), unique=True, nullable=True, index=True)
    tags = Column(JSON, default=list, nullable=False)

    # Cached sum of product prices, see WishlistService.recalculate_total_value
    total_value = Column(Numeric(12, 2), default=0, nullable=False)

    # Relationships
    owner = relationship("User", lazy="selectin")
    collaborators = relationship(
        "WishlistCollaborator",
        back_populates="wishlist",
        cascade="all, delete-orphan",
        order_by="WishlistCollaborator.joined_at",
        lazy="selectin"
    )
    products = relationship(
        "Product",
        back_populates="wishlist",
        cascade="all, delete-orphan",
        order_by="Product.created_at.desc()",
        lazy="selectin"
    )

    __table_args__ = (
        Index("idx_wishlists_owner_updated", "owner_id", "updated_at"),
    )

    def collaborator_for(self, user_id):
        """Collaborator entry for user_id, or None"""
        for collaborator in self.collaborators:
            if collaborator.user_id == user_id:
                return collaborator
        return None

    def __repr__(self):
        return f"<Wishlist {self.title}>"

class WishlistCollaborator(Base, UUIDModel, ReprMixin):
    """Non-owner member of a wishlist with a role"""

    __tablename__ = "wishlist_collaborators"

    wishlist_id = Column(UUID(as_uuid=True), ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    role = Column(Enum(CollaboratorRole), default=CollaboratorRole.EDITOR, nullable=False)
    joined_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    wishlist = relationship("Wishlist", back_populates="collaborators")
    user = relationship("User", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("wishlist_id", "user_id", name="uq_wishlist_collaborator"),
    )

"""Models package initialization"""

from .base import Base
from .user import User
from .wishlist import Wishlist, WishlistCollaborator, CollaboratorRole
from .product import (
    Product,
    ProductComment,
    ProductReaction,
    ProductPriority,
    ProductStatus,
    REACTION_EMOJIS,
)

# Export all models
__all__ = [
    "Base",
    "User",
    "Wishlist",
    "WishlistCollaborator",
    "CollaboratorRole",
    "Product",
    "ProductComment",
    "ProductReaction",
    "ProductPriority",
    "ProductStatus",
    "REACTION_EMOJIS",
]

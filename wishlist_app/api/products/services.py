"""
Product service layer
Handles products on a wishlist plus their comments and reactions
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
import uuid

from wishlist_app.models import (
    Product,
    ProductComment,
    ProductReaction,
    ProductStatus,
    User,
)
from wishlist_app.models.base import utcnow
from wishlist_app.core import permissions
from wishlist_app.core.exceptions import NotFoundException
from wishlist_app.api.wishlists.services import WishlistService
from wishlist_app.services.storage import StorageService
from .schemas import ProductCreate, ProductUpdate, CommentCreate, ReactionCreate

logger = logging.getLogger(__name__)

# Fields that reject NULL; an explicit null in an update leaves them unchanged
NON_NULLABLE_FIELDS = ("name", "currency", "priority", "status", "tags")

class ProductService:
    """Product service"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.wishlists = WishlistService(db)

    async def _load(self, product_id: uuid.UUID) -> Optional[Product]:
        result = await self.db.execute(
            select(Product)
            .where(Product.id == product_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, product_id: uuid.UUID) -> Product:
        product = await self._load(product_id)
        if product is None:
            raise NotFoundException("Product not found")
        return product

    async def list_for_wishlist(self, wishlist_id: uuid.UUID, user: User) -> List[Product]:
        """Products of a viewable wishlist, newest first"""
        await self.wishlists.get(wishlist_id, user)

        result = await self.db.execute(
            select(Product)
            .where(Product.wishlist_id == wishlist_id)
            .order_by(Product.created_at.desc())
        )
        return list(result.scalars().all())

    async def create(self, data: ProductCreate, user: User) -> Product:
        """Add a product and refresh the wishlist total"""
        wishlist = await self.wishlists.get_or_404(data.wishlist_id)
        permissions.require(permissions.can_add_product(wishlist, user.id))

        product = Product(
            **data.model_dump(),
            added_by_id=user.id,
            status=ProductStatus.WANTED,
        )
        self.db.add(product)

        await self.wishlists.recalculate_total_value(wishlist)
        await self.db.commit()

        logger.info(f"User {user.id} added product {product.id} to wishlist {wishlist.id}")
        return await self.get_or_404(product.id)

    async def update(self, product_id: uuid.UUID, data: ProductUpdate, user: User) -> Product:
        """
        Apply product changes

        Moving to ``purchased`` records who bought it and when (unless
        already recorded); moving away from ``purchased`` clears both.
        """
        product = await self.get_or_404(product_id)
        wishlist = product.wishlist
        permissions.require(permissions.can_edit_product(wishlist, product, user.id))

        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if value is None and field in NON_NULLABLE_FIELDS:
                continue
            setattr(product, field, value)

        if product.status == ProductStatus.PURCHASED:
            if product.purchased_by_id is None:
                product.purchased_by_id = user.id
                product.purchased_at = utcnow()
        else:
            product.purchased_by_id = None
            product.purchased_at = None

        if "price" in changes:
            await self.wishlists.recalculate_total_value(wishlist)

        product.touch()
        await self.db.commit()
        return await self.get_or_404(product.id)

    async def delete(self, product_id: uuid.UUID, user: User, storage: StorageService) -> uuid.UUID:
        """
        Remove a product, refresh the total and drop its hosted image

        The image cleanup runs after the commit and never fails the request.
        """
        product = await self.get_or_404(product_id)
        wishlist = product.wishlist
        permissions.require(permissions.can_delete_product(wishlist, product, user.id))

        image_url = product.image_url
        await self.db.delete(product)
        await self.wishlists.recalculate_total_value(wishlist)
        await self.db.commit()

        logger.info(f"User {user.id} deleted product {product_id} from wishlist {wishlist.id}")

        if image_url:
            await storage.delete_quietly(image_url)

        return wishlist.id

    async def add_comment(self, product_id: uuid.UUID, data: CommentCreate, user: User) -> Tuple[Product, ProductComment]:
        """Append a comment; anyone who can view the wishlist may comment

        Returns the product together with the stored comment.
        """
        product = await self.get_or_404(product_id)
        permissions.require(permissions.can_view(product.wishlist, user.id))

        comment = ProductComment(product_id=product.id, user_id=user.id, text=data.text)
        self.db.add(comment)
        product.touch()
        await self.db.commit()

        result = await self.db.execute(
            select(ProductComment).where(ProductComment.id == comment.id)
            .execution_options(populate_existing=True)
        )
        return product, result.scalar_one()

    async def add_reaction(self, product_id: uuid.UUID, data: ReactionCreate, user: User) -> Tuple[Product, ProductReaction]:
        """
        Set the user's reaction to a product

        A previous reaction by the same user is removed first, so the new one
        lands at the end of the list.
        """
        product = await self.get_or_404(product_id)
        permissions.require(permissions.can_view(product.wishlist, user.id))

        existing = self._reaction_of(product, user.id)
        if existing is not None:
            await self.db.delete(existing)
            # The unique (product, user) pair must be free before the insert
            await self.db.flush()

        reaction = ProductReaction(product_id=product.id, user_id=user.id, emoji=data.emoji)
        self.db.add(reaction)
        product.touch()
        await self.db.commit()

        result = await self.db.execute(
            select(ProductReaction).where(ProductReaction.id == reaction.id)
            .execution_options(populate_existing=True)
        )
        return product, result.scalar_one()

    async def remove_reaction(self, product_id: uuid.UUID, user: User) -> Product:
        """Remove the user's reaction; a no-op when there is none"""
        product = await self.get_or_404(product_id)
        permissions.require(permissions.can_view(product.wishlist, user.id))

        existing = self._reaction_of(product, user.id)
        if existing is not None:
            await self.db.delete(existing)
            product.touch()
            await self.db.commit()

        return await self.get_or_404(product.id)

    @staticmethod
    def _reaction_of(product: Product, user_id) -> Optional[ProductReaction]:
        for reaction in product.reactions:
            if reaction.user_id == user_id:
                return reaction
        return None

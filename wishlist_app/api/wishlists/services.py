"""
Wishlist service layer
Handles wishlist lifecycle, invite codes, membership and the cached total
"""

from typing import List, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, func, or_
import logging
import uuid

from wishlist_app.models import Wishlist, WishlistCollaborator, CollaboratorRole, Product, User
from wishlist_app.core import permissions
from wishlist_app.core.config import get_settings
from wishlist_app.core.security import SecurityUtils
from wishlist_app.core.exceptions import (
    NotFoundException,
    ConflictException,
    AlreadyMemberException,
)
from .schemas import WishlistCreate, WishlistUpdate

logger = logging.getLogger(__name__)

# Columns that reject NULL and are therefore skipped when sent as null
NON_NULLABLE_FIELDS = ("title", "is_public", "tags")

class WishlistService:
    """Wishlist service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load(self, wishlist_id: uuid.UUID) -> Optional[Wishlist]:
        """Fetch a wishlist with every relationship refreshed from the database"""
        result = await self.db.execute(
            select(Wishlist)
            .where(Wishlist.id == wishlist_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, wishlist_id: uuid.UUID) -> Wishlist:
        wishlist = await self._load(wishlist_id)
        if wishlist is None:
            raise NotFoundException("Wishlist not found")
        return wishlist

    async def list_for_user(self, user: User) -> List[Wishlist]:
        """Wishlists the user owns or collaborates on, most recently updated first"""
        member_of = select(WishlistCollaborator.wishlist_id).where(
            WishlistCollaborator.user_id == user.id
        )
        result = await self.db.execute(
            select(Wishlist)
            .where(or_(Wishlist.owner_id == user.id, Wishlist.id.in_(member_of)))
            .order_by(Wishlist.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, wishlist_id: uuid.UUID, user: User) -> Wishlist:
        wishlist = await self.get_or_404(wishlist_id)
        permissions.require(permissions.can_view(wishlist, user.id))
        return wishlist

    async def create(self, data: WishlistCreate, user: User) -> Wishlist:
        """Create a wishlist owned by user; public lists get an invite code right away"""
        wishlist = Wishlist(
            title=data.title,
            description=data.description,
            owner_id=user.id,
            is_public=data.is_public,
            tags=data.tags,
            total_value=Decimal("0"),
        )
        if data.is_public:
            wishlist.invite_code = self._new_invite_code()

        self.db.add(wishlist)
        await self._commit_invite(wishlist)

        logger.info(f"User {user.id} created wishlist {wishlist.id}")
        return await self.get_or_404(wishlist.id)

    async def update(self, wishlist_id: uuid.UUID, data: WishlistUpdate, user: User) -> Wishlist:
        wishlist = await self.get_or_404(wishlist_id)
        permissions.require(permissions.can_mutate_wishlist(wishlist, user.id))

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in NON_NULLABLE_FIELDS:
                continue
            setattr(wishlist, field, value)

        # First switch to public hands out a code; an existing one is kept
        if wishlist.is_public and not wishlist.invite_code:
            wishlist.invite_code = self._new_invite_code()

        wishlist.touch()
        await self._commit_invite(wishlist)
        return await self.get_or_404(wishlist.id)

    async def delete(self, wishlist_id: uuid.UUID, user: User) -> None:
        """Delete the wishlist together with its collaborators, products, comments and reactions"""
        wishlist = await self.get_or_404(wishlist_id)
        permissions.require(
            permissions.can_delete_wishlist(wishlist, user.id),
            "Only the owner can delete this wishlist"
        )

        await self.db.delete(wishlist)
        await self.db.commit()

        logger.info(f"User {user.id} deleted wishlist {wishlist_id}")

    async def join(self, invite_code: str, user: User) -> Wishlist:
        """Add user as an editor of the wishlist the code belongs to"""
        result = await self.db.execute(
            select(Wishlist).where(Wishlist.invite_code == invite_code)
        )
        wishlist = result.scalar_one_or_none()
        if wishlist is None:
            raise NotFoundException("Invalid invite code")

        if permissions.is_member(wishlist, user.id):
            raise AlreadyMemberException()

        wishlist.collaborators.append(
            WishlistCollaborator(user_id=user.id, role=CollaboratorRole.EDITOR)
        )
        wishlist.touch()

        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent join by the same user
            await self.db.rollback()
            raise AlreadyMemberException()

        logger.info(f"User {user.id} joined wishlist {wishlist.id}")
        return await self.get_or_404(wishlist.id)

    async def rotate_invite(self, wishlist_id: uuid.UUID, user: User) -> str:
        """Issue a new invite code, invalidating the previous one"""
        wishlist = await self.get_or_404(wishlist_id)
        permissions.require(permissions.can_manage_invite(wishlist, user.id))

        wishlist.invite_code = self._new_invite_code()
        wishlist.touch()
        await self._commit_invite(wishlist)
        return wishlist.invite_code

    async def update_collaborator(
        self,
        wishlist_id: uuid.UUID,
        collaborator_id: uuid.UUID,
        role: CollaboratorRole,
        user: User
    ) -> Wishlist:
        wishlist = await self.get_or_404(wishlist_id)
        permissions.require(permissions.can_mutate_wishlist(wishlist, user.id))

        collaborator = self._collaborator_or_404(wishlist, collaborator_id)
        collaborator.role = role
        wishlist.touch()
        await self.db.commit()

        logger.info(f"User {user.id} set role {role.value} for {collaborator_id} on wishlist {wishlist.id}")
        return await self.get_or_404(wishlist.id)

    async def remove_collaborator(
        self,
        wishlist_id: uuid.UUID,
        collaborator_id: uuid.UUID,
        user: User
    ) -> Wishlist:
        """Owner and admins remove anyone; a collaborator may remove only themselves"""
        wishlist = await self.get_or_404(wishlist_id)
        leaving = str(collaborator_id) == str(user.id)
        if not leaving:
            permissions.require(permissions.can_mutate_wishlist(wishlist, user.id))

        collaborator = self._collaborator_or_404(wishlist, collaborator_id)
        wishlist.collaborators.remove(collaborator)
        wishlist.touch()
        await self.db.commit()

        return await self.get_or_404(wishlist.id)

    async def recalculate_total_value(self, wishlist: Wishlist) -> Decimal:
        """
        Recompute the cached sum of product prices

        Pending product changes are flushed first so the sum sees them.
        Products without a price contribute nothing.
        """
        await self.db.flush()
        result = await self.db.execute(
            select(func.coalesce(func.sum(Product.price), 0))
            .where(Product.wishlist_id == wishlist.id)
        )
        wishlist.total_value = Decimal(str(result.scalar_one()))
        wishlist.touch()
        return wishlist.total_value

    @staticmethod
    def _collaborator_or_404(wishlist: Wishlist, user_id: uuid.UUID) -> WishlistCollaborator:
        collaborator = wishlist.collaborator_for(user_id)
        if collaborator is None:
            raise NotFoundException("Collaborator not found")
        return collaborator

    @staticmethod
    def _new_invite_code() -> str:
        return SecurityUtils.generate_invite_code(get_settings().INVITE_CODE_LENGTH)

    async def _commit_invite(self, wishlist: Wishlist) -> None:
        """Commit, turning an invite code collision into a retryable conflict"""
        # Attributes expire on rollback and cannot be lazily reloaded here
        wishlist_id = wishlist.id
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Invite code collision on wishlist {wishlist_id}")
            raise ConflictException("Invite code collision, please retry", error_code="INVITE_CODE_COLLISION")

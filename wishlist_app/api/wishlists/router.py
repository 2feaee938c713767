"""
Wishlist API routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from wishlist_app.core.database import get_db
from wishlist_app.api.auth.dependencies import get_current_user
from wishlist_app.models import User
from .schemas import (
    WishlistCreate,
    WishlistUpdate,
    WishlistResponse,
    CollaboratorUpdate,
    JoinWishlistResponse,
    InviteCodeResponse,
    MessageResponse,
)
from .services import WishlistService

router = APIRouter()

@router.get(
    "",
    response_model=List[WishlistResponse],
    summary="List wishlists",
    description="Wishlists the current user owns or collaborates on, most recently updated first"
)
async def list_wishlists(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    return await service.list_for_user(current_user)

@router.post(
    "",
    response_model=WishlistResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create wishlist"
)
async def create_wishlist(
    payload: WishlistCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    return await service.create(payload, current_user)

# Declared before /{wishlist_id} routes so "join" is never parsed as an id
@router.post(
    "/join/{invite_code}",
    response_model=JoinWishlistResponse,
    summary="Join wishlist",
    description="Join a wishlist as an editor using its invite code"
)
async def join_wishlist(
    invite_code: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    wishlist = await service.join(invite_code, current_user)
    return JoinWishlistResponse(
        message="Successfully joined wishlist",
        wishlist=WishlistResponse.model_validate(wishlist)
    )

@router.get(
    "/{wishlist_id}",
    response_model=WishlistResponse,
    summary="Get wishlist",
    description="Full wishlist including products; requires view access"
)
async def get_wishlist(
    wishlist_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    return await service.get(wishlist_id, current_user)

@router.put(
    "/{wishlist_id}",
    response_model=WishlistResponse,
    summary="Update wishlist",
    description="Owner or admin collaborators only"
)
async def update_wishlist(
    wishlist_id: uuid.UUID,
    payload: WishlistUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    return await service.update(wishlist_id, payload, current_user)

@router.delete(
    "/{wishlist_id}",
    response_model=MessageResponse,
    summary="Delete wishlist",
    description="Owner only; removes every product of the wishlist as well"
)
async def delete_wishlist(
    wishlist_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    await service.delete(wishlist_id, current_user)
    return MessageResponse(message="Wishlist deleted successfully")

@router.post(
    "/{wishlist_id}/invite",
    response_model=InviteCodeResponse,
    summary="Generate invite code",
    description="Issue a fresh invite code; the previous code stops working"
)
async def generate_invite(
    wishlist_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    code = await service.rotate_invite(wishlist_id, current_user)
    return InviteCodeResponse(invite_code=code)

@router.put(
    "/{wishlist_id}/collaborators/{user_id}",
    response_model=WishlistResponse,
    summary="Change collaborator role"
)
async def update_collaborator(
    wishlist_id: uuid.UUID,
    user_id: uuid.UUID,
    payload: CollaboratorUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    return await service.update_collaborator(wishlist_id, user_id, payload.role, current_user)

@router.delete(
    "/{wishlist_id}/collaborators/{user_id}",
    response_model=WishlistResponse,
    summary="Remove collaborator",
    description="Owner or admins remove a collaborator; collaborators may remove themselves"
)
async def remove_collaborator(
    wishlist_id: uuid.UUID,
    user_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = WishlistService(db)
    return await service.remove_collaborator(wishlist_id, user_id, current_user)

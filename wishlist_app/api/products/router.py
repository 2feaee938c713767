"""
Product API routes

Every successful mutation is also pushed to the wishlist's realtime room,
skipping the acting user's own sockets.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from wishlist_app.core.database import get_db
from wishlist_app.core.websocket import ConnectionManager, get_connection_manager
from wishlist_app.api.auth.dependencies import get_current_user
from wishlist_app.api.wishlists.schemas import MessageResponse
from wishlist_app.services.storage import StorageService, get_storage
from wishlist_app.models import User
from .schemas import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    CommentCreate,
    CommentResponse,
    ReactionCreate,
    ReactionResponse,
)
from .services import ProductService

router = APIRouter()

@router.get(
    "/wishlist/{wishlist_id}",
    response_model=List[ProductResponse],
    summary="List products",
    description="Products of a wishlist, newest first; requires view access"
)
async def list_products(
    wishlist_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = ProductService(db)
    return await service.list_for_wishlist(wishlist_id, current_user)

@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add product",
    description="Owner, editors and admins may add products"
)
async def create_product(
    payload: ProductCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    realtime: ConnectionManager = Depends(get_connection_manager)
):
    service = ProductService(db)
    product = await service.create(payload, current_user)
    response = ProductResponse.model_validate(product)

    await realtime.emit(
        "product-added",
        product.wishlist_id,
        response.model_dump(mode="json"),
        actor_id=current_user.id
    )
    return response

@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update product"
)
async def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    realtime: ConnectionManager = Depends(get_connection_manager)
):
    service = ProductService(db)
    product = await service.update(product_id, payload, current_user)
    response = ProductResponse.model_validate(product)

    await realtime.emit(
        "product-updated",
        product.wishlist_id,
        response.model_dump(mode="json"),
        actor_id=current_user.id
    )
    return response

@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    summary="Delete product",
    description="Owner, the product's creator or admins; editors cannot delete others' products"
)
async def delete_product(
    product_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: StorageService = Depends(get_storage),
    realtime: ConnectionManager = Depends(get_connection_manager)
):
    service = ProductService(db)
    wishlist_id = await service.delete(product_id, current_user, storage)

    await realtime.emit(
        "product-deleted",
        wishlist_id,
        {"id": str(product_id)},
        actor_id=current_user.id
    )
    return MessageResponse(message="Product deleted successfully")

@router.post(
    "/{product_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add comment"
)
async def add_comment(
    product_id: uuid.UUID,
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    realtime: ConnectionManager = Depends(get_connection_manager)
):
    service = ProductService(db)
    product, comment = await service.add_comment(product_id, payload, current_user)
    response = CommentResponse.model_validate(comment)

    await realtime.emit(
        "comment-added",
        product.wishlist_id,
        {"product_id": str(product_id), "comment": response.model_dump(mode="json")},
        actor_id=current_user.id
    )
    return response

@router.post(
    "/{product_id}/reactions",
    response_model=ReactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="React to product",
    description="Replaces the current user's previous reaction on this product"
)
async def add_reaction(
    product_id: uuid.UUID,
    payload: ReactionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    realtime: ConnectionManager = Depends(get_connection_manager)
):
    service = ProductService(db)
    product, reaction = await service.add_reaction(product_id, payload, current_user)
    response = ReactionResponse.model_validate(reaction)

    await realtime.emit(
        "reaction-added",
        product.wishlist_id,
        {"product_id": str(product_id), "reaction": response.model_dump(mode="json")},
        actor_id=current_user.id
    )
    return response

@router.delete(
    "/{product_id}/reactions",
    response_model=MessageResponse,
    summary="Remove reaction"
)
async def remove_reaction(
    product_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    realtime: ConnectionManager = Depends(get_connection_manager)
):
    service = ProductService(db)
    product = await service.remove_reaction(product_id, current_user)

    await realtime.emit(
        "product-updated",
        product.wishlist_id,
        ProductResponse.model_validate(product).model_dump(mode="json"),
        actor_id=current_user.id
    )
    return MessageResponse(message="Reaction removed")

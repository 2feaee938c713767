"""
Wishlist and product access rules

Every predicate takes the wishlist (and product, where relevant) as freshly
loaded for the current request together with the acting user's id. They
read ``owner_id``, ``is_public``, ``collaborators`` (``user_id``/``role``)
and ``added_by_id`` only, so plain objects with those attributes work too.
"""

from typing import Optional, Iterable

from wishlist_app.models.wishlist import CollaboratorRole
from .exceptions import ForbiddenException

EDIT_ROLES = frozenset({CollaboratorRole.EDITOR, CollaboratorRole.ADMIN})
ADMIN_ROLES = frozenset({CollaboratorRole.ADMIN})

def _same(a, b) -> bool:
    if a is None or b is None:
        return False
    return str(a) == str(b)

def is_owner(wishlist, actor_id) -> bool:
    return _same(wishlist.owner_id, actor_id)

def collaborator_role(wishlist, actor_id) -> Optional[CollaboratorRole]:
    """Role of actor_id among the collaborators, None if not a collaborator"""
    for collaborator in wishlist.collaborators:
        if _same(collaborator.user_id, actor_id):
            return CollaboratorRole(collaborator.role)
    return None

def _has_role(wishlist, actor_id, roles: Iterable[CollaboratorRole]) -> bool:
    role = collaborator_role(wishlist, actor_id)
    return role is not None and role in roles

def is_member(wishlist, actor_id) -> bool:
    """Owner or collaborator of any role"""
    return is_owner(wishlist, actor_id) or collaborator_role(wishlist, actor_id) is not None

def can_view(wishlist, actor_id) -> bool:
    return is_member(wishlist, actor_id) or bool(wishlist.is_public)

def can_add_product(wishlist, actor_id) -> bool:
    return is_owner(wishlist, actor_id) or _has_role(wishlist, actor_id, EDIT_ROLES)

def can_edit_product(wishlist, product, actor_id) -> bool:
    """Editors and admins, plus the product's creator regardless of role"""
    return can_add_product(wishlist, actor_id) or _same(product.added_by_id, actor_id)

def can_delete_product(wishlist, product, actor_id) -> bool:
    """Editor role alone is not enough to delete someone else's product"""
    return (
        is_owner(wishlist, actor_id)
        or _same(product.added_by_id, actor_id)
        or _has_role(wishlist, actor_id, ADMIN_ROLES)
    )

def can_mutate_wishlist(wishlist, actor_id) -> bool:
    return is_owner(wishlist, actor_id) or _has_role(wishlist, actor_id, ADMIN_ROLES)

def can_delete_wishlist(wishlist, actor_id) -> bool:
    return is_owner(wishlist, actor_id)

def can_manage_invite(wishlist, actor_id) -> bool:
    return can_mutate_wishlist(wishlist, actor_id)

def require(allowed: bool, detail: str = "Access denied") -> None:
    """Raise 403 unless allowed"""
    if not allowed:
        raise ForbiddenException(detail)

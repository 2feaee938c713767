"""Wishlist lifecycle, invite codes and collaborator management"""

import pytest
from sqlalchemy import func, select

from wishlist_app.api.wishlists.services import WishlistService
from wishlist_app.models import Product, ProductComment, WishlistCollaborator

async def test_create_private_wishlist(client, alice):
    response = await client.post("/api/wishlists", json={
        "title": "  Birthday  ",
        "description": "<b>Things</b> I like",
        "tags": ["tech", " tech ", "", "books"],
    }, headers=alice.headers)

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Birthday"
    assert body["description"] == "Things I like"
    assert body["tags"] == ["tech", "books"]
    assert body["owner"]["id"] == alice.id
    assert body["collaborators"] == []
    assert body["products"] == []
    assert body["is_public"] is False
    assert body["invite_code"] is None
    assert body["total_value"] == 0

async def test_public_wishlist_gets_invite_code(make_wishlist, alice):
    wishlist = await make_wishlist(alice, is_public=True)
    assert len(wishlist["invite_code"]) == 16

async def test_making_wishlist_public_generates_code_once(client, make_wishlist, alice):
    wishlist = await make_wishlist(alice)

    response = await client.put(f"/api/wishlists/{wishlist['id']}", json={"is_public": True}, headers=alice.headers)
    assert response.status_code == 200
    code = response.json()["invite_code"]
    assert code

    response = await client.put(f"/api/wishlists/{wishlist['id']}", json={"title": "Renamed"}, headers=alice.headers)
    assert response.json()["invite_code"] == code
    assert response.json()["title"] == "Renamed"

async def test_missing_title_is_rejected(client, alice):
    response = await client.post("/api/wishlists", json={"title": "   "}, headers=alice.headers)
    assert response.status_code == 400

@pytest.fixture
def reuse_invite_code(monkeypatch):
    """Make the next generated invite code repeat an existing one"""

    def _reuse(code):
        monkeypatch.setattr(WishlistService, "_new_invite_code", staticmethod(lambda: code))

    return _reuse

async def test_invite_collision_on_create_conflicts(client, make_wishlist, reuse_invite_code, alice):
    taken = await make_wishlist(alice, is_public=True)
    reuse_invite_code(taken["invite_code"])

    response = await client.post("/api/wishlists", json={"title": "Twin", "is_public": True}, headers=alice.headers)

    assert response.status_code == 409
    assert response.json()["code"] == "INVITE_CODE_COLLISION"

async def test_invite_collision_on_rotate_conflicts(client, make_wishlist, reuse_invite_code, alice):
    taken = await make_wishlist(alice, is_public=True)
    wishlist = await make_wishlist(alice, is_public=True)
    reuse_invite_code(taken["invite_code"])

    response = await client.post(f"/api/wishlists/{wishlist['id']}/invite", headers=alice.headers)

    assert response.status_code == 409
    assert response.json()["code"] == "INVITE_CODE_COLLISION"

    response = await client.get(f"/api/wishlists/{wishlist['id']}", headers=alice.headers)
    assert response.json()["invite_code"] == wishlist["invite_code"]

async def test_invite_collision_on_going_public_conflicts(client, make_wishlist, reuse_invite_code, alice):
    taken = await make_wishlist(alice, is_public=True)
    wishlist = await make_wishlist(alice)
    reuse_invite_code(taken["invite_code"])

    response = await client.put(f"/api/wishlists/{wishlist['id']}", json={"is_public": True}, headers=alice.headers)

    assert response.status_code == 409
    assert response.json()["code"] == "INVITE_CODE_COLLISION"

    response = await client.get(f"/api/wishlists/{wishlist['id']}", headers=alice.headers)
    body = response.json()
    assert body["is_public"] is False
    assert body["invite_code"] is None

async def test_description_keeps_plain_text_characters(client, alice):
    response = await client.post("/api/wishlists", json={
        "title": "Snacks",
        "description": "Salt & vinegar <i>chips</i> < 5 bags",
    }, headers=alice.headers)

    assert response.status_code == 201
    assert response.json()["description"] == "Salt & vinegar chips < 5 bags"

async def test_view_access(client, make_wishlist, alice, bob):
    private = await make_wishlist(alice)
    public = await make_wishlist(alice, title="Open", is_public=True)

    response = await client.get(f"/api/wishlists/{private['id']}", headers=bob.headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied"

    response = await client.get(f"/api/wishlists/{public['id']}", headers=bob.headers)
    assert response.status_code == 200

async def test_unknown_wishlist_is_404(client, alice):
    response = await client.get("/api/wishlists/00000000-0000-0000-0000-000000000000", headers=alice.headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Wishlist not found"

async def test_list_includes_owned_and_joined(client, make_wishlist, add_member, alice, bob, carol):
    mine = await make_wishlist(bob, title="Mine")
    shared = await make_wishlist(alice, title="Shared")
    await make_wishlist(carol, title="Not mine")
    await add_member(shared, alice, bob)

    response = await client.get("/api/wishlists", headers=bob.headers)

    assert response.status_code == 200
    titles = [wishlist["title"] for wishlist in response.json()]
    # Joining bumped the shared list's updated_at
    assert titles == ["Shared", "Mine"]
    assert mine["id"] in [wishlist["id"] for wishlist in response.json()]

async def test_join_twice_conflicts(client, make_wishlist, alice, bob):
    wishlist = await make_wishlist(alice, is_public=True)
    code = wishlist["invite_code"]

    response = await client.post(f"/api/wishlists/join/{code}", headers=bob.headers)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Successfully joined wishlist"
    collaborators = body["wishlist"]["collaborators"]
    assert [(c["user"]["id"], c["role"]) for c in collaborators] == [(bob.id, "editor")]

    response = await client.post(f"/api/wishlists/join/{code}", headers=bob.headers)
    assert response.status_code == 409
    assert response.json()["message"] == "You are already part of this wishlist"

async def test_owner_cannot_join_own_wishlist(client, make_wishlist, alice):
    wishlist = await make_wishlist(alice, is_public=True)
    response = await client.post(f"/api/wishlists/join/{wishlist['invite_code']}", headers=alice.headers)
    assert response.status_code == 409

async def test_join_with_unknown_code(client, alice):
    response = await client.post("/api/wishlists/join/doesnotexist0000", headers=alice.headers)
    assert response.status_code == 404

async def test_rotating_invite_invalidates_old_code(client, make_wishlist, alice, bob):
    wishlist = await make_wishlist(alice, is_public=True)
    old_code = wishlist["invite_code"]

    response = await client.post(f"/api/wishlists/{wishlist['id']}/invite", headers=alice.headers)
    assert response.status_code == 200
    new_code = response.json()["invite_code"]
    assert new_code != old_code

    response = await client.post(f"/api/wishlists/join/{old_code}", headers=bob.headers)
    assert response.status_code == 404

async def test_only_owner_and_admin_manage_wishlist(client, make_wishlist, add_member, alice, bob, carol):
    wishlist = await make_wishlist(alice)
    await add_member(wishlist, alice, bob)
    await add_member(wishlist, alice, carol, role="admin")

    response = await client.put(f"/api/wishlists/{wishlist['id']}", json={"title": "Hijacked"}, headers=bob.headers)
    assert response.status_code == 403
    response = await client.post(f"/api/wishlists/{wishlist['id']}/invite", headers=bob.headers)
    assert response.status_code == 403

    response = await client.put(f"/api/wishlists/{wishlist['id']}", json={"title": "Tidied"}, headers=carol.headers)
    assert response.status_code == 200
    assert response.json()["title"] == "Tidied"

    response = await client.delete(f"/api/wishlists/{wishlist['id']}", headers=carol.headers)
    assert response.status_code == 403

async def test_collaborator_roles_and_removal(client, make_wishlist, add_member, alice, bob, carol):
    wishlist = await make_wishlist(alice)
    await add_member(wishlist, alice, bob)
    await add_member(wishlist, alice, carol)

    response = await client.put(
        f"/api/wishlists/{wishlist['id']}/collaborators/{bob.id}",
        json={"role": "viewer"},
        headers=alice.headers,
    )
    assert response.status_code == 200
    roles = {c["user"]["username"]: c["role"] for c in response.json()["collaborators"]}
    assert roles == {"bob": "viewer", "carol": "editor"}

    # Editors cannot remove others
    response = await client.delete(f"/api/wishlists/{wishlist['id']}/collaborators/{bob.id}", headers=carol.headers)
    assert response.status_code == 403

    # but anyone can leave
    response = await client.delete(f"/api/wishlists/{wishlist['id']}/collaborators/{carol.id}", headers=carol.headers)
    assert response.status_code == 200
    assert [c["user"]["id"] for c in response.json()["collaborators"]] == [bob.id]

    response = await client.delete(f"/api/wishlists/{wishlist['id']}/collaborators/{carol.id}", headers=alice.headers)
    assert response.status_code == 404

async def test_invalid_role_is_rejected(client, make_wishlist, add_member, alice, bob):
    wishlist = await make_wishlist(alice)
    await add_member(wishlist, alice, bob)

    response = await client.put(
        f"/api/wishlists/{wishlist['id']}/collaborators/{bob.id}",
        json={"role": "overlord"},
        headers=alice.headers,
    )
    assert response.status_code == 400

async def test_delete_wishlist_removes_products(app, client, make_wishlist, make_product, add_member, alice, bob):
    wishlist = await make_wishlist(alice)
    await add_member(wishlist, alice, bob)
    for name in ("One", "Two", "Three"):
        product = await make_product(alice, wishlist, name=name, price=5)
    await client.post(f"/api/products/{product['id']}/comments", json={"text": "nice"}, headers=bob.headers)

    response = await client.delete(f"/api/wishlists/{wishlist['id']}", headers=alice.headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Wishlist deleted successfully"

    async with app.state.db.session() as db:
        products = await db.scalar(select(func.count()).select_from(Product))
        comments = await db.scalar(select(func.count()).select_from(ProductComment))
        collaborators = await db.scalar(select(func.count()).select_from(WishlistCollaborator))
    assert (products, comments, collaborators) == (0, 0, 0)

    response = await client.get(f"/api/wishlists/{wishlist['id']}", headers=alice.headers)
    assert response.status_code == 404

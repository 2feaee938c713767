"""Avatar and product image uploads against the in-memory storage"""

from wishlist_app.services.storage import StorageService, get_storage

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

def image(name="photo.png", content=PNG, content_type="image/png"):
    return (name, content, content_type)

async def test_upload_product_image(client, storage, alice):
    response = await client.post(
        "/api/upload/product-image",
        files={"image": image()},
        headers=alice.headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Product image uploaded successfully"
    assert body["image_url"].startswith("https://res.cloudinary.com/")
    assert body["public_id"].startswith("wishlist-app/products/")
    assert body["size"] == len(PNG)
    assert storage.uploads[0]["folder"] == "wishlist-app/products"

async def test_upload_avatar_replaces_previous(client, storage, alice):
    first = await client.post("/api/upload/avatar", files={"avatar": image()}, headers=alice.headers)
    assert first.status_code == 200
    assert first.json()["user"]["avatar"] == first.json()["avatar_url"]
    assert storage.uploads[0]["folder"] == "wishlist-app/avatars"

    second = await client.post("/api/upload/avatar", files={"avatar": image()}, headers=alice.headers)
    assert second.status_code == 200

    assert storage.destroyed == [storage.uploads[0]["public_id"]]
    me = await client.get("/api/auth/me", headers=alice.headers)
    assert me.json()["avatar"] == second.json()["avatar_url"]

async def test_avatar_cleanup_failure_is_ignored(client, storage, alice):
    await client.post("/api/upload/avatar", files={"avatar": image()}, headers=alice.headers)
    storage.fail_destroy = True

    response = await client.post("/api/upload/avatar", files={"avatar": image()}, headers=alice.headers)
    assert response.status_code == 200

async def test_rejects_non_images(client, alice):
    response = await client.post(
        "/api/upload/product-image",
        files={"image": image("notes.txt", b"hello", "text/plain")},
        headers=alice.headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Only image files are allowed"

async def test_rejects_oversized_files(client, alice):
    too_big = b"\x00" * (5 * 1024 * 1024 + 1)
    response = await client.post("/api/upload/avatar", files={"avatar": image(content=too_big)}, headers=alice.headers)
    assert response.status_code == 413

async def test_upload_requires_auth(client):
    response = await client.post("/api/upload/product-image", files={"image": image()})
    assert response.status_code == 401

async def test_unconfigured_storage_returns_503(app, client, alice):
    app.dependency_overrides[get_storage] = lambda: StorageService(app.state.settings)

    response = await client.post("/api/upload/avatar", files={"avatar": image()}, headers=alice.headers)
    assert response.status_code == 503
    assert response.json()["message"] == "Avatar upload service not configured"

    response = await client.get("/api/upload/test")
    assert response.status_code == 503
    assert response.json()["cloudinary_connection"] == "not_configured"

async def test_storage_check(client):
    response = await client.get("/api/upload/test")
    assert response.status_code == 200
    assert response.json()["cloudinary_connection"] == "success"

async def test_delete_image(client, storage, alice):
    url = "https://res.cloudinary.com/demo/image/upload/v1700000000/wishlist-app/products/old.png"
    response = await client.request("DELETE", "/api/upload/image", json={"image_url": url}, headers=alice.headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Image deleted successfully"
    assert storage.destroyed == ["wishlist-app/products/old"]

async def test_delete_image_validation(client, alice):
    response = await client.request("DELETE", "/api/upload/image", json={}, headers=alice.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Image URL is required"

    response = await client.request(
        "DELETE", "/api/upload/image",
        json={"image_url": "https://example.com/cat.png"},
        headers=alice.headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid Cloudinary URL"

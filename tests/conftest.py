"""Shared fixtures: per-test SQLite database, in-memory image storage, users"""

import os

# Settings are read on first import of the application
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_AUTO_CREATE"] = "false"
for key in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET"):
    os.environ.pop(key, None)

from types import SimpleNamespace

import cloudinary.api
import cloudinary.uploader
import pytest
from httpx import ASGITransport, AsyncClient

from wishlist_app.core.config import get_settings
from wishlist_app.main import create_app
from wishlist_app.services.storage import StorageService, get_storage

PASSWORD = "s3cret-pass"

def cloudinary_settings(settings):
    return settings.model_copy(update={
        "CLOUDINARY_CLOUD_NAME": "demo",
        "CLOUDINARY_API_KEY": "key",
        "CLOUDINARY_API_SECRET": "secret",
    })

class FakeStorage(StorageService):
    """StorageService whose Cloudinary calls are answered in memory"""

    def __init__(self, settings):
        super().__init__(cloudinary_settings(settings))
        self.uploads = []
        self.destroyed = []
        self.fail_destroy = False

    async def _run(self, func, *args, **kwargs):
        if func is cloudinary.uploader.upload:
            public_id = f"{kwargs['folder']}/image{len(self.uploads) + 1}"
            self.uploads.append({"public_id": public_id, **kwargs})
            return {
                "secure_url": f"https://res.cloudinary.com/demo/image/upload/v1700000000/{public_id}.jpg",
                "public_id": public_id,
                "width": 200,
                "height": 200,
                "format": "jpg",
                "bytes": len(args[0].getvalue()),
            }
        if func is cloudinary.uploader.destroy:
            if self.fail_destroy:
                raise RuntimeError("cloudinary unavailable")
            self.destroyed.append(args[0])
            return {"result": "ok"}
        if func is cloudinary.api.ping:
            return {"status": "ok"}
        raise AssertionError(f"unexpected Cloudinary call {func!r}")

def build_settings(tmp_path, **overrides):
    return get_settings().model_copy(update={
        "DATABASE_URL": f"sqlite:///{tmp_path}/test.db",
        **overrides,
    })

@pytest.fixture
async def app(tmp_path):
    settings = build_settings(tmp_path)
    application = create_app(settings)
    await application.state.db.create_all()

    storage = FakeStorage(settings)
    application.dependency_overrides[get_storage] = lambda: storage
    application.state.fake_storage = storage

    yield application

    await application.state.db.close()

@pytest.fixture
def storage(app):
    return app.state.fake_storage

@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

@pytest.fixture
def make_user(client):
    """Register a user and return its id, token and auth headers"""

    async def _make(username):
        response = await client.post("/api/auth/register", json={
            "username": username,
            "email": f"{username}@wishlists.io",
            "password": PASSWORD,
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return SimpleNamespace(
            id=body["user"]["id"],
            username=username,
            token=body["token"],
            headers={"Authorization": f"Bearer {body['token']}"},
        )

    return _make

@pytest.fixture
async def alice(make_user):
    return await make_user("alice")

@pytest.fixture
async def bob(make_user):
    return await make_user("bob")

@pytest.fixture
async def carol(make_user):
    return await make_user("carol")

@pytest.fixture
def make_wishlist(client):
    async def _make(owner, **fields):
        payload = {"title": "Birthday", **fields}
        response = await client.post("/api/wishlists", json=payload, headers=owner.headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make

@pytest.fixture
def add_member(client):
    """Invite user into wishlist and optionally set a role other than editor"""

    async def _add(wishlist, owner, user, role=None):
        response = await client.post(f"/api/wishlists/{wishlist['id']}/invite", headers=owner.headers)
        assert response.status_code == 200, response.text
        code = response.json()["invite_code"]

        response = await client.post(f"/api/wishlists/join/{code}", headers=user.headers)
        assert response.status_code == 200, response.text

        if role is not None:
            response = await client.put(
                f"/api/wishlists/{wishlist['id']}/collaborators/{user.id}",
                json={"role": role},
                headers=owner.headers,
            )
            assert response.status_code == 200, response.text

    return _add

@pytest.fixture
def make_product(client):
    async def _make(user, wishlist, **fields):
        payload = {"name": "Headphones", "wishlist_id": wishlist["id"], **fields}
        response = await client.post("/api/products", json=payload, headers=user.headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make

"""StorageService behaviour around the Cloudinary client"""

import time

import cloudinary.uploader
import pytest

from wishlist_app.core.exceptions import StorageNotConfiguredException, UpstreamServiceException
from wishlist_app.services.storage import StorageService, derive_public_id, is_managed_url

from conftest import build_settings, cloudinary_settings

@pytest.mark.parametrize("url, public_id", [
    ("https://res.cloudinary.com/demo/image/upload/v1712345678/wishlist-app/avatars/abc.jpg", "wishlist-app/avatars/abc"),
    ("https://res.cloudinary.com/demo/image/upload/c_fill,w_200/v1/wishlist-app/products/x_1.webp", "wishlist-app/products/x_1"),
    ("https://res.cloudinary.com/demo/image/upload/sample.jpg", None),
    ("", None),
    (None, None),
])
def test_derive_public_id(url, public_id):
    assert derive_public_id(url) == public_id
    assert StorageService.derive_public_id(url) == public_id

def test_is_managed_url():
    assert is_managed_url("https://res.cloudinary.com/demo/image/upload/v1/a.png")
    assert not is_managed_url("https://cdn.example.com/a.png")
    assert not is_managed_url(None)

def test_placeholder_credentials_count_as_unconfigured(tmp_path):
    settings = cloudinary_settings(build_settings(tmp_path)).model_copy(
        update={"CLOUDINARY_CLOUD_NAME": "your_cloud_name_here"}
    )
    assert not StorageService(settings).is_configured
    assert StorageService(cloudinary_settings(build_settings(tmp_path))).is_configured

async def test_store_requires_configuration(tmp_path):
    storage = StorageService(build_settings(tmp_path))
    with pytest.raises(StorageNotConfiguredException):
        await storage.store(b"data", folder="wishlist-app/products")

async def test_store_times_out(tmp_path, monkeypatch):
    settings = cloudinary_settings(build_settings(tmp_path, STORAGE_TIMEOUT_SECONDS=0.05))
    storage = StorageService(settings)

    def slow_upload(*args, **kwargs):
        time.sleep(0.3)
        return {}

    monkeypatch.setattr(cloudinary.uploader, "upload", slow_upload)

    with pytest.raises(UpstreamServiceException) as exc_info:
        await storage.store(b"data", folder="wishlist-app/products")
    assert exc_info.value.status_code == 502

async def test_store_wraps_provider_errors(tmp_path, monkeypatch):
    storage = StorageService(cloudinary_settings(build_settings(tmp_path)))

    def broken_upload(*args, **kwargs):
        raise RuntimeError("Invalid image file")

    monkeypatch.setattr(cloudinary.uploader, "upload", broken_upload)

    with pytest.raises(UpstreamServiceException):
        await storage.store(b"data", folder="wishlist-app/products")

async def test_delete_reports_provider_result(tmp_path, monkeypatch):
    storage = StorageService(cloudinary_settings(build_settings(tmp_path)))
    results = {"gone": {"result": "ok"}, "missing": {"result": "not found"}}
    monkeypatch.setattr(cloudinary.uploader, "destroy", lambda public_id: results[public_id])

    assert await storage.delete("gone") is True
    assert await storage.delete("missing") is False

async def test_delete_quietly_never_raises(tmp_path, monkeypatch):
    storage = StorageService(cloudinary_settings(build_settings(tmp_path)))

    def broken_destroy(public_id):
        raise RuntimeError("network down")

    monkeypatch.setattr(cloudinary.uploader, "destroy", broken_destroy)

    url = "https://res.cloudinary.com/demo/image/upload/v1/wishlist-app/avatars/a.png"
    assert await storage.delete_quietly(url) is False
    assert await storage.delete_quietly("https://cdn.example.com/a.png") is False

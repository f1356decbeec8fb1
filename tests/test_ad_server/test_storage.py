"""
Tests for Cloudinary image storage.
"""

import hashlib

import httpx
import pytest

from admedia.ad_server.services.storage_service import ImageStorage, sign_params
from admedia.common.config import StorageSettings
from admedia.common.exceptions import StorageError, ValidationError


def test_sign_params() -> None:
    params = {"timestamp": 1700000000, "folder": "campaigns"}
    expected = hashlib.sha1(b"folder=campaigns&timestamp=1700000000secret").hexdigest()
    assert sign_params(params, "secret") == expected


def test_endpoint(storage_settings: StorageSettings) -> None:
    storage = ImageStorage(settings=storage_settings)
    assert storage.endpoint == "https://api.cloudinary.com/v1_1/test-cloud/image/upload"


class TestValidate:
    """Upload pre-checks."""

    def test_accepts_image(self, image_storage: ImageStorage) -> None:
        image_storage.validate("a.jpg", "image/jpeg", 10)

    @pytest.mark.parametrize("content_type", ["text/plain", "application/pdf", None, ""])
    def test_rejects_non_image(self, image_storage: ImageStorage, content_type: str | None) -> None:
        with pytest.raises(ValidationError, match="Not an image"):
            image_storage.validate("file", content_type, 10)

    def test_rejects_large_file(self, image_storage: ImageStorage) -> None:
        with pytest.raises(ValidationError, match="too large"):
            image_storage.validate("big.png", "image/png", 1025)

    def test_rejects_empty_file(self, image_storage: ImageStorage) -> None:
        with pytest.raises(ValidationError, match="empty"):
            image_storage.validate("empty.png", "image/png", 0)


@pytest.mark.asyncio
async def test_upload(
    image_storage: ImageStorage,
    upload_requests: list[httpx.Request],
) -> None:
    url = await image_storage.upload(b"png-bytes", "banner.png", "image/png")

    assert url.startswith("https://res.cloudinary.com/test-cloud/")
    assert len(upload_requests) == 1
    request = upload_requests[0]
    assert request.method == "POST"
    body = request.content
    assert b'name="api_key"' in body
    assert b'name="signature"' in body
    assert b'name="folder"' in body
    assert b"png-bytes" in body


@pytest.mark.asyncio
async def test_upload_validates_before_sending(
    image_storage: ImageStorage,
    upload_requests: list[httpx.Request],
) -> None:
    with pytest.raises(ValidationError):
        await image_storage.upload(b"text", "notes.txt", "text/plain")
    assert upload_requests == []


@pytest.mark.asyncio
async def test_upload_rejected_by_server(storage_settings: StorageSettings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"error": "bad key"}))
    storage = ImageStorage(settings=storage_settings, transport=transport)

    with pytest.raises(StorageError) as exc_info:
        await storage.upload(b"png-bytes", "banner.png", "image/png")
    assert exc_info.value.status_code == 502
    assert exc_info.value.details == {"status_code": 401}


@pytest.mark.asyncio
async def test_upload_connection_error(storage_settings: StorageSettings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    storage = ImageStorage(settings=storage_settings, transport=httpx.MockTransport(handler))

    with pytest.raises(StorageError):
        await storage.upload(b"png-bytes", "banner.png", "image/png")


@pytest.mark.asyncio
async def test_upload_without_url(storage_settings: StorageSettings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"public_id": "x"}))
    storage = ImageStorage(settings=storage_settings, transport=transport)

    with pytest.raises(StorageError, match="no URL"):
        await storage.upload(b"png-bytes", "banner.png", "image/png")

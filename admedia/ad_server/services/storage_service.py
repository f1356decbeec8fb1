"""
Campaign image storage on Cloudinary.

Uses Cloudinary's signed REST upload endpoint directly over httpx:

    POST {upload_url}/{cloud_name}/image/upload
         file, api_key, timestamp, folder, signature

where ``signature`` is the SHA-1 of the alphabetically ordered signed
parameters joined with ``&``, followed by the API secret.
"""

from __future__ import annotations

from typing import Any

import httpx

from admedia.ad_server.middleware.metrics import record_image_upload
from admedia.common.config import StorageSettings, get_settings
from admedia.common.exceptions import StorageError, ValidationError
from admedia.common.logger import get_logger
from admedia.common.utils import current_timestamp, sha1_hex

logger = get_logger(__name__)


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Cloudinary request signature for ``params``."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return sha1_hex(to_sign + api_secret)


class ImageStorage:
    """Validates and uploads campaign images, returning their public URL."""

    def __init__(
        self,
        settings: StorageSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings().storage
        self._transport = transport

    def validate(self, filename: str | None, content_type: str | None, size: int) -> None:
        """Reject non-images and files over the size limit."""
        if not content_type or not content_type.startswith(self.settings.allowed_content_prefix):
            raise ValidationError(
                "Not an image! Please upload an image.",
                details={"filename": filename, "content_type": content_type},
            )
        if size > self.settings.max_file_size:
            raise ValidationError(
                "Image is too large",
                details={"size": size, "max_size": self.settings.max_file_size},
            )
        if size == 0:
            raise ValidationError("Image is empty", details={"filename": filename})

    @property
    def endpoint(self) -> str:
        return f"{self.settings.upload_url.rstrip('/')}/{self.settings.cloud_name}/image/upload"

    async def upload(self, data: bytes, filename: str, content_type: str) -> str:
        """
        Upload an image and return its ``secure_url``.

        Raises:
            ValidationError: Not an image, empty, or too large.
            StorageError: Cloudinary unreachable, rejected the upload, or
                answered without a URL.
        """
        self.validate(filename, content_type, len(data))

        signed = {"folder": self.settings.folder, "timestamp": current_timestamp()}
        form = {
            **{key: str(value) for key, value in signed.items()},
            "api_key": self.settings.api_key,
            "signature": sign_params(signed, self.settings.api_secret),
        }

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.timeout),
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.endpoint,
                    data=form,
                    files={"file": (filename, data, content_type)},
                )
        except httpx.HTTPError as e:
            record_image_upload(success=False)
            logger.error("Image upload failed", error=str(e), filename=filename)
            raise StorageError("Error uploading image", details={"reason": str(e)}) from e

        if response.status_code >= 400:
            record_image_upload(success=False)
            logger.error(
                "Image upload rejected",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise StorageError(
                "Error uploading image",
                details={"status_code": response.status_code},
            )

        secure_url = response.json().get("secure_url")
        if not secure_url:
            record_image_upload(success=False)
            raise StorageError("Image storage returned no URL")

        record_image_upload(success=True)
        logger.info("Image uploaded", filename=filename, size=len(data))
        return secure_url


def get_image_storage() -> ImageStorage:
    """FastAPI dependency; overridden in tests."""
    return ImageStorage()

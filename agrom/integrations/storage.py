"""Listing image uploads.

Images go to a public bucket of the hosted storage. Uploads are not atomic:
a file that fails is logged and left out, the rest of the batch continues.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass

from agrom.common.exceptions import ExternalServiceError
from agrom.config import settings
from agrom.integrations.base import BaseIntegration
from agrom.integrations.supabase import SupabaseClient


@dataclass
class UploadedImage:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


def _object_name(filename: str) -> str:
    safe = re.sub(r"[^A-Za-z0-9._-]", "_", filename) or "image"
    return f"{int(time.time() * 1000)}-{safe}"


class StorageClient(BaseIntegration):
    """Public image storage backed by the hosted bucket."""

    def __init__(self, backend: SupabaseClient, bucket: str | None = None) -> None:
        super().__init__("storage")
        self._backend = backend
        self.bucket = bucket or settings.STORAGE_BUCKET

    async def health_check(self) -> bool:
        return await self._backend.health_check()

    async def upload_file(self, image: UploadedImage) -> str:
        name = _object_name(image.filename)
        await self._backend.upload_object(self.bucket, name, image.content, image.content_type)
        self.logger.info("Uploaded %s (%d bytes)", name, len(image.content))
        return self._backend.public_url(self.bucket, name)

    async def upload_images(self, images: list[UploadedImage]) -> list[str]:
        urls: list[str] = []
        for image in images:
            if not image.content:
                continue
            try:
                urls.append(await self.upload_file(image))
            except ExternalServiceError as e:
                self.logger.warning("Skipping image %s: %s", image.filename, e.detail)
        return urls

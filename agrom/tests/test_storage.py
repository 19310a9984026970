import httpx
import pytest

from agrom.config import settings
from agrom.integrations.storage import StorageClient, UploadedImage
from agrom.integrations.supabase import SupabaseClient


@pytest.mark.asyncio
async def test_upload_returns_public_urls_and_skips_failures():
    uploaded = []

    def handler(request: httpx.Request):
        if "broken" in request.url.path:
            return httpx.Response(500, json={"message": "storage unavailable"})
        uploaded.append((request.url.path, request.headers["content-type"], request.content))
        return httpx.Response(200, json={"Key": request.url.path})

    storage = StorageClient(SupabaseClient(access_token="t", transport=httpx.MockTransport(handler)))
    urls = await storage.upload_images(
        [
            UploadedImage("campo 1.jpg", b"one", "image/jpeg"),
            UploadedImage("broken.png", b"two", "image/png"),
            UploadedImage("empty.jpg", b"", "image/jpeg"),
            UploadedImage("tractor.png", b"three", "image/png"),
        ]
    )

    assert len(urls) == 2
    assert urls[0].startswith(f"{settings.SUPABASE_URL}/storage/v1/object/public/service-images/")
    assert urls[0].endswith("-campo_1.jpg")
    assert urls[1].endswith("-tractor.png")
    assert [u[1] for u in uploaded] == ["image/jpeg", "image/png"]
    assert uploaded[0][0].startswith("/storage/v1/object/service-images/")


@pytest.mark.asyncio
async def test_custom_bucket():
    def handler(request):
        return httpx.Response(200, json={})

    storage = StorageClient(SupabaseClient(transport=httpx.MockTransport(handler)), bucket="avatars")
    url = await storage.upload_file(UploadedImage("me.jpg", b"x"))
    assert "/public/avatars/" in url

"""
Tests for the image upload, retrieval and deletion endpoints.
"""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from sqlalchemy import func, select
from starlette.datastructures import UploadFile

from adaptation_server.app.factory import create_app
from adaptation_server.config import get_config
from adaptation_server.container import ApplicationContainer
from adaptation_server.exceptions import StorageError, StorageTimeoutError
from adaptation_server.models.stored_image import StoredImage


async def count_stored_images(container: ApplicationContainer) -> int:
    session_maker = container.database_manager.get_session_maker()
    async with session_maker() as session:
        return (await session.execute(select(func.count()).select_from(StoredImage))).scalar_one()


@pytest.fixture
async def placeholder_client(monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Client for an app whose blob store has no read/write token."""
    monkeypatch.setenv("BLOB_READ_WRITE_TOKEN", "")
    config = get_config()
    app_container = ApplicationContainer(config=config)
    await app_container.initialize()
    app = create_app(config=config, container=app_container)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    await app_container.shutdown()


class TestUploadImage:
    """Tests for POST /images/upload."""

    async def test_upload_then_fetch_returns_same_bytes(self, client: httpx.AsyncClient, png_bytes: bytes) -> None:
        """Test the upload/retrieve round trip including headers."""
        upload = await client.post("/images/upload", files={"file": ("pixel.png", png_bytes, "image/png")})

        assert upload.status_code == 200
        body = upload.json()
        assert body["success"] is True
        assert body["url"] == f"/images/{body['fileId']}"
        assert "note" not in body

        fetched = await client.get(body["url"])

        assert fetched.status_code == 200
        assert fetched.content == png_bytes
        assert fetched.headers["content-type"] == "image/png"
        assert fetched.headers["cache-control"] == "public, max-age=31536000"

    async def test_oversize_upload_is_rejected_without_storing(
        self, client: httpx.AsyncClient, container: ApplicationContainer
    ) -> None:
        """Test that a file over the limit returns 400 and writes nothing."""
        content = b"\x00" * (container.blob_store.max_upload_bytes + 1)

        response = await client.post("/images/upload", files={"file": ("big.png", content, "image/png")})

        assert response.status_code == 400
        assert response.json()["error"] == "File too large. Maximum size is 2MB."
        assert await count_stored_images(container) == 0

    async def test_upload_read_is_bounded_by_size_limit(
        self, client: httpx.AsyncClient, container: ApplicationContainer
    ) -> None:
        """Test that a large upload is never read past one byte over the limit."""
        limit = container.blob_store.max_upload_bytes
        original_read = UploadFile.read
        read_sizes: list[int] = []

        async def recording_read(self, size: int = -1) -> bytes:
            read_sizes.append(size)
            return await original_read(self, size)

        with patch.object(UploadFile, "read", recording_read):
            response = await client.post(
                "/images/upload", files={"file": ("big.png", b"\x00" * (limit + 1024 * 1024), "image/png")}
            )

        assert response.status_code == 400
        assert read_sizes == [limit + 1]
        assert await count_stored_images(container) == 0

    async def test_non_image_upload_is_rejected(
        self, client: httpx.AsyncClient, container: ApplicationContainer
    ) -> None:
        """Test that non-image content types return 400."""
        response = await client.post("/images/upload", files={"file": ("notes.txt", b"hello", "text/plain")})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid file type. Only images are allowed."
        assert await count_stored_images(container) == 0

    async def test_missing_file_returns_400(self, client: httpx.AsyncClient) -> None:
        """Test a multipart request without the file field."""
        response = await client.post("/images/upload", data={"other": "value"})

        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}

    async def test_timeout_returns_500_with_suggestion(
        self, client: httpx.AsyncClient, container: ApplicationContainer, png_bytes: bytes
    ) -> None:
        """Test that a write timeout maps to a 500 with retry advice."""
        timeout = StorageTimeoutError("Image write exceeded 25s", operation="store", timeout_seconds=25)
        with patch.object(container.blob_store, "store", AsyncMock(side_effect=timeout)):
            response = await client.post("/images/upload", files={"file": ("pixel.png", png_bytes, "image/png")})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Image upload timed out"
        assert body["suggestion"] == "Please try again with a smaller image"
        assert body["details"]

    async def test_storage_failure_returns_500(
        self, client: httpx.AsyncClient, container: ApplicationContainer, png_bytes: bytes
    ) -> None:
        """Test that other storage failures map to a 500."""
        with patch.object(container.blob_store, "store", AsyncMock(side_effect=StorageError("disk full"))):
            response = await client.post("/images/upload", files={"file": ("pixel.png", png_bytes, "image/png")})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to upload file"


class TestPlaceholderUpload:
    """Tests for uploads when the blob store token is not configured."""

    async def test_placeholder_returned_without_token(
        self, placeholder_client: httpx.AsyncClient, png_bytes: bytes
    ) -> None:
        """Test that a valid upload returns a placeholder URL and no id."""
        response = await placeholder_client.post(
            "/images/upload", files={"file": ("my cat.png", png_bytes, "image/png")}
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "fileId": None,
            "url": "/placeholder.svg?height=200&width=200&text=my%20cat.png",
            "note": "Using placeholder due to missing Blob token",
        }

    async def test_validation_still_applies_without_token(self, placeholder_client: httpx.AsyncClient) -> None:
        """Test that oversize and non-image files are rejected even in placeholder mode."""
        response = await placeholder_client.post(
            "/images/upload", files={"file": ("notes.txt", b"hello", "text/plain")}
        )

        assert response.status_code == 400


class TestGetImage:
    """Tests for GET /images/{id}."""

    @pytest.mark.parametrize("file_id", ["0b6f8a52-1111-4c3d-9e2f-3a4b5c6d7e8f", "not-an-id"])
    async def test_unknown_image_returns_404(self, client: httpx.AsyncClient, file_id: str) -> None:
        """Test unknown and malformed ids."""
        response = await client.get(f"/images/{file_id}")

        assert response.status_code == 404
        assert response.json() == {"error": "Image not found"}

    async def test_uppercase_id_fetches_image(self, client: httpx.AsyncClient, png_bytes: bytes) -> None:
        """Test that image ids are matched case-insensitively."""
        file_id = (
            await client.post("/images/upload", files={"file": ("pixel.png", png_bytes, "image/png")})
        ).json()["fileId"]

        response = await client.get(f"/images/{file_id.upper()}")

        assert response.status_code == 200
        assert response.content == png_bytes

    async def test_missing_id_returns_400(self, client: httpx.AsyncClient) -> None:
        """Test a request that names no file."""
        response = await client.get("/images")

        assert response.status_code == 400
        assert response.json() == {"error": "Missing file ID"}

    async def test_read_timeout_returns_500(self, client: httpx.AsyncClient, container: ApplicationContainer) -> None:
        """Test that a slow read maps to a 500."""
        timeout = StorageTimeoutError("Image read exceeded 15s", operation="retrieve", timeout_seconds=15)
        with patch.object(container.blob_store, "retrieve", AsyncMock(side_effect=timeout)):
            response = await client.get("/images/0b6f8a52-1111-4c3d-9e2f-3a4b5c6d7e8f")

        assert response.status_code == 500
        assert response.json() == {"error": "Image retrieval timed out"}


class TestDeleteImage:
    """Tests for DELETE /images/{id}."""

    async def test_delete_uploaded_image(self, client: httpx.AsyncClient, png_bytes: bytes) -> None:
        """Test that a deleted image can no longer be fetched."""
        file_id = (
            await client.post("/images/upload", files={"file": ("pixel.png", png_bytes, "image/png")})
        ).json()["fileId"]

        response = await client.delete(f"/images/{file_id}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Image deleted successfully"}
        assert (await client.get(f"/images/{file_id}")).status_code == 404

    async def test_delete_unknown_image_returns_500(self, client: httpx.AsyncClient) -> None:
        """Test that a failed delete, including an unknown id, is a 500."""
        response = await client.delete("/images/0b6f8a52-1111-4c3d-9e2f-3a4b5c6d7e8f")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to delete image"}

    async def test_delete_without_id_returns_400(self, client: httpx.AsyncClient) -> None:
        """Test a delete that names no file."""
        response = await client.delete("/images")

        assert response.status_code == 400


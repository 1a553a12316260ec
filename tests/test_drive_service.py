"""Tests for the Google Drive download service."""

import httpx
import pytest

from app.backend.exceptions import UpstreamError
from app.backend.services.drive_service import DriveService


class TestDriveService:
    """Tests for DriveService.download_file."""

    @pytest.mark.asyncio
    async def test_downloads_file_content(self, sample_pdf_bytes: bytes):
        """Test that the media endpoint is called with the bearer token."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=sample_pdf_bytes)

        service = DriveService(access_token="abc", transport=httpx.MockTransport(handler))
        content = await service.download_file("file-123")

        assert content == sample_pdf_bytes
        assert seen[0].url.path == "/drive/v3/files/file-123"
        assert seen[0].url.params["alt"] == "media"
        assert seen[0].headers["Authorization"] == "Bearer abc"

    @pytest.mark.asyncio
    async def test_http_error_is_upstream_error(self):
        """Test that a non-2xx response raises UpstreamError."""
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        service = DriveService(access_token="abc", transport=transport)

        with pytest.raises(UpstreamError) as exc_info:
            await service.download_file("missing")
        assert "404" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_is_upstream_error(self):
        """Test that connection failures raise UpstreamError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        service = DriveService(access_token="abc", transport=httpx.MockTransport(handler))
        with pytest.raises(UpstreamError):
            await service.download_file("file-123")

    @pytest.mark.asyncio
    async def test_missing_token(self):
        """Test that no access token fails before any request."""
        service = DriveService(access_token="")
        with pytest.raises(UpstreamError) as exc_info:
            await service.download_file("file-123")
        assert "GOOGLE_DRIVE_ACCESS_TOKEN" in str(exc_info.value)

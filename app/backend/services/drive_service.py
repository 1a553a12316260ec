"""
Google Drive download service.

Fetches the raw bytes of a Drive file so it can be fed to the extraction
pipeline, either from a push notification or from ``/api/extract/drive``.
"""

import logging

import httpx

from ..config import get_settings
from ..exceptions import UpstreamError

logger = logging.getLogger(__name__)

DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"


class DriveService:
    """
    Downloads file content from the Google Drive v3 API.

    Uses a bearer access token; obtaining and refreshing that token is
    handled outside this service.
    """

    def __init__(
        self,
        access_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Drive service.

        Args:
            access_token: OAuth bearer token. If None, reads from config/environment.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        if access_token is None:
            access_token = get_settings().google_drive_access_token
        self.access_token = access_token
        self._transport = transport

    async def download_file(self, file_id: str) -> bytes:
        """
        Download the content of a Drive file.

        Args:
            file_id: Google Drive file identifier.

        Returns:
            The file bytes.

        Raises:
            UpstreamError: If no token is configured or the download fails.
        """
        if not self.access_token:
            raise UpstreamError(
                "Google Drive access token not provided. Set GOOGLE_DRIVE_ACCESS_TOKEN."
            )

        url = f"{DRIVE_API_BASE}/files/{file_id}"
        headers = {"Authorization": f"Bearer {self.access_token}"}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(url, params={"alt": "media"}, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Drive download failed for %s: HTTP %d",
                file_id,
                e.response.status_code,
            )
            raise UpstreamError(
                f"Google Drive returned {e.response.status_code} for file {file_id}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Drive download failed for %s: %s", file_id, e)
            raise UpstreamError(f"Google Drive request failed: {e}") from e

        logger.info("Downloaded Drive file %s (%d bytes)", file_id, len(response.content))
        return response.content


_drive_service: DriveService | None = None


def get_drive_service() -> DriveService:
    """Get or create the Drive service singleton."""
    global _drive_service
    if _drive_service is None:
        _drive_service = DriveService()
    return _drive_service

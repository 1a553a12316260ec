"""
Ingestion of remote files into the extraction pipeline.
"""

import logging

from ..models import PaperMetadata
from .ai import AIService
from .drive_service import DriveService

logger = logging.getLogger(__name__)


async def extract_drive_file(
    file_id: str,
    drive_service: DriveService,
    ai_service: AIService,
) -> PaperMetadata:
    """
    Download a Google Drive file and extract its metadata.

    Args:
        file_id: Google Drive file identifier.
        drive_service: Service used to fetch the file bytes.
        ai_service: Service used to run the extraction.

    Returns:
        The extracted PaperMetadata.
    """
    logger.info("Ingesting Drive file %s", file_id)
    pdf_bytes = await drive_service.download_file(file_id)
    return await ai_service.extract_metadata(pdf_bytes, filename=f"drive:{file_id}")

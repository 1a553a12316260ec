"""
Router for metadata extraction endpoints.

Handles:
- PDF upload extraction
- Google Drive file extraction
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from ..models import DriveExtractRequest, ExtractResponse
from ..services.ai import AIService, get_ai_service
from ..services.drive_service import DriveService, get_drive_service
from ..services.ingestion import extract_drive_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/extract", tags=["extract"])


@router.post("", response_model=ExtractResponse)
async def extract_from_upload(
    pdf: Annotated[UploadFile | None, File(description="Paper PDF to analyze")] = None,
    ai_service: AIService = Depends(get_ai_service),
) -> ExtractResponse:
    """
    Extract bibliographic metadata from an uploaded PDF.

    The record is returned for review only; nothing is saved until the
    client posts it to ``/api/papers/create``.
    """
    pdf_bytes = None
    filename = None
    if pdf is not None:
        try:
            pdf_bytes = await pdf.read()
            filename = pdf.filename
        finally:
            await pdf.close()

    extracted = await ai_service.extract_metadata(pdf_bytes, filename=filename)
    return ExtractResponse(extracted=extracted)


@router.post("/drive", response_model=ExtractResponse)
async def extract_from_drive(
    request: DriveExtractRequest,
    ai_service: AIService = Depends(get_ai_service),
    drive_service: DriveService = Depends(get_drive_service),
) -> ExtractResponse:
    """Extract bibliographic metadata from a Google Drive file."""
    extracted = await extract_drive_file(request.file_id, drive_service, ai_service)
    return ExtractResponse(extracted=extracted)

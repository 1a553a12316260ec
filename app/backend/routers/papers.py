"""
Router for saved paper endpoints.

Handles:
- Listing saved papers (newest first)
- Creating a paper from a reviewed record
- Deleting a paper by ID
- CSV export
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import InputError
from ..models import (
    CreatePaperResponse,
    DeletePaperResponse,
    PaperListResponse,
    PaperMetadata,
    PaperRecord,
)
from ..services.csv_export import CSV_FILENAME, export_papers_csv
from ..services.paper_repository import PaperRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/papers", tags=["papers"])


@router.get("", response_model=PaperListResponse)
async def list_papers(db: Session = Depends(get_db)) -> PaperListResponse:
    """Get all saved papers ordered by creation date (newest first)."""
    papers = PaperRepository(db).list()
    return PaperListResponse(papers=[PaperRecord.from_paper(p) for p in papers])


@router.post("/create", response_model=CreatePaperResponse)
async def create_paper(
    request: PaperMetadata,
    db: Session = Depends(get_db),
) -> CreatePaperResponse:
    """
    Save a reviewed paper record.

    Accepts the full record shape; unknown fields are ignored and absent
    fields take their defaults.
    """
    paper = PaperRepository(db).create(request)
    return CreatePaperResponse(paper=PaperRecord.from_paper(paper))


@router.get("/export")
async def export_papers(db: Session = Depends(get_db)) -> Response:
    """Download all saved papers as CSV."""
    papers = PaperRepository(db).list()
    logger.info("Exporting %d paper(s) to CSV", len(papers))
    return Response(
        content=export_papers_csv(papers),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{CSV_FILENAME}"',
        },
    )


@router.delete("/{paper_id}", response_model=DeletePaperResponse)
async def delete_paper(
    paper_id: str,
    db: Session = Depends(get_db),
) -> DeletePaperResponse:
    """
    Delete a saved paper.

    Deleting an unknown ID succeeds with ``deleted`` set to false.
    """
    try:
        paper_uuid = uuid.UUID(paper_id)
    except ValueError:
        raise InputError("Invalid paper ID format")

    deleted = PaperRepository(db).delete_by_id(paper_uuid)
    return DeletePaperResponse(deleted=deleted)

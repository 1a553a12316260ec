"""
Persistence gateway for saved papers.

Create, list and delete only; stored records are never updated in place.
"""

import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import PersistenceError
from ..models import PaperMetadata
from ..models_db import Paper

logger = logging.getLogger(__name__)


class PaperRepository:
    """Create/list/delete operations on the ``papers`` table."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, metadata: PaperMetadata) -> Paper:
        """
        Persist a reviewed record.

        The identifier and timestamps are assigned here. Duplicate titles
        and DOIs are allowed.
        """
        paper = Paper(**metadata.model_dump(by_alias=False))
        try:
            self.db.add(paper)
            self.db.commit()
            self.db.refresh(paper)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to create paper: %s", e)
            raise PersistenceError(f"Failed to save paper: {e}") from e

        logger.info("Created paper %s: %r", paper.id, paper.title[:80])
        return paper

    def list(self) -> list[Paper]:
        """All saved papers, newest first."""
        try:
            return self.db.query(Paper).order_by(Paper.created_at.desc()).all()
        except SQLAlchemyError as e:
            logger.error("Failed to list papers: %s", e)
            raise PersistenceError(f"Failed to fetch papers: {e}") from e

    def delete_by_id(self, paper_id: uuid.UUID) -> bool:
        """
        Delete a paper by identifier.

        Returns:
            True if a row was removed, False if no paper had that id.
        """
        try:
            paper = self.db.get(Paper, paper_id)
            if paper is None:
                logger.info("Delete requested for unknown paper %s", paper_id)
                return False
            self.db.delete(paper)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to delete paper %s: %s", paper_id, e)
            raise PersistenceError(f"Failed to delete paper: {e}") from e

        logger.info("Deleted paper %s", paper_id)
        return True

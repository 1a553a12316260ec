"""Tests for the paper persistence gateway."""

import uuid
from datetime import datetime, timedelta

import pytest
from sqlalchemy import Text
from sqlalchemy.exc import OperationalError

from app.backend.exceptions import PersistenceError
from app.backend.models import PaperMetadata
from app.backend.models_db import Paper
from app.backend.services.paper_repository import PaperRepository


class TestPaperRepository:
    """Tests for PaperRepository."""

    def test_create_assigns_id_and_timestamp(self, db_session):
        """Test that create fills in the identifier and timestamps."""
        repo = PaperRepository(db_session)
        paper = repo.create(PaperMetadata(title="Sensor Fusion Survey"))

        assert isinstance(paper.id, uuid.UUID)
        assert isinstance(paper.created_at, datetime)
        assert paper.doi == ""
        assert paper.is_data_fusion_paper is False

    def test_created_record_is_listed(self, db_session):
        """Test the create-then-list round trip."""
        repo = PaperRepository(db_session)
        created = repo.create(PaperMetadata(title="Round Trip", author="A; B"))

        listed = repo.list()
        assert [p.id for p in listed] == [created.id]
        assert listed[0].title == "Round Trip"
        assert listed[0].author == "A; B"

    def test_duplicates_allowed(self, db_session):
        """Test that identical records are stored twice."""
        repo = PaperRepository(db_session)
        record = PaperMetadata(title="Same", doi="10.1/same")
        first = repo.create(record)
        second = repo.create(record)

        assert first.id != second.id
        assert len(repo.list()) == 2

    def test_list_newest_first(self, db_session):
        """Test that listing is ordered by creation time descending."""
        base = datetime(2024, 1, 1, 12, 0, 0)
        for offset, title in [(1, "middle"), (0, "oldest"), (2, "newest")]:
            db_session.add(Paper(title=title, created_at=base + timedelta(minutes=offset)))
        db_session.commit()

        titles = [p.title for p in PaperRepository(db_session).list()]
        assert titles == ["newest", "middle", "oldest"]

    def test_free_form_fields_are_unbounded(self, db_session):
        """Test that long DOI and date strings are stored as-is in TEXT columns."""
        for column in ("doi", "publication_date"):
            assert isinstance(Paper.__table__.c[column].type, Text)
            assert Paper.__table__.c[column].type.length is None

        doi = "10.5555/" + "x" * 300
        date = "Published online ahead of print, " * 4
        repo = PaperRepository(db_session)
        repo.create(PaperMetadata(doi=doi, publicationDate=date))

        stored = repo.list()[0]
        assert stored.doi == doi
        assert stored.publication_date == date

    def test_delete_existing(self, db_session):
        """Test that a deleted record disappears from listings."""
        repo = PaperRepository(db_session)
        keep = repo.create(PaperMetadata(title="keep"))
        drop = repo.create(PaperMetadata(title="drop"))

        assert repo.delete_by_id(drop.id) is True
        assert [p.id for p in repo.list()] == [keep.id]

    def test_delete_unknown_is_safe(self, db_session):
        """Test that deleting an unknown id returns False without raising."""
        repo = PaperRepository(db_session)
        assert repo.delete_by_id(uuid.uuid4()) is False

    def test_database_failure_is_persistence_error(self, db_session, monkeypatch):
        """Test that SQLAlchemy errors surface as PersistenceError."""

        def broken_commit():
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db_session, "commit", broken_commit)
        with pytest.raises(PersistenceError):
            PaperRepository(db_session).create(PaperMetadata(title="lost"))

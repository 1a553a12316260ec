"""
SQLAlchemy database models for the paper metadata service.

A single table holds the saved paper records. Rows are created and deleted,
never updated in place.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the column stores UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Paper(Base):
    """
    A saved paper record.

    Holds the twelve bibliographic fields extracted from a PDF (after user
    review) plus the identifier and timestamps assigned on insert.
    """

    __tablename__ = "papers"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    doi: Mapped[str] = mapped_column(Text, default="", nullable=False)
    title: Mapped[str] = mapped_column(Text, default="", nullable=False)
    author: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
        comment="Semicolon-delimited author names",
    )
    publication_title: Mapped[str] = mapped_column(Text, default="", nullable=False)
    publication_date: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
        comment="YYYY-MM-DD or YYYY, unvalidated",
    )
    url: Mapped[str] = mapped_column(Text, default="", nullable=False)
    keywords: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
        comment="Semicolon-delimited keywords",
    )
    abstract: Mapped[str] = mapped_column(Text, default="", nullable=False)
    publisher: Mapped[str] = mapped_column(Text, default="", nullable=False)
    field_of_study: Mapped[str] = mapped_column(Text, default="", nullable=False)
    is_data_fusion_paper: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    data_fusion_classification_reason: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Paper(id={self.id}, title='{self.title[:40]}')>"

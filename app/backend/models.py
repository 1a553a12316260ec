"""
Pydantic models for the paper metadata service.

Defines the twelve-field paper record shared by extraction and persistence,
its coercion rules for untrusted model output, and the API envelopes.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import __version__

# Text fields of the record, keyed by their JSON (camelCase) name
TEXT_FIELDS: dict[str, str] = {
    "doi": "doi",
    "title": "title",
    "author": "author",
    "publicationTitle": "publication_title",
    "publicationDate": "publication_date",
    "url": "url",
    "keywords": "keywords",
    "abstract": "abstract",
    "publisher": "publisher",
    "fieldOfStudy": "field_of_study",
    "dataFusionClassificationReason": "data_fusion_classification_reason",
}

FLAG_FIELD = "isDataFusionPaper"

# All twelve record keys in their canonical order
RECORD_KEYS: list[str] = [
    "doi",
    "title",
    "author",
    "publicationTitle",
    "publicationDate",
    "url",
    "keywords",
    "abstract",
    "publisher",
    "fieldOfStudy",
    "isDataFusionPaper",
    "dataFusionClassificationReason",
]

_TRUE_STRINGS = {"true", "yes", "y", "1"}


def coerce_text(value: Any) -> str:
    """
    Coerce an arbitrary JSON value to a record string.

    None becomes "", lists are joined with "; " (models sometimes return
    author or keyword arrays), and other scalars are stringified.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "; ".join(coerce_text(item) for item in value if item is not None)
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


def coerce_flag(value: Any) -> bool:
    """Coerce an arbitrary JSON value to the classification flag."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


# =============================================================================
# Paper Record Models
# =============================================================================


class PaperMetadata(BaseModel):
    """
    Bibliographic metadata for one scientific paper.

    Every string field defaults to "" and the flag defaults to False, so a
    field missing from the model output never surfaces as null.

    Attributes:
        doi: Digital Object Identifier, may be empty.
        title: Full paper title.
        author: Author names separated by semicolons.
        publication_title: Journal or conference name.
        publication_date: YYYY-MM-DD or YYYY (not validated).
        url: Paper URL, may be empty.
        keywords: Keywords separated by semicolons.
        abstract: Abstract text.
        publisher: Publisher name.
        field_of_study: Primary field of study.
        is_data_fusion_paper: Whether the paper concerns data/sensor/information fusion.
        data_fusion_classification_reason: Rationale for the fusion flag.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    doi: str = Field(default="", examples=["10.1234/example"])
    title: str = Field(default="")
    author: str = Field(default="", examples=["Ada Lovelace; Charles Babbage"])
    publication_title: str = Field(default="", alias="publicationTitle")
    publication_date: str = Field(default="", alias="publicationDate", examples=["2024-01-15"])
    url: str = Field(default="")
    keywords: str = Field(default="")
    abstract: str = Field(default="")
    publisher: str = Field(default="")
    field_of_study: str = Field(default="", alias="fieldOfStudy")
    is_data_fusion_paper: bool = Field(default=False, alias="isDataFusionPaper")
    data_fusion_classification_reason: str = Field(
        default="",
        alias="dataFusionClassificationReason",
    )

    @field_validator(
        "doi",
        "title",
        "author",
        "publication_title",
        "publication_date",
        "url",
        "keywords",
        "abstract",
        "publisher",
        "field_of_study",
        "data_fusion_classification_reason",
        mode="before",
    )
    @classmethod
    def coerce_text_field(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("is_data_fusion_paper", mode="before")
    @classmethod
    def coerce_flag_field(cls, v: Any) -> bool:
        return coerce_flag(v)

    @classmethod
    def from_extracted(cls, data: dict[str, Any]) -> "PaperMetadata":
        """
        Project a parsed model reply onto the record.

        Only the twelve known keys are read; anything else the model added is
        dropped. Absent keys take their defaults.
        """
        projected: dict[str, Any] = {
            attr: coerce_text(data.get(key)) for key, attr in TEXT_FIELDS.items()
        }
        projected["is_data_fusion_paper"] = coerce_flag(data.get(FLAG_FIELD))
        return cls(**projected)


class PaperRecord(PaperMetadata):
    """A persisted paper with its assigned identifier and timestamps."""

    id: str = Field(..., description="Paper ID (UUID)")
    created_at: str = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: str = Field(..., alias="updatedAt", description="Last write timestamp")

    @classmethod
    def from_paper(cls, paper: Any) -> "PaperRecord":
        """Build a response record from a ``Paper`` ORM row."""
        return cls(
            id=str(paper.id),
            created_at=paper.created_at.isoformat(),
            updated_at=paper.updated_at.isoformat(),
            doi=paper.doi,
            title=paper.title,
            author=paper.author,
            publication_title=paper.publication_title,
            publication_date=paper.publication_date,
            url=paper.url,
            keywords=paper.keywords,
            abstract=paper.abstract,
            publisher=paper.publisher,
            field_of_study=paper.field_of_study,
            is_data_fusion_paper=paper.is_data_fusion_paper,
            data_fusion_classification_reason=paper.data_fusion_classification_reason,
        )


# =============================================================================
# API Envelopes
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default=__version__)


class ExtractResponse(BaseModel):
    """Successful extraction envelope."""

    success: bool = Field(default=True)
    extracted: PaperMetadata


class DriveExtractRequest(BaseModel):
    """Request to extract metadata from a Google Drive file."""

    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(..., min_length=1, alias="fileId")
    source: str = Field(default="google-drive")


class PaperListResponse(BaseModel):
    """All saved papers, newest first."""

    papers: list[PaperRecord] = Field(default_factory=list)


class CreatePaperResponse(BaseModel):
    """Response for a created paper."""

    success: bool = Field(default=True)
    paper: PaperRecord


class DeletePaperResponse(BaseModel):
    """Response for a delete request."""

    success: bool = Field(default=True)
    deleted: bool = Field(..., description="Whether a record was actually removed")


class ChallengeResponse(BaseModel):
    """Webhook verification handshake reply."""

    challenge: str | None = None


class WebhookResponse(BaseModel):
    """Acknowledgement of a Drive change notification."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    processed_files: int | None = Field(default=None, alias="processedFiles")
    succeeded_files: int | None = Field(default=None, alias="succeededFiles")

"""
Metadata extraction from scientific paper PDFs.

Sends the whole PDF to the model as a single multimodal request, then
cleans and parses the textual reply into a ``PaperMetadata`` record.
"""

import base64
import json
import logging
import re
from typing import Any, Awaitable, Callable

from ...exceptions import InputError, PaperServiceError, ParseError, UpstreamError
from ...models import RECORD_KEYS, PaperMetadata

logger = logging.getLogger(__name__)

# (document bytes, prompt) -> raw model text
MetadataGenerator = Callable[[bytes, str], Awaitable[str]]


# =============================================================================
# Extraction Prompts
# =============================================================================

EXTRACTION_PROMPT = """You are a scientific paper metadata extractor. Analyze this PDF document and extract the following fields. Return ONLY a valid JSON object with these exact keys:

{
  "doi": "the DOI of the paper, e.g. 10.1234/example",
  "title": "the full title of the paper",
  "author": "all authors separated by semicolons",
  "publicationTitle": "the journal or conference name",
  "publicationDate": "publication date in YYYY-MM-DD or YYYY format",
  "url": "the URL if available, otherwise empty string",
  "keywords": "keywords separated by semicolons",
  "abstract": "the full abstract text",
  "publisher": "the publisher name",
  "fieldOfStudy": "the primary field of study",
  "isDataFusionPaper": true or false (whether this paper is related to data fusion, sensor fusion, or information fusion),
  "dataFusionClassificationReason": "brief explanation of why this is or is not a data fusion paper"
}

If a field cannot be determined from the text, use an empty string (or false for isDataFusionPaper).
Never invent values that the document does not state.
Return ONLY the JSON object, no markdown formatting, no code blocks."""

PDF_HEADER_WINDOW = 1024

# ```json and bare ``` markers, each with an optional trailing newline
_CODE_FENCE_RE = re.compile(r"```(?:json)?\n?")


# =============================================================================
# Helper Functions
# =============================================================================


def _pdf_to_base64(pdf_bytes: bytes) -> str:
    """Encode PDF bytes as base64 for the API."""
    return base64.b64encode(pdf_bytes).decode("utf-8")


def _validate_pdf_bytes(pdf_bytes: bytes | None) -> bytes:
    """Reject missing, empty or non-PDF payloads before any model call."""
    if not pdf_bytes:
        raise InputError("No PDF file provided")
    # Readers accept the header anywhere in the first 1024 bytes
    if b"%PDF" not in pdf_bytes[:PDF_HEADER_WINDOW]:
        raise InputError("Invalid PDF file: no PDF header found")
    return pdf_bytes


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code fences the model may wrap around its JSON.

    Args:
        text: Raw model reply.

    Returns:
        The reply with every fence marker removed, whitespace-trimmed.
    """
    return _CODE_FENCE_RE.sub("", text).strip()


def parse_extraction_response(raw: str) -> dict[str, Any]:
    """
    Parse the model reply into a generic mapping.

    No partial recovery is attempted: anything that is not a single JSON
    object after fence stripping is a ``ParseError``.

    Args:
        raw: Model reply, already trimmed.

    Returns:
        The decoded JSON object.

    Raises:
        ParseError: If the cleaned text is not a JSON object. ``raw`` is
            attached unmodified for diagnostics.
    """
    cleaned = strip_code_fences(raw)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse extraction response: %s", raw[:500])
        raise ParseError("Failed to parse model response", raw=raw) from e

    if not isinstance(data, dict):
        logger.error("Extraction response is not a JSON object: %s", raw[:500])
        raise ParseError("Failed to parse model response", raw=raw)

    return data


# =============================================================================
# Model Call
# =============================================================================


async def request_metadata(
    client: Any,  # AsyncOpenAI client
    pdf_bytes: bytes,
    prompt: str,
    model: str = "gpt-4.1",
    filename: str = "paper.pdf",
) -> str:
    """
    Send the PDF and prompt to OpenAI in one multimodal request.

    No retries and no client-side timeout: any failure is surfaced as
    ``UpstreamError``.

    Returns:
        The raw text of the completion.
    """
    content = [
        {
            "type": "file",
            "file": {
                "filename": filename,
                "file_data": f"data:application/pdf;base64,{_pdf_to_base64(pdf_bytes)}",
            },
        },
        {"type": "text", "text": prompt},
    ]

    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": content}],
        )
    except Exception as e:
        logger.exception("Metadata extraction request failed")
        raise UpstreamError(f"AI service error: {e}") from e

    if not response.choices:
        raise UpstreamError("Empty response from OpenAI")
    text = response.choices[0].message.content
    if not text:
        raise UpstreamError("Empty response from OpenAI")
    return text


# =============================================================================
# Main Extraction Function
# =============================================================================


async def extract_metadata(
    pdf_bytes: bytes | None,
    generate: MetadataGenerator,
    filename: str | None = None,
) -> PaperMetadata:
    """
    Extract bibliographic metadata from a PDF.

    Args:
        pdf_bytes: Raw PDF content.
        generate: The model seam, ``(document bytes, prompt) -> raw text``.
        filename: Original filename, used for logging only.

    Returns:
        PaperMetadata with all twelve fields populated or defaulted.

    Raises:
        InputError: No (or non-PDF) document supplied. No model call is made.
        UpstreamError: The model call failed.
        ParseError: The reply was not a JSON object.
    """
    pdf_bytes = _validate_pdf_bytes(pdf_bytes)

    logger.info(
        "Extracting metadata from '%s' (%d bytes)",
        filename or "upload",
        len(pdf_bytes),
    )

    try:
        reply = await generate(pdf_bytes, EXTRACTION_PROMPT)
    except PaperServiceError:
        raise
    except Exception as e:
        logger.exception("Metadata generator failed")
        raise UpstreamError(f"AI service error: {e}") from e

    if not isinstance(reply, str):
        raise UpstreamError("Empty response from AI service")

    raw = reply.strip()
    data = parse_extraction_response(raw)

    missing = [key for key in RECORD_KEYS if key not in data]
    if missing:
        logger.info("Model omitted %d field(s), using defaults: %s", len(missing), missing)

    metadata = PaperMetadata.from_extracted(data)
    logger.info(
        "Extracted metadata for '%s': title=%r, data_fusion=%s",
        filename or "upload",
        metadata.title[:80],
        metadata.is_data_fusion_paper,
    )
    return metadata

"""
AI service package for paper metadata extraction.

This package provides:
- extraction: prompt, model call, fence stripping and JSON parsing

The AIService class owns the OpenAI client and exposes the single model
seam (``generate``) that the extraction pipeline runs against.
"""

import json
import logging

from ...config import get_settings
from ...exceptions import UpstreamError
from ...models import PaperMetadata
from .extraction import (
    EXTRACTION_PROMPT,
    MetadataGenerator,
    extract_metadata as _extract_metadata,
    parse_extraction_response,
    request_metadata,
    strip_code_fences,
)

logger = logging.getLogger(__name__)

__all__ = [
    "AIService",
    "EXTRACTION_PROMPT",
    "MetadataGenerator",
    "extract_metadata",
    "get_ai_service",
    "parse_extraction_response",
    "strip_code_fences",
]


MOCK_EXTRACTION = {
    "doi": "10.0000/mock.2024.001",
    "title": "MOCK: Multi-Sensor Data Fusion for Development Builds",
    "author": "Mock Author; Another Author",
    "publicationTitle": "Journal of Mock Results",
    "publicationDate": "2024-01-15",
    "url": "",
    "keywords": "data fusion; development mode",
    "abstract": "DEVELOPMENT MODE: canned response. Set OPENAI_API_KEY for real extraction.",
    "publisher": "Mock Press",
    "fieldOfStudy": "Computer Science",
    "isDataFusionPaper": True,
    "dataFusionClassificationReason": "Mock data always claims to be about sensor fusion.",
}


class AIService:
    """
    Service for AI-powered paper metadata extraction.

    Uses an OpenAI model with PDF file input to read the paper and report
    its bibliographic fields as JSON.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        use_mock: bool | None = None,
    ):
        """
        Initialize the AI service.

        Args:
            api_key: OpenAI API key. If None, reads from config/environment.
            model: OpenAI model to use (must accept PDF file input).
            use_mock: If True, return a canned reply instead of calling OpenAI.
        """
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.openai_model
        self.use_mock = settings.ai_mock_mode if use_mock is None else use_mock
        self._client = None

        if self.use_mock:
            logger.warning(
                "AI Service running in MOCK MODE. Unset AI_MOCK_MODE for real extraction."
            )
        elif not self.api_key:
            logger.warning("OPENAI_API_KEY is not set; extraction requests will fail")

    @property
    def client(self):
        """Lazy-load the async OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise UpstreamError(
                    "OpenAI API key not provided. Set OPENAI_API_KEY environment variable."
                )
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def generate(self, document: bytes, prompt: str) -> str:
        """
        Run one model call over a PDF and a prompt.

        Args:
            document: Raw PDF bytes.
            prompt: Instruction text.

        Returns:
            The model's raw text reply.
        """
        if self.use_mock:
            logger.info("Generating metadata (MOCK MODE)")
            return "```json\n" + json.dumps(MOCK_EXTRACTION, indent=2) + "\n```"
        return await request_metadata(self.client, document, prompt, model=self.model)

    async def extract_metadata(
        self,
        pdf_bytes: bytes | None,
        filename: str | None = None,
    ) -> PaperMetadata:
        """
        Extract paper metadata from PDF bytes.

        Delegates to the extraction module with ``generate`` as the model seam.
        """
        return await _extract_metadata(pdf_bytes, self.generate, filename=filename)


# =============================================================================
# Singleton Factory
# =============================================================================

_ai_service: AIService | None = None


def get_ai_service() -> AIService:
    """Get or create the AI service singleton."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service


extract_metadata = _extract_metadata

"""
Services package for the paper metadata application.

Contains:
- ai: OpenAI integration for metadata extraction
- drive_service: Google Drive file downloads
- paper_repository: create/list/delete of saved papers
- csv_export: CSV rendering of saved papers
"""

from .ai import AIService
from .drive_service import DriveService
from .paper_repository import PaperRepository

__all__ = ["AIService", "DriveService", "PaperRepository"]

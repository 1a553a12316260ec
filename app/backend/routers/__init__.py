"""
Routers package for FastAPI endpoints.

Organized by domain:
- extract: Metadata extraction from uploads and Drive files
- papers: Saved paper listing, creation, deletion and export
- webhooks: Google Drive push notifications
"""

from . import extract, papers, webhooks

__all__ = ["extract", "papers", "webhooks"]

"""
Paper Metadata Backend Application.

A FastAPI service that extracts bibliographic metadata from scientific
paper PDFs using AI (OpenAI GPT-4.1) and stores reviewed records.
"""

__version__ = "1.0.0"

"""Pytest configuration and fixtures."""

import json
import os
from typing import Generator

# Settings are cached on first use, so the test environment must be in place
# before the application is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""
os.environ["AI_MOCK_MODE"] = "false"
os.environ["GOOGLE_WEBHOOK_VERIFICATION_TOKEN"] = "test-token"
os.environ["GOOGLE_DRIVE_ACCESS_TOKEN"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.backend.database import Base, get_db
from app.backend.exceptions import UpstreamError
from app.backend.main import app
from app.backend.services.ai import AIService, get_ai_service
from app.backend.services.drive_service import DriveService, get_drive_service

SAMPLE_EXTRACTION = {
    "doi": "10.1109/TSP.2024.0001",
    "title": "Distributed Kalman Filtering for Multi-Sensor Data Fusion",
    "author": "Jane Doe; John Smith",
    "publicationTitle": "IEEE Transactions on Signal Processing",
    "publicationDate": "2024-03-01",
    "url": "https://doi.org/10.1109/TSP.2024.0001",
    "keywords": "Kalman filter; sensor fusion; distributed estimation",
    "abstract": "We study distributed Kalman filtering across sensor networks.",
    "publisher": "IEEE",
    "fieldOfStudy": "Electrical Engineering",
    "isDataFusionPaper": True,
    "dataFusionClassificationReason": "The paper fuses estimates from multiple sensors.",
}


class StubAIService(AIService):
    """AIService whose model call returns a canned reply or raises."""

    def __init__(self):
        super().__init__(api_key="test-key", use_mock=False)
        self.reply = json.dumps(SAMPLE_EXTRACTION)
        self.error: Exception | None = None
        self.calls: list[tuple[bytes, str]] = []

    async def generate(self, document: bytes, prompt: str) -> str:
        self.calls.append((document, prompt))
        if self.error is not None:
            raise self.error
        return self.reply


class StubDriveService(DriveService):
    """DriveService serving files from an in-memory dict."""

    def __init__(self, files: dict[str, bytes] | None = None):
        super().__init__(access_token="test-token")
        self.files = files or {}
        self.requested: list[str] = []

    async def download_file(self, file_id: str) -> bytes:
        self.requested.append(file_id)
        if file_id not in self.files:
            raise UpstreamError(f"Google Drive returned 404 for file {file_id}")
        return self.files[file_id]


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Generator[Session, None, None]:
    """Database session bound to the test engine."""
    session = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def stub_ai() -> StubAIService:
    """Stubbed AI service (no network)."""
    return StubAIService()


@pytest.fixture
def stub_drive(sample_pdf_bytes: bytes) -> StubDriveService:
    """Stubbed Drive service holding one known PDF."""
    return StubDriveService({"file-ok": sample_pdf_bytes})


@pytest.fixture
def client(
    db_engine,
    stub_ai: StubAIService,
    stub_drive: StubDriveService,
) -> Generator[TestClient, None, None]:
    """Create a test client with database and external services overridden."""
    TestingSessionLocal = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_service] = lambda: stub_ai
    app.dependency_overrides[get_drive_service] = lambda: stub_drive
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sample_extraction() -> dict:
    """A complete model reply for a data fusion paper."""
    return dict(SAMPLE_EXTRACTION)


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """
    Create a minimal valid PDF for testing.

    This is a minimal PDF structure that should be recognized as a valid PDF.
    """
    return b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R >>
endobj
4 0 obj
<< /Length 44 >>
stream
BT
/F1 12 Tf
100 700 Td
(Test) Tj
ET
endstream
endobj
xref
0 5
0000000000 65535 f
0000000009 00000 n
0000000058 00000 n
0000000115 00000 n
0000000214 00000 n
trailer
<< /Size 5 /Root 1 0 R >>
startxref
306
%%EOF"""


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"

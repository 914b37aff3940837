"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from app.backend.config import get_settings
from app.backend.main import app
from app.backend.routers.upload import get_document_analyzer
from app.backend.services.analyzer import DocumentAnalyzer
from app.backend.services.uploads import UploadStorage, get_upload_storage
from tests.helpers import CERTIFICATE_RESPONSE, FakeAIService, make_image_bytes, make_pdf_bytes


@pytest.fixture
def sample_png_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    return make_pdf_bytes(["Certificate of Completion", "Issued by ACME"])


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"


@pytest.fixture
def sample_png_path(tmp_path: Path, sample_png_bytes: bytes) -> Path:
    path = tmp_path / "certificate.png"
    path.write_bytes(sample_png_bytes)
    return path


@pytest.fixture
def sample_pdf_path(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    path = tmp_path / "report.pdf"
    path.write_bytes(sample_pdf_bytes)
    return path


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def upload_storage(upload_dir: Path) -> UploadStorage:
    settings = get_settings()
    return UploadStorage(
        upload_dir=upload_dir,
        allowed_mime_types=settings.allowed_mime_types,
        max_file_size=settings.max_upload_size,
    )


@pytest.fixture
def fake_ai() -> FakeAIService:
    return FakeAIService(response=CERTIFICATE_RESPONSE)


def _override_dependencies(storage: UploadStorage, ai_service: FakeAIService) -> None:
    app.dependency_overrides[get_upload_storage] = lambda: storage
    app.dependency_overrides[get_document_analyzer] = lambda: DocumentAnalyzer(ai_service)


@pytest.fixture
def client(
    upload_storage: UploadStorage, fake_ai: FakeAIService
) -> Generator[TestClient, None, None]:
    """Create a test client with disk storage in a temp dir and a fake AI service."""
    _override_dependencies(upload_storage, fake_ai)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def lenient_client(
    upload_storage: UploadStorage, fake_ai: FakeAIService
) -> Generator[TestClient, None, None]:
    """Test client that returns 500 responses instead of re-raising server errors."""
    _override_dependencies(upload_storage, fake_ai)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()

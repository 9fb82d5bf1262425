"""
tests/conftest.py

Shared pytest fixtures available to all test modules.

Fixtures defined here are auto-discovered by pytest — no import needed.
Every fixture that touches disk is rooted in ``tmp_path`` so tests never
see ./uploads or ./data and are fully isolated from each other.
"""

import io
from pathlib import Path
from typing import Callable, Iterator

import fitz  # PyMuPDF
import pytest
from fastapi.testclient import TestClient

from docvault.blob_store.filesystem_store import FilesystemBlobStore
from docvault.core.config import Settings
from docvault.main import create_app
from docvault.record_store.sql_store import SqlRecordStore


# ── PDF helpers ────────────────────────────────────────────────────────────────

def make_pdf(pages: list[str]) -> bytes:
    """Build a genuine in-memory PDF with one line of text per page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text, fontsize=12)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_factory() -> Callable[[list[str]], bytes]:
    return make_pdf


@pytest.fixture
def pdf_bytes() -> bytes:
    """A small, structurally valid PDF."""
    return make_pdf(["Patient summary, page one.", "Page two."])


# ── Store fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'data' / 'documents.sqlite'}"


@pytest.fixture
def blobs(upload_dir: Path) -> FilesystemBlobStore:
    store = FilesystemBlobStore(upload_dir)
    store.prepare()
    return store


@pytest.fixture
def records(database_url: str) -> Iterator[SqlRecordStore]:
    store = SqlRecordStore(database_url, auto_migrate=True)
    store.open()
    yield store
    store.close()


# ── HTTP client fixtures ───────────────────────────────────────────────────────

@pytest.fixture
def make_settings(upload_dir: Path, database_url: str) -> Callable[..., Settings]:
    """Factory for Settings pointing at the temp stores; kwargs override fields."""

    def _make(**overrides) -> Settings:
        values = {"upload_dir": str(upload_dir), "database_url": database_url}
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def make_client(make_settings) -> Iterator[Callable[..., TestClient]]:
    """
    Factory returning a started TestClient for an app built from
    ``make_settings(**overrides)``. All clients are shut down at teardown.
    """
    opened: list[TestClient] = []

    def _make(**overrides) -> TestClient:
        client = TestClient(create_app(make_settings(**overrides)), raise_server_exceptions=False)
        client.__enter__()
        opened.append(client)
        return client

    yield _make

    for client in opened:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    """
    A synchronous TestClient wrapping a freshly built app.

    The lifespan context (store open/close) is entered automatically.
    """
    return make_client()


# ── Sample upload fixtures ─────────────────────────────────────────────────────

@pytest.fixture
def sample_pdf_file(pdf_bytes) -> tuple:
    """
    A (field_name, (filename, file_obj, content_type)) tuple ready for
    use with TestClient's ``files=`` parameter.

    Usage:
        response = client.post("/api/documents/upload", files=[sample_pdf_file])
    """
    return ("document", ("report.pdf", io.BytesIO(pdf_bytes), "application/pdf"))


@pytest.fixture
def sample_txt_file() -> tuple:
    """A non-PDF upload tuple for negative-case tests."""
    return ("document", ("readme.txt", io.BytesIO(b"hello world"), "text/plain"))


@pytest.fixture
def disguised_pdf_file() -> tuple:
    """Plain text that claims to be a PDF by name and content type."""
    return ("document", ("invoice.pdf", io.BytesIO(b"MZ\x90\x00 not a pdf"), "application/pdf"))

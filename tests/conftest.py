"""
Pytest configuration and fixtures for the user registry tests.

Every test gets its own SQLite file and upload directory under tmp_path;
settings are read from the environment on access, so monkeypatching the
variables is enough to point the app at them.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from user_registry import database
from user_registry.services.blob_store import BlobStore

MAX_FILE_SIZE = 1024

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture(autouse=True)
def env(tmp_path: Path, upload_dir: Path, monkeypatch):
    """Point the settings at per-test storage."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    monkeypatch.setenv("MAX_FILE_SIZE", str(MAX_FILE_SIZE))
    monkeypatch.setenv("DB_INIT_RETRY_DELAY", "0")
    monkeypatch.delenv("ALLOWED_MIME_TYPES", raising=False)
    monkeypatch.delenv("UPLOAD_FIELD_NAME", raising=False)
    yield
    database.dispose_engine()


@pytest.fixture
def db_session():
    """Session on a freshly created schema."""
    database.init_engine()
    database.ensure_schema()
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def blobs(upload_dir: Path) -> BlobStore:
    return BlobStore(upload_dir)


@pytest.fixture
def client():
    """TestClient running the app lifespan (engine + schema)."""
    from user_registry.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def max_file_size() -> int:
    return MAX_FILE_SIZE

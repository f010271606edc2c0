"""Shared test fixtures and configuration."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Keep the module-level app away from the working tree
_SCRATCH = tempfile.mkdtemp(prefix="expense_portal_test_")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("UPLOAD_ROOT", os.path.join(_SCRATCH, "uploads"))
os.environ.setdefault("FILE_METADATA_PATH", os.path.join(_SCRATCH, "metadata.json"))
os.environ.setdefault("ENABLE_METRICS", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from expense_portal.config import Settings
from expense_portal.documents.sql_store import SqlDocumentStore
from expense_portal.main import create_app


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing every writable location at tmp_path."""
    return Settings(
        upload_root=str(tmp_path / "uploads"),
        database_url="sqlite:///:memory:",
        file_metadata_path=str(tmp_path / "metadata.json"),
        max_upload_bytes=10 * 1024 * 1024,
        rate_limit="10000/minute",
        enable_metrics=False,
        _env_file=None,
    )


@pytest.fixture
def store() -> SqlDocumentStore:
    """A clean in-memory document store per test."""
    return SqlDocumentStore("sqlite:///:memory:")


@pytest.fixture
def app(settings: Settings, store: SqlDocumentStore):
    return create_app(settings, document_store=store)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)

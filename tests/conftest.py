"""Shared test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.services.filename_sanitizer import FilenameSanitizer
from domain.value_objects.validation_policy import ValidationPolicy
from infrastructure.blob_stores.fsspec_blob_store import FsspecBlobStore
from tests.mocks import MockBlobStore


@pytest.fixture
def fixed_sanitizer() -> FilenameSanitizer:
    """Return a sanitizer with a deterministic unique token."""
    return FilenameSanitizer(token_factory=lambda: "1700000000000-abcd1234")


@pytest.fixture
def validation_policy() -> ValidationPolicy:
    """Return the default contract upload policy (docx/doc/pdf, 10MB)."""
    return ValidationPolicy()


@pytest.fixture
def mock_blob_store() -> MockBlobStore:
    return MockBlobStore()


@pytest.fixture
def fsspec_blob_store(tmp_path: Path) -> FsspecBlobStore:
    """Create an FsspecBlobStore rooted in a temporary directory."""
    return FsspecBlobStore(
        base_url=f"file://{tmp_path / 'blobs'}",
        public_base_url="https://files.example.com",
    )


@pytest.fixture
def docx_bytes() -> bytes:
    """Return a payload that starts with the ZIP signature, like a real .docx."""
    return b"PK\x03\x04" + b"\x00" * 60

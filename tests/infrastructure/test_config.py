"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from domain.value_objects.mime_type import CONTRACT_UPLOAD_TYPES, MimeType
from infrastructure.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("MAX_FILE_SIZE_MB", "ALLOWED_UPLOAD_TYPES", "CONTRACT_DOCUMENT_SOURCE"):
            monkeypatch.delenv(key, raising=False)

        config = Settings(_env_file=None)

        assert config.max_file_size_mb == 10
        assert config.allowed_upload_types == CONTRACT_UPLOAD_TYPES
        assert config.contract_document_source == "blob"

    def test_allowed_types_from_comma_separated_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(
            "ALLOWED_UPLOAD_TYPES",
            f"{MimeType.PDF.value}, {MimeType.TXT.value},",
        )

        config = Settings(_env_file=None)

        assert config.allowed_upload_types == frozenset({MimeType.PDF.value, MimeType.TXT.value})

    def test_validation_policy_follows_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_FILE_SIZE_MB", "2.5")
        monkeypatch.setenv("SNIFF_UPLOAD_CONTENT", "true")

        policy = Settings(_env_file=None).validation_policy()

        assert policy.max_size_bytes == int(2.5 * 1024 * 1024)
        assert policy.sniff_content is True

    def test_rejects_non_positive_size_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_FILE_SIZE_MB", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

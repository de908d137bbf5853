"""Tests for the generated-document retriever."""

from __future__ import annotations

import pytest
from returns.result import Failure, Success

from application.use_cases.contract_document_use_cases import GetContractDocumentUseCase
from domain.exceptions import StorageError
from domain.value_objects.mime_type import MimeType
from tests.mocks import MockContractDocumentSource


class TestGetContractDocumentUseCase:
    """Test GetContractDocumentUseCase."""

    @pytest.mark.asyncio
    async def test_document_found(self) -> None:
        source = MockContractDocumentSource({"c-1": b"PK\x03\x04docx"})
        use_case = GetContractDocumentUseCase(source)

        result = await use_case.execute("c-1")

        assert isinstance(result, Success)
        document = result.unwrap()
        assert document.data == b"PK\x03\x04docx"
        assert document.content_type == MimeType.DOCX.value
        assert document.filename == "contract-c-1.docx"

    @pytest.mark.asyncio
    async def test_document_not_found(self) -> None:
        use_case = GetContractDocumentUseCase(MockContractDocumentSource())

        result = await use_case.execute("abc123")

        assert isinstance(result, Failure)
        assert result.failure().category == "not_found"
        assert result.failure().message == "Contract not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, b""])
    async def test_document_without_content(self, content) -> None:
        """Found-but-empty is a different failure class from not found."""
        use_case = GetContractDocumentUseCase(MockContractDocumentSource({"c-1": content}))

        result = await use_case.execute("c-1")

        assert isinstance(result, Failure)
        assert result.failure().category == "unavailable"
        assert result.failure().message == "Document content is unavailable"

    @pytest.mark.asyncio
    async def test_storage_error_includes_cause(self) -> None:
        source = MockContractDocumentSource(raise_on_call=StorageError("export timed out"))
        use_case = GetContractDocumentUseCase(source)

        result = await use_case.execute("c-1")

        assert isinstance(result, Failure)
        assert result.failure().category == "storage_error"
        assert result.failure().message == "Download failed: export timed out"

    @pytest.mark.asyncio
    async def test_unexpected_error_includes_cause(self) -> None:
        source = MockContractDocumentSource(raise_on_call=RuntimeError("socket closed"))
        use_case = GetContractDocumentUseCase(source)

        result = await use_case.execute("c-1")

        assert isinstance(result, Failure)
        assert result.failure().category == "unknown"
        assert "socket closed" in result.failure().message

    @pytest.mark.asyncio
    async def test_repeated_reads_are_identical(self) -> None:
        source = MockContractDocumentSource({"c-1": b"bytes"})
        use_case = GetContractDocumentUseCase(source)

        first = await use_case.execute("c-1")
        second = await use_case.execute("c-1")

        assert first.unwrap() == second.unwrap()
        assert source.documents == {"c-1": b"bytes"}
        assert source.fetch_calls == ["c-1", "c-1"]

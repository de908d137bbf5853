"""Tests for route error handling."""

from __future__ import annotations

import pytest
from fastapi import HTTPException
from returns.result import Failure, Success

from application.dtos.errors import AppError
from domain.exceptions import StorageError
from interfaces.api.middleware import handle_use_case_errors


def _route(outcome: object):  # type: ignore[no-untyped-def]
    @handle_use_case_errors
    async def route() -> object:
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return route


class TestHandleUseCaseErrors:
    @pytest.mark.asyncio
    async def test_success_is_unwrapped(self) -> None:
        assert await _route(Success({"ok": True}))() == {"ok": True}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("category", "status_code"),
        [
            ("validation", 400),
            ("not_found", 404),
            ("unavailable", 500),
            ("storage_error", 500),
            ("unknown", 500),
        ],
    )
    async def test_failure_maps_category(self, category: str, status_code: int) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await _route(Failure(AppError(category, "went wrong")))()

        assert exc_info.value.status_code == status_code
        assert exc_info.value.detail == "went wrong"

    @pytest.mark.asyncio
    async def test_infrastructure_error_is_not_leaked(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await _route(StorageError("bucket s3://secret unreachable"))()

        assert exc_info.value.status_code == 500
        assert "secret" not in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_generic_500(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await _route(RuntimeError("boom"))()

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Internal server error"

    @pytest.mark.asyncio
    async def test_plain_return_value_is_rejected(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await _route({"not": "a result"})()

        assert exc_info.value.detail == "Unexpected result type"

    @pytest.mark.asyncio
    async def test_http_exception_passes_through(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await _route(HTTPException(status_code=400, detail="Please select a file to upload"))()

        assert exc_info.value.status_code == 400

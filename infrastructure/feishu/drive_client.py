"""Async client for the Feishu drive export API."""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import structlog
from pydantic import BaseModel

from domain.exceptions import StorageError

logger = structlog.get_logger()

TOKEN_PATH = "/open-apis/auth/v3/tenant_access_token/internal"
EXPORT_TASKS_PATH = "/open-apis/drive/v1/export_tasks"

# Refresh the tenant token this long before Feishu says it expires
TOKEN_REFRESH_MARGIN_SECONDS = 300

# job_status values reported by the export task endpoint
JOB_SUCCEEDED = 0
JOB_PENDING = frozenset({1, 2})


class ExportTaskStatus(BaseModel):
    job_status: int
    file_token: str | None = None
    job_error_msg: str | None = None

    @property
    def is_done(self) -> bool:
        return self.job_status == JOB_SUCCEEDED and bool(self.file_token)

    @property
    def is_pending(self) -> bool:
        return self.job_status in JOB_PENDING or (
            self.job_status == JOB_SUCCEEDED and not self.file_token
        )


class FeishuDriveClient:
    def __init__(
        self,
        app_id: str,
        app_secret: str,
        *,
        base_url: str = "https://open.feishu.cn",
        timeout_seconds: float = 30.0,
        poll_attempts: int = 30,
        poll_interval_seconds: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.app_id = app_id
        self.app_secret = app_secret
        self.poll_attempts = poll_attempts
        self.poll_interval_seconds = poll_interval_seconds
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
        )
        self._token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:  # noqa: ANN401
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            msg = f"Feishu request failed: {e!s}"
            raise StorageError(msg) from e
        return response

    @staticmethod
    def _payload(response: httpx.Response, action: str) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            msg = f"{action} failed: invalid response body"
            raise StorageError(msg) from e
        if payload.get("code") != 0:
            msg = f"{action} failed: {payload.get('msg') or 'unknown error'}"
            raise StorageError(msg)
        return payload

    async def tenant_access_token(self) -> str:
        """Return a cached tenant access token, fetching a new one when stale."""
        async with self._token_lock:
            if self._token and time.monotonic() < self._token_expires_at:
                return self._token

            response = await self._send(
                "POST",
                TOKEN_PATH,
                json={"app_id": self.app_id, "app_secret": self.app_secret},
            )
            payload = self._payload(response, "Tenant access token request")
            token = payload.get("tenant_access_token")
            if not token:
                msg = "Tenant access token request failed: no token returned"
                raise StorageError(msg)

            expire = int(payload.get("expire") or 0)
            self._token = token
            self._token_expires_at = time.monotonic() + max(
                expire - TOKEN_REFRESH_MARGIN_SECONDS,
                0,
            )
            logger.info("feishu_token_refreshed", expires_in=expire)
            return token

    async def _authorized(self, method: str, url: str, **kwargs: Any) -> httpx.Response:  # noqa: ANN401
        token = await self.tenant_access_token()
        headers = {"Authorization": f"Bearer {token}", **kwargs.pop("headers", {})}
        return await self._send(method, url, headers=headers, **kwargs)

    async def create_export_task(self, document_token: str, file_extension: str = "docx") -> str:
        """Start exporting a docx document; return the task ticket."""
        response = await self._authorized(
            "POST",
            EXPORT_TASKS_PATH,
            json={"file_extension": file_extension, "token": document_token, "type": "docx"},
        )
        data = self._payload(response, "Export task creation").get("data") or {}
        ticket = data.get("ticket")
        if not ticket:
            msg = "Export task creation failed: no ticket returned"
            raise StorageError(msg)
        return ticket

    async def get_export_status(self, ticket: str, document_token: str) -> ExportTaskStatus:
        response = await self._authorized(
            "GET",
            f"{EXPORT_TASKS_PATH}/{ticket}",
            params={"token": document_token},
        )
        data = self._payload(response, "Export status query").get("data") or {}
        return ExportTaskStatus.model_validate(data.get("result", data))

    async def wait_for_export(self, ticket: str, document_token: str) -> str:
        """Poll the export task until it finishes; return the exported file token."""
        for attempt in range(1, self.poll_attempts + 1):
            status = await self.get_export_status(ticket, document_token)
            if status.is_done:
                return status.file_token  # type: ignore[return-value]
            if not status.is_pending:
                msg = f"Export failed: {status.job_error_msg or 'unknown error'}"
                raise StorageError(msg)

            logger.debug("feishu_export_pending", ticket=ticket, attempt=attempt)
            if attempt < self.poll_attempts:
                await asyncio.sleep(self.poll_interval_seconds)

        msg = f"Export timed out after {self.poll_attempts} status checks"
        raise StorageError(msg)

    async def download_export(self, file_token: str) -> bytes:
        response = await self._authorized(
            "GET",
            f"{EXPORT_TASKS_PATH}/file/{file_token}/download",
        )
        return response.content

    async def export_document(self, document_token: str) -> bytes:
        """Export, wait and download: the provider's full retrieval contract."""
        ticket = await self.create_export_task(document_token)
        file_token = await self.wait_for_export(ticket, document_token)
        content = await self.download_export(file_token)
        logger.info(
            "feishu_export_downloaded",
            document_token=document_token,
            size_bytes=len(content),
        )
        return content

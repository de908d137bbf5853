from __future__ import annotations

import structlog

from application.ports.blob_store import BlobStore
from application.ports.contract_document_source import ContractDocumentSource
from application.use_cases.blob_calls import call_with_deadline
from domain.exceptions import NotFoundError, ValidationError
from domain.value_objects.namespace import BlobNamespace

logger = structlog.get_logger()


def contract_document_name(contract_id: str) -> str:
    """Return the GENERATED-namespace name of a contract's document."""
    return f"contract-{contract_id}.docx"


class BlobContractDocumentSource(ContractDocumentSource):
    """Read generated contracts the provider dropped into the GENERATED namespace."""

    def __init__(self, blob_store: BlobStore, timeout_seconds: float | None = 30.0) -> None:
        self.blob_store = blob_store
        self.timeout_seconds = timeout_seconds

    async def fetch_bytes(self, contract_id: str) -> bytes | None:
        name = contract_document_name(contract_id)
        try:
            content = await call_with_deadline(
                self.blob_store.get,
                BlobNamespace.GENERATED,
                name,
                timeout_seconds=self.timeout_seconds,
            )
        except ValidationError as e:
            msg = f"Contract not found: {contract_id}"
            raise NotFoundError(msg) from e

        logger.debug(
            "contract_document_read",
            contract_id=contract_id,
            pathname=content.info.pathname,
            size_bytes=content.info.size_bytes,
        )
        return content.data

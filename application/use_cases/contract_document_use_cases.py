from __future__ import annotations

import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from application.ports.contract_document_source import ContractDocumentSource
from domain.exceptions import NotFoundError, StorageError
from domain.value_objects.contract_document import ContractDocument

logger = structlog.get_logger()


class GetContractDocumentUseCase:
    """Fetch a contract document generated by the external provider.

    Read-only: repeated calls return the same document and never touch
    stored state.
    """

    def __init__(self, document_source: ContractDocumentSource) -> None:
        self.document_source = document_source

    async def execute(self, contract_id: str) -> Result[ContractDocument, AppError]:
        """Retrieve the document bytes for ``contract_id``.

        Returns:
            Success with the document, or a Failure whose category is
            ``not_found`` (no such document), ``unavailable`` (document exists
            but has no content), ``storage_error`` or ``unknown``.

        """
        logger.info("contract_document_requested", contract_id=contract_id)
        try:
            data = await self.document_source.fetch_bytes(contract_id)
        except NotFoundError as e:
            logger.info("contract_document_not_found", contract_id=contract_id, error=str(e))
            return Failure(AppError("not_found", str(e) or "Contract not found"))
        except StorageError as e:
            logger.exception("contract_document_fetch_failed", contract_id=contract_id)
            return Failure(AppError("storage_error", f"Download failed: {e!s}"))
        except Exception as e:  # noqa: BLE001
            logger.exception("contract_document_unexpected_error", contract_id=contract_id)
            return Failure(AppError("unknown", f"Download failed: {e!s}"))

        if not data:
            logger.warning("contract_document_empty", contract_id=contract_id)
            return Failure(AppError("unavailable", "Document content is unavailable"))

        return Success(ContractDocument(contract_id=contract_id, data=data))

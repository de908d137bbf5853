from __future__ import annotations

import structlog

from application.ports.contract_document_source import ContractDocumentSource
from application.ports.repositories.generated_contract_repository import (
    GeneratedContractRepository,
)
from domain.exceptions import NotFoundError
from infrastructure.feishu.drive_client import FeishuDriveClient

logger = structlog.get_logger()


class FeishuContractDocumentSource(ContractDocumentSource):
    """Re-export a generated contract from Feishu drive as ``.docx``.

    The contract record only stores a pointer (the provider's document
    token); the bytes are produced by the provider's export task on demand.
    """

    def __init__(
        self,
        contract_repository: GeneratedContractRepository,
        drive_client: FeishuDriveClient,
    ) -> None:
        self.contract_repository = contract_repository
        self.drive_client = drive_client

    async def fetch_bytes(self, contract_id: str) -> bytes | None:
        record = await self.contract_repository.get_by_id(contract_id)
        if record is None:
            msg = "Contract not found"
            raise NotFoundError(msg)

        document_token = record.document_token
        if document_token is None:
            msg = "Contract document path not found"
            raise NotFoundError(msg)

        logger.info(
            "feishu_contract_export_started",
            contract_id=contract_id,
            document_token=document_token,
        )
        return await self.drive_client.export_document(document_token)

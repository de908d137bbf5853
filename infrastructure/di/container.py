from __future__ import annotations

from lagom import Container
from motor.motor_asyncio import AsyncIOMotorClient

from application.ports.blob_store import BlobStore
from application.ports.contract_document_source import ContractDocumentSource
from application.ports.repositories.generated_contract_repository import (
    GeneratedContractRepository,
)
from application.use_cases.contract_document_use_cases import GetContractDocumentUseCase
from application.use_cases.upload_use_cases import (
    DeleteFileUseCase,
    ListFilesUseCase,
    UploadFileUseCase,
)
from domain.services.filename_sanitizer import FilenameSanitizer
from infrastructure.blob_stores.fsspec_blob_store import FsspecBlobStore
from infrastructure.config import Settings, settings
from infrastructure.contract_sources.blob_contract_source import BlobContractDocumentSource
from infrastructure.contract_sources.feishu_contract_source import FeishuContractDocumentSource
from infrastructure.feishu.drive_client import FeishuDriveClient
from infrastructure.read_repositories.mongo_contract_repository import (
    MongoGeneratedContractRepository,
)


def _register_feishu_source(container: Container, config: Settings) -> None:
    if not config.feishu_app_id or not config.feishu_app_secret:
        msg = "FEISHU_APP_ID and FEISHU_APP_SECRET are required when CONTRACT_DOCUMENT_SOURCE=feishu"
        raise ValueError(msg)

    container[AsyncIOMotorClient] = lambda _: AsyncIOMotorClient(config.mongo_uri)
    container[GeneratedContractRepository] = lambda c: MongoGeneratedContractRepository(
        client=c[AsyncIOMotorClient],
        settings=config,
    )

    # One client so the tenant token cache is shared across requests
    drive_client_instance = FeishuDriveClient(
        app_id=config.feishu_app_id,
        app_secret=config.feishu_app_secret,
        base_url=config.feishu_base_url,
        timeout_seconds=config.feishu_timeout_seconds,
        poll_attempts=config.feishu_export_poll_attempts,
        poll_interval_seconds=config.feishu_export_poll_interval_seconds,
    )
    container[FeishuDriveClient] = drive_client_instance

    container[ContractDocumentSource] = lambda c: FeishuContractDocumentSource(
        contract_repository=c[GeneratedContractRepository],
        drive_client=c[FeishuDriveClient],
    )


def create_container(config: Settings = settings) -> Container:
    container = Container()

    # Blob storage (fsspec)
    blob_store_instance = FsspecBlobStore(
        base_url=config.blob_base_url,
        public_base_url=config.blob_public_base_url,
        storage_options=config.blob_storage_options,
    )
    container[BlobStore] = blob_store_instance

    container[FilenameSanitizer] = lambda _: FilenameSanitizer()

    # Generated contract documents
    if config.contract_document_source == "feishu":
        _register_feishu_source(container, config)
    else:
        container[ContractDocumentSource] = lambda c: BlobContractDocumentSource(
            blob_store=c[BlobStore],
            timeout_seconds=config.blob_timeout_seconds,
        )

    # Register Use Cases
    container[UploadFileUseCase] = lambda c: UploadFileUseCase(
        blob_store=c[BlobStore],
        sanitizer=c[FilenameSanitizer],
        name_prefix=config.upload_name_prefix,
        timeout_seconds=config.blob_timeout_seconds,
    )
    container[ListFilesUseCase] = lambda c: ListFilesUseCase(
        blob_store=c[BlobStore],
        timeout_seconds=config.blob_timeout_seconds,
    )
    container[DeleteFileUseCase] = lambda c: DeleteFileUseCase(
        blob_store=c[BlobStore],
        timeout_seconds=config.blob_timeout_seconds,
    )
    container[GetContractDocumentUseCase] = lambda c: GetContractDocumentUseCase(
        document_source=c[ContractDocumentSource],
    )

    return container

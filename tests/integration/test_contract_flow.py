import pytest
from returns.result import Failure, Success

from application.dtos.upload_dtos import UploadFileRequest
from application.ports.blob_store import BlobStore
from application.use_cases.contract_document_use_cases import GetContractDocumentUseCase
from application.use_cases.upload_use_cases import ListFilesUseCase, UploadFileUseCase
from domain.value_objects.mime_type import MimeType
from domain.value_objects.namespace import BlobNamespace
from infrastructure.config import Settings
from infrastructure.contract_sources.blob_contract_source import contract_document_name
from infrastructure.di.container import create_container


@pytest.fixture
def config(tmp_path):
    return Settings(
        _env_file=None,
        BLOB_BASE_URL=f"file://{tmp_path / 'blobs'}",
        BLOB_PUBLIC_BASE_URL="https://files.example.com",
        CONTRACT_DOCUMENT_SOURCE="blob",
    )


@pytest.mark.asyncio
async def test_upload_then_list_roundtrip(config):
    container = create_container(config)

    upload = container[UploadFileUseCase]
    result = await upload.execute(
        UploadFileRequest(
            data=b"PK\x03\x04template",
            original_filename="Lease Agreement.docx",
            declared_content_type=MimeType.DOCX.value,
            namespace=BlobNamespace.TEMPLATES,
        ),
        config.validation_policy(),
    )
    assert isinstance(result, Success)
    uploaded = result.unwrap()
    assert uploaded.filename.startswith("template-Lease-Agreement-")
    assert uploaded.url == f"https://files.example.com/{uploaded.pathname}"

    listed = await container[ListFilesUseCase].execute(BlobNamespace.TEMPLATES)
    assert [f.pathname for f in listed.unwrap()] == [uploaded.pathname]

    # Generated namespace is untouched
    generated = await container[ListFilesUseCase].execute(BlobNamespace.GENERATED)
    assert generated.unwrap() == []


@pytest.mark.asyncio
async def test_generated_contract_download(config):
    container = create_container(config)
    container[BlobStore].put(
        BlobNamespace.GENERATED,
        contract_document_name("c-7"),
        b"PK\x03\x04generated",
        MimeType.DOCX.value,
    )

    use_case = container[GetContractDocumentUseCase]

    found = await use_case.execute("c-7")
    assert isinstance(found, Success)
    assert found.unwrap().data == b"PK\x03\x04generated"
    assert found.unwrap().filename == "contract-c-7.docx"

    missing = await use_case.execute("abc123")
    assert isinstance(missing, Failure)
    assert missing.failure().category == "not_found"


def test_feishu_source_requires_credentials(tmp_path):
    config = Settings(
        _env_file=None,
        BLOB_BASE_URL=f"file://{tmp_path / 'blobs'}",
        CONTRACT_DOCUMENT_SOURCE="feishu",
        FEISHU_APP_ID=None,
        FEISHU_APP_SECRET=None,
    )

    with pytest.raises(ValueError, match="FEISHU_APP_ID"):
        create_container(config)

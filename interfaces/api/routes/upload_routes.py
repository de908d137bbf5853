from collections.abc import Container
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from returns.result import Failure

from application.dtos.upload_dtos import StoredFileResponse, UploadFileRequest, UploadFileResponse
from application.use_cases.upload_use_cases import (
    DeleteFileUseCase,
    ListFilesUseCase,
    UploadFileUseCase,
    check_declared_upload,
)
from domain.value_objects.namespace import BlobNamespace
from domain.value_objects.validation_policy import ValidationPolicy
from interfaces.api.middleware import handle_use_case_errors
from interfaces.api.routes.helpers import ApiResponse
from interfaces.dependencies import get_container, get_validation_policy

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["files"])


def _is_missing(file: UploadFile | None) -> bool:
    # Browsers send an empty, unnamed part when no file was chosen
    return file is None or (not file.filename and not file.size)


@router.post("/upload", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def upload_file(
    container: Annotated[Container, Depends(get_container)],
    policy: Annotated[ValidationPolicy, Depends(get_validation_policy)],
    file: Annotated[UploadFile | None, File()] = None,
    target: Annotated[str | None, Form(alias="container")] = None,
) -> ApiResponse[UploadFileResponse]:
    """Upload a contract template (or generated contract) to blob storage.

    Returns:
        200 OK: File stored
        400 Bad Request: Missing file, disallowed type or oversized file
        500 Internal Server Error: Storage backend failure

    """
    if _is_missing(file):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please select a file to upload",
        )

    if file.size is not None:
        declared = check_declared_upload(file.content_type, file.size, policy)
        if isinstance(declared, Failure):
            logger.info(
                "upload_rejected_before_read",
                filename=file.filename,
                content_type=file.content_type,
                size_bytes=file.size,
                reason=declared.failure().message,
            )
            return declared

    data = await file.read()
    logger.info(
        "upload_received",
        filename=file.filename,
        content_type=file.content_type,
        size_bytes=len(data),
        container=target,
    )

    use_case = container[UploadFileUseCase]
    result = await use_case.execute(
        UploadFileRequest(
            data=data,
            original_filename=file.filename,
            declared_content_type=file.content_type,
            namespace=BlobNamespace.from_container(target),
        ),
        policy,
    )
    return result.map(lambda uploaded: ApiResponse[UploadFileResponse](data=uploaded))


@router.get("/files", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def list_files(
    container: Annotated[Container, Depends(get_container)],
    target: Annotated[str | None, Query(alias="container")] = None,
    prefix: Annotated[str, Query()] = "",
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> ApiResponse[list[StoredFileResponse]]:
    """List stored files of one namespace."""
    use_case = container[ListFilesUseCase]
    result = await use_case.execute(
        BlobNamespace.from_container(target),
        prefix=prefix,
        limit=limit,
    )
    return result.map(lambda files: ApiResponse[list[StoredFileResponse]](data=files))


@router.delete("/files", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def delete_file(
    container: Annotated[Container, Depends(get_container)],
    pathname: Annotated[str, Query(min_length=1)],
    target: Annotated[str | None, Query(alias="container")] = None,
) -> ApiResponse[None]:
    """Delete one stored file."""
    use_case = container[DeleteFileUseCase]
    result = await use_case.execute(BlobNamespace.from_container(target), pathname)
    return result.map(lambda _: ApiResponse[None](data=None))

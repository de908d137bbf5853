from __future__ import annotations

import threading

import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from application.dtos.upload_dtos import StoredFileResponse, UploadFileRequest, UploadFileResponse
from application.ports.blob_store import BlobStore
from application.use_cases.blob_calls import call_with_deadline
from domain.exceptions import NotFoundError, StorageError, ValidationError
from domain.services.filename_sanitizer import FilenameSanitizer
from domain.services.upload_validator import sniff_matches, validate_size, validate_type
from domain.value_objects.mime_type import MimeType
from domain.value_objects.namespace import BlobNamespace
from domain.value_objects.stored_object import StoredObject
from domain.value_objects.validation_policy import ValidationPolicy

logger = structlog.get_logger()

UPLOAD_FAILED_MESSAGE = "File upload failed, please try again later"


def _describe_allowed_types(allowed_types: frozenset[str]) -> str:
    extensions = sorted(
        f".{ext}"
        for ext, mime in (
            ("docx", MimeType.DOCX),
            ("doc", MimeType.DOC),
            ("pdf", MimeType.PDF),
            ("txt", MimeType.TXT),
            ("rtf", MimeType.RTF),
            ("odt", MimeType.ODT),
            ("png", MimeType.PNG),
            ("jpg", MimeType.JPEG),
        )
        if mime.value in allowed_types
    )
    return ", ".join(extensions) or ", ".join(sorted(allowed_types))


def check_declared_upload(
    content_type: str | None,
    size_bytes: int,
    policy: ValidationPolicy,
) -> Result[None, AppError]:
    """Check what the client declared, before the payload has been read."""
    if not validate_type(content_type, policy.allowed_types):
        return Failure(
            AppError(
                "validation",
                "Unsupported file type "
                f"'{content_type or 'unknown'}', please upload "
                f"{_describe_allowed_types(policy.allowed_types)} files",
            ),
        )

    if not validate_size(size_bytes, policy.max_size_mb):
        return Failure(
            AppError("validation", f"File size must not exceed {policy.max_size_mb:g}MB"),
        )

    return Success(None)


def validate_upload(request: UploadFileRequest, policy: ValidationPolicy) -> Result[None, AppError]:
    """Apply the policy's type, size and (optional) content checks."""
    declared = check_declared_upload(request.declared_content_type, request.size_bytes, policy)
    if isinstance(declared, Failure):
        return declared

    if policy.sniff_content and not sniff_matches(request.data, request.declared_content_type):
        return Failure(
            AppError(
                "validation",
                f"File content does not match declared type '{request.declared_content_type}'",
            ),
        )

    return Success(None)


class UploadFileUseCase:
    """Validate an upload, give it a safe name and store it."""

    def __init__(
        self,
        blob_store: BlobStore,
        sanitizer: FilenameSanitizer | None = None,
        name_prefix: str = "template",
        timeout_seconds: float | None = 30.0,
    ) -> None:
        self.blob_store = blob_store
        self.sanitizer = sanitizer or FilenameSanitizer()
        self.name_prefix = name_prefix
        self.timeout_seconds = timeout_seconds

    async def execute(
        self,
        request: UploadFileRequest,
        policy: ValidationPolicy,
    ) -> Result[UploadFileResponse, AppError]:
        """Execute the upload.

        Args:
            request: Payload, client filename and declared content type
            policy: Allowed types and size ceiling for this request

        Returns:
            Result containing the upload response or an error

        """
        validation = validate_upload(request, policy)
        if isinstance(validation, Failure):
            logger.info(
                "upload_rejected",
                filename=request.original_filename,
                content_type=request.declared_content_type,
                size_bytes=request.size_bytes,
                reason=validation.failure().message,
            )
            return validation

        safe_name = self.sanitizer.sanitize(request.original_filename, self.name_prefix)
        content_type = (
            request.declared_content_type
            or MimeType.from_filename(request.original_filename or "").value
        )

        cancelled = threading.Event()
        try:
            stored: StoredObject = await call_with_deadline(
                self.blob_store.put,
                request.namespace,
                safe_name,
                request.data,
                content_type,
                cancelled=cancelled,
                timeout_seconds=self.timeout_seconds,
                cancel_event=cancelled,
            )
        except ValidationError as e:
            return Failure(AppError("validation", f"Validation error: {e!s}"))
        except StorageError:
            logger.exception(
                "upload_storage_failed",
                namespace=request.namespace.value,
                safe_name=safe_name,
            )
            return Failure(AppError("storage_error", UPLOAD_FAILED_MESSAGE))
        except Exception:  # noqa: BLE001
            logger.exception(
                "upload_unexpected_error",
                namespace=request.namespace.value,
                safe_name=safe_name,
            )
            return Failure(AppError("unknown", UPLOAD_FAILED_MESSAGE))

        logger.info(
            "upload_stored",
            namespace=request.namespace.value,
            pathname=stored.pathname,
            size_bytes=stored.size_bytes,
        )

        return Success(
            UploadFileResponse(
                url=stored.url,
                pathname=stored.pathname,
                filename=safe_name,
                original_name=request.original_filename,
                size=request.size_bytes,
                type=request.declared_content_type,
            ),
        )


def _to_stored_file_response(stored: StoredObject) -> StoredFileResponse:
    return StoredFileResponse(
        url=stored.url,
        pathname=stored.pathname,
        size=stored.size_bytes,
        content_type=stored.content_type,
        uploaded_at=stored.created_at.isoformat(),
    )


class ListFilesUseCase:
    """List stored objects of one namespace."""

    def __init__(self, blob_store: BlobStore, timeout_seconds: float | None = 30.0) -> None:
        self.blob_store = blob_store
        self.timeout_seconds = timeout_seconds

    async def execute(
        self,
        namespace: BlobNamespace,
        prefix: str = "",
        limit: int = 100,
    ) -> Result[list[StoredFileResponse], AppError]:
        try:
            objects = await call_with_deadline(
                self.blob_store.list,
                namespace,
                prefix=prefix,
                limit=limit,
                timeout_seconds=self.timeout_seconds,
            )
        except ValidationError as e:
            return Failure(AppError("validation", f"Validation error: {e!s}"))
        except StorageError:
            logger.exception("list_files_failed", namespace=namespace.value, prefix=prefix)
            return Failure(AppError("storage_error", "Failed to list files"))
        return Success([_to_stored_file_response(obj) for obj in objects])


class DeleteFileUseCase:
    """Delete one stored object."""

    def __init__(self, blob_store: BlobStore, timeout_seconds: float | None = 30.0) -> None:
        self.blob_store = blob_store
        self.timeout_seconds = timeout_seconds

    async def execute(self, namespace: BlobNamespace, pathname: str) -> Result[None, AppError]:
        try:
            await call_with_deadline(
                self.blob_store.delete,
                namespace,
                pathname,
                timeout_seconds=self.timeout_seconds,
            )
        except ValidationError as e:
            return Failure(AppError("validation", f"Validation error: {e!s}"))
        except NotFoundError:
            return Failure(AppError("not_found", f"File not found: {pathname}"))
        except StorageError:
            logger.exception("delete_file_failed", namespace=namespace.value, pathname=pathname)
            return Failure(AppError("storage_error", "Failed to delete file"))

        logger.info("file_deleted", namespace=namespace.value, pathname=pathname)
        return Success(None)

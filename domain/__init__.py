"""Domain layer exports."""

from domain.exceptions import (
    DomainError,
    InfrastructureError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from domain.value_objects import (
    BlobContent,
    BlobNamespace,
    ContractDocument,
    MimeType,
    StoredObject,
    ValidationPolicy,
)

__all__ = [
    "BlobContent",
    "BlobNamespace",
    "ContractDocument",
    "DomainError",
    "InfrastructureError",
    "MimeType",
    "NotFoundError",
    "StorageError",
    "StoredObject",
    "ValidationError",
    "ValidationPolicy",
]

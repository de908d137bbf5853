from .contract_document import ContractDocument
from .mime_type import CONTRACT_UPLOAD_TYPES, MimeType
from .namespace import BlobNamespace
from .stored_object import BlobContent, StoredObject
from .validation_policy import ValidationPolicy

__all__ = [
    "CONTRACT_UPLOAD_TYPES",
    "BlobContent",
    "BlobNamespace",
    "ContractDocument",
    "MimeType",
    "StoredObject",
    "ValidationPolicy",
]

"""Domain exceptions for storage and retrieval failures."""


class DomainError(Exception):
    """Base exception for domain layer."""


class ValidationError(DomainError):
    """Raised when an upload or a storage key fails validation."""


class NotFoundError(DomainError):
    """Raised when a stored object or contract document does not exist."""


class InfrastructureError(DomainError):
    """Raised when infrastructure operations fail (DB, network, etc.)."""


class StorageError(InfrastructureError):
    """Raised when the blob backend or document provider fails."""

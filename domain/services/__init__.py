"""Pure domain services for the document storage layer."""

from domain.services.filename_sanitizer import FilenameSanitizer, sanitize
from domain.services.upload_validator import sniff_matches, validate_size, validate_type

__all__ = [
    "FilenameSanitizer",
    "sanitize",
    "sniff_matches",
    "validate_size",
    "validate_type",
]

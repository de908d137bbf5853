"""Predicates that gate uploads before any bytes are persisted.

Type checks trust the content type declared by the transport layer; the
payload is not inspected unless the policy opts into magic-byte sniffing.
"""

from __future__ import annotations

from collections.abc import Collection

from domain.value_objects.mime_type import MimeType

BYTES_PER_MB = 1024 * 1024

_ZIP_MAGIC = b"PK\x03\x04"
_MAGIC_PREFIXES: dict[str, tuple[bytes, ...]] = {
    MimeType.PDF.value: (b"%PDF-",),
    MimeType.DOCX.value: (_ZIP_MAGIC,),
    MimeType.ODT.value: (_ZIP_MAGIC,),
    MimeType.DOC.value: (b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",),
    MimeType.RTF.value: (b"{\\rtf",),
    MimeType.PNG.value: (b"\x89PNG\r\n\x1a\n",),
    MimeType.JPEG.value: (b"\xff\xd8\xff",),
}


def validate_type(content_type: str | None, allowed_types: Collection[str]) -> bool:
    """Return True iff the declared type is in the allow-list.

    Matching is exact and case-sensitive: ``APPLICATION/PDF`` does not match
    ``application/pdf``.
    """
    if not content_type:
        return False
    return content_type in allowed_types


def validate_size(size_bytes: int, max_mb: float) -> bool:
    """Return True iff ``size_bytes <= max_mb * 1024 * 1024`` (inclusive)."""
    if size_bytes < 0:
        return False
    return size_bytes <= max_mb * BYTES_PER_MB


def sniff_matches(data: bytes, content_type: str | None) -> bool:
    """Check the payload's leading bytes against the declared type.

    Types without a known signature always pass.
    """
    prefixes = _MAGIC_PREFIXES.get(content_type or "")
    if prefixes is None:
        return True
    return data.startswith(prefixes)

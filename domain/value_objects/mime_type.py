from enum import Enum


class MimeType(str, Enum):
    """Represent MIME types handled by the document storage layer."""

    PDF = "application/pdf"

    DOC = "application/msword"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    TXT = "text/plain"
    RTF = "application/rtf"
    ODT = "application/vnd.oasis.opendocument.text"

    PNG = "image/png"
    JPEG = "image/jpeg"

    OCTET_STREAM = "application/octet-stream"

    @classmethod
    def from_filename(cls, filename: str) -> "MimeType":
        """Guess the MIME type from a filename extension."""
        _, _, extension = filename.rpartition(".")
        if not extension or extension == filename:
            return cls.OCTET_STREAM
        return _EXTENSION_MIME_TYPES.get(extension.lower(), cls.OCTET_STREAM)


_EXTENSION_MIME_TYPES: dict[str, MimeType] = {
    "pdf": MimeType.PDF,
    "doc": MimeType.DOC,
    "docx": MimeType.DOCX,
    "txt": MimeType.TXT,
    "rtf": MimeType.RTF,
    "odt": MimeType.ODT,
    "png": MimeType.PNG,
    "jpg": MimeType.JPEG,
    "jpeg": MimeType.JPEG,
}

# Default allow-list for contract template uploads
CONTRACT_UPLOAD_TYPES: frozenset[str] = frozenset(
    {MimeType.DOCX.value, MimeType.DOC.value, MimeType.PDF.value},
)

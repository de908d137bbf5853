"""Turn user-supplied filenames into collision-resistant storage names."""

from __future__ import annotations

import re
import secrets
import time
from collections.abc import Callable

RECOGNIZED_EXTENSIONS = frozenset(
    {"docx", "doc", "pdf", "txt", "rtf", "odt", "png", "jpg", "jpeg"},
)
FALLBACK_BASE_NAME = "file"
MAX_BASE_LENGTH = 50

# Allowed: ASCII letters and digits, CJK unified ideographs, "." "-" "_"
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9\u4e00-\u9fa5._-]")
_REPEATED_DASHES = re.compile(r"-{2,}")
_REPEATED_DOTS = re.compile(r"\.{2,}")


def unique_token() -> str:
    """Return a millisecond timestamp joined with 32 random bits.

    Uses no shared counter, so concurrent callers cannot collide on state.
    """
    return f"{time.time_ns() // 1_000_000}-{secrets.token_hex(4)}"


def _clean(value: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("-", value)
    cleaned = _REPEATED_DOTS.sub(".", cleaned)
    cleaned = _REPEATED_DASHES.sub("-", cleaned)
    return cleaned.strip(".-_")


def _split_extension(original_name: str) -> tuple[str, str]:
    # Only the final path segment counts, whatever separator the client used
    name = re.split(r"[\\/]", original_name)[-1]
    stem, dot, extension = name.rpartition(".")
    if not dot or not stem:
        return name, ""
    extension = extension.lower()
    if extension in RECOGNIZED_EXTENSIONS:
        return stem, extension
    return stem, ""


class FilenameSanitizer:
    """Build safe names of the form ``{prefix}-{base}-{token}.{ext}``.

    The result only contains ASCII letters, digits, CJK ideographs
    (U+4E00 to U+9FA5), ``.``, ``-`` and ``_``.
    A recognized extension is kept (lower-cased); any other extension is
    dropped. Sanitizing never fails: empty or fully unsafe input degrades to
    ``file`` plus the unique token.
    """

    def __init__(self, token_factory: Callable[[], str] = unique_token) -> None:
        self.token_factory = token_factory

    def sanitize(self, original_name: str | None, prefix: str | None = None) -> str:
        stem, extension = _split_extension(original_name or "")
        base = _clean(stem)[:MAX_BASE_LENGTH].rstrip(".-_") or FALLBACK_BASE_NAME
        token = _clean(self.token_factory()) or unique_token()

        parts = [_clean(prefix or ""), base, token]
        safe_name = "-".join(part for part in parts if part)
        if extension:
            safe_name = f"{safe_name}.{extension}"
        return safe_name


def sanitize(original_name: str | None, prefix: str | None = None) -> str:
    """Sanitize with the default unique-token source."""
    return FilenameSanitizer().sanitize(original_name, prefix)

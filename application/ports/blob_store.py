from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    import threading

    from domain.value_objects.namespace import BlobNamespace
    from domain.value_objects.stored_object import BlobContent, StoredObject


class BlobStore(Protocol):
    """Namespaced binary object storage.

    Implementations raise ``NotFoundError`` for absent objects and
    ``StorageError`` for backend failures, so callers can tell "absent" from
    "broken". Pathname arguments accept either the bare safe name or the
    namespace-qualified pathname returned by ``put``.
    """

    def put(
        self,
        namespace: BlobNamespace,
        safe_name: str,
        data: bytes,
        content_type: str,
        *,
        cancelled: threading.Event | None = None,
    ) -> StoredObject:
        """Store ``data`` atomically under ``namespace/safe_name``.

        Once ``cancelled`` is set the object must not stay visible; the call
        raises ``StorageError`` instead of returning.
        """
        ...

    def get(self, namespace: BlobNamespace, pathname: str) -> BlobContent: ...
    def head(self, namespace: BlobNamespace, pathname: str) -> StoredObject: ...
    def exists(self, namespace: BlobNamespace, pathname: str) -> bool: ...
    def delete(self, namespace: BlobNamespace, pathname: str) -> None: ...
    def list(
        self,
        namespace: BlobNamespace,
        *,
        prefix: str = "",
        limit: int = 100,
    ) -> list[StoredObject]: ...

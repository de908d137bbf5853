from __future__ import annotations

import posixpath
import threading
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import fsspec
import structlog
from pydantic import BaseModel

from application.ports.blob_store import BlobStore
from domain.exceptions import NotFoundError, StorageError, ValidationError
from domain.value_objects.mime_type import MimeType
from domain.value_objects.namespace import BlobNamespace
from domain.value_objects.stored_object import BlobContent, StoredObject

logger = structlog.get_logger()

META_DIR = ".meta"
STAGING_DIR = ".staging"


class _ObjectMetadata(BaseModel):
    content_type: str
    created_at: datetime


class FsspecBlobStore(BlobStore):
    """Blob store on top of any fsspec filesystem.

    Layout under ``base_url``::

        <namespace>/<name>              object bytes
        .meta/<namespace>/<name>.json   content type and creation time
        .staging/<random>               in-flight writes

    Writes land in ``.staging`` first and are moved into place, so an object
    is either fully visible or absent.
    """

    def __init__(
        self,
        base_url: str,
        *,
        public_base_url: str | None = None,
        storage_options: dict | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.storage_options = storage_options or {}
        self.fs, root = fsspec.core.url_to_fs(self.base_url, **self.storage_options)
        self.root = root.rstrip("/")

    # -- key handling -----------------------------------------------------

    @staticmethod
    def _name(namespace: BlobNamespace, pathname: str) -> str:
        """Strip the namespace prefix and reject keys that could escape it."""
        name = pathname.removeprefix(f"{namespace.value}/")
        if not name or name.startswith("/") or "\\" in name:
            msg = f"Invalid storage path: {pathname!r}"
            raise ValidationError(msg)
        if any(part in ("", ".", "..") for part in name.split("/")):
            msg = f"Invalid storage path: {pathname!r}"
            raise ValidationError(msg)
        return name

    def _data_path(self, namespace: BlobNamespace, name: str) -> str:
        return f"{self.root}/{namespace.value}/{name}"

    def _meta_path(self, namespace: BlobNamespace, name: str) -> str:
        return f"{self.root}/{META_DIR}/{namespace.value}/{name}.json"

    def _public_url(self, pathname: str) -> str:
        return f"{self.public_base_url or self.base_url}/{pathname}"

    def _stored_object(
        self,
        namespace: BlobNamespace,
        name: str,
        size_bytes: int,
        fs_info: dict[str, Any] | None = None,
    ) -> StoredObject:
        metadata = self._read_metadata(namespace, name, fs_info)
        pathname = f"{namespace.value}/{name}"
        return StoredObject(
            namespace=namespace,
            pathname=pathname,
            url=self._public_url(pathname),
            size_bytes=size_bytes,
            content_type=metadata.content_type,
            created_at=metadata.created_at,
        )

    def _read_metadata(
        self,
        namespace: BlobNamespace,
        name: str,
        fs_info: dict[str, Any] | None,
    ) -> _ObjectMetadata:
        try:
            raw = self.fs.cat_file(self._meta_path(namespace, name))
        except FileNotFoundError:
            # Objects written out-of-band (e.g. by the generation provider)
            return _ObjectMetadata(
                content_type=MimeType.from_filename(name).value,
                created_at=_created_at(fs_info or {}),
            )
        return _ObjectMetadata.model_validate_json(raw)

    def _discard(self, *paths: str) -> None:
        for path in paths:
            try:
                if self.fs.exists(path):
                    self.fs.rm(path)
            except Exception:  # noqa: BLE001
                logger.warning("blob_cleanup_failed", path=path, exc_info=True)

    def _abort_if_cancelled(
        self,
        cancelled: threading.Event | None,
        pathname: str,
        *paths: str,
    ) -> None:
        if cancelled is None or not cancelled.is_set():
            return
        self._discard(*paths)
        logger.warning("blob_put_cancelled", pathname=pathname)
        msg = f"Store of {pathname} abandoned after its deadline expired"
        raise StorageError(msg)

    # -- BlobStore --------------------------------------------------------

    def put(
        self,
        namespace: BlobNamespace,
        safe_name: str,
        data: bytes,
        content_type: str,
        *,
        cancelled: threading.Event | None = None,
    ) -> StoredObject:
        name = self._name(namespace, safe_name)
        path = self._data_path(namespace, name)
        meta_path = self._meta_path(namespace, name)
        staging_path = f"{self.root}/{STAGING_DIR}/{uuid4().hex}"
        metadata = _ObjectMetadata(content_type=content_type, created_at=datetime.now(UTC))
        pathname = f"{namespace.value}/{name}"

        try:
            self.fs.makedirs(posixpath.dirname(staging_path), exist_ok=True)
            with self.fs.open(staging_path, "wb") as out:
                out.write(data)

            self.fs.makedirs(posixpath.dirname(meta_path), exist_ok=True)
            self.fs.pipe_file(meta_path, metadata.model_dump_json().encode())

            self.fs.makedirs(posixpath.dirname(path), exist_ok=True)
        except Exception as e:
            self._discard(staging_path, meta_path)
            msg = f"Failed to store {pathname}: {e!s}"
            raise StorageError(msg) from e

        # Last point where the caller can still be told "not stored"
        self._abort_if_cancelled(cancelled, pathname, staging_path, meta_path)
        try:
            self.fs.mv(staging_path, path)
        except Exception as e:
            self._discard(staging_path, meta_path)
            msg = f"Failed to store {pathname}: {e!s}"
            raise StorageError(msg) from e
        # The deadline may expire while the move is in flight
        self._abort_if_cancelled(cancelled, pathname, path, meta_path)

        logger.debug("blob_stored", pathname=pathname, size_bytes=len(data))
        return StoredObject(
            namespace=namespace,
            pathname=pathname,
            url=self._public_url(pathname),
            size_bytes=len(data),
            content_type=metadata.content_type,
            created_at=metadata.created_at,
        )

    def get(self, namespace: BlobNamespace, pathname: str) -> BlobContent:
        name = self._name(namespace, pathname)
        try:
            data = self.fs.cat_file(self._data_path(namespace, name))
        except FileNotFoundError as e:
            msg = f"No object at {namespace.value}/{name}"
            raise NotFoundError(msg) from e
        except IsADirectoryError as e:
            msg = f"No object at {namespace.value}/{name}"
            raise NotFoundError(msg) from e
        except Exception as e:
            msg = f"Failed to read {namespace.value}/{name}: {e!s}"
            raise StorageError(msg) from e

        try:
            info = self._stored_object(namespace, name, len(data))
        except Exception as e:
            msg = f"Failed to read metadata of {namespace.value}/{name}: {e!s}"
            raise StorageError(msg) from e
        return BlobContent(info=info, data=data)

    def head(self, namespace: BlobNamespace, pathname: str) -> StoredObject:
        name = self._name(namespace, pathname)
        try:
            fs_info = self.fs.info(self._data_path(namespace, name))
        except FileNotFoundError as e:
            msg = f"No object at {namespace.value}/{name}"
            raise NotFoundError(msg) from e
        except Exception as e:
            msg = f"Failed to inspect {namespace.value}/{name}: {e!s}"
            raise StorageError(msg) from e

        if fs_info.get("type") == "directory":
            msg = f"No object at {namespace.value}/{name}"
            raise NotFoundError(msg)

        try:
            return self._stored_object(namespace, name, int(fs_info.get("size") or 0), fs_info)
        except Exception as e:
            msg = f"Failed to read metadata of {namespace.value}/{name}: {e!s}"
            raise StorageError(msg) from e

    def exists(self, namespace: BlobNamespace, pathname: str) -> bool:
        name = self._name(namespace, pathname)
        try:
            return self.fs.isfile(self._data_path(namespace, name))
        except Exception as e:
            msg = f"Failed to inspect {namespace.value}/{name}: {e!s}"
            raise StorageError(msg) from e

    def delete(self, namespace: BlobNamespace, pathname: str) -> None:
        name = self._name(namespace, pathname)
        if not self.exists(namespace, name):
            msg = f"No object at {namespace.value}/{name}"
            raise NotFoundError(msg)

        try:
            self.fs.rm(self._data_path(namespace, name))
        except FileNotFoundError as e:
            msg = f"No object at {namespace.value}/{name}"
            raise NotFoundError(msg) from e
        except Exception as e:
            msg = f"Failed to delete {namespace.value}/{name}: {e!s}"
            raise StorageError(msg) from e
        self._discard(self._meta_path(namespace, name))

    def list(
        self,
        namespace: BlobNamespace,
        *,
        prefix: str = "",
        limit: int = 100,
    ) -> list[StoredObject]:
        namespace_root = f"{self.root}/{namespace.value}"
        try:
            found = self.fs.find(namespace_root, detail=True) if self.fs.exists(namespace_root) else {}
        except Exception as e:
            msg = f"Failed to list {namespace.value}: {e!s}"
            raise StorageError(msg) from e

        objects: list[StoredObject] = []
        for path in sorted(found):
            fs_info = found[path]
            name = path.removeprefix(f"{namespace_root}/")
            if fs_info.get("type") == "directory" or not name.startswith(prefix):
                continue
            try:
                objects.append(
                    self._stored_object(namespace, name, int(fs_info.get("size") or 0), fs_info),
                )
            except Exception as e:
                msg = f"Failed to read metadata of {namespace.value}/{name}: {e!s}"
                raise StorageError(msg) from e
            if len(objects) >= limit:
                break
        return objects


def _created_at(fs_info: dict[str, Any]) -> datetime:
    created = fs_info.get("created") or fs_info.get("mtime")
    if isinstance(created, datetime):
        return created if created.tzinfo else created.replace(tzinfo=UTC)
    if isinstance(created, int | float):
        return datetime.fromtimestamp(created, tz=UTC)
    return datetime.now(UTC)

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects.namespace import BlobNamespace


class StoredObject(BaseModel):
    """Value object describing an object held by the blob backend."""

    model_config = ConfigDict(frozen=True)

    namespace: BlobNamespace
    pathname: str = Field(..., description="Namespace-qualified storage path")
    url: str = Field(..., description="Public locator assigned by the backend")
    size_bytes: int = Field(..., ge=0)
    content_type: str
    created_at: datetime

    @property
    def name(self) -> str:
        """Return the safe name without its namespace prefix."""
        return self.pathname.removeprefix(f"{self.namespace.value}/")


class BlobContent(BaseModel):
    """Bytes of a stored object together with its metadata."""

    model_config = ConfigDict(frozen=True)

    info: StoredObject
    data: bytes

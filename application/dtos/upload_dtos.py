from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects.namespace import BlobNamespace


class UploadFileRequest(BaseModel):
    """Transient upload payload, consumed once by the upload use case."""

    data: bytes = Field(..., description="Raw file content", repr=False)
    original_filename: str | None = Field(None, description="Filename supplied by the client")
    declared_content_type: str | None = Field(
        None,
        description="Content type declared by the transport layer",
    )
    namespace: BlobNamespace = Field(default=BlobNamespace.TEMPLATES)

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class UploadFileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(..., description="Public URL of the stored file")
    pathname: str = Field(..., description="Namespace-qualified storage path")
    filename: str = Field(..., description="Sanitized storage name")
    original_name: str | None = Field(
        None,
        alias="originalName",
        description="Filename supplied by the client",
    )
    size: int = Field(..., description="Size of the file in bytes")
    type: str | None = Field(None, description="Declared content type")


class StoredFileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    pathname: str
    size: int
    content_type: str = Field(..., alias="contentType")
    uploaded_at: str = Field(..., alias="uploadedAt")

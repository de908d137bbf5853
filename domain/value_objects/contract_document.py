from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects.mime_type import MimeType


class ContractDocument(BaseModel):
    """A generated contract document ready to be downloaded."""

    model_config = ConfigDict(frozen=True)

    contract_id: str
    data: bytes = Field(..., min_length=1)
    content_type: str = MimeType.DOCX.value

    @property
    def filename(self) -> str:
        return f"contract-{self.contract_id}.docx"

    @property
    def size_bytes(self) -> int:
        return len(self.data)

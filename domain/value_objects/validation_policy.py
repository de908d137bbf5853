from pydantic import BaseModel, ConfigDict, Field

from domain.value_objects.mime_type import CONTRACT_UPLOAD_TYPES


class ValidationPolicy(BaseModel):
    """Upload constraints, built per request from configuration."""

    model_config = ConfigDict(frozen=True)

    allowed_types: frozenset[str] = Field(default=CONTRACT_UPLOAD_TYPES)
    max_size_mb: float = Field(default=10, gt=0)
    sniff_content: bool = Field(
        default=False,
        description="Also check the payload's magic bytes against the declared type.",
    )

    @property
    def max_size_bytes(self) -> int:
        return int(self.max_size_mb * 1024 * 1024)

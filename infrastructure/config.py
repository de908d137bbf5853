from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from domain.value_objects.mime_type import CONTRACT_UPLOAD_TYPES
from domain.value_objects.validation_policy import ValidationPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # make it absolute so reload/CWD doesn't break it
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="ContractStore", validation_alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "logs",
        validation_alias="LOG_DIR",
    )

    # API
    api_host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")

    # Blob Storage
    blob_base_url: str = Field(
        default="file://" + str(Path(__file__).resolve().parents[1] / "blobs"),
        validation_alias="BLOB_BASE_URL",
    )
    blob_public_base_url: str | None = Field(
        default=None,
        validation_alias="BLOB_PUBLIC_BASE_URL",
        description="Public prefix for stored object URLs. Falls back to the backend URL.",
    )
    blob_storage_options: dict = {}
    blob_timeout_seconds: float = Field(default=30.0, gt=0, validation_alias="BLOB_TIMEOUT_SECONDS")

    # Uploads
    max_file_size_mb: float = Field(default=10, gt=0, validation_alias="MAX_FILE_SIZE_MB")
    allowed_upload_types: Annotated[frozenset[str], NoDecode] = Field(
        default=CONTRACT_UPLOAD_TYPES,
        validation_alias="ALLOWED_UPLOAD_TYPES",
        description="Comma-separated MIME types accepted by /api/upload.",
    )
    sniff_upload_content: bool = Field(
        default=False,
        validation_alias="SNIFF_UPLOAD_CONTENT",
        description="Reject uploads whose magic bytes contradict the declared type.",
    )
    upload_name_prefix: str = Field(default="template", validation_alias="UPLOAD_NAME_PREFIX")

    # Generated contract documents
    contract_document_source: Literal["blob", "feishu"] = Field(
        default="blob",
        validation_alias="CONTRACT_DOCUMENT_SOURCE",
    )

    # MongoDB (generated contract records)
    mongo_uri: str = Field(
        default="mongodb://localhost:27017",
        validation_alias="MONGO_URI",
    )
    mongo_db: str = Field(default="contract_store", validation_alias="MONGO_DB")
    mongo_contracts_collection: str = Field(
        default="generated_contracts",
        validation_alias="MONGO_CONTRACTS_COLLECTION",
    )

    # Feishu (document generation provider)
    feishu_app_id: str | None = Field(default=None, validation_alias="FEISHU_APP_ID")
    feishu_app_secret: str | None = Field(default=None, validation_alias="FEISHU_APP_SECRET")
    feishu_base_url: str = Field(
        default="https://open.feishu.cn",
        validation_alias="FEISHU_BASE_URL",
    )
    feishu_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="FEISHU_TIMEOUT_SECONDS",
    )
    feishu_export_poll_attempts: int = Field(
        default=30,
        ge=1,
        validation_alias="FEISHU_EXPORT_POLL_ATTEMPTS",
    )
    feishu_export_poll_interval_seconds: float = Field(
        default=2.0,
        ge=0,
        validation_alias="FEISHU_EXPORT_POLL_INTERVAL_SECONDS",
    )

    @field_validator("allowed_upload_types", mode="before")
    @classmethod
    def _split_allowed_upload_types(cls, value: object) -> object:
        if isinstance(value, str):
            return frozenset(item.strip() for item in value.split(",") if item.strip())
        return value

    def validation_policy(self) -> ValidationPolicy:
        """Build the upload policy for one request."""
        return ValidationPolicy(
            allowed_types=self.allowed_upload_types,
            max_size_mb=self.max_file_size_mb,
            sniff_content=self.sniff_upload_content,
        )


# Global settings instance
settings = Settings()

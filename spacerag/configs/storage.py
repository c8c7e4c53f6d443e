"""
Blob storage configuration.

Settings for raw document storage and presigned URL generation.
Works against S3 and S3-compatible stores (R2, MinIO) via endpoint_url.

Dependencies: pydantic_settings
System role: Blob storage configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BlobStorageSettings(BaseSettings):
    """Settings for the document blob store."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BLOB_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: str = Field(default="s3", description="'s3' or 'local'")
    bucket: str = Field(default="spacerag-documents", description="Bucket for raw documents")
    region: str = Field(default="auto", description="Bucket region")
    endpoint_url: str | None = Field(
        default=None,
        description="Custom endpoint for S3-compatible stores",
    )
    access_key_id: str | None = Field(default=None, description="Access key id")
    secret_access_key: str | None = Field(default=None, description="Secret access key")
    public_base_url: str | None = Field(
        default=None,
        description="Public URL prefix for stored objects",
    )
    local_root: str = Field(default="./data/blobs", description="Root directory for local storage")
    presigned_url_expiry: int = Field(
        default=3600,
        description="Presigned URL expiry in seconds (default 1 hour)",
    )

"""Pydantic settings models for application configuration."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseModel):
    """Application-level settings."""

    name: str = "videomania"
    version: str = "0.1.0"
    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class ServerSettings(BaseModel):
    """HTTP server settings."""

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    workers: int = Field(default=1, ge=1, le=32)
    reload: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    api_prefix: str = "/api"
    docs_enabled: bool = True


class ContainerSettings(BaseModel):
    """Blob container (bucket) names."""

    videos: str = "videos"
    thumbnails: str = "thumbnails"
    processed_videos: str = "processed-videos"


class BlobStorageSettings(BaseModel):
    """Blob storage settings (MinIO/S3)."""

    provider: Literal["minio", "s3"] = "minio"
    endpoint: str = "localhost:9000"
    access_key: str = ""
    secret_key: str = ""
    use_ssl: bool = False
    region: str = "us-east-1"
    containers: ContainerSettings = Field(default_factory=ContainerSettings)
    upload_sas_validity_minutes: int = Field(default=30, ge=1)
    read_sas_validity_hours: int = Field(default=24, ge=1)


class DocumentCollectionSettings(BaseModel):
    """Document DB collection names."""

    users: str = "Users"
    videos: str = "Videos"
    comments: str = "Comments"


class DocumentDBSettings(BaseModel):
    """Document database settings (MongoDB)."""

    provider: Literal["mongodb"] = "mongodb"
    host: str = "localhost"
    port: int = 27017
    username: str = ""
    password: str = ""
    database: str = "videomania"
    auth_source: str = "admin"
    collections: DocumentCollectionSettings = Field(
        default_factory=DocumentCollectionSettings
    )


class UploadSettings(BaseModel):
    """Validation rules for user uploads."""

    max_file_size_mb: int = Field(default=500, ge=1)
    allowed_extensions: list[str] = Field(
        default_factory=lambda: [".mp4", ".webm", ".avi", ".mov", ".mkv"]
    )
    # Direct-to-blob uploads through a signed URL also accept Flash video
    signed_upload_extensions: list[str] = Field(
        default_factory=lambda: [".mp4", ".webm", ".avi", ".mov", ".mkv", ".flv"]
    )
    default_user_id: str = "TestUser"
    anonymous_commenter: str = "Anonymous"

    @property
    def max_file_size_bytes(self) -> int:
        """Maximum upload size in bytes."""
        return self.max_file_size_mb * 1024 * 1024


class ProcessingSettings(BaseModel):
    """Ingest worker and media toolchain settings."""

    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"
    temp_dir: str | None = None
    thumbnail_at_seconds: float = Field(default=1.0, ge=0)
    resize_width: int = Field(default=1280, ge=16)
    resize_height: int = Field(default=720, ge=16)
    ingest_extensions: list[str] = Field(
        default_factory=lambda: [
            ".mp4",
            ".avi",
            ".mov",
            ".wmv",
            ".flv",
            ".mkv",
            ".webm",
            ".m4v",
        ]
    )


class TelemetrySettings(BaseModel):
    """Logging settings."""

    enabled: bool = True
    log_format: Literal["json", "text"] = "json"
    log_level: str = "INFO"


class Settings(BaseSettings):
    """Root settings container with environment loading."""

    app: AppSettings = Field(default_factory=AppSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    blob_storage: BlobStorageSettings = Field(default_factory=BlobStorageSettings)
    document_db: DocumentDBSettings = Field(default_factory=DocumentDBSettings)
    uploads: UploadSettings = Field(default_factory=UploadSettings)
    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VIDEOMANIA__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

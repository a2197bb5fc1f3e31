"""Infrastructure factory for creating service instances from configuration."""

from pathlib import Path
from typing import Any, cast

from videomania.commons.infrastructure.blob import BlobStorageBase, MinioBlobStorage
from videomania.commons.infrastructure.documentdb import (
    DocumentDBBase,
    MongoDBDocumentDB,
)
from videomania.commons.settings.models import Settings
from videomania.commons.telemetry import get_logger
from videomania.infrastructure.video import (
    FFmpegMediaProcessor,
    FFmpegToolchain,
    MediaProcessorBase,
)

logger = get_logger(__name__)


def build_mongo_connection_string(settings: Settings) -> str:
    """Build the MongoDB URI from the document DB settings."""
    doc_settings = settings.document_db
    if doc_settings.username and doc_settings.password:
        return (
            f"mongodb://{doc_settings.username}:{doc_settings.password}"
            f"@{doc_settings.host}:{doc_settings.port}"
            f"/?authSource={doc_settings.auth_source}"
        )
    return f"mongodb://{doc_settings.host}:{doc_settings.port}"


def partition_key_paths(settings: Settings) -> dict[str, str]:
    """Partition key path of each configured collection."""
    collections = settings.document_db.collections
    return {
        collections.users: "id",
        collections.videos: "userId",
        collections.comments: "videoId",
    }


class InfrastructureFactory:
    """Factory for creating infrastructure service instances.

    Creates concrete implementations based on configuration settings.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize factory with settings.

        Args:
            settings: Application settings.
        """
        self._settings = settings
        self._instances: dict[str, Any] = {}

    def get_blob_storage(self) -> BlobStorageBase:
        """Get blob storage instance.

        Returns:
            Configured blob storage provider.
        """
        if "blob_storage" not in self._instances:
            blob_settings = self._settings.blob_storage
            self._instances["blob_storage"] = MinioBlobStorage(
                endpoint=blob_settings.endpoint,
                access_key=blob_settings.access_key,
                secret_key=blob_settings.secret_key,
                secure=blob_settings.use_ssl,
                region=blob_settings.region,
            )
        return cast("BlobStorageBase", self._instances["blob_storage"])

    def get_document_db(self) -> DocumentDBBase:
        """Get document database instance.

        Returns:
            Configured document database provider.
        """
        if "document_db" not in self._instances:
            self._instances["document_db"] = MongoDBDocumentDB(
                connection_string=build_mongo_connection_string(self._settings),
                database_name=self._settings.document_db.database,
                partition_keys=partition_key_paths(self._settings),
            )
        return cast("DocumentDBBase", self._instances["document_db"])

    def get_media_toolchain(self) -> FFmpegToolchain:
        """Resolve the ffmpeg toolchain once per process.

        Raises:
            MediaToolchainError: If the executables are unavailable.
        """
        if "media_toolchain" not in self._instances:
            processing = self._settings.processing
            self._instances["media_toolchain"] = FFmpegToolchain.initialize(
                ffmpeg_path=processing.ffmpeg_path,
                ffprobe_path=processing.ffprobe_path,
            )
        return cast("FFmpegToolchain", self._instances["media_toolchain"])

    def get_media_processor(self) -> MediaProcessorBase:
        """Get media processor instance.

        Returns:
            Media processor bound to the initialized toolchain.
        """
        if "media_processor" not in self._instances:
            temp_dir = self._settings.processing.temp_dir
            self._instances["media_processor"] = FFmpegMediaProcessor(
                toolchain=self.get_media_toolchain(),
                temp_dir=Path(temp_dir) if temp_dir else None,
            )
        return cast("MediaProcessorBase", self._instances["media_processor"])

    async def close_all(self) -> None:
        """Close all service connections."""
        for name, instance in self._instances.items():
            if hasattr(instance, "close"):
                try:
                    close_result = instance.close()
                    if hasattr(close_result, "__await__"):
                        await close_result
                except Exception as e:
                    logger.warning(
                        "Error closing service",
                        extra={"service": name, "error": str(e)},
                    )

        self._instances.clear()


class _FactoryHolder:
    """Holder for the factory singleton to avoid global statements."""

    instance: InfrastructureFactory | None = None


def get_factory(settings: Settings | None = None) -> InfrastructureFactory:
    """Get or create the infrastructure factory singleton.

    Args:
        settings: Settings to use. Required on first call.

    Returns:
        Infrastructure factory instance.

    Raises:
        ValueError: If settings not provided on first call.
    """
    if _FactoryHolder.instance is None:
        if settings is None:
            raise ValueError("Settings required to initialize factory")
        _FactoryHolder.instance = InfrastructureFactory(settings)

    return _FactoryHolder.instance


def reset_factory() -> None:
    """Reset the factory singleton (for testing)."""
    _FactoryHolder.instance = None

"""FastAPI dependency injection for services and settings."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from videomania.application.services.catalog import VideoCatalogService
from videomania.application.services.metadata import MetadataStore
from videomania.commons.settings.loader import get_settings as _load_settings
from videomania.commons.settings.models import Settings
from videomania.commons.telemetry import get_logger
from videomania.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)

logger = get_logger(__name__)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings loaded from config files and environment.
    """
    return _load_settings()


def get_infrastructure_factory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> InfrastructureFactory:
    """Get infrastructure factory with all providers."""
    return get_factory(settings)


def get_metadata_store(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MetadataStore:
    """Get the typed metadata store over the configured document DB."""
    return MetadataStore(
        document_db=factory.get_document_db(),
        doc_settings=settings.document_db,
    )


def get_catalog_service(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    metadata: Annotated[MetadataStore, Depends(get_metadata_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> VideoCatalogService:
    """Get the catalog service used by the upload, video and comment routes."""
    return VideoCatalogService(
        metadata=metadata,
        blob_storage=factory.get_blob_storage(),
        settings=settings,
    )


# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
FactoryDep = Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)]
CatalogServiceDep = Annotated[VideoCatalogService, Depends(get_catalog_service)]


async def init_services(settings: Settings) -> None:
    """Initialize infrastructure on startup, failing fast when unreachable.

    Args:
        settings: Application settings.
    """
    factory = get_factory(settings)

    blob_storage = factory.get_blob_storage()
    document_db = factory.get_document_db()

    containers = settings.blob_storage.containers
    for bucket in (containers.videos, containers.thumbnails, containers.processed_videos):
        await blob_storage.ensure_container(bucket)

    await MetadataStore(document_db, settings.document_db).ensure_indexes()
    logger.info("Services initialized")


async def shutdown_services() -> None:
    """Shutdown all infrastructure services."""
    try:
        factory = get_factory()
        await factory.close_all()
    except ValueError:
        pass  # Factory not initialized
    finally:
        reset_factory()
        get_settings.cache_clear()

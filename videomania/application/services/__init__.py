"""Application services - orchestration of infrastructure calls."""

from videomania.application.services.catalog import VideoCatalogService
from videomania.application.services.ingest import IngestWorkflow
from videomania.application.services.metadata import MetadataStore

__all__ = [
    "MetadataStore",
    "VideoCatalogService",
    "IngestWorkflow",
]

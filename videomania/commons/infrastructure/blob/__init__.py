"""Blob storage abstractions and implementations."""

from videomania.commons.infrastructure.blob.base import (
    BlobCreatedEvent,
    BlobMetadata,
    BlobNotFoundError,
    BlobStorageBase,
    HealthStatus,
    SignedUrlPermission,
    SigningConfigurationError,
)
from videomania.commons.infrastructure.blob.minio_provider import MinioBlobStorage

__all__ = [
    # Base classes
    "BlobMetadata",
    "BlobCreatedEvent",
    "BlobStorageBase",
    "HealthStatus",
    "SignedUrlPermission",
    # Implementations
    "MinioBlobStorage",
    # Exceptions
    "BlobNotFoundError",
    "SigningConfigurationError",
]

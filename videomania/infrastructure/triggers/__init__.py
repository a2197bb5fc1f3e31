"""Triggers that start background work when blobs appear."""

from videomania.infrastructure.triggers.minio_listener import (
    BlobCreatedHandler,
    BlobCreatedListener,
)

__all__ = [
    "BlobCreatedHandler",
    "BlobCreatedListener",
]

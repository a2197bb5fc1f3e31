"""Abstract base class for blob storage operations."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from videomania.domain.exceptions import ConfigurationException


@dataclass
class BlobMetadata:
    """Metadata for a stored blob."""

    path: str
    size_bytes: int
    content_type: str
    created_at: datetime
    etag: str


@dataclass
class HealthStatus:
    """Health check result."""

    healthy: bool
    latency_ms: float
    message: str | None = None
    details: dict[str, str] | None = None


@dataclass
class BlobCreatedEvent:
    """A notification that an object appeared in a watched container."""

    bucket: str
    path: str
    size_bytes: int
    event_name: str


class SignedUrlPermission(str, Enum):
    """What a signed URL lets its holder do."""

    READ = "read"
    WRITE_CREATE = "write_create"


class BlobNotFoundError(Exception):
    """Raised when a blob is not found."""

    def __init__(self, bucket: str, path: str) -> None:
        self.bucket = bucket
        self.path = path
        super().__init__(f"Blob not found: {bucket}/{path}")


class SigningConfigurationError(ConfigurationException):
    """Raised when the storage credentials cannot sign a URL."""

    def __init__(self, reason: str) -> None:
        super().__init__("blob_storage", reason)


class BlobStorageBase(ABC):
    """Container-scoped operations against a binary object store.

    A "container" is a bucket; a blob is addressed by (bucket, path) where
    path is the bare blob name.
    """

    @abstractmethod
    async def upload(
        self,
        bucket: str,
        path: str,
        data: BinaryIO | bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> BlobMetadata:
        """Upload a blob, overwriting any existing object.

        Args:
            bucket: Target bucket name.
            path: Path within the bucket.
            data: Seekable file-like object or bytes to upload.
            content_type: MIME type of the content.
            metadata: Optional key-value metadata.

        Returns:
            Metadata of the uploaded blob.
        """

    @abstractmethod
    async def upload_file(
        self,
        bucket: str,
        path: str,
        local_path: Path,
        content_type: str = "application/octet-stream",
    ) -> BlobMetadata:
        """Upload a local file as a blob."""

    @abstractmethod
    def download_stream(
        self,
        bucket: str,
        path: str,
        chunk_size: int = 8192,
    ) -> AsyncIterator[bytes]:
        """Stream download a blob in chunks.

        Raises:
            BlobNotFoundError: If blob doesn't exist.
        """
        ...

    @abstractmethod
    async def delete(self, bucket: str, path: str) -> bool:
        """Delete a blob.

        Returns:
            True if deleted, False if it didn't exist.
        """

    @abstractmethod
    async def exists(self, bucket: str, path: str) -> bool:
        """Check if a blob exists."""

    @abstractmethod
    async def get_metadata(self, bucket: str, path: str) -> BlobMetadata:
        """Get blob metadata without downloading.

        Raises:
            BlobNotFoundError: If blob doesn't exist.
        """

    @abstractmethod
    async def generate_signed_url(
        self,
        bucket: str,
        path: str,
        permission: SignedUrlPermission,
        valid_for: timedelta,
    ) -> str:
        """Issue a time-limited URL granting direct access to one blob.

        Args:
            bucket: Bucket name.
            path: Bare blob name.
            permission: READ, or WRITE_CREATE for client-side uploads.
            valid_for: How long the URL stays valid.

        Returns:
            Signed URL string.

        Raises:
            SigningConfigurationError: If the credentials cannot sign. Not retried.
        """

    @abstractmethod
    async def create_bucket(self, bucket: str) -> bool:
        """Create a bucket.

        Returns:
            True if created, False if it already existed.
        """

    @abstractmethod
    async def bucket_exists(self, bucket: str) -> bool:
        """Check if a bucket exists."""

    async def ensure_container(self, bucket: str) -> str:
        """Create the bucket if needed and return its name as a handle."""
        await self.create_bucket(bucket)
        return bucket

    @abstractmethod
    def listen_created(
        self,
        bucket: str,
        suffixes: list[str] | None = None,
    ) -> Iterator[BlobCreatedEvent]:
        """Block on object-created notifications for a bucket.

        Args:
            bucket: Bucket to watch.
            suffixes: Only report objects whose name ends with one of these.

        Yields:
            One event per delivered notification record.
        """

    @abstractmethod
    async def health_check(self) -> HealthStatus:
        """Check service health."""

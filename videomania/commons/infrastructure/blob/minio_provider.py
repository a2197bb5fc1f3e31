"""MinIO implementation of blob storage."""

import asyncio
import functools
import io
import time
from collections.abc import AsyncIterator, Callable, Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import BinaryIO, TypeVar
from urllib.parse import unquote_plus

from minio import Minio
from minio.error import S3Error

from videomania.commons.infrastructure.blob.base import (
    BlobCreatedEvent,
    BlobMetadata,
    BlobNotFoundError,
    BlobStorageBase,
    HealthStatus,
    SignedUrlPermission,
    SigningConfigurationError,
)
from videomania.commons.telemetry import get_logger

T = TypeVar("T")

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchObject"})
_CREATED_EVENTS = ("s3:ObjectCreated:*",)


def _is_missing(error: S3Error) -> bool:
    return error.code in _NOT_FOUND_CODES


def _data_length(data: BinaryIO) -> int:
    data.seek(0, io.SEEK_END)
    length = data.tell()
    data.seek(0)
    return length


class MinioBlobStorage(BlobStorageBase):
    """Blob storage on MinIO buckets.

    Works with both MinIO (local development) and AWS S3. The SDK is
    synchronous, so every call is pushed to the default executor.
    Presigned URLs need both keys; without them signing fails fast with
    ``SigningConfigurationError``.
    """

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        secure: bool = False,
        region: str | None = None,
    ) -> None:
        """Initialize MinIO client.

        Args:
            endpoint: MinIO/S3 endpoint (e.g., "localhost:9000").
            access_key: Access key ID. Empty for anonymous access.
            secret_key: Secret access key. Empty for anonymous access.
            secure: Use HTTPS connection.
            region: AWS region (optional, for S3).
        """
        self._client = Minio(
            endpoint=endpoint,
            access_key=access_key or None,
            secret_key=secret_key or None,
            secure=secure,
            region=region,
        )
        self._endpoint = endpoint
        self._can_sign = bool(access_key and secret_key)
        self._logger = get_logger(__name__)

    async def _in_executor(self, fn: Callable[..., T], *args: object, **kwargs: object) -> T:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))

    # =========================================================================
    # Writes
    # =========================================================================

    async def upload(
        self,
        bucket: str,
        path: str,
        data: BinaryIO | bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> BlobMetadata:
        """Upload bytes or a readable binary file object."""
        stream = io.BytesIO(data) if isinstance(data, bytes) else data
        length = _data_length(stream)

        await self._in_executor(
            self._client.put_object,
            bucket_name=bucket,
            object_name=path,
            data=stream,
            length=length,
            content_type=content_type,
            metadata=metadata,
        )
        self._logger.debug(
            "Blob uploaded",
            extra={"bucket": bucket, "blob_name": path, "size_bytes": length},
        )
        return await self.get_metadata(bucket, path)

    async def upload_file(
        self,
        bucket: str,
        path: str,
        local_path: Path,
        content_type: str = "application/octet-stream",
    ) -> BlobMetadata:
        """Upload a staged local file."""
        await self._in_executor(
            self._client.fput_object,
            bucket_name=bucket,
            object_name=path,
            file_path=str(local_path),
            content_type=content_type,
        )
        self._logger.debug(
            "File uploaded",
            extra={"bucket": bucket, "blob_name": path, "local_path": str(local_path)},
        )
        return await self.get_metadata(bucket, path)

    async def delete(self, bucket: str, path: str) -> bool:
        """Delete a blob. A missing blob returns False instead of raising."""
        if not await self.exists(bucket, path):
            return False

        await self._in_executor(self._client.remove_object, bucket, path)
        self._logger.debug("Blob deleted", extra={"bucket": bucket, "blob_name": path})
        return True

    # =========================================================================
    # Reads
    # =========================================================================

    async def download_stream(  # type: ignore[override]
        self,
        bucket: str,
        path: str,
        chunk_size: int = 8192,
    ) -> AsyncIterator[bytes]:
        """Yield the blob in chunks, releasing the connection when done."""
        try:
            response = await self._in_executor(self._client.get_object, bucket, path)
        except S3Error as e:
            if _is_missing(e):
                raise BlobNotFoundError(bucket, path) from e
            raise

        try:
            while chunk := await self._in_executor(response.read, chunk_size):
                yield chunk
        finally:
            response.close()
            response.release_conn()

    async def exists(self, bucket: str, path: str) -> bool:
        try:
            await self._in_executor(self._client.stat_object, bucket, path)
        except S3Error as e:
            if _is_missing(e):
                return False
            raise
        return True

    async def get_metadata(self, bucket: str, path: str) -> BlobMetadata:
        """Stat a blob without downloading it.

        Raises:
            BlobNotFoundError: If the blob does not exist.
        """
        try:
            stat = await self._in_executor(self._client.stat_object, bucket, path)
        except S3Error as e:
            if _is_missing(e):
                raise BlobNotFoundError(bucket, path) from e
            raise

        return BlobMetadata(
            path=path,
            size_bytes=stat.size or 0,
            content_type=stat.content_type or "application/octet-stream",
            created_at=stat.last_modified or datetime.now(UTC),
            etag=stat.etag or "",
        )

    async def generate_signed_url(
        self,
        bucket: str,
        path: str,
        permission: SignedUrlPermission,
        valid_for: timedelta,
    ) -> str:
        """Presign a GET (read) or PUT (write+create) for one object."""
        if not self._can_sign:
            raise SigningConfigurationError(
                "access key and secret key are required to sign URLs"
            )

        presign = (
            self._client.presigned_put_object
            if permission == SignedUrlPermission.WRITE_CREATE
            else self._client.presigned_get_object
        )
        try:
            url = await self._in_executor(
                presign, bucket_name=bucket, object_name=path, expires=valid_for
            )
        except ValueError as e:
            # Raised by the SDK for out-of-range expiry windows
            raise SigningConfigurationError(str(e)) from e
        return str(url)

    # =========================================================================
    # Buckets
    # =========================================================================

    async def create_bucket(self, bucket: str) -> bool:
        """Create a bucket; False when it already existed."""
        if await self.bucket_exists(bucket):
            return False

        await self._in_executor(self._client.make_bucket, bucket)
        self._logger.info("Bucket created", extra={"bucket": bucket})
        return True

    async def bucket_exists(self, bucket: str) -> bool:
        return bool(await self._in_executor(self._client.bucket_exists, bucket))

    def listen_created(
        self,
        bucket: str,
        suffixes: list[str] | None = None,
    ) -> Iterator[BlobCreatedEvent]:
        """Yield object-created events from MinIO bucket notifications.

        Blocks between events; callers pull from a worker thread.
        Object keys arrive URL-encoded and are decoded here.
        """
        wanted = tuple(s.lower() for s in suffixes) if suffixes else None

        with self._client.listen_bucket_notification(
            bucket, events=_CREATED_EVENTS
        ) as events:
            for event in events:
                for record in event.get("Records", []):
                    s3_object = record.get("s3", {}).get("object", {})
                    key = unquote_plus(s3_object.get("key", ""))
                    if not key:
                        continue
                    if wanted and not key.lower().endswith(wanted):
                        continue
                    yield BlobCreatedEvent(
                        bucket=bucket,
                        path=key,
                        size_bytes=int(s3_object.get("size", 0)),
                        event_name=record.get("eventName", ""),
                    )

    async def health_check(self) -> HealthStatus:
        """List buckets as a connectivity probe."""
        start = time.perf_counter()
        try:
            await self._in_executor(self._client.list_buckets)
        except Exception as e:
            return HealthStatus(
                healthy=False,
                latency_ms=(time.perf_counter() - start) * 1000,
                message=f"MinIO health check failed: {e}",
                details={"endpoint": self._endpoint, "error": str(e)},
            )
        return HealthStatus(
            healthy=True,
            latency_ms=(time.perf_counter() - start) * 1000,
            message="MinIO is healthy",
            details={"endpoint": self._endpoint},
        )

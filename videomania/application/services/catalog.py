"""Request-level use cases behind the HTTP API."""

from datetime import timedelta
from pathlib import PurePosixPath
from typing import BinaryIO
from uuid import uuid4

from videomania.application.dtos import (
    AddCommentRequest,
    CommentResponse,
    DeleteVideoResponse,
    SignedUploadResponse,
    UploadVideoResponse,
    VideoDetailResponse,
)
from videomania.application.services.metadata import MetadataStore
from videomania.commons.infrastructure.blob.base import (
    BlobStorageBase,
    SignedUrlPermission,
)
from videomania.commons.infrastructure.documentdb.base import DocumentNotFoundError
from videomania.commons.settings.models import Settings
from videomania.commons.telemetry import LogContext, get_logger
from videomania.domain.exceptions import (
    CommentNotFoundException,
    DependencyException,
    ValidationException,
    VideoNotFoundException,
)
from videomania.domain.models import Comment, Video
from videomania.domain.value_objects import BlobName


def _extension(file_name: str) -> str:
    return PurePosixPath(file_name).suffix.lower()


def _base_file_name(file_name: str) -> str:
    """Drop any client-side directory part, Windows or POSIX."""
    return file_name.replace("\\", "/").rsplit("/", 1)[-1]


class VideoCatalogService:
    """Upload, browse, comment on and delete videos.

    Each operation is a straight sequence of awaited store and blob calls.
    Validation and missing-record failures are raised as domain exceptions
    for the API layer to translate.
    """

    def __init__(
        self,
        metadata: MetadataStore,
        blob_storage: BlobStorageBase,
        settings: Settings,
    ) -> None:
        """Initialize the catalog.

        Args:
            metadata: Typed metadata store.
            blob_storage: Blob storage provider.
            settings: Application settings.
        """
        self._metadata = metadata
        self._blob = blob_storage
        self._uploads = settings.uploads
        self._logger = get_logger(__name__)

        containers = settings.blob_storage.containers
        self._videos_bucket = containers.videos
        self._thumbnails_bucket = containers.thumbnails
        self._processed_bucket = containers.processed_videos
        self._upload_validity = timedelta(
            minutes=settings.blob_storage.upload_sas_validity_minutes
        )
        self._read_validity = timedelta(
            hours=settings.blob_storage.read_sas_validity_hours
        )

    # =========================================================================
    # Uploads
    # =========================================================================

    async def upload_video(
        self,
        title: str | None,
        description: str | None,
        user_id: str | None,
        file_name: str | None,
        data: BinaryIO | bytes,
        size_bytes: int,
        content_type: str | None = None,
    ) -> UploadVideoResponse:
        """Store an uploaded file and record it as a new video.

        The blob is written first; the video record is created only after
        the upload succeeded.

        Raises:
            ValidationException: If the title or file is missing or rejected.
            DependencyException: If the blob or record write fails.
        """
        if not title or not title.strip():
            raise ValidationException("title", "Title is required")
        if not file_name or size_bytes <= 0:
            raise ValidationException("file", "A non-empty video file is required")
        if size_bytes > self._uploads.max_file_size_bytes:
            raise ValidationException(
                "file",
                f"File exceeds the {self._uploads.max_file_size_mb} MB limit",
            )

        ext = _extension(file_name)
        if ext not in self._uploads.allowed_extensions:
            raise ValidationException(
                "file",
                "Invalid file type. Allowed: "
                + ", ".join(e.lstrip(".").upper() for e in self._uploads.allowed_extensions),
            )

        blob_name = f"{uuid4()}{ext}"
        with LogContext(blob_name=blob_name):
            try:
                await self._blob.ensure_container(self._videos_bucket)
                await self._blob.upload(
                    self._videos_bucket,
                    blob_name,
                    data,
                    content_type=content_type or "application/octet-stream",
                )
            except Exception as e:
                self._logger.error("Blob upload failed", extra={"error": str(e)})
                raise DependencyException("upload_blob", str(e)) from e

            video = Video(
                user_id=user_id or self._uploads.default_user_id,
                title=title.strip(),
                description=(description or "").strip() or None,
                url=blob_name,
            )
            try:
                video_id = await self._metadata.add_video(video)
            except Exception as e:
                self._logger.error(
                    "Video record not created after upload",
                    extra={"error": str(e)},
                )
                raise DependencyException("add_video", str(e)) from e

        return UploadVideoResponse(video_id=video_id, blob_name=blob_name)

    async def create_signed_upload(self, file_name: str) -> SignedUploadResponse:
        """Issue a write+create URL for a direct browser upload.

        Raises:
            ValidationException: If the name is empty or the type is not allowed.
            SigningConfigurationError: If the storage credentials cannot sign.
        """
        if not file_name or not file_name.strip():
            raise ValidationException("fileName", "FileName is required")

        base_name = _base_file_name(file_name.strip())
        if _extension(base_name) not in self._uploads.signed_upload_extensions:
            raise ValidationException(
                "fileName",
                "Invalid file type. Allowed: "
                + ", ".join(
                    e.lstrip(".").upper() for e in self._uploads.signed_upload_extensions
                ),
            )

        blob_name = f"{uuid4()}_{base_name}"
        await self._blob.ensure_container(self._videos_bucket)
        sas_uri = await self._blob.generate_signed_url(
            self._videos_bucket,
            blob_name,
            SignedUrlPermission.WRITE_CREATE,
            self._upload_validity,
        )
        return SignedUploadResponse(
            sas_uri=sas_uri,
            blob_name=blob_name,
            expires_in=int(self._upload_validity.total_seconds()),
        )

    # =========================================================================
    # Browsing
    # =========================================================================

    async def list_videos(self) -> list[Video]:
        return await self._metadata.list_videos()

    async def get_video_detail(self, video_id: str) -> VideoDetailResponse:
        """Video, its comments and read URLs for the player.

        Raises:
            VideoNotFoundException: If no video has this id.
        """
        video = await self._require_video(video_id)
        comments = await self._metadata.list_comments(video_id)

        processing = video.processing
        return VideoDetailResponse(
            video=video,
            comments=comments,
            video_url=await self._sign_read(self._videos_bucket, video.url),
            thumbnail_url=(
                await self._sign_read(self._thumbnails_bucket, processing.thumbnail_url)
                if processing and processing.thumbnail_url
                else None
            ),
            resized_video_url=(
                await self._sign_read(
                    self._processed_bucket, processing.resized_video_url
                )
                if processing and processing.resized_video_url
                else None
            ),
        )

    async def _sign_read(self, bucket: str, stored_url: str) -> str:
        """Signed read URL for a stored url value, or the bare name on failure."""
        blob_name = BlobName.from_url(stored_url).value
        try:
            return await self._blob.generate_signed_url(
                bucket, blob_name, SignedUrlPermission.READ, self._read_validity
            )
        except Exception as e:
            self._logger.warning(
                "Could not sign read URL",
                extra={"bucket": bucket, "blob_name": blob_name, "error": str(e)},
            )
            return blob_name

    async def _require_video(self, video_id: str) -> Video:
        if not video_id:
            raise ValidationException("videoId", "Video ID is required")
        video = await self._metadata.find_video_by_id(video_id)
        if video is None:
            raise VideoNotFoundException(video_id)
        return video

    # =========================================================================
    # Comments
    # =========================================================================

    async def add_comment(self, request: AddCommentRequest) -> CommentResponse:
        """Attach a comment to an existing video.

        Raises:
            VideoNotFoundException: If the video does not exist.
        """
        await self._require_video(request.video_id)

        comment = Comment(
            video_id=request.video_id,
            user_id=request.user_id or self._uploads.anonymous_commenter,
            text=request.comment_text,
        )
        comment_id = await self._metadata.add_comment(comment)
        self._logger.info(
            "Comment added",
            extra={"comment_id": comment_id, "video_id": request.video_id},
        )
        return CommentResponse(
            message="Comment added successfully",
            comment_id=comment_id,
            video_id=request.video_id,
        )

    async def delete_comment(
        self, comment_id: str, video_id: str | None
    ) -> CommentResponse:
        """Delete one comment using the owning video id as partition key.

        Raises:
            ValidationException: If the video id is missing.
            VideoNotFoundException: If the video does not exist.
            CommentNotFoundException: If the comment is not under that video.
        """
        if not video_id:
            raise ValidationException("videoId", "videoId query parameter is required")
        await self._require_video(video_id)

        result = await self._metadata.delete_comment(comment_id, video_id)
        if result.is_not_found:
            raise CommentNotFoundException(comment_id, video_id)

        return CommentResponse(
            message="Comment deleted successfully",
            comment_id=comment_id,
            video_id=video_id,
        )

    # =========================================================================
    # Cascading delete
    # =========================================================================

    async def delete_video(self, video_id: str) -> DeleteVideoResponse:
        """Delete comments, then the blob, then the video record.

        Comment and blob failures are logged and skipped. Failing to delete
        the video record itself fails the whole request.

        Raises:
            VideoNotFoundException: If the video does not exist.
            DependencyException: If the video record cannot be deleted.
        """
        video = await self._require_video(video_id)
        response = DeleteVideoResponse(video_id=video_id)

        with LogContext(video_id=video_id):
            try:
                comments = await self._metadata.list_comments(video_id)
            except Exception as e:
                self._logger.warning(
                    "Could not list comments for cascade", extra={"error": str(e)}
                )
                comments = []

            for comment in comments:
                try:
                    result = await self._metadata.delete_comment(
                        comment.id, comment.video_id
                    )
                except Exception as e:
                    self._logger.warning(
                        "Error deleting comment",
                        extra={"comment_id": comment.id, "error": str(e)},
                    )
                    response.comments_failed += 1
                    continue
                if result.is_success:
                    response.comments_deleted += 1
                else:
                    response.comments_failed += 1

            if video.url:
                try:
                    blob_name = BlobName.from_url(video.url).value
                    response.blob_deleted = await self._blob.delete(
                        self._videos_bucket, blob_name
                    )
                except Exception as e:
                    self._logger.warning(
                        "Error deleting video blob, continuing with record delete",
                        extra={"url": video.url, "error": str(e)},
                    )

            try:
                await self._metadata.delete_video(video)
            except DocumentNotFoundError as e:
                self._logger.error("Video vanished during deletion")
                raise DependencyException(
                    "delete_video",
                    "Video found in query but not found during deletion. "
                    "Database may be inconsistent.",
                ) from e

        self._logger.info(
            "Video deleted",
            extra={
                "video_id": video_id,
                "comments_deleted": response.comments_deleted,
                "comments_failed": response.comments_failed,
            },
        )
        return response

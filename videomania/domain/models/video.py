"""Video domain model and its processing sub-record."""

from datetime import UTC, datetime
from enum import Enum
from typing import Self
from uuid import uuid4

from pydantic import Field

from videomania.domain.models.base import DocumentModel


class ProcessingStatus(str, Enum):
    """Outcome recorded by the ingest worker."""

    COMPLETED = "completed"  # At least one artifact or probe succeeded
    FAILED = "failed"  # Nothing could be derived from the upload


class MediaMetadata(DocumentModel):
    """Technical metadata probed from the uploaded file."""

    duration: float = Field(default=0.0, ge=0, description="Duration in seconds")
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    video_codec: str = "unknown"
    audio_codec: str = "unknown"
    frame_rate: float = Field(default=0.0, ge=0)
    bit_rate: int = Field(default=0, ge=0)
    file_size_bytes: int = Field(default=0, ge=0)

    @property
    def resolution(self) -> str:
        """Resolution as WIDTHxHEIGHT."""
        return f"{self.width}x{self.height}"


class VideoProcessing(DocumentModel):
    """Sub-record describing what the ingest worker derived from a video."""

    processed: bool
    processed_at: datetime
    thumbnail_url: str | None = Field(
        default=None,
        description="Blob name of the thumbnail in the thumbnails container",
    )
    resized_video_url: str | None = Field(
        default=None,
        description="Blob name of the resized copy in the processed container",
    )
    metadata: MediaMetadata | None = None
    status: ProcessingStatus


class ProcessingUpdate(DocumentModel):
    """Typed partial update produced by one ingest run.

    Applied to a Video with read-modify-write; fields left as None mean the
    corresponding step produced nothing.
    """

    thumbnail_url: str | None = None
    resized_video_url: str | None = None
    metadata: MediaMetadata | None = None
    processed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def status(self) -> ProcessingStatus:
        if self.thumbnail_url or self.resized_video_url or self.metadata:
            return ProcessingStatus.COMPLETED
        return ProcessingStatus.FAILED

    def to_processing(self) -> VideoProcessing:
        """Build the processing sub-record stored on the video."""
        status = self.status
        return VideoProcessing(
            processed=status == ProcessingStatus.COMPLETED,
            processed_at=self.processed_at,
            thumbnail_url=self.thumbnail_url,
            resized_video_url=self.resized_video_url,
            metadata=self.metadata,
            status=status,
        )


class Video(DocumentModel):
    """An uploaded video. Partitioned by the owning user's id."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str = Field(description="Owner; also the partition key")
    title: str = Field(min_length=1)
    description: str | None = None
    url: str = Field(description="Blob name in the videos container, not a URL")
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    processing: VideoProcessing | None = None

    @property
    def is_processed(self) -> bool:
        """Whether the ingest worker has recorded a successful run."""
        return self.processing is not None and self.processing.processed

    def with_processing(self, update: ProcessingUpdate) -> Self:
        """Return a copy carrying the processing sub-record from an ingest run."""
        return self.model_copy(update={"processing": update.to_processing()})

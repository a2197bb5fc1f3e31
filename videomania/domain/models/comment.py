"""Comment domain model."""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import Field

from videomania.domain.models.base import DocumentModel


class Comment(DocumentModel):
    """A comment on a video. Partitioned by the video id it belongs to."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    video_id: str = Field(description="Owning video; also the partition key")
    user_id: str = "Anonymous"
    text: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

"""DTOs for upload, browse and delete operations on videos."""

from pydantic import Field

from videomania.application.dtos.base import CamelModel
from videomania.domain.models import Comment, Video


class UploadVideoResponse(CamelModel):
    """Result of a server-side upload."""

    success: bool = True
    message: str = "Video uploaded successfully"
    video_id: str = Field(description="Id of the created video record")
    blob_name: str = Field(description="Name of the stored blob")


class SignedUploadRequest(CamelModel):
    """Request for a URL the browser can upload to directly."""

    file_name: str = Field(min_length=1, description="Original file name")


class SignedUploadResponse(CamelModel):
    """Write+create signed URL for one new blob."""

    sas_uri: str = Field(description="Signed URL accepting a single PUT")
    blob_name: str
    expires_in: int = Field(description="Validity in seconds")


class VideoDetailResponse(CamelModel):
    """A video with its comments and signed read URLs."""

    video: Video
    comments: list[Comment] = Field(default_factory=list)
    video_url: str = Field(description="Signed read URL, or the bare blob name")
    thumbnail_url: str | None = None
    resized_video_url: str | None = None


class DeleteVideoResponse(CamelModel):
    """Outcome of a cascading video delete."""

    success: bool = True
    message: str = "Video deleted successfully"
    video_id: str
    comments_deleted: int = 0
    comments_failed: int = 0
    blob_deleted: bool = False

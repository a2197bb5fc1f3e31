"""Data Transfer Objects for API boundaries."""

from videomania.application.dtos.base import CamelModel
from videomania.application.dtos.comments import AddCommentRequest, CommentResponse
from videomania.application.dtos.ingest import IngestReport, IngestState
from videomania.application.dtos.videos import (
    DeleteVideoResponse,
    SignedUploadRequest,
    SignedUploadResponse,
    UploadVideoResponse,
    VideoDetailResponse,
)

__all__ = [
    "CamelModel",
    # Videos
    "UploadVideoResponse",
    "SignedUploadRequest",
    "SignedUploadResponse",
    "VideoDetailResponse",
    "DeleteVideoResponse",
    # Comments
    "AddCommentRequest",
    "CommentResponse",
    # Ingest
    "IngestState",
    "IngestReport",
]

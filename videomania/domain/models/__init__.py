"""Domain models."""

from videomania.domain.models.base import DocumentModel
from videomania.domain.models.comment import Comment
from videomania.domain.models.result import OperationResult, OperationStatus
from videomania.domain.models.user import User
from videomania.domain.models.video import (
    MediaMetadata,
    ProcessingStatus,
    ProcessingUpdate,
    Video,
    VideoProcessing,
)

__all__ = [
    "DocumentModel",
    # Video
    "Video",
    "VideoProcessing",
    "ProcessingUpdate",
    "ProcessingStatus",
    "MediaMetadata",
    # Comment / User
    "Comment",
    "User",
    # Results
    "OperationResult",
    "OperationStatus",
]

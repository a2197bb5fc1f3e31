"""Domain layer - business models and logic."""

from videomania.domain.exceptions import (
    CommentNotFoundException,
    ConfigurationException,
    DependencyException,
    DomainException,
    IngestionException,
    ValidationException,
    VideoNotFoundException,
)
from videomania.domain.models import (
    Comment,
    DocumentModel,
    MediaMetadata,
    OperationResult,
    OperationStatus,
    ProcessingStatus,
    ProcessingUpdate,
    User,
    Video,
    VideoProcessing,
)
from videomania.domain.value_objects import BlobName, blob_name_from_url

__all__ = [
    # Exceptions
    "DomainException",
    "ValidationException",
    "VideoNotFoundException",
    "CommentNotFoundException",
    "DependencyException",
    "ConfigurationException",
    "IngestionException",
    # Models
    "DocumentModel",
    "Video",
    "VideoProcessing",
    "ProcessingUpdate",
    "ProcessingStatus",
    "MediaMetadata",
    "Comment",
    "User",
    "OperationResult",
    "OperationStatus",
    # Value Objects
    "BlobName",
    "blob_name_from_url",
]

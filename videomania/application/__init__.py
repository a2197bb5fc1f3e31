"""Application layer - use cases and orchestration.

This layer contains:
- Services: metadata access, request-level use cases, the ingest workflow
- DTOs: Data transfer objects for API boundaries
"""

from videomania.application.dtos import (
    AddCommentRequest,
    CommentResponse,
    DeleteVideoResponse,
    IngestReport,
    IngestState,
    SignedUploadRequest,
    SignedUploadResponse,
    UploadVideoResponse,
    VideoDetailResponse,
)
from videomania.application.services import (
    IngestWorkflow,
    MetadataStore,
    VideoCatalogService,
)

__all__ = [
    # DTOs
    "AddCommentRequest",
    "CommentResponse",
    "DeleteVideoResponse",
    "IngestReport",
    "IngestState",
    "SignedUploadRequest",
    "SignedUploadResponse",
    "UploadVideoResponse",
    "VideoDetailResponse",
    # Services
    "IngestWorkflow",
    "MetadataStore",
    "VideoCatalogService",
]

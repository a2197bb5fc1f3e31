"""Domain exceptions for the video sharing system."""


class DomainException(Exception):
    """Base exception for domain errors."""


class ValidationException(DomainException):
    """Raised when a request is missing a field or carries an invalid value."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(reason)


class VideoNotFoundException(DomainException):
    """Raised when a requested video is not found."""

    def __init__(self, video_id: str) -> None:
        self.video_id = video_id
        super().__init__(f"Video not found: {video_id}")


class CommentNotFoundException(DomainException):
    """Raised when a comment does not exist under the given video."""

    def __init__(self, comment_id: str, video_id: str) -> None:
        self.comment_id = comment_id
        self.video_id = video_id
        super().__init__(f"Comment {comment_id} not found for video {video_id}")


class DependencyException(DomainException):
    """Raised when a store or blob call fails in a way the caller cannot absorb."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed: {reason}")


class ConfigurationException(DomainException):
    """Raised when a component cannot work with the configuration it was given."""

    def __init__(self, component: str, reason: str) -> None:
        self.component = component
        self.reason = reason
        super().__init__(f"{component} is misconfigured: {reason}")


class IngestionException(DomainException):
    """Raised when processing a newly stored video blob fails."""

    def __init__(self, blob_name: str, stage: str, reason: str) -> None:
        self.blob_name = blob_name
        self.stage = stage
        self.reason = reason
        super().__init__(f"Ingestion failed for {blob_name} at {stage}: {reason}")

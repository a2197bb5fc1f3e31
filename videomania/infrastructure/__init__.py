"""Infrastructure layer - external service implementations."""

from videomania.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)
from videomania.infrastructure.triggers import BlobCreatedHandler, BlobCreatedListener
from videomania.infrastructure.video import (
    FFmpegMediaProcessor,
    FFmpegToolchain,
    MediaProcessorBase,
    MediaToolchainError,
)

__all__ = [
    # Factory
    "InfrastructureFactory",
    "get_factory",
    "reset_factory",
    # Triggers
    "BlobCreatedHandler",
    "BlobCreatedListener",
    # Media
    "MediaProcessorBase",
    "MediaToolchainError",
    "FFmpegMediaProcessor",
    "FFmpegToolchain",
]

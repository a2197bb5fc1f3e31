"""Media processing services."""

from videomania.infrastructure.video.base import MediaProcessorBase, MediaToolchainError
from videomania.infrastructure.video.ffmpeg_processor import FFmpegMediaProcessor
from videomania.infrastructure.video.toolchain import FFmpegToolchain

__all__ = [
    "MediaProcessorBase",
    "MediaToolchainError",
    "FFmpegMediaProcessor",
    "FFmpegToolchain",
]

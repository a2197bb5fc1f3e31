"""Abstract base class for media processing."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from pathlib import Path

from videomania.domain.exceptions import ConfigurationException
from videomania.domain.models import MediaMetadata, OperationResult


class MediaToolchainError(ConfigurationException):
    """Raised when the media executables cannot be located or started."""

    def __init__(self, reason: str) -> None:
        super().__init__("media_toolchain", reason)


class MediaProcessorBase(ABC):
    """Local-file media operations used by the ingest worker.

    Operations that find no decodable video stream report ``NOT_FOUND``
    rather than raising; tool failures report ``FAILED``.
    """

    @property
    @abstractmethod
    def temp_dir(self) -> Path:
        """Directory holding staged inputs and generated artifacts."""

    @abstractmethod
    async def probe(self, video_path: Path) -> OperationResult[MediaMetadata]:
        """Read duration, dimensions, codecs, frame rate and bit rate."""

    @abstractmethod
    async def extract_thumbnail(
        self,
        video_path: Path,
        output_name: str,
        at_seconds: float = 1.0,
    ) -> OperationResult[Path]:
        """Write a single JPEG frame taken at ``at_seconds``.

        Args:
            video_path: Local input file.
            output_name: File name of the thumbnail inside the temp directory.
            at_seconds: Offset of the captured frame.

        Returns:
            Path of the written image on success.
        """

    @abstractmethod
    async def transcode_resize(
        self,
        video_path: Path,
        output_name: str,
        width: int = 1280,
        height: int = 720,
    ) -> OperationResult[Path]:
        """Transcode to H.264 MP4 fitted into ``width`` x ``height``.

        Audio is kept when the input has an audio stream.
        """

    @abstractmethod
    async def persist_stream_to_temp_file(
        self,
        stream: AsyncIterator[bytes],
        file_name: str,
    ) -> Path:
        """Drain a byte stream into ``file_name`` inside the temp directory."""

    @abstractmethod
    def delete_temp_file(self, path: Path) -> None:
        """Remove a temp file. A missing file is not an error."""

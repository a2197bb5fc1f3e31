"""Startup resolution of the ffmpeg/ffprobe executables."""

import shutil
import subprocess
from dataclasses import dataclass
from typing import Self

from videomania.commons.telemetry import get_logger
from videomania.infrastructure.video.base import MediaToolchainError

logger = get_logger(__name__)


def _resolve(executable: str) -> str:
    resolved = shutil.which(executable)
    if resolved is None:
        raise MediaToolchainError(f"'{executable}' was not found on PATH")
    return resolved


def _version_line(executable: str) -> str:
    try:
        result = subprocess.run(
            [executable, "-version"],
            capture_output=True,
            check=True,
            timeout=30,
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise MediaToolchainError(f"'{executable} -version' failed: {e}") from e

    output = result.stdout.decode("utf-8", errors="replace")
    return output.splitlines()[0] if output else "unknown"


@dataclass(frozen=True)
class FFmpegToolchain:
    """Resolved ffmpeg and ffprobe executables.

    Build one with ``initialize`` at process startup and hand it to the
    media processor. There is no process-wide "already downloaded" flag;
    holding a toolchain means the executables were found and answered.
    """

    ffmpeg: str
    ffprobe: str
    version: str

    @classmethod
    def initialize(
        cls,
        ffmpeg_path: str = "ffmpeg",
        ffprobe_path: str = "ffprobe",
    ) -> Self:
        """Locate both executables and check that they start.

        Raises:
            MediaToolchainError: If either executable is missing or broken.
        """
        ffmpeg = _resolve(ffmpeg_path)
        ffprobe = _resolve(ffprobe_path)

        version = _version_line(ffmpeg)
        _version_line(ffprobe)

        logger.info(
            "Media toolchain ready",
            extra={"ffmpeg": ffmpeg, "ffprobe": ffprobe, "version": version},
        )
        return cls(ffmpeg=ffmpeg, ffprobe=ffprobe, version=version)

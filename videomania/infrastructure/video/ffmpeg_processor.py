"""FFmpeg implementation of media processing."""

import asyncio
import json
import os
import subprocess
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

from videomania.commons.telemetry import get_logger, timed
from videomania.domain.models import MediaMetadata, OperationResult
from videomania.infrastructure.video.base import MediaProcessorBase
from videomania.infrastructure.video.toolchain import FFmpegToolchain


def _parse_frame_rate(value: str | None) -> float:
    """Parse ffprobe's ``r_frame_rate`` fraction, e.g. ``30000/1001``."""
    if not value:
        return 0.0
    if "/" in value:
        num, den = value.split("/", 1)
        return float(num) / float(den) if float(den) != 0 else 0.0
    return float(value)


def _first_stream(data: dict[str, Any], codec_type: str) -> dict[str, Any] | None:
    for stream in data.get("streams", []):
        if stream.get("codec_type") == codec_type:
            return dict(stream)
    return None


# Missing executable, non-zero exit or garbled ffprobe output
_TOOL_ERRORS = (subprocess.CalledProcessError, OSError, json.JSONDecodeError)


def _describe(error: Exception, lines: int = 5) -> str:
    """Tail of stderr for a failed tool run, else the error message."""
    if not isinstance(error, subprocess.CalledProcessError):
        return str(error)
    stderr = (error.stderr or b"").decode("utf-8", errors="replace")
    return "\n".join(stderr.strip().splitlines()[-lines:]) or str(error)


class FFmpegMediaProcessor(MediaProcessorBase):
    """FFmpeg-based thumbnail, resize and probe operations on local files.

    Requires an initialized ``FFmpegToolchain``.
    """

    def __init__(
        self,
        toolchain: FFmpegToolchain,
        temp_dir: Path | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            toolchain: Resolved ffmpeg/ffprobe executables.
            temp_dir: Working directory. Defaults to a per-process directory
                under the system temp dir.
        """
        self._toolchain = toolchain
        self._temp_dir = temp_dir or (
            Path(tempfile.gettempdir()) / f"videomania-{os.getpid()}"
        )
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        self._logger = get_logger(__name__)

    @property
    def temp_dir(self) -> Path:
        return self._temp_dir

    async def _run(self, cmd: list[str]) -> subprocess.CompletedProcess[bytes]:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            None,
            lambda: subprocess.run(cmd, capture_output=True, check=True),
        )

    async def _ffprobe(self, video_path: Path) -> dict[str, Any]:
        cmd = [
            self._toolchain.ffprobe,
            "-v",
            "quiet",
            "-print_format",
            "json",
            "-show_format",
            "-show_streams",
            str(video_path),
        ]
        result = await self._run(cmd)
        data: dict[str, Any] = json.loads(result.stdout or b"{}")
        return data

    @timed
    async def probe(self, video_path: Path) -> OperationResult[MediaMetadata]:
        """Get technical metadata of a video file."""
        try:
            data = await self._ffprobe(video_path)
        except _TOOL_ERRORS as e:
            self._logger.warning(
                "ffprobe failed",
                extra={"file_path": str(video_path), "error": _describe(e)},
            )
            return OperationResult.failed(_describe(e))

        video_stream = _first_stream(data, "video")
        if video_stream is None:
            self._logger.warning(
                "No video stream found", extra={"file_path": str(video_path)}
            )
            return OperationResult.not_found(f"No video stream in {video_path.name}")

        audio_stream = _first_stream(data, "audio")
        format_info = data.get("format", {})

        metadata = MediaMetadata(
            duration=float(format_info.get("duration") or 0),
            width=int(video_stream.get("width") or 0),
            height=int(video_stream.get("height") or 0),
            video_codec=video_stream.get("codec_name") or "unknown",
            audio_codec=(audio_stream or {}).get("codec_name") or "unknown",
            frame_rate=_parse_frame_rate(video_stream.get("r_frame_rate")),
            bit_rate=int(format_info.get("bit_rate") or 0),
            file_size_bytes=int(format_info.get("size") or 0),
        )
        return OperationResult.ok(metadata)

    async def extract_thumbnail(
        self,
        video_path: Path,
        output_name: str,
        at_seconds: float = 1.0,
    ) -> OperationResult[Path]:
        """Extract a single frame as JPEG."""
        info = await self.probe(video_path)
        if not info.is_success or info.value is None:
            return OperationResult(status=info.status, error=info.error)

        # Short clips: take the first frame instead of seeking past the end
        seek = at_seconds if info.value.duration > at_seconds else 0.0
        output_path = self._temp_dir / output_name

        cmd = [
            self._toolchain.ffmpeg,
            "-ss",
            str(seek),
            "-i",
            str(video_path),
            "-vframes",
            "1",
            "-q:v",
            "2",
            "-y",
            str(output_path),
        ]

        try:
            await self._run(cmd)
        except _TOOL_ERRORS as e:
            self._logger.warning(
                "Thumbnail extraction failed",
                extra={"file_path": str(video_path), "error": _describe(e)},
            )
            self.delete_temp_file(output_path)
            return OperationResult.failed(_describe(e))

        try:
            with Image.open(output_path) as img:
                width, height = img.size
        except (OSError, UnidentifiedImageError) as e:
            self.delete_temp_file(output_path)
            return OperationResult.failed(f"Thumbnail not readable: {e}")

        self._logger.debug(
            "Thumbnail extracted",
            extra={"output": str(output_path), "width": width, "height": height},
        )
        return OperationResult.ok(output_path)

    @timed
    async def transcode_resize(
        self,
        video_path: Path,
        output_name: str,
        width: int = 1280,
        height: int = 720,
    ) -> OperationResult[Path]:
        """Transcode to H.264/AAC MP4 letterboxed into width x height."""
        try:
            data = await self._ffprobe(video_path)
        except _TOOL_ERRORS as e:
            return OperationResult.failed(_describe(e))

        if _first_stream(data, "video") is None:
            self._logger.warning(
                "No video stream to resize", extra={"file_path": str(video_path)}
            )
            return OperationResult.not_found(f"No video stream in {video_path.name}")

        has_audio = _first_stream(data, "audio") is not None
        output_path = self._temp_dir / output_name

        scale_filter = (
            f"scale={width}:{height}:force_original_aspect_ratio=decrease,"
            f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2"
        )
        cmd = [
            self._toolchain.ffmpeg,
            "-i",
            str(video_path),
            "-vf",
            scale_filter,
            "-c:v",
            "libx264",
            "-preset",
            "fast",
            "-crf",
            "23",
        ]
        if has_audio:
            cmd.extend(["-c:a", "aac", "-b:a", "128k"])
        else:
            cmd.append("-an")
        cmd.extend(["-movflags", "+faststart", "-y", str(output_path)])

        try:
            await self._run(cmd)
        except _TOOL_ERRORS as e:
            self._logger.warning(
                "Resize failed",
                extra={"file_path": str(video_path), "error": _describe(e)},
            )
            self.delete_temp_file(output_path)
            return OperationResult.failed(_describe(e))

        return OperationResult.ok(output_path)

    async def persist_stream_to_temp_file(
        self,
        stream: AsyncIterator[bytes],
        file_name: str,
    ) -> Path:
        """Write the incoming blob stream to disk."""
        target = self._temp_dir / file_name
        size = 0
        try:
            with target.open("wb") as handle:
                async for chunk in stream:
                    handle.write(chunk)
                    size += len(chunk)
        except BaseException:
            self.delete_temp_file(target)
            raise

        self._logger.debug(
            "Stream staged", extra={"file_path": str(target), "size_bytes": size}
        )
        return target

    def delete_temp_file(self, path: Path) -> None:
        """Remove a temp file, logging OS errors instead of raising."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            self._logger.warning(
                "Could not delete temp file",
                extra={"file_path": str(path), "error": str(e)},
            )

"""Unit tests for the FFmpeg toolchain and media processor."""

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from videomania.domain.models import OperationStatus
from videomania.infrastructure.video import (
    FFmpegMediaProcessor,
    FFmpegToolchain,
    MediaToolchainError,
)
from videomania.infrastructure.video.ffmpeg_processor import _parse_frame_rate

PROBE_WITH_AUDIO = {
    "streams": [
        {
            "codec_type": "video",
            "codec_name": "h264",
            "width": 1920,
            "height": 1080,
            "r_frame_rate": "30000/1001",
        },
        {"codec_type": "audio", "codec_name": "aac"},
    ],
    "format": {"duration": "12.5", "bit_rate": "800000", "size": "2097152"},
}

PROBE_AUDIO_ONLY = {
    "streams": [{"codec_type": "audio", "codec_name": "mp3"}],
    "format": {"duration": "3.0"},
}


class FakeTools:
    """Stand-in for subprocess.run that mimics ffprobe and ffmpeg."""

    def __init__(self, probe_output, ffmpeg_error=None, ffmpeg_missing=False):
        self.probe_output = probe_output
        self.ffmpeg_error = ffmpeg_error
        self.ffmpeg_missing = ffmpeg_missing
        self.calls: list[list[str]] = []

    def __call__(self, cmd, capture_output=True, check=True):
        self.calls.append(cmd)
        if cmd[0] == "ffprobe":
            return subprocess.CompletedProcess(
                cmd, 0, stdout=json.dumps(self.probe_output).encode(), stderr=b""
            )
        if self.ffmpeg_missing:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        if self.ffmpeg_error:
            raise subprocess.CalledProcessError(
                1, cmd, output=b"", stderr=self.ffmpeg_error.encode()
            )
        output = Path(cmd[-1])
        if output.suffix == ".jpg":
            Image.new("RGB", (64, 36), color="red").save(output, "JPEG")
        else:
            output.write_bytes(b"mp4")
        return subprocess.CompletedProcess(cmd, 0, stdout=b"", stderr=b"")

    def ffmpeg_calls(self):
        return [c for c in self.calls if c[0] == "ffmpeg"]


@pytest.fixture
def toolchain():
    return FFmpegToolchain(ffmpeg="ffmpeg", ffprobe="ffprobe", version="ffmpeg 6.1")


@pytest.fixture
def processor(toolchain, tmp_path):
    return FFmpegMediaProcessor(toolchain, temp_dir=tmp_path / "work")


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "cat.mp4"
    path.write_bytes(b"not really a video")
    return path


def _patch_run(fake):
    return patch(
        "videomania.infrastructure.video.ffmpeg_processor.subprocess.run", fake
    )


# =========================================================================
# Toolchain
# =========================================================================


class TestFFmpegToolchain:
    """Tests for startup resolution of the executables."""

    @patch("videomania.infrastructure.video.toolchain.subprocess.run")
    @patch("videomania.infrastructure.video.toolchain.shutil.which")
    def test_initialize_resolves_both_tools(self, mock_which, mock_run):
        mock_which.side_effect = lambda name: f"/usr/bin/{name}"
        mock_run.return_value = MagicMock(stdout=b"ffmpeg version 6.1\nbuilt with gcc")

        toolchain = FFmpegToolchain.initialize()

        assert toolchain.ffmpeg == "/usr/bin/ffmpeg"
        assert toolchain.ffprobe == "/usr/bin/ffprobe"
        assert toolchain.version == "ffmpeg version 6.1"
        assert mock_run.call_count == 2

    @patch("videomania.infrastructure.video.toolchain.shutil.which", return_value=None)
    def test_missing_executable_raises(self, _mock_which):
        with pytest.raises(MediaToolchainError, match="not found"):
            FFmpegToolchain.initialize()

    @patch("videomania.infrastructure.video.toolchain.subprocess.run")
    @patch("videomania.infrastructure.video.toolchain.shutil.which")
    def test_broken_executable_raises(self, mock_which, mock_run):
        mock_which.side_effect = lambda name: f"/usr/bin/{name}"
        mock_run.side_effect = subprocess.CalledProcessError(1, ["ffmpeg"])

        with pytest.raises(MediaToolchainError) as exc_info:
            FFmpegToolchain.initialize()

        assert exc_info.value.component == "media_toolchain"


# =========================================================================
# Probe
# =========================================================================


class TestProbe:
    """Tests for metadata probing."""

    async def test_probe_reads_streams_and_format(self, processor, source):
        with _patch_run(FakeTools(PROBE_WITH_AUDIO)):
            result = await processor.probe(source)

        assert result.is_success
        metadata = result.value
        assert metadata.duration == 12.5
        assert metadata.resolution == "1920x1080"
        assert metadata.video_codec == "h264"
        assert metadata.audio_codec == "aac"
        assert metadata.frame_rate == pytest.approx(29.97, rel=1e-3)
        assert metadata.bit_rate == 800000
        assert metadata.file_size_bytes == 2097152

    async def test_probe_without_video_stream_is_not_found(self, processor, source):
        with _patch_run(FakeTools(PROBE_AUDIO_ONLY)):
            result = await processor.probe(source)

        assert result.status == OperationStatus.NOT_FOUND

    async def test_probe_tool_error_is_failure(self, processor, source):
        def failing(cmd, capture_output=True, check=True):
            raise subprocess.CalledProcessError(1, cmd, stderr=b"moov atom not found")

        with _patch_run(failing):
            result = await processor.probe(source)

        assert result.is_failure
        assert "moov atom" in result.error

    async def test_probe_garbled_output_is_failure(self, processor, source):
        def garbled(cmd, capture_output=True, check=True):
            return subprocess.CompletedProcess(cmd, 0, stdout=b"{not json", stderr=b"")

        with _patch_run(garbled):
            result = await processor.probe(source)

        assert result.is_failure

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("25/1", 25.0), ("30000/1001", 29.97), ("0/0", 0.0), ("24", 24.0), (None, 0.0)],
    )
    def test_parse_frame_rate(self, value, expected):
        assert _parse_frame_rate(value) == pytest.approx(expected, rel=1e-3)


# =========================================================================
# Thumbnail
# =========================================================================


class TestExtractThumbnail:
    """Tests for thumbnail extraction."""

    async def test_writes_jpeg_into_temp_dir(self, processor, source):
        fake = FakeTools(PROBE_WITH_AUDIO)
        with _patch_run(fake):
            result = await processor.extract_thumbnail(source, "cat_thumbnail.jpg")

        assert result.is_success
        assert result.value == processor.temp_dir / "cat_thumbnail.jpg"
        assert result.value.exists()
        cmd = fake.ffmpeg_calls()[0]
        assert cmd[cmd.index("-ss") + 1] == "1.0"
        assert cmd[cmd.index("-vframes") + 1] == "1"

    async def test_short_clip_uses_first_frame(self, processor, source):
        short = {**PROBE_WITH_AUDIO, "format": {"duration": "0.5"}}
        fake = FakeTools(short)
        with _patch_run(fake):
            await processor.extract_thumbnail(source, "cat_thumbnail.jpg")

        cmd = fake.ffmpeg_calls()[0]
        assert cmd[cmd.index("-ss") + 1] == "0.0"

    async def test_no_video_stream_is_soft_failure(self, processor, source):
        fake = FakeTools(PROBE_AUDIO_ONLY)
        with _patch_run(fake):
            result = await processor.extract_thumbnail(source, "cat_thumbnail.jpg")

        assert result.is_not_found
        assert fake.ffmpeg_calls() == []

    async def test_ffmpeg_failure_leaves_no_file(self, processor, source):
        with _patch_run(FakeTools(PROBE_WITH_AUDIO, ffmpeg_error="decode error")):
            result = await processor.extract_thumbnail(source, "cat_thumbnail.jpg")

        assert result.is_failure
        assert not (processor.temp_dir / "cat_thumbnail.jpg").exists()

    async def test_missing_ffmpeg_is_failure(self, processor, source):
        with _patch_run(FakeTools(PROBE_WITH_AUDIO, ffmpeg_missing=True)):
            result = await processor.extract_thumbnail(source, "cat_thumbnail.jpg")

        assert result.is_failure
        assert "No such file" in result.error
        assert not (processor.temp_dir / "cat_thumbnail.jpg").exists()


# =========================================================================
# Resize
# =========================================================================


class TestTranscodeResize:
    """Tests for the resized copy."""

    async def test_keeps_audio_when_present(self, processor, source):
        fake = FakeTools(PROBE_WITH_AUDIO)
        with _patch_run(fake):
            result = await processor.transcode_resize(source, "cat_resized.mp4")

        assert result.is_success
        cmd = fake.ffmpeg_calls()[0]
        assert "scale=1280:720:force_original_aspect_ratio=decrease" in cmd[
            cmd.index("-vf") + 1
        ]
        assert "-c:a" in cmd
        assert "-an" not in cmd

    async def test_drops_audio_when_absent(self, processor, source):
        silent = {"streams": [PROBE_WITH_AUDIO["streams"][0]], "format": {}}
        fake = FakeTools(silent)
        with _patch_run(fake):
            await processor.transcode_resize(source, "cat_resized.mp4", 640, 360)

        cmd = fake.ffmpeg_calls()[0]
        assert "-an" in cmd
        assert "scale=640:360" in cmd[cmd.index("-vf") + 1]

    async def test_no_video_stream_is_soft_failure(self, processor, source):
        with _patch_run(FakeTools(PROBE_AUDIO_ONLY)):
            result = await processor.transcode_resize(source, "cat_resized.mp4")

        assert result.is_not_found

    async def test_missing_ffmpeg_is_failure(self, processor, source):
        with _patch_run(FakeTools(PROBE_WITH_AUDIO, ffmpeg_missing=True)):
            result = await processor.transcode_resize(source, "cat_resized.mp4")

        assert result.is_failure
        assert not (processor.temp_dir / "cat_resized.mp4").exists()

    async def test_garbled_probe_is_failure(self, processor, source):
        def garbled(cmd, capture_output=True, check=True):
            return subprocess.CompletedProcess(cmd, 0, stdout=b"<html>", stderr=b"")

        with _patch_run(garbled):
            result = await processor.transcode_resize(source, "cat_resized.mp4")

        assert result.is_failure

    async def test_unstartable_probe_is_failure(self, processor, source):
        def unstartable(cmd, capture_output=True, check=True):
            raise PermissionError(13, "Permission denied", cmd[0])

        with _patch_run(unstartable):
            result = await processor.transcode_resize(source, "cat_resized.mp4")

        assert result.is_failure
        assert "Permission denied" in result.error


# =========================================================================
# Temp files
# =========================================================================


class TestTempFiles:
    """Tests for staging and deleting temp files."""

    async def test_persist_stream_writes_all_chunks(self, processor):
        async def stream():
            yield b"abc"
            yield b"def"

        path = await processor.persist_stream_to_temp_file(stream(), "cat.mp4")

        assert path == processor.temp_dir / "cat.mp4"
        assert path.read_bytes() == b"abcdef"

    async def test_persist_stream_failure_removes_partial_file(self, processor):
        async def stream():
            yield b"abc"
            raise ConnectionError("stream reset")

        with pytest.raises(ConnectionError):
            await processor.persist_stream_to_temp_file(stream(), "cat.mp4")

        assert not (processor.temp_dir / "cat.mp4").exists()

    def test_delete_missing_file_is_fine(self, processor):
        processor.delete_temp_file(processor.temp_dir / "never-created.mp4")

    def test_delete_existing_file(self, processor):
        path = processor.temp_dir / "x.mp4"
        path.write_bytes(b"x")

        processor.delete_temp_file(path)

        assert not path.exists()

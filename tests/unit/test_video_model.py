"""Unit tests for the Video, Comment and result models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from videomania.domain.models import (
    Comment,
    MediaMetadata,
    OperationResult,
    OperationStatus,
    ProcessingStatus,
    ProcessingUpdate,
    User,
    Video,
)


def _video(**overrides) -> Video:
    fields = {"user_id": "alice", "title": "Cat", "url": "abc.mp4"}
    fields.update(overrides)
    return Video(**fields)


class TestVideo:
    """Tests for the Video model."""

    def test_defaults(self):
        video = _video()
        assert len(video.id) == 36
        assert video.description is None
        assert video.processing is None
        assert video.is_processed is False
        assert video.uploaded_at.tzinfo is not None

    def test_title_required(self):
        with pytest.raises(ValidationError):
            _video(title="")

    def test_document_uses_camel_case(self):
        doc = _video(id="v-1").to_document()

        assert doc["id"] == "v-1"
        assert doc["userId"] == "alice"
        assert "uploadedAt" in doc
        assert "user_id" not in doc
        assert "description" not in doc
        assert "processing" not in doc

    def test_from_document_ignores_store_keys(self):
        video = Video.from_document(
            {
                "id": "v-1",
                "userId": "alice",
                "title": "Cat",
                "url": "abc.mp4",
                "uploadedAt": "2024-05-01T10:00:00Z",
                "_rid": "store-internal",
            }
        )
        assert video.user_id == "alice"
        assert video.uploaded_at == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)

    def test_with_processing_keeps_other_fields(self):
        video = _video(id="v-1", description="purring")
        updated = video.with_processing(
            ProcessingUpdate(thumbnail_url="v-1_thumbnail.jpg")
        )

        assert updated.description == "purring"
        assert updated.processing.thumbnail_url == "v-1_thumbnail.jpg"
        assert updated.is_processed is True
        assert video.processing is None


class TestProcessingUpdate:
    """Tests for the per-run processing update."""

    @pytest.mark.parametrize(
        ("fields", "expected"),
        [
            ({"thumbnail_url": "a_thumbnail.jpg"}, ProcessingStatus.COMPLETED),
            ({"resized_video_url": "a_resized.mp4"}, ProcessingStatus.COMPLETED),
            ({"metadata": MediaMetadata(duration=1.0)}, ProcessingStatus.COMPLETED),
            ({}, ProcessingStatus.FAILED),
        ],
    )
    def test_status(self, fields, expected):
        assert ProcessingUpdate(**fields).status == expected

    def test_to_processing(self):
        processed_at = datetime(2024, 5, 1, tzinfo=UTC)
        processing = ProcessingUpdate(
            resized_video_url="a_resized.mp4", processed_at=processed_at
        ).to_processing()

        assert processing.processed is True
        assert processing.processed_at == processed_at
        assert processing.thumbnail_url is None
        assert processing.status == ProcessingStatus.COMPLETED

    def test_failed_run_is_not_processed(self):
        processing = ProcessingUpdate().to_processing()
        assert processing.processed is False
        assert processing.to_document()["status"] == "failed"


class TestMediaMetadata:
    """Tests for probed media metadata."""

    def test_resolution(self):
        assert MediaMetadata(width=1280, height=720).resolution == "1280x720"

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            MediaMetadata(duration=-1)

    def test_document_keys(self):
        doc = MediaMetadata(video_codec="h264", frame_rate=25.0).to_document()
        assert doc["videoCodec"] == "h264"
        assert doc["frameRate"] == 25.0
        assert doc["fileSizeBytes"] == 0


class TestCommentAndUser:
    """Tests for the Comment and User models."""

    def test_comment_defaults_to_anonymous(self):
        comment = Comment(video_id="v-1", text="nice")
        assert comment.user_id == "Anonymous"
        assert comment.to_document()["videoId"] == "v-1"

    def test_comment_text_required(self):
        with pytest.raises(ValidationError):
            Comment(video_id="v-1", text="")

    def test_user(self):
        user = User(name="Ann", email="ann@example.com")
        assert user.to_document()["name"] == "Ann"


class TestOperationResult:
    """Tests for the three-way operation result."""

    def test_ok(self):
        result = OperationResult.ok(42)
        assert result.is_success
        assert result.value == 42
        assert result.error is None

    def test_not_found(self):
        result = OperationResult.not_found("no video stream")
        assert result.status == OperationStatus.NOT_FOUND
        assert result.is_not_found
        assert not result.is_success
        assert not result.is_failure

    def test_failed(self):
        result = OperationResult.failed("exit code 1")
        assert result.is_failure
        assert result.error == "exit code 1"
        assert result.value is None

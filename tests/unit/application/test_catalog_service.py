"""Unit tests for the video catalog service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from videomania.application.dtos import AddCommentRequest
from videomania.application.services import VideoCatalogService
from videomania.commons.infrastructure.blob import (
    SignedUrlPermission,
    SigningConfigurationError,
)
from videomania.commons.infrastructure.documentdb import DocumentNotFoundError
from videomania.commons.settings.models import Settings
from videomania.domain.exceptions import (
    CommentNotFoundException,
    DependencyException,
    ValidationException,
    VideoNotFoundException,
)
from videomania.domain.models import (
    Comment,
    OperationResult,
    ProcessingUpdate,
    Video,
)


def _video(**overrides) -> Video:
    fields = {"id": "v-1", "user_id": "alice", "title": "Cat", "url": "abc.mp4"}
    fields.update(overrides)
    return Video(**fields)


@pytest.fixture
def metadata():
    store = MagicMock()
    store.find_video_by_id = AsyncMock(return_value=_video())
    store.list_comments = AsyncMock(return_value=[])
    store.add_video = AsyncMock(side_effect=lambda video: video.id)
    store.add_comment = AsyncMock(side_effect=lambda comment: comment.id)
    store.delete_comment = AsyncMock(
        side_effect=lambda comment_id, video_id: OperationResult.ok(comment_id)
    )
    store.delete_video = AsyncMock()
    store.list_videos = AsyncMock(return_value=[_video()])
    return store


@pytest.fixture
def blob_storage():
    storage = AsyncMock()
    storage.generate_signed_url.side_effect = (
        lambda bucket, name, permission, validity: f"http://minio/{bucket}/{name}?sig"
    )
    storage.delete.return_value = True
    return storage


@pytest.fixture
def settings():
    return Settings(uploads={"max_file_size_mb": 1})


@pytest.fixture
def catalog(metadata, blob_storage, settings):
    return VideoCatalogService(metadata, blob_storage, settings)


# =========================================================================
# Upload
# =========================================================================


class TestUploadVideo:
    """Tests for server-side uploads."""

    async def test_record_url_matches_stored_blob(self, catalog, metadata, blob_storage):
        response = await catalog.upload_video(
            title="  Cat  ",
            description="purring",
            user_id=None,
            file_name="My Cat.MP4",
            data=b"data",
            size_bytes=4,
            content_type="video/mp4",
        )

        bucket, blob_name, data = blob_storage.upload.await_args.args
        assert bucket == "videos"
        assert blob_name == response.blob_name
        assert blob_name.endswith(".mp4")
        assert data == b"data"

        video = metadata.add_video.await_args.args[0]
        assert video.url == response.blob_name
        assert video.title == "Cat"
        assert video.user_id == "TestUser"
        assert response.video_id == video.id
        assert response.success is True

    async def test_user_id_from_form(self, catalog, metadata):
        await catalog.upload_video("Cat", None, "alice", "cat.webm", b"x", 1)

        assert metadata.add_video.await_args.args[0].user_id == "alice"

    @pytest.mark.parametrize(
        ("description", "expected"),
        [("  purring \n", "purring"), ("   ", None), ("", None), (None, None)],
    )
    async def test_description_is_trimmed(
        self, catalog, metadata, description, expected
    ):
        await catalog.upload_video("Cat", description, None, "cat.mp4", b"x", 1)

        assert metadata.add_video.await_args.args[0].description == expected

    async def test_blob_is_uploaded_before_record(self, catalog, metadata, blob_storage):
        order = []
        blob_storage.upload.side_effect = lambda *a, **kw: order.append("blob")
        metadata.add_video.side_effect = lambda video: order.append("record") or video.id

        await catalog.upload_video("Cat", None, None, "cat.mp4", b"x", 1)

        assert order == ["blob", "record"]

    @pytest.mark.parametrize(
        ("title", "file_name", "size", "field"),
        [
            ("", "cat.mp4", 1, "title"),
            ("   ", "cat.mp4", 1, "title"),
            ("Cat", None, 1, "file"),
            ("Cat", "cat.mp4", 0, "file"),
            ("Cat", "cat.mp4", 2 * 1024 * 1024, "file"),
        ],
    )
    async def test_rejects_invalid_input(
        self, catalog, blob_storage, title, file_name, size, field
    ):
        with pytest.raises(ValidationException) as exc_info:
            await catalog.upload_video(title, None, None, file_name, b"x", size)

        assert exc_info.value.field == field
        blob_storage.upload.assert_not_awaited()

    async def test_rejects_disallowed_extension(self, catalog, blob_storage):
        with pytest.raises(ValidationException, match="Invalid file type"):
            await catalog.upload_video("Cat", None, None, "cat.flv", b"x", 1)

        blob_storage.upload.assert_not_awaited()

    async def test_blob_failure_creates_no_record(self, catalog, metadata, blob_storage):
        blob_storage.upload.side_effect = ConnectionError("minio down")

        with pytest.raises(DependencyException) as exc_info:
            await catalog.upload_video("Cat", None, None, "cat.mp4", b"x", 1)

        assert exc_info.value.operation == "upload_blob"
        metadata.add_video.assert_not_awaited()


class TestSignedUpload:
    """Tests for direct-upload URLs."""

    async def test_issues_write_create_url(self, catalog, blob_storage):
        response = await catalog.create_signed_upload("C:\\clips\\cat.flv")

        assert response.blob_name.endswith("_cat.flv")
        assert response.expires_in == 30 * 60
        bucket, name, permission, _ = blob_storage.generate_signed_url.await_args.args
        assert bucket == "videos"
        assert name == response.blob_name
        assert permission == SignedUrlPermission.WRITE_CREATE

    async def test_rejects_other_types(self, catalog):
        with pytest.raises(ValidationException) as exc_info:
            await catalog.create_signed_upload("notes.txt")

        assert exc_info.value.field == "fileName"

    async def test_signing_errors_propagate(self, catalog, blob_storage):
        blob_storage.generate_signed_url.side_effect = SigningConfigurationError(
            "no secret key"
        )

        with pytest.raises(SigningConfigurationError):
            await catalog.create_signed_upload("cat.mp4")


# =========================================================================
# Browsing
# =========================================================================


class TestVideoDetail:
    """Tests for the video page payload."""

    async def test_signs_stored_names(self, catalog, metadata):
        video = _video().with_processing(
            ProcessingUpdate(
                thumbnail_url="abc_thumbnail.jpg", resized_video_url="abc_resized.mp4"
            )
        )
        metadata.find_video_by_id.return_value = video
        metadata.list_comments.return_value = [
            Comment(id="c-1", video_id="v-1", text="nice")
        ]

        detail = await catalog.get_video_detail("v-1")

        assert detail.video_url == "http://minio/videos/abc.mp4?sig"
        assert detail.thumbnail_url == "http://minio/thumbnails/abc_thumbnail.jpg?sig"
        assert detail.resized_video_url == (
            "http://minio/processed-videos/abc_resized.mp4?sig"
        )
        assert [c.id for c in detail.comments] == ["c-1"]

    async def test_unprocessed_video_has_no_artifact_urls(self, catalog):
        detail = await catalog.get_video_detail("v-1")

        assert detail.thumbnail_url is None
        assert detail.resized_video_url is None

    async def test_signing_failure_falls_back_to_name(self, catalog, blob_storage):
        blob_storage.generate_signed_url.side_effect = SigningConfigurationError("x")

        detail = await catalog.get_video_detail("v-1")

        assert detail.video_url == "abc.mp4"

    async def test_unknown_video(self, catalog, metadata):
        metadata.find_video_by_id.return_value = None

        with pytest.raises(VideoNotFoundException):
            await catalog.get_video_detail("ghost")

    async def test_list_videos(self, catalog):
        videos = await catalog.list_videos()
        assert [v.id for v in videos] == ["v-1"]


# =========================================================================
# Comments
# =========================================================================


class TestComments:
    """Tests for adding and deleting comments."""

    async def test_add_comment_defaults_to_anonymous(self, catalog, metadata):
        request = AddCommentRequest.model_validate(
            {"videoId": "v-1", "CommentText": "nice"}
        )

        response = await catalog.add_comment(request)

        comment = metadata.add_comment.await_args.args[0]
        assert comment.user_id == "Anonymous"
        assert comment.video_id == "v-1"
        assert comment.text == "nice"
        assert response.comment_id == comment.id
        assert response.message == "Comment added successfully"

    async def test_add_comment_stores_trimmed_text(self, catalog, metadata):
        request = AddCommentRequest.model_validate(
            {"videoId": "v-1", "CommentText": "  great clip  "}
        )

        await catalog.add_comment(request)

        assert metadata.add_comment.await_args.args[0].text == "great clip"

    async def test_add_comment_to_unknown_video(self, catalog, metadata):
        metadata.find_video_by_id.return_value = None
        request = AddCommentRequest(video_id="ghost", comment_text="hi")

        with pytest.raises(VideoNotFoundException):
            await catalog.add_comment(request)

        metadata.add_comment.assert_not_awaited()

    async def test_delete_comment_uses_video_partition(self, catalog, metadata):
        response = await catalog.delete_comment("c-1", "v-1")

        metadata.delete_comment.assert_awaited_once_with("c-1", "v-1")
        assert response.success is True

    async def test_delete_comment_requires_video_id(self, catalog):
        with pytest.raises(ValidationException) as exc_info:
            await catalog.delete_comment("c-1", None)

        assert exc_info.value.field == "videoId"

    async def test_delete_comment_not_under_video(self, catalog, metadata):
        metadata.delete_comment.side_effect = None
        metadata.delete_comment.return_value = OperationResult.not_found("missing")

        with pytest.raises(CommentNotFoundException):
            await catalog.delete_comment("c-1", "v-1")


# =========================================================================
# Cascading delete
# =========================================================================


class TestDeleteVideo:
    """Tests for the comments, blob, record cascade."""

    async def test_deletes_everything(self, catalog, metadata, blob_storage):
        metadata.list_comments.return_value = [
            Comment(id="c-1", video_id="v-1", text="a"),
            Comment(id="c-2", video_id="v-1", text="b"),
        ]

        response = await catalog.delete_video("v-1")

        assert response.comments_deleted == 2
        assert response.comments_failed == 0
        assert response.blob_deleted is True
        blob_storage.delete.assert_awaited_once_with("videos", "abc.mp4")
        metadata.delete_video.assert_awaited_once()

    async def test_continues_after_comment_failure(self, catalog, metadata):
        metadata.list_comments.return_value = [
            Comment(id="c-1", video_id="v-1", text="a"),
            Comment(id="c-2", video_id="v-1", text="b"),
        ]

        async def flaky(comment_id, video_id):
            if comment_id == "c-1":
                raise ConnectionError("timeout")
            return OperationResult.ok(comment_id)

        metadata.delete_comment.side_effect = flaky

        response = await catalog.delete_video("v-1")

        assert response.comments_deleted == 1
        assert response.comments_failed == 1
        metadata.delete_video.assert_awaited_once()

    async def test_full_url_in_record_deletes_bare_blob(
        self, catalog, metadata, blob_storage
    ):
        metadata.find_video_by_id.return_value = _video(
            url="http://minio:9000/videos/abc.mp4?X-Amz-Signature=1"
        )

        await catalog.delete_video("v-1")

        blob_storage.delete.assert_awaited_once_with("videos", "abc.mp4")

    async def test_blob_failure_still_deletes_record(
        self, catalog, metadata, blob_storage
    ):
        blob_storage.delete.side_effect = ConnectionError("minio down")

        response = await catalog.delete_video("v-1")

        assert response.blob_deleted is False
        metadata.delete_video.assert_awaited_once()

    async def test_record_vanished_is_dependency_error(self, catalog, metadata):
        metadata.delete_video.side_effect = DocumentNotFoundError(
            "Videos", "v-1", "alice"
        )

        with pytest.raises(DependencyException, match="inconsistent"):
            await catalog.delete_video("v-1")

    async def test_unknown_video(self, catalog, metadata, blob_storage):
        metadata.find_video_by_id.return_value = None

        with pytest.raises(VideoNotFoundException):
            await catalog.delete_video("ghost")

        blob_storage.delete.assert_not_awaited()

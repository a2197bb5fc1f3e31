"""Unit tests for domain value objects."""

import pytest
from pydantic import ValidationError

from videomania.domain.exceptions import ValidationException
from videomania.domain.value_objects import BlobName, blob_name_from_url


class TestBlobName:
    """Tests for BlobName value object."""

    def test_bare_name(self):
        assert BlobName(value="3f2a.mp4").value == "3f2a.mp4"

    def test_rejects_path(self):
        with pytest.raises(ValidationError):
            BlobName(value="videos/3f2a.mp4")

    def test_rejects_query_string(self):
        with pytest.raises(ValidationError):
            BlobName(value="3f2a.mp4?sig=abc")

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            BlobName(value="")

    @pytest.mark.parametrize(
        "url",
        [
            "3f2a.mp4",
            "3f2a.mp4?sig=abc",
            "http://localhost:9000/videos/3f2a.mp4",
            "https://acct.blob.local/videos/3f2a.mp4?se=2024&sig=abc%2F",
            "videos/nested/3f2a.mp4",
            "  3f2a.mp4  ",
        ],
    )
    def test_from_url_reduces_to_bare_name(self, url):
        assert BlobName.from_url(url).value == "3f2a.mp4"

    @pytest.mark.parametrize("url", ["", "   ", "?sig=abc"])
    def test_from_url_without_name(self, url):
        with pytest.raises(ValidationException) as exc_info:
            BlobName.from_url(url)
        assert exc_info.value.field == "url"

    def test_extension_is_lowercased(self):
        assert BlobName(value="Cat.MOV").extension == ".mov"

    def test_no_extension(self):
        assert BlobName(value="README").extension == ""

    def test_derived_artifact_names(self):
        name = BlobName(value="3f2a.mp4")
        assert name.stem == "3f2a"
        assert name.derived("_thumbnail.jpg") == "3f2a_thumbnail.jpg"
        assert name.derived("_resized.mp4") == "3f2a_resized.mp4"

    def test_equality_with_string(self):
        name = BlobName(value="3f2a.mp4")
        assert name == "3f2a.mp4"
        assert name == BlobName(value="3f2a.mp4")
        assert name != 42
        assert str(name) == "3f2a.mp4"

    def test_hashable(self):
        names = {BlobName(value="a.mp4"), BlobName(value="a.mp4")}
        assert len(names) == 1

    def test_shortcut(self):
        assert blob_name_from_url("http://minio/videos/a.mp4?x=1") == "a.mp4"

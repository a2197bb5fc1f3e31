"""Blob name value object."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Annotated

from pydantic import BaseModel, Field, field_validator

from videomania.domain.exceptions import ValidationException


class BlobName(BaseModel):
    """A bare object name inside a container, e.g. ``3f2a...9c.mp4``.

    The ``url`` field on a stored video may hold a bare name or a full URL,
    possibly carrying a signature query string. ``from_url`` reduces either
    form to the bare name that blob operations need.

    Examples:
        >>> BlobName.from_url("https://acct.blob.local/videos/cat.mp4?sig=abc").value
        'cat.mp4'
        >>> BlobName(value="cat.MP4").extension
        '.mp4'
    """

    value: Annotated[str, Field(min_length=1, description="Bare blob name")]

    @field_validator("value")
    @classmethod
    def validate_bare(cls, v: str) -> str:
        """Reject names that still carry a path or a query string."""
        if "/" in v or "?" in v:
            raise ValueError(f"Blob name must not contain '/' or '?': '{v}'")
        return v

    @classmethod
    def from_url(cls, url: str) -> BlobName:
        """Strip the query string, then any path prefix.

        Raises:
            ValidationException: If nothing is left after normalization.
        """
        if not url or not url.strip():
            raise ValidationException("url", "Blob URL cannot be empty")

        name = url.strip().split("?", 1)[0]
        if "/" in name:
            name = name.rstrip("/").rsplit("/", 1)[-1]

        if not name:
            raise ValidationException("url", f"No blob name in '{url}'")
        return cls(value=name)

    @property
    def extension(self) -> str:
        """Lowercased extension including the dot, or '' when absent."""
        return PurePosixPath(self.value).suffix.lower()

    @property
    def stem(self) -> str:
        """Name without its extension."""
        return PurePosixPath(self.value).stem

    def derived(self, suffix: str) -> str:
        """Name for an artifact derived from this blob, e.g. ``<stem>_thumbnail.jpg``."""
        return f"{self.stem}{suffix}"

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BlobName):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return False


def blob_name_from_url(url: str) -> str:
    """Shortcut returning the bare blob name for a stored url value."""
    return BlobName.from_url(url).value

"""DTOs for comment operations."""

from pydantic import AliasChoices, Field, field_validator

from videomania.application.dtos.base import CamelModel


class AddCommentRequest(CamelModel):
    """Comment posted from the video page."""

    video_id: str = Field(min_length=1)
    # The page posts the text as "CommentText"
    comment_text: str = Field(
        min_length=1,
        validation_alias=AliasChoices("CommentText", "commentText", "comment_text"),
        serialization_alias="CommentText",
    )
    user_id: str | None = None

    @field_validator("comment_text", mode="before")
    @classmethod
    def strip_comment_text(cls, value: object) -> object:
        """Trim the text; blank text is rejected."""
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("Comment text cannot be empty")
        return value


class CommentResponse(CamelModel):
    """Outcome of adding or deleting a comment."""

    success: bool = True
    message: str
    comment_id: str
    video_id: str

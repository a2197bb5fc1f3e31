"""Comment endpoints."""

from fastapi import APIRouter, Query

from videomania.api.dependencies import CatalogServiceDep
from videomania.application.dtos import AddCommentRequest, CommentResponse

router = APIRouter()


@router.post(
    "/comments/add",
    response_model=CommentResponse,
    response_model_by_alias=True,
    summary="Add a comment",
    responses={404: {"description": "Video not found"}},
)
async def add_comment(
    request: AddCommentRequest,
    catalog: CatalogServiceDep,
) -> CommentResponse:
    """Attach a comment to a video; anonymous when no user id is given."""
    return await catalog.add_comment(request)


@router.delete(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    response_model_by_alias=True,
    summary="Delete a comment",
    responses={
        400: {"description": "videoId missing"},
        404: {"description": "Video or comment not found"},
    },
)
async def delete_comment(
    comment_id: str,
    catalog: CatalogServiceDep,
    video_id: str | None = Query(default=None, alias="videoId"),
) -> CommentResponse:
    """Delete a comment. The owning video id is required."""
    return await catalog.delete_comment(comment_id, video_id)

"""Video browse and delete endpoints."""

from fastapi import APIRouter

from videomania.api.dependencies import CatalogServiceDep
from videomania.application.dtos import DeleteVideoResponse, VideoDetailResponse
from videomania.domain.models import Video

router = APIRouter()


@router.get(
    "/videos",
    response_model=list[Video],
    response_model_by_alias=True,
    response_model_exclude_none=True,
    summary="List videos",
    description="All uploaded videos, newest first.",
)
async def list_videos(catalog: CatalogServiceDep) -> list[Video]:
    return await catalog.list_videos()


@router.get(
    "/videos/{video_id}",
    response_model=VideoDetailResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    summary="Get video details",
    description="A video with its comments and signed read URLs.",
    responses={404: {"description": "Video not found"}},
)
async def get_video(video_id: str, catalog: CatalogServiceDep) -> VideoDetailResponse:
    return await catalog.get_video_detail(video_id)


@router.delete(
    "/videos/{video_id}",
    response_model=DeleteVideoResponse,
    response_model_by_alias=True,
    summary="Delete a video",
    description=(
        "Delete the video's comments, then its blob, then the video record. "
        "Only a failure on the record itself fails the request."
    ),
    responses={
        404: {"description": "Video not found"},
        500: {"description": "Video record could not be deleted"},
    },
)
async def delete_video(
    video_id: str, catalog: CatalogServiceDep
) -> DeleteVideoResponse:
    return await catalog.delete_video(video_id)

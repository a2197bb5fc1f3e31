"""Upload endpoints: server-side upload and signed direct-upload URLs."""

from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile

from videomania.api.dependencies import CatalogServiceDep
from videomania.application.dtos import (
    SignedUploadRequest,
    SignedUploadResponse,
    UploadVideoResponse,
)

router = APIRouter()


@router.post(
    "/getuploadSas",
    response_model=UploadVideoResponse,
    response_model_by_alias=True,
    summary="Upload a video",
    description=(
        "Store the posted file as a new blob and record a video pointing at it. "
        "Accepts MP4, WebM, AVI, MOV and MKV up to the configured size limit."
    ),
)
async def upload_video(
    catalog: CatalogServiceDep,
    file: Annotated[UploadFile | None, File()] = None,
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    user_id: Annotated[str | None, Form(alias="userId")] = None,
) -> UploadVideoResponse:
    """Upload a video through the API server."""
    return await catalog.upload_video(
        title=title,
        description=description,
        user_id=user_id,
        file_name=file.filename if file else None,
        data=file.file if file else b"",
        size_bytes=(file.size or 0) if file else 0,
        content_type=file.content_type if file else None,
    )


@router.post(
    "/uploads/sas",
    response_model=SignedUploadResponse,
    response_model_by_alias=True,
    summary="Get a signed upload URL",
    description="Issue a short-lived write URL for uploading straight to blob storage.",
)
async def create_signed_upload(
    request: SignedUploadRequest,
    catalog: CatalogServiceDep,
) -> SignedUploadResponse:
    """Return a write+create signed URL and the blob name it targets."""
    return await catalog.create_signed_upload(request.file_name)

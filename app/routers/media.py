# =============================================================================
# app/routers/media.py - Media Upload Endpoints
# =============================================================================
# Admin only (mounted under /admin/dashboard):
#   POST   /media/images     - compress and store an image
#   POST   /media/pdfs       - store a technical sheet
#   POST   /media/videos     - store a video file
#   POST   /media/youtube    - validate a YouTube link
#   DELETE /media            - delete a stored file (best effort)
#
# Each upload accepts an optional `replaces` form field: the URL of the file
# the new one supersedes. It is deleted after the upload succeeded; a failed
# delete is logged and does not fail the request.
# =============================================================================

import asyncio
import logging
from typing import Annotated, Literal

from fastapi import APIRouter, File, Form, Query, UploadFile
from pydantic import BaseModel, Field

from app.dependencies import MediaDep
from core.services.media_service import (
    DOCUMENT_BUCKET,
    IMAGE_BUCKET,
    VIDEO_BUCKET,
    MediaService,
    get_youtube_embed_url,
    youtube_video_source,
)

logger = logging.getLogger(__name__)

admin_router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================

class YoutubeRequest(BaseModel):
    url: str = Field(..., examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ"])


class DeleteResponse(BaseModel):
    deleted: bool


# =============================================================================
# Helper Functions
# =============================================================================

def _replace(media: MediaService, bucket: str, old_url: str | None) -> None:
    if old_url:
        logger.info(f"Replacing {bucket} file {old_url}")
        media.delete_file(bucket, old_url)


# =============================================================================
# Endpoints
# =============================================================================

@admin_router.post("/media/images", status_code=201)
async def upload_image(
    file: Annotated[UploadFile, File(description="Image to upload")],
    media: MediaDep,
    replaces: Annotated[str | None, Form()] = None,
):
    """
    Upload an image.

    Images over the size limit are rejected before compression. The stored
    image is at most 1920px on its longest side.
    """
    content = await file.read()
    url = await asyncio.to_thread(
        media.process_image,
        content,
        file.filename or "image",
        file.content_type or "image",
    )
    _replace(media, IMAGE_BUCKET, replaces)
    return {"url": url}


@admin_router.post("/media/pdfs", status_code=201)
async def upload_pdf(
    file: Annotated[UploadFile, File(description="Technical sheet (PDF)")],
    media: MediaDep,
    replaces: Annotated[str | None, Form()] = None,
):
    content = await file.read()
    url = await asyncio.to_thread(media.process_pdf, content, file.filename or "sheet.pdf")
    _replace(media, DOCUMENT_BUCKET, replaces)
    return {"url": url}


@admin_router.post("/media/videos", status_code=201)
async def upload_video(
    file: Annotated[UploadFile, File(description="Video file")],
    media: MediaDep,
    replaces: Annotated[str | None, Form()] = None,
):
    """
    Upload a video file.

    Accepts mp4, webm, quicktime, avi and mov up to the video size limit.
    """
    content = await file.read()
    video_source = await asyncio.to_thread(
        media.process_video,
        content,
        file.filename or "video",
        file.content_type,
    )
    _replace(media, VIDEO_BUCKET, replaces)
    return {"videoSource": video_source}


@admin_router.post("/media/youtube")
async def attach_youtube(request: YoutubeRequest):
    """Turn a YouTube link into a video source. Returns 400 if no id is found."""
    video_source = youtube_video_source(request.url)
    return {
        "videoSource": video_source,
        "embedUrl": get_youtube_embed_url(request.url),
    }


@admin_router.delete("/media", response_model=DeleteResponse)
def delete_media(
    media: MediaDep,
    bucket: Literal["images", "documents", "videos"] = Query(...),
    url: str = Query(..., min_length=1),
):
    """Delete a stored file. Never fails: `deleted` reports the outcome."""
    return DeleteResponse(deleted=media.delete_file(bucket, url))

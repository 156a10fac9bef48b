# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .media_service import (
    DOCUMENT_BUCKET,
    IMAGE_BUCKET,
    VIDEO_BUCKET,
    MediaService,
    get_youtube_embed_url,
    youtube_video_source,
)

__all__ = [
    "DOCUMENT_BUCKET",
    "IMAGE_BUCKET",
    "VIDEO_BUCKET",
    "MediaService",
    "get_youtube_embed_url",
    "youtube_video_source",
]

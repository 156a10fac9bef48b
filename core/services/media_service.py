# =============================================================================
# core/services/media_service.py - Media Upload Pipeline
# =============================================================================
# Turns uploaded files into public Supabase Storage URLs, and back:
# - images: size check, Pillow compression, upload
# - PDFs (technical sheets): size check, upload as-is
# - videos: size and type check, upload as-is
# - YouTube links: no upload, only an embed URL is derived
# - deletes: best effort, failures are logged and never raised
#
# Nothing is reference counted: deleting a URL that another entity still
# uses breaks that entity's media.
# =============================================================================

import io
import logging
import re
import time
from uuid import uuid4

from PIL import Image, UnidentifiedImageError

from app.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    InvalidYoutubeUrlError,
    StorageUploadError,
)
from core.models.fruit import VideoSource
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

# Storage buckets and the folder each kind of file goes to
IMAGE_BUCKET = "images"
DOCUMENT_BUCKET = "documents"
VIDEO_BUCKET = "videos"

IMAGE_FOLDER = "uploads"
DOCUMENT_FOLDER = "pdfs"
VIDEO_FOLDER = "uploads"

MB = 1024 * 1024

# Compression targets
MAX_IMAGE_DIMENSION = 1920
TARGET_IMAGE_BYTES = 1 * MB
JPEG_QUALITY_STEPS = (85, 75, 65, 55, 45, 35)

ACCEPTED_VIDEO_TYPES = [
    "video/mp4",
    "video/webm",
    "video/quicktime",
    "video/avi",
    "video/mov",
]

PUBLIC_PATH_MARKER = "/storage/v1/object/public/"

YOUTUBE_ID_PATTERN = re.compile(
    r"(?:youtu\.be/|youtube\.com(?:/embed/|/v/|/watch\?v=|/user/\S+|"
    r"/ytscreeningroom\?v=|/sandalsResorts#\w/\w/.*/))([^/&?]{10,12})"
)
MALFORMED_STORAGE_PATH = re.compile(r"/storage/v1/[^/]+/([^/]+)/(.+)")


# =============================================================================
# YouTube
# =============================================================================

def get_youtube_embed_url(url: str) -> str:
    """
    Derive the embeddable URL of a YouTube watch or share link.

    Returns:
        https://www.youtube.com/embed/<id>, or "" when no video id is found

    Example:
        get_youtube_embed_url("https://youtu.be/dQw4w9WgXcQ")
        # -> "https://www.youtube.com/embed/dQw4w9WgXcQ"
    """
    match = YOUTUBE_ID_PATTERN.search(url or "")
    return f"https://www.youtube.com/embed/{match.group(1)}" if match else ""


def youtube_video_source(url: str) -> VideoSource:
    """
    Build a YouTube video source from a link entered by the user.

    Raises:
        InvalidYoutubeUrlError: If no video id can be found in the link
    """
    if not get_youtube_embed_url(url):
        raise InvalidYoutubeUrlError(url)
    return VideoSource(type="youtube", url=url)


# =============================================================================
# Image Compression
# =============================================================================

def compress_image(content: bytes, content_type: str = "image") -> tuple[bytes, str, str]:
    """
    Shrink an image to at most 1920px on its longest side and about 1MB.

    Images with transparency stay PNG when that fits the budget; everything
    else is re-encoded as JPEG at decreasing quality until it fits (or the
    lowest quality step is reached).

    Returns:
        Tuple of (bytes, file extension, content type)

    Raises:
        InvalidFileTypeError: If the content is not a readable image
    """
    try:
        image = Image.open(io.BytesIO(content))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Unreadable image upload: {e}")
        raise InvalidFileTypeError(content_type, ["image/jpeg", "image/png", "image/webp", "image/gif"])

    image.thumbnail((MAX_IMAGE_DIMENSION, MAX_IMAGE_DIMENSION))

    has_alpha = image.mode in ("RGBA", "LA") or (
        image.mode == "P" and "transparency" in image.info
    )

    if has_alpha:
        buffer = io.BytesIO()
        image.save(buffer, format="PNG", optimize=True)
        if buffer.tell() <= TARGET_IMAGE_BYTES:
            return buffer.getvalue(), "png", "image/png"

        # Too big as PNG: flatten onto white and fall through to JPEG
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        image = background

    rgb = image.convert("RGB")
    data = b""
    for quality in JPEG_QUALITY_STEPS:
        buffer = io.BytesIO()
        rgb.save(buffer, format="JPEG", quality=quality, optimize=True)
        data = buffer.getvalue()
        if len(data) <= TARGET_IMAGE_BYTES:
            break

    logger.debug(f"Compressed image {len(content)} -> {len(data)} bytes ({rgb.size[0]}x{rgb.size[1]})")
    return data, "jpg", "image/jpeg"


# =============================================================================
# Media Service
# =============================================================================

def _extension(filename: str, default: str) -> str:
    if "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    return default


def unique_filename(extension: str) -> str:
    """Collision-resistant object name: <epoch ms>-<random>.<ext>"""
    return f"{int(time.time() * 1000)}-{uuid4().hex[:12]}.{extension}"


class MediaService:
    """
    Upload and delete media files in Supabase Storage.

    Size and type checks run before anything is compressed or uploaded.

    Example:
        media = MediaService(db)
        url = media.process_image(content, "verger.png")
        media.delete_file(IMAGE_BUCKET, old_url)
    """

    def __init__(
        self,
        db: SupabaseClient,
        max_image_mb: int = 10,
        max_pdf_mb: int = 10,
        max_video_mb: int = 50,
    ):
        self._db = db
        self.max_image_mb = max_image_mb
        self.max_pdf_mb = max_pdf_mb
        self.max_video_mb = max_video_mb

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def check_size(kind: str, size_bytes: int, max_mb: int) -> None:
        """
        Raises:
            FileTooLargeError: If size_bytes is over max_mb megabytes
        """
        if size_bytes > max_mb * MB:
            raise FileTooLargeError(kind, size_bytes / MB, max_mb)

    @staticmethod
    def check_video_type(content_type: str | None) -> None:
        """
        Raises:
            InvalidFileTypeError: If the type is not an accepted video type
        """
        if content_type not in ACCEPTED_VIDEO_TYPES:
            raise InvalidFileTypeError(content_type or "unknown", ACCEPTED_VIDEO_TYPES)

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    def _upload(
        self,
        bucket: str,
        folder: str,
        content: bytes,
        extension: str,
        content_type: str,
    ) -> str:
        """Upload under a fresh name and return the public URL."""
        path = f"{folder}/{unique_filename(extension)}" if folder else unique_filename(extension)

        try:
            stored_path = self._db.upload_file(bucket, path, content, content_type)
            public_url = self._db.get_public_url(bucket, stored_path)
        except SupabaseClientError as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(e.message)

        logger.info(f"Uploaded {bucket}/{stored_path}")
        return public_url

    def process_image(
        self,
        content: bytes,
        filename: str,
        content_type: str = "image",
    ) -> str:
        """
        Validate, compress and upload an image.

        Returns:
            Public URL of the stored image

        Raises:
            FileTooLargeError: Over the image limit (checked before compression)
            InvalidFileTypeError: Not a readable image
            StorageUploadError: If the upload fails
        """
        self.check_size("Image", len(content), self.max_image_mb)

        data, extension, stored_type = compress_image(content, content_type)
        return self._upload(IMAGE_BUCKET, IMAGE_FOLDER, data, extension, stored_type)

    def process_pdf(self, content: bytes, filename: str) -> str:
        """Validate and upload a technical sheet. Returns its public URL."""
        self.check_size("PDF", len(content), self.max_pdf_mb)

        return self._upload(
            DOCUMENT_BUCKET,
            DOCUMENT_FOLDER,
            content,
            _extension(filename, "pdf"),
            "application/pdf",
        )

    def process_video(
        self,
        content: bytes,
        filename: str,
        content_type: str | None,
    ) -> VideoSource:
        """
        Validate and upload a video file.

        Returns:
            A local VideoSource pointing at the public URL

        Raises:
            FileTooLargeError: Over the video limit
            InvalidFileTypeError: Not an accepted video type
            StorageUploadError: If the upload fails
        """
        self.check_size("Video", len(content), self.max_video_mb)
        self.check_video_type(content_type)

        url = self._upload(
            VIDEO_BUCKET,
            VIDEO_FOLDER,
            content,
            _extension(filename, "mp4"),
            content_type,
        )
        return VideoSource(type="local", url=url)

    # -------------------------------------------------------------------------
    # URLs and Deletes
    # -------------------------------------------------------------------------

    def get_correct_public_url(self, url: str, bucket: str) -> str:
        """
        Repair URLs saved by older versions of the admin.

        - a proper public URL is returned unchanged
        - a bare "/storage/v1/<x>/<bucket>/<path>" is rebuilt as a public URL
        - a bare filename is assumed to live under uploads/
        Anything else is returned unchanged.
        """
        if not url:
            return ""

        if PUBLIC_PATH_MARKER in url:
            return url

        if url.startswith("/storage/v1/"):
            match = MALFORMED_STORAGE_PATH.match(url)
            if match:
                return self._db.get_public_url(bucket, match.group(2))

        if "http" not in url and "/" not in url:
            return self._db.get_public_url(bucket, f"{IMAGE_FOLDER}/{url}")

        return url

    @staticmethod
    def resolve_storage_path(url: str) -> str:
        """Map a stored URL back to an object path relative to its bucket."""
        if PUBLIC_PATH_MARKER in url:
            after_marker = url.split(PUBLIC_PATH_MARKER, 1)[1]
            # First segment is the bucket name
            return after_marker.split("?", 1)[0].split("/", 1)[-1]

        if url.startswith("/storage/v1/"):
            match = MALFORMED_STORAGE_PATH.match(url)
            if match:
                return match.group(2)

        if "http" not in url and "/" not in url:
            return f"{IMAGE_FOLDER}/{url}"

        return url

    def delete_file(self, bucket: str, url: str) -> bool:
        """
        Delete a stored file, best effort.

        Failures are logged and reported through the return value only, so
        callers never block on cleanup.

        Returns:
            True if the remove call succeeded
        """
        if not url:
            return False

        try:
            path = self.resolve_storage_path(url)
            logger.info(f"Deleting file from storage: {bucket}/{path}")
            self._db.remove_files(bucket, [path])
            return True

        except Exception as e:
            logger.error(f"Failed to delete {url} from {bucket}: {e}")
            return False

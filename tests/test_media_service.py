# =============================================================================
# tests/test_media_service.py - Media Pipeline Tests
# =============================================================================
# Tests for core/services/media_service.py:
# - YouTube id extraction
# - size and type checks happen before compression or upload
# - Pillow compression limits
# - URL repair and best-effort deletes
#
# Run with: pytest tests/test_media_service.py -v
# =============================================================================

import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

from app.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    InvalidYoutubeUrlError,
    StorageUploadError,
)
from core.services import media_service
from core.services.media_service import (
    MAX_IMAGE_DIMENSION,
    MB,
    MediaService,
    compress_image,
    get_youtube_embed_url,
    youtube_video_source,
)
from lib.supabase_client import SupabaseClientError

PUBLIC = "https://test-project.supabase.co/storage/v1/object/public"


def image_bytes(size: tuple[int, int], mode: str = "RGB", fmt: str = "PNG") -> bytes:
    color = (200, 120, 40, 128) if mode == "RGBA" else (200, 120, 40)
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def media(db):
    return MediaService(db)


# =============================================================================
# YouTube
# =============================================================================

class TestYoutube:

    def test_watch_url(self):
        assert (
            get_youtube_embed_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ")
            == "https://www.youtube.com/embed/dQw4w9WgXcQ"
        )

    def test_share_url(self):
        assert (
            get_youtube_embed_url("https://youtu.be/dQw4w9WgXcQ")
            == "https://www.youtube.com/embed/dQw4w9WgXcQ"
        )

    def test_watch_url_with_extra_parameters(self):
        assert (
            get_youtube_embed_url("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42s")
            == "https://www.youtube.com/embed/dQw4w9WgXcQ"
        )

    def test_other_urls_give_empty_string(self):
        assert get_youtube_embed_url("https://vimeo.com/123456789") == ""
        assert get_youtube_embed_url("") == ""

    def test_video_source(self):
        source = youtube_video_source("https://youtu.be/dQw4w9WgXcQ")

        assert source.type == "youtube"
        assert source.url == "https://youtu.be/dQw4w9WgXcQ"

    def test_video_source_rejects_non_youtube(self):
        with pytest.raises(InvalidYoutubeUrlError):
            youtube_video_source("https://example.com/video")


# =============================================================================
# Size and Type Checks
# =============================================================================

class TestChecks:

    def test_oversized_video_rejected_before_upload(self, media, db):
        with pytest.raises(FileTooLargeError) as exc_info:
            media.process_video(b"\0" * (51 * MB), "clip.mp4", "video/mp4")

        assert exc_info.value.status_code == 413
        assert db.calls_to("upload_file") == []

    def test_oversized_image_rejected_before_compression(self, media, db, monkeypatch):
        compress = MagicMock()
        monkeypatch.setattr(media_service, "compress_image", compress)

        with pytest.raises(FileTooLargeError):
            media.process_image(b"\0" * (11 * MB), "photo.jpg", "image/jpeg")

        compress.assert_not_called()
        assert db.calls_to("upload_file") == []

    def test_oversized_pdf_rejected(self, media, db):
        with pytest.raises(FileTooLargeError):
            media.process_pdf(b"\0" * (11 * MB), "fiche.pdf")

        assert db.calls_to("upload_file") == []

    def test_video_type_checked(self, media, db):
        with pytest.raises(InvalidFileTypeError):
            media.process_video(b"data", "clip.mkv", "video/x-matroska")

        assert db.calls_to("upload_file") == []

    def test_custom_limits(self, db):
        media = MediaService(db, max_video_mb=1)

        with pytest.raises(FileTooLargeError):
            media.process_video(b"\0" * (2 * MB), "clip.mp4", "video/mp4")


# =============================================================================
# Compression
# =============================================================================

class TestCompressImage:

    def test_large_image_resized_to_jpeg(self):
        data, extension, content_type = compress_image(image_bytes((3000, 1500)))

        image = Image.open(io.BytesIO(data))
        assert extension == "jpg"
        assert content_type == "image/jpeg"
        assert max(image.size) == MAX_IMAGE_DIMENSION
        assert image.size == (1920, 960)

    def test_small_transparent_image_stays_png(self):
        data, extension, content_type = compress_image(image_bytes((200, 200), mode="RGBA"))

        assert extension == "png"
        assert content_type == "image/png"
        assert Image.open(io.BytesIO(data)).mode == "RGBA"

    def test_small_image_not_upscaled(self):
        data, _, _ = compress_image(image_bytes((640, 480), fmt="JPEG"))

        assert Image.open(io.BytesIO(data)).size == (640, 480)

    def test_unreadable_content_rejected(self):
        with pytest.raises(InvalidFileTypeError):
            compress_image(b"not an image", "image/png")


# =============================================================================
# Uploads
# =============================================================================

class TestUploads:

    def test_image_uploaded_under_uploads(self, media, db):
        url = media.process_image(image_bytes((100, 100)), "photo.png", "image/png")

        bucket, path, content_type = db.calls_to("upload_file")[0]
        assert bucket == "images"
        assert path.startswith("uploads/")
        assert path.endswith(".jpg")
        assert content_type == "image/jpeg"
        assert url == f"{PUBLIC}/images/{path}"

    def test_pdf_uploaded_under_pdfs(self, media, db):
        url = media.process_pdf(b"%PDF-1.4 test", "Fiche Technique.PDF")

        bucket, path, content_type = db.calls_to("upload_file")[0]
        assert bucket == "documents"
        assert path.startswith("pdfs/")
        assert path.endswith(".pdf")
        assert content_type == "application/pdf"
        assert url.endswith(path)

    def test_video_returns_local_source(self, media, db):
        source = media.process_video(b"\0" * 1024, "clip.webm", "video/webm")

        assert source.type == "local"
        assert source.url.startswith(f"{PUBLIC}/videos/uploads/")

    def test_unique_names(self, media, db):
        media.process_pdf(b"%PDF", "a.pdf")
        media.process_pdf(b"%PDF", "a.pdf")

        first, second = (args[1] for args in db.calls_to("upload_file"))
        assert first != second

    def test_upload_failure_wrapped(self, media, db):
        db.fail_on = {"upload_file"}

        with pytest.raises(StorageUploadError) as exc_info:
            media.process_pdf(b"%PDF", "a.pdf")

        assert exc_info.value.status_code == 502


# =============================================================================
# URLs and Deletes
# =============================================================================

class TestUrls:

    def test_public_url_unchanged(self, media):
        url = f"{PUBLIC}/images/uploads/a.jpg"

        assert media.get_correct_public_url(url, "images") == url

    def test_malformed_storage_path_repaired(self, media):
        repaired = media.get_correct_public_url("/storage/v1/object/images/uploads/a.jpg", "images")

        assert repaired == f"{PUBLIC}/images/uploads/a.jpg"

    def test_bare_filename_assumed_in_uploads(self, media):
        assert media.get_correct_public_url("a.jpg", "images") == f"{PUBLIC}/images/uploads/a.jpg"

    def test_external_and_empty_urls(self, media):
        assert media.get_correct_public_url("https://cdn.test/a.jpg", "images") == "https://cdn.test/a.jpg"
        assert media.get_correct_public_url("", "images") == ""

    def test_resolve_storage_path(self):
        resolve = MediaService.resolve_storage_path

        assert resolve(f"{PUBLIC}/images/uploads/a.jpg") == "uploads/a.jpg"
        assert resolve(f"{PUBLIC}/documents/pdfs/f.pdf?t=1") == "pdfs/f.pdf"
        assert resolve("a.jpg") == "uploads/a.jpg"


class TestDeleteFile:

    def test_delete_removes_object(self, media, db):
        url = media.process_pdf(b"%PDF", "a.pdf")
        path = db.calls_to("upload_file")[0][1]

        assert media.delete_file("documents", url) is True
        assert path not in db.buckets["documents"]

    def test_failure_is_reported_not_raised(self, media, db):
        db.fail_on = {"remove_files"}

        assert media.delete_file("images", f"{PUBLIC}/images/uploads/a.jpg") is False

    def test_empty_url_is_skipped(self, media, db):
        assert media.delete_file("images", "") is False
        assert db.calls_to("remove_files") == []

    def test_mock_client_error(self):
        db = MagicMock()
        db.remove_files.side_effect = SupabaseClientError("bucket missing")

        assert MediaService(db).delete_file("videos", "clip.mp4") is False

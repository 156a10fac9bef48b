# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized error handling for the API. Every error a user can trigger is
# turned into the same notification body:
#   {"detail": ..., "code": ..., "suggestion": ..., "details": ...}
#
# Error families:
# - form validation (missing fields, reversed dates): 400/422, raised
#   before any remote call
# - media (oversized file, unsupported type, bad YouTube URL): 4xx, raised
#   by the media pipeline before any upload
# - persistence (SupabaseClientError from a store): 502
# - authentication: 401
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


class AcFruitException(Exception):
    """
    Base exception for the AC Fruit API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "ACFRUIT_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Form Exceptions
# =============================================================================

class FormValidationError(AcFruitException):
    """Raised when a submitted form fails a check."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="FORM_INVALID",
            status_code=400,
            details=details,
        )


class NotFoundError(AcFruitException):
    """Raised when an entity id is not held by its store."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            message=f"{entity} not found: {entity_id}",
            code="NOT_FOUND",
            status_code=404,
            suggestion="Reload the page; the item may have been deleted",
            details={"entity": entity, "id": entity_id},
        )


class InvalidVarietyAddressError(AcFruitException):
    """Raised when a sub-categorized fruit is addressed without a type."""

    def __init__(self, category: str):
        super().__init__(
            message=f"A type is required for {category}",
            code="TYPE_REQUIRED",
            status_code=400,
            suggestion="Pass one of: jaune, blanche, sanguine, plate",
            details={"category": category},
        )


# =============================================================================
# Media Exceptions
# =============================================================================

class FileTooLargeError(AcFruitException):
    """Raised when an uploaded file exceeds its size limit."""

    def __init__(self, kind: str, size_mb: float, max_mb: int):
        super().__init__(
            message=f"{kind} too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"kind": kind, "size_mb": round(size_mb, 2), "max_mb": max_mb},
        )


class InvalidFileTypeError(AcFruitException):
    """Raised when an uploaded file type is not allowed."""

    def __init__(self, content_type: str, allowed: list[str]):
        super().__init__(
            message=f"Unsupported file type: {content_type}",
            code="INVALID_FILE_TYPE",
            status_code=415,
            suggestion=f"Only these types are supported: {', '.join(allowed)}",
            details={"content_type": content_type, "allowed_types": allowed},
        )


class InvalidYoutubeUrlError(AcFruitException):
    """Raised when no YouTube video id can be found in a URL."""

    def __init__(self, url: str):
        super().__init__(
            message=f"Invalid YouTube URL: {url}",
            code="INVALID_YOUTUBE_URL",
            status_code=400,
            suggestion="Use a link like https://www.youtube.com/watch?v=... or https://youtu.be/...",
            details={"url": url},
        )


class StorageUploadError(AcFruitException):
    """Raised when a file cannot be stored."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=502,
            suggestion="Try again later or check the storage buckets in Supabase",
            details={"error": error},
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationError(AcFruitException):
    """Raised on bad credentials or when an admin route is hit signed out."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            suggestion="Sign in at /api/v1/admin/login",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def acfruit_exception_handler(
    request: Request,
    exc: AcFruitException
) -> JSONResponse:
    """Convert AcFruitException to a JSON notification."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def supabase_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """
    Convert a persistence failure to a JSON notification.

    The store has already recorded the error; the caller only needs to
    tell the user.
    """
    logger.warning(f"Persistence error on {request.method} {request.url.path}: {exc}")
    content = {
        "detail": exc.message,
        "code": exc.code,
    }
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=502, content=content)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors on submitted forms.

    The first error message is promoted to `detail` so it can be shown as
    a notification as-is.
    """
    errors = exc.errors()
    detail = "Veuillez remplir tous les champs obligatoires"
    if errors:
        message = str(errors[0].get("msg", ""))
        # pydantic prefixes errors raised in validators with "Value error, "
        detail = message.removeprefix("Value error, ") or detail
    return JSONResponse(
        status_code=422,
        content={
            "detail": detail,
            "code": "VALIDATION_ERROR",
            "errors": [
                {"loc": list(error.get("loc", ())), "msg": str(error.get("msg", ""))}
                for error in errors
            ],
        }
    )

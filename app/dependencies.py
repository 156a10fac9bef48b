# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# The application's long-lived objects (Supabase client, stores, media
# service, admin session) are built once by build_services() and attached
# to app.state. Route handlers receive them through Depends().
# =============================================================================

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from app.auth.session import AdminSession
from app.config import Settings
from core.services.media_service import MediaService
from core.stores import Stores, build_stores
from lib.supabase_client import SupabaseClient


@dataclass
class AppServices:
    """Everything a request handler may need, built once per application."""

    settings: Settings
    db: SupabaseClient
    stores: Stores
    media: MediaService
    admin_session: AdminSession


def build_services(settings: Settings, db: SupabaseClient | None = None) -> AppServices:
    """
    Build the service container for one application instance.

    Args:
        settings: Validated settings
        db: Optional pre-built client (tests pass a fake here)
    """
    if db is None:
        db = SupabaseClient(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)

    return AppServices(
        settings=settings,
        db=db,
        stores=build_stores(db),
        media=MediaService(
            db,
            max_image_mb=settings.MAX_IMAGE_SIZE_MB,
            max_pdf_mb=settings.MAX_PDF_SIZE_MB,
            max_video_mb=settings.MAX_VIDEO_SIZE_MB,
        ),
        admin_session=AdminSession(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD),
    )


def get_services(request: Request) -> AppServices:
    """Return the service container of the running application."""
    return request.app.state.services


# Type alias for dependency injection
ServicesDep = Annotated[AppServices, Depends(get_services)]


def get_stores(services: ServicesDep) -> Stores:
    return services.stores


def get_media(services: ServicesDep) -> MediaService:
    return services.media


StoresDep = Annotated[Stores, Depends(get_stores)]
MediaDep = Annotated[MediaService, Depends(get_media)]

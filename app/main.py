# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the AC Fruit API.
# create_app() builds the application: settings, services, middleware,
# exception handlers and routers. The stores are loaded once at startup.
#
# When SUPABASE_URL or SUPABASE_ANON_KEY is missing, create_app() returns a
# small application that answers every request with a 503 configuration
# error instead of crashing at import time.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.auth import require_admin
from app.auth import routes as auth_routes
from app.config import REQUIRED_VARIABLES, Settings, get_settings, missing_variables
from app.dependencies import AppServices, build_services
from app.exceptions import (
    AcFruitException,
    acfruit_exception_handler,
    supabase_exception_handler,
    validation_exception_handler,
)
from app.routers import appearance, diagnostics, events, fruits, health, media, news, planifruits
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
ADMIN_PREFIX = f"{API_PREFIX}/admin"
DASHBOARD_PREFIX = f"{ADMIN_PREFIX}/dashboard"

OPENAPI_TAGS = [
    {"name": "Home", "description": "Home page, contact block and site appearance"},
    {"name": "Fruits", "description": "Fruit catalog by category, type and variety"},
    {"name": "News", "description": "Published news articles"},
    {"name": "Events", "description": "Published events and the admin calendar"},
    {"name": "Planifruits", "description": "Maturity-calendar charts"},
    {"name": "Auth", "description": "Admin sign-in"},
    {"name": "Admin", "description": "Catalog management (sign-in required)"},
    {"name": "Health", "description": "API health and readiness checks"},
]


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


# =============================================================================
# Configuration Error Application
# =============================================================================

def create_config_error_app(missing: list[str]) -> FastAPI:
    """
    Build an application that reports missing configuration.

    Every path and method answers 503 with the list of missing variables.
    """
    missing = missing or list(REQUIRED_VARIABLES)
    app = FastAPI(title="AC Fruit API (configuration error)")

    @app.api_route(
        "/{path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    )
    async def configuration_error(path: str):
        return JSONResponse(
            status_code=503,
            content={
                "detail": "Erreur de configuration",
                "code": "CONFIG_ERROR",
                "missing": missing,
                "suggestion": f"Set {', '.join(missing)} in the environment or in .env",
            }
        )

    return app


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    settings: Settings | None = None,
    services: AppServices | None = None,
) -> FastAPI:
    """
    Build the AC Fruit API.

    Args:
        settings: Settings to use (read from the environment when omitted)
        services: Pre-built services (tests pass a container around a fake
            Supabase client)
    """
    if settings is None:
        try:
            settings = get_settings()
        except ValidationError as e:
            missing = missing_variables(e)
            configure_logging()
            logger.error(f"Configuration error, missing variables: {missing}")
            return create_config_error_app(missing)

    configure_logging(settings.DEBUG)

    if services is None:
        services = build_services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Startup loads every store concurrently. A store that fails to load
        records the error and the application still starts.
        """
        logger.info(f"Starting AC Fruit API in {settings.ENVIRONMENT} mode")
        logger.info(f"CORS origins: {settings.cors_origins_list}")

        await app.state.services.stores.load_all()

        yield

        logger.info("Shutting down AC Fruit API")

    app = FastAPI(
        title="AC Fruit API",
        description="Fruit catalog, news, events and maturity calendars of AC Fruit.",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )
    app.state.services = services

    # =========================================================================
    # Middleware
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(AcFruitException, acfruit_exception_handler)
    app.add_exception_handler(SupabaseClientError, supabase_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.exception_handler(Exception)
    async def handle_general_exception(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(f"Unexpected error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            }
        )

    # =========================================================================
    # Routers
    # =========================================================================

    # Public pages
    app.include_router(appearance.router, prefix=API_PREFIX, tags=["Home"])
    app.include_router(fruits.router, prefix=API_PREFIX, tags=["Fruits"])
    app.include_router(news.router, prefix=API_PREFIX, tags=["News"])
    app.include_router(events.router, prefix=API_PREFIX, tags=["Events"])
    app.include_router(planifruits.router, prefix=API_PREFIX, tags=["Planifruits"])
    app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])

    # Admin sign-in
    app.include_router(auth_routes.router, prefix=ADMIN_PREFIX, tags=["Auth"])

    # Admin dashboard (every route requires the admin session)
    for module in (fruits, news, events, planifruits, appearance, media, diagnostics):
        app.include_router(
            module.admin_router,
            prefix=DASHBOARD_PREFIX,
            tags=["Admin"],
            dependencies=[Depends(require_admin)],
        )

    return app


app = create_app()

# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import get_settings
#   settings = get_settings()
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# SUPABASE_URL and SUPABASE_ANON_KEY are required. When either is missing,
# get_settings() raises and the application factory serves a configuration
# error page instead of the site (see app.main).
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

# Variables the site cannot start without
REQUIRED_VARIABLES = ("SUPABASE_URL", "SUPABASE_ANON_KEY")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed through get_settings().
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - the site shows a configuration error without them

    SUPABASE_URL: str = Field(
        ...,  # ... means required (no default)
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    # -------------------------------------------------------------------------
    # Admin Credentials
    # -------------------------------------------------------------------------
    # A single hardcoded pair; signing in only sets an in-memory flag

    ADMIN_EMAIL: str = Field(
        default="admin@acfruit.com",
        description="Admin login email"
    )

    ADMIN_PASSWORD: str = Field(
        default="admin123",
        description="Admin login password"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Diagnostics
    # -------------------------------------------------------------------------

    DIAGNOSTICS_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Timeout of the admin connectivity check"
    )

    # -------------------------------------------------------------------------
    # Media Upload Limits
    # -------------------------------------------------------------------------

    MAX_IMAGE_SIZE_MB: int = Field(default=10, ge=1, le=100)
    MAX_PDF_SIZE_MB: int = Field(default=10, ge=1, le=100)
    MAX_VIDEO_SIZE_MB: int = Field(default=50, ge=1, le=500)

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Empty variables count as missing
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
        # The .env file may hold variables for other tools
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://acfruit.fr" -> ["http://localhost:5173", "https://acfruit.fr"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Raises:
        ValidationError: If a required variable is missing or invalid
    """
    return Settings()


def missing_variables(error: ValidationError) -> list[str]:
    """List the required variables a settings ValidationError complains about."""
    missing = []
    for item in error.errors():
        name = str(item["loc"][0]) if item.get("loc") else ""
        if item.get("type") == "missing" and name in REQUIRED_VARIABLES:
            missing.append(name)
    return missing

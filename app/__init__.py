# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: create_app(), middleware setup, error handlers, startup load
# - config.py: Environment variable loading and settings
# - dependencies.py: the per-application service container
# - auth/: admin sign-in and the admin gate
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# catalog state to core/stores and media handling to core/services.
# =============================================================================

# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the catalog's business logic:
# - models/: Pydantic schemas for varieties, news, events, planifruits and
#   the appearance record
# - stores/: in-memory domain stores synchronized with Supabase tables
# - services/: the media upload pipeline
#
# Route handlers live in app/; stores and services take their Supabase
# client as a constructor argument and never reach for a global one.
# =============================================================================

# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the AC Fruit API:
# - test_models.py: Pydantic model validation and partial updates
# - test_stores.py: domain stores against an in-memory Supabase fake
# - test_catalog.py: search, maturity sorting, French formatting
# - test_media_service.py: upload checks, compression, URL repair, deletes
# - test_supabase_client.py: the Supabase wrapper with a mocked client
# - test_config.py: settings and the configuration-error application
# - test_api.py: endpoints through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================

# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for table and storage operations
# - catalog.py: Search, maturity sorting and French formatting over the catalog
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.catalog import (
    SearchResult,
    VarietyRef,
    format_date,
    format_maturity_period,
    iter_varieties,
    search_varieties,
    sort_by_maturity,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Catalog
    "SearchResult",
    "VarietyRef",
    "format_date",
    "format_maturity_period",
    "iter_varieties",
    "search_varieties",
    "sort_by_maturity",
]

# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for the catalog:
# - base.py: shared config, partial-update helpers (changed_fields, merge)
# - fruit.py: categories, types, varieties and the flat/nested variety maps
# - news.py: news articles
# - event.py: events and the date-range form rule
# - planifruit.py: maturity-calendar charts
# - appearance.py: the site configuration singleton
#
# These models define the "contract" between the stores and the API.
# =============================================================================

# -----------------------------------------------------------------------------
# Shared
# -----------------------------------------------------------------------------
from .base import (
    DomainModel,
    PartialUpdate,
    changed_fields,
    merge,
)

# -----------------------------------------------------------------------------
# Fruit Models
# -----------------------------------------------------------------------------
from .fruit import (
    CATEGORY_NAMES,
    SUB_CATEGORIZED,
    FlatVarieties,
    Fruit,
    FruitCategory,
    FruitType,
    FruitVariety,
    MaturityPeriod,
    NestedVarieties,
    VarietyForm,
    VarietyUpdate,
    VideoSource,
    default_fruit_data,
)

# -----------------------------------------------------------------------------
# News / Events / Planifruits
# -----------------------------------------------------------------------------
from .news import (
    NewsArticle,
    NewsArticleCreate,
    NewsArticleUpdate,
)
from .event import (
    DateRangeError,
    Event,
    EventCreate,
    EventUpdate,
    validate_date_range,
)
from .planifruit import (
    Planifruit,
    PlanifruitCreate,
    PlanifruitTypeError,
    PlanifruitUpdate,
    resolve_planifruit_type,
)

# -----------------------------------------------------------------------------
# Appearance
# -----------------------------------------------------------------------------
from .appearance import (
    DEFAULT_APPEARANCE,
    Appearance,
    AppearanceUpdate,
    SocialMedia,
)

__all__ = [
    # Shared
    "DomainModel",
    "PartialUpdate",
    "changed_fields",
    "merge",
    # Fruit
    "CATEGORY_NAMES",
    "SUB_CATEGORIZED",
    "FlatVarieties",
    "Fruit",
    "FruitCategory",
    "FruitType",
    "FruitVariety",
    "MaturityPeriod",
    "NestedVarieties",
    "VarietyForm",
    "VarietyUpdate",
    "VideoSource",
    "default_fruit_data",
    # News
    "NewsArticle",
    "NewsArticleCreate",
    "NewsArticleUpdate",
    # Events
    "DateRangeError",
    "Event",
    "EventCreate",
    "EventUpdate",
    "validate_date_range",
    # Planifruits
    "Planifruit",
    "PlanifruitCreate",
    "PlanifruitTypeError",
    "PlanifruitUpdate",
    "resolve_planifruit_type",
    # Appearance
    "DEFAULT_APPEARANCE",
    "Appearance",
    "AppearanceUpdate",
    "SocialMedia",
]

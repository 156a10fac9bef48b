# =============================================================================
# lib/catalog.py - Catalog Helpers
# =============================================================================
# Pure functions over the fruit catalog, used by the public pages:
# - iter_varieties(): walk every variety whatever its map shape
# - search_varieties(): sidebar search on name and description
# - sort_by_maturity(): order varieties by the start of their harvest
# - format_maturity_period() / format_date(): French display strings
#
# Nothing here touches Supabase; everything works on store snapshots.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterator, Mapping

from core.models.fruit import (
    FlatVarieties,
    Fruit,
    FruitCategory,
    FruitType,
    FruitVariety,
    MaturityPeriod,
)

FRENCH_MONTHS = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)


@dataclass(frozen=True)
class VarietyRef:
    """A variety together with its address in the catalog."""
    id: str
    category: FruitCategory
    type: FruitType | None
    variety: FruitVariety


@dataclass(frozen=True)
class SearchResult:
    id: str
    name: str
    category: FruitCategory
    type: FruitType | None
    description: str


def iter_varieties(fruit_data: Mapping[FruitCategory, Fruit]) -> Iterator[VarietyRef]:
    """Yield every variety of the catalog with its category and type."""
    for category, fruit in fruit_data.items():
        if isinstance(fruit.varieties, FlatVarieties):
            for variety_id, variety in fruit.varieties.varieties.items():
                yield VarietyRef(variety_id, category, None, variety)
        else:
            for fruit_type, varieties in fruit.varieties.varieties.items():
                for variety_id, variety in varieties.items():
                    yield VarietyRef(variety_id, category, fruit_type, variety)


def search_varieties(
    fruit_data: Mapping[FruitCategory, Fruit],
    query: str,
) -> list[SearchResult]:
    """
    Case-insensitive substring search on variety names and descriptions.

    A blank query returns no results.
    """
    needle = query.strip().lower()
    if not needle:
        return []

    return [
        SearchResult(
            id=ref.id,
            name=ref.variety.name,
            category=ref.category,
            type=ref.type,
            description=ref.variety.description,
        )
        for ref in iter_varieties(fruit_data)
        if needle in ref.variety.name.lower() or needle in ref.variety.description.lower()
    ]


def maturity_key(variety: FruitVariety) -> tuple[int, int]:
    """(start month, start day); varieties without a period sort first."""
    period = variety.maturity_period
    if period is None:
        return (0, 0)
    return (period.start_month, period.start_day)


def sort_by_maturity(varieties: Mapping[str, FruitVariety]) -> list[tuple[str, FruitVariety]]:
    """
    Order varieties by the start of their maturity window.

    Month first, then day, ascending. Ties keep their original order.
    """
    return sorted(varieties.items(), key=lambda item: maturity_key(item[1]))


def format_maturity_period(period: MaturityPeriod | None) -> str:
    """Format a window as "DD/MM au DD/MM" (empty string when unknown)."""
    if period is None:
        return ""
    return (
        f"{period.start_day:02d}/{period.start_month:02d} au "
        f"{period.end_day:02d}/{period.end_month:02d}"
    )


def format_date(value: date | datetime | str) -> str:
    """Long French date, e.g. "10 juin 2024"."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value.day} {FRENCH_MONTHS[value.month - 1]} {value.year}"

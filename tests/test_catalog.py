# =============================================================================
# tests/test_catalog.py - Catalog Helper Tests
# =============================================================================
# Tests for lib/catalog.py: search, maturity ordering and French formatting.
#
# Run with: pytest tests/test_catalog.py -v
# =============================================================================

from datetime import date, datetime

from core.models import FruitCategory, FruitType, FruitVariety, MaturityPeriod, default_fruit_data
from lib.catalog import (
    format_date,
    format_maturity_period,
    iter_varieties,
    search_varieties,
    sort_by_maturity,
)


def variety(name: str, description: str = "", start: tuple[int, int] | None = None) -> FruitVariety:
    """Build a variety; `start` is (month, day)."""
    period = None
    if start is not None:
        period = MaturityPeriod(start_month=start[0], start_day=start[1], end_day=28, end_month=start[0])
    return FruitVariety(name=name, description=description, image="", maturity_period=period)


def sample_catalog():
    data = default_fruit_data()
    data[FruitCategory.ABRICOTS].varieties.varieties["a1"] = variety("Bergeron", "Abricot tardif")
    data[FruitCategory.PECHES].varieties.varieties[FruitType.JAUNE]["p1"] = variety("Big Top", "Chair ferme")
    data[FruitCategory.NECTARINES].varieties.varieties[FruitType.BLANCHE]["n1"] = variety("Nectaperle", "Très sucrée")
    return data


class TestIterVarieties:

    def test_yields_addresses(self):
        refs = {ref.id: ref for ref in iter_varieties(sample_catalog())}

        assert refs["a1"].category == FruitCategory.ABRICOTS
        assert refs["a1"].type is None
        assert refs["p1"].type == FruitType.JAUNE
        assert refs["n1"].type == FruitType.BLANCHE


class TestSearch:

    def test_matches_name_case_insensitive(self):
        results = search_varieties(sample_catalog(), "big")

        assert [r.id for r in results] == ["p1"]
        assert results[0].category == FruitCategory.PECHES

    def test_matches_description(self):
        results = search_varieties(sample_catalog(), "TARDIF")

        assert [r.id for r in results] == ["a1"]

    def test_blank_query_returns_nothing(self):
        assert search_varieties(sample_catalog(), "") == []
        assert search_varieties(sample_catalog(), "   ") == []


class TestMaturitySort:

    def test_month_then_day(self):
        varieties = {
            "mar10": variety("A", start=(3, 10)),
            "jan5": variety("B", start=(1, 5)),
            "mar1": variety("C", start=(3, 1)),
        }

        ordered = [vid for vid, _ in sort_by_maturity(varieties)]

        assert ordered == ["jan5", "mar1", "mar10"]

    def test_varieties_without_period_first(self):
        varieties = {
            "june": variety("A", start=(6, 1)),
            "unknown": variety("B"),
        }

        assert [vid for vid, _ in sort_by_maturity(varieties)] == ["unknown", "june"]


class TestFormatting:

    def test_maturity_label(self):
        period = MaturityPeriod(start_day=5, start_month=6, end_day=20, end_month=7)

        assert format_maturity_period(period) == "05/06 au 20/07"
        assert format_maturity_period(None) == ""

    def test_french_date(self):
        assert format_date(date(2024, 6, 10)) == "10 juin 2024"
        assert format_date(datetime(2024, 2, 1, 9, 30)) == "1 février 2024"
        assert format_date("2024-12-25T10:00:00Z") == "25 décembre 2024"

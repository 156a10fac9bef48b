# =============================================================================
# tests/test_stores.py - Domain Store Tests
# =============================================================================
# Tests for the five stores against the in-memory Supabase fake:
# - loads build the right local state (and never raise)
# - mutations touch local state only after the remote call succeeded
# - failures record the error, clear `loading` and propagate
#
# Run with: pytest tests/test_stores.py -v
# =============================================================================

import asyncio
from datetime import date
from unittest.mock import MagicMock

import pytest

from app.exceptions import InvalidVarietyAddressError
from core.models import (
    DEFAULT_APPEARANCE,
    AppearanceUpdate,
    EventCreate,
    EventUpdate,
    FruitCategory,
    FruitType,
    FruitVariety,
    MaturityPeriod,
    NewsArticleCreate,
    NewsArticleUpdate,
    PlanifruitCreate,
    VarietyUpdate,
    VideoSource,
)
from core.stores import (
    AppearanceStore,
    EventStore,
    FruitStore,
    NewsStore,
    PlanifruitStore,
    build_stores,
)
from core.stores.fruit_store import variety_columns, variety_from_row
from lib.supabase_client import SupabaseClientError
from tests.conftest import InMemorySupabase, fruit_row


def make_variety(name: str = "Bergeron", **fields) -> FruitVariety:
    return FruitVariety(name=name, description=f"{name} description", image=f"{name}.jpg", **fields)


def failing_db(method: str) -> MagicMock:
    """A MagicMock client whose given method raises SupabaseClientError."""
    db = MagicMock()
    getattr(db, method).side_effect = SupabaseClientError("boom", code="TEST_FAILURE")
    return db


# =============================================================================
# Row Mapping
# =============================================================================

class TestVarietyRowMapping:
    """Tests for variety_from_row() and variety_columns()."""

    def test_maturity_needs_all_four_columns(self):
        row = fruit_row(
            "1", "abricots", "Orangered",
            maturity_start_day=1, maturity_start_month=6,
            maturity_end_day=None, maturity_end_month=7,
        )

        assert variety_from_row(row).maturity_period is None

    def test_maturity_parsed(self):
        row = fruit_row(
            "1", "abricots", "Orangered",
            maturity_start_day=1, maturity_start_month=6,
            maturity_end_day=20, maturity_end_month=6,
        )

        period = variety_from_row(row).maturity_period

        assert period == MaturityPeriod(start_day=1, start_month=6, end_day=20, end_month=6)

    def test_video_type_inferred_from_url(self):
        youtube = variety_from_row(fruit_row("1", "abricots", "A", video_url="https://youtu.be/dQw4w9WgXcQ"))
        local = variety_from_row(fruit_row("2", "abricots", "B", video_url="https://cdn.test/v.mp4"))
        empty = variety_from_row(fruit_row("3", "abricots", "C", video_url=""))

        assert youtube.video_source.type == "youtube"
        assert local.video_source.type == "local"
        assert empty.video_source is None

    def test_columns_for_partial_update(self):
        columns = variety_columns({
            "technical_sheet": "",
            "video_source": None,
            "maturity_period": None,
        })

        assert columns["technical_sheet"] is None
        assert columns["video_url"] is None
        assert columns["maturity_start_day"] is None
        assert "name" not in columns


# =============================================================================
# Fruit Store
# =============================================================================

class TestFruitStoreLoad:

    def test_flat_and_nested_rows_placed(self):
        db = InMemorySupabase(tables={"fruits": [
            fruit_row("a1", "abricots", "Bergeron"),
            fruit_row("p1", "peches", "Big Top", type="jaune"),
            fruit_row("n1", "nectarines", "Nectaross", type="sanguine"),
        ]})
        store = FruitStore(db)

        store.load_fruits()

        assert list(store.varieties_for("abricots")) == ["a1"]
        assert list(store.varieties_for("peches", "jaune")) == ["p1"]
        assert list(store.varieties_for("nectarines", "sanguine")) == ["n1"]
        assert store.loading is False
        assert store.error is None

    def test_unaddressable_rows_skipped(self):
        db = InMemorySupabase(tables={"fruits": [
            fruit_row("x1", "cerises", "Burlat"),
            fruit_row("p1", "peches", "Sans type"),
            fruit_row("a1", "abricots", "Bergeron"),
        ]})
        store = FruitStore(db)

        store.load_fruits()

        assert list(store.varieties_for("abricots")) == ["a1"]
        assert all(not v for v in store.fruit_data[FruitCategory.PECHES].varieties.varieties.values())

    def test_failure_falls_back_to_defaults(self):
        store = FruitStore(failing_db("select_rows"))
        store.fruit_data[FruitCategory.ABRICOTS].varieties.varieties["old"] = make_variety()

        store.load_fruits()

        assert store.varieties_for("abricots") == {}
        assert store.error == "boom"
        assert store.loading is False


class TestFruitStoreMutations:

    def test_add_returns_database_id(self, db):
        store = FruitStore(db)

        variety_id = store.add_variety("abricots", None, make_variety())

        assert variety_id == db.tables["fruits"][0]["id"]
        assert store.get_variety("abricots", None, variety_id).name == "Bergeron"

    def test_flat_category_stores_null_type(self, db):
        store = FruitStore(db)

        store.add_variety("abricots", "jaune", make_variety())

        assert db.tables["fruits"][0]["type"] is None

    def test_nested_without_type_rejected_before_any_call(self, db):
        store = FruitStore(db)

        with pytest.raises(InvalidVarietyAddressError):
            store.add_variety("peches", None, make_variety())

        assert db.calls == []

    def test_nested_add_then_reload(self, db):
        store = FruitStore(db)
        variety = make_variety(
            "Big Top",
            video_source=VideoSource(type="youtube", url="https://www.youtube.com/watch?v=dQw4w9WgXcQ"),
            maturity_period=MaturityPeriod(start_day=10, start_month=7, end_day=25, end_month=7),
        )

        variety_id = store.add_variety("peches", "jaune", variety)
        reloaded = FruitStore(db)
        reloaded.load_fruits()

        assert reloaded.get_variety("peches", FruitType.JAUNE, variety_id) == variety

    def test_update_merges_only_changed_fields(self, db):
        store = FruitStore(db)
        variety_id = store.add_variety("abricots", None, make_variety())

        updated = store.update_variety("abricots", None, variety_id, VarietyUpdate(description="Nouveau"))

        assert updated.description == "Nouveau"
        assert updated.name == "Bergeron"
        assert db.calls_to("update_row")[-1] == ("fruits", variety_id, {"description": "Nouveau"})

    def test_update_failure_leaves_local_state(self):
        db = failing_db("update_row")
        store = FruitStore(db)
        store.fruit_data[FruitCategory.ABRICOTS].varieties.varieties["a1"] = make_variety()

        with pytest.raises(SupabaseClientError):
            store.update_variety("abricots", None, "a1", VarietyUpdate(name="Changé"))

        assert store.get_variety("abricots", None, "a1").name == "Bergeron"
        assert store.error == "boom"
        assert store.loading is False

    def test_delete_is_idempotent_locally(self, db):
        store = FruitStore(db)
        variety_id = store.add_variety("nectarines", "blanche", make_variety())

        store.delete_variety("nectarines", "blanche", variety_id)
        store.delete_variety("nectarines", "blanche", variety_id)

        assert store.varieties_for("nectarines", "blanche") == {}
        assert db.tables["fruits"] == []

    def test_add_failure_records_error(self):
        store = FruitStore(failing_db("insert_row"))

        with pytest.raises(SupabaseClientError):
            store.add_variety("abricots", None, make_variety())

        assert store.varieties_for("abricots") == {}
        assert store.error == "boom"
        assert store.loading is False


# =============================================================================
# News Store
# =============================================================================

class TestNewsStore:

    def test_add_prepends(self, db):
        store = NewsStore(db)

        first = store.add_article(NewsArticleCreate(title="Un", content="c", image="i"))
        second = store.add_article(NewsArticleCreate(title="Deux", content="c", image="i"))

        assert [a.id for a in store.articles] == [second.id, first.id]

    def test_toggle_twice_restores(self, db):
        store = NewsStore(db)
        article = store.add_article(NewsArticleCreate(title="Un", content="c", image="i"))

        assert store.toggle_published(article.id).published is True
        assert store.toggle_published(article.id).published is False
        assert db.tables["news"][0]["published"] is False

    def test_toggle_unknown_id_sends_nothing(self, db):
        store = NewsStore(db)

        assert store.toggle_published("missing") is None
        assert db.calls == []

    def test_published_filter(self, db):
        store = NewsStore(db)
        store.add_article(NewsArticleCreate(title="Brouillon", content="c", image="i"))
        published = store.add_article(NewsArticleCreate(title="En ligne", content="c", image="i", published=True))

        assert store.published_articles() == [published]

    def test_update_unknown_id_is_local_noop(self, db):
        store = NewsStore(db)
        article = store.add_article(NewsArticleCreate(title="Un", content="c", image="i"))

        assert store.update_article("missing", NewsArticleUpdate(title="X")) is None
        assert store.articles == [article]

    def test_load_failure_keeps_previous_articles(self, db):
        store = NewsStore(db)
        article = store.add_article(NewsArticleCreate(title="Un", content="c", image="i"))
        db.fail_on = {"select_rows"}

        store.load_articles()

        assert store.articles == [article]
        assert store.error == "select_rows failed"
        assert store.loading is False


# =============================================================================
# Event Store
# =============================================================================

class TestEventStore:

    def event(self, title: str, start: date, end: date) -> EventCreate:
        return EventCreate(title=title, start_date=start, end_date=end, location="Avignon")

    def test_add_appends(self, db):
        store = EventStore(db)

        first = store.add_event(self.event("Un", date(2024, 6, 1), date(2024, 6, 2)))
        second = store.add_event(self.event("Deux", date(2024, 5, 1), date(2024, 5, 2)))

        assert store.events == [first, second]

    def test_load_orders_by_start_date(self, db):
        writer = EventStore(db)
        writer.add_event(self.event("Juin", date(2024, 6, 1), date(2024, 6, 2)))
        writer.add_event(self.event("Mai", date(2024, 5, 1), date(2024, 5, 2)))

        store = EventStore(db)
        store.load_events()

        assert [e.title for e in store.events] == ["Mai", "Juin"]

    def test_dates_written_as_iso_strings(self, db):
        store = EventStore(db)

        store.add_event(self.event("Un", date(2024, 6, 1), date(2024, 6, 2)))

        assert db.tables["events"][0]["start_date"] == "2024-06-01"

    def test_update_and_toggle(self, db):
        store = EventStore(db)
        event = store.add_event(self.event("Un", date(2024, 6, 1), date(2024, 6, 2)))

        updated = store.update_event(event.id, EventUpdate(location="Cavaillon"))
        toggled = store.toggle_published(event.id)

        assert updated.location == "Cavaillon"
        assert toggled.published is True
        assert store.toggle_published("missing") is None

    def test_delete(self, db):
        store = EventStore(db)
        event = store.add_event(self.event("Un", date(2024, 6, 1), date(2024, 6, 2)))

        store.delete_event(event.id)

        assert store.events == []


# =============================================================================
# Planifruit Store
# =============================================================================

class TestPlanifruitStore:

    def test_add_prepends_and_find(self, db):
        store = PlanifruitStore(db)

        abricot = store.add_planifruit(PlanifruitCreate(category="abricots", image="a.jpg"))
        peche = store.add_planifruit(PlanifruitCreate(category="peches", type="jaune", image="p.jpg"))

        assert store.planifruits == [peche, abricot]
        assert store.find("peches") == [peche]
        assert store.find("peches", "blanche") == []
        assert db.tables["planifruits"][0]["category"] == "abricots"
        assert db.tables["planifruits"][0]["type"] is None

    def test_load_failure_keeps_previous_state(self, db):
        store = PlanifruitStore(db)
        planifruit = store.add_planifruit(PlanifruitCreate(category="abricots", image="a.jpg"))
        db.fail_on = {"select_rows"}

        store.load_planifruits()

        assert store.planifruits == [planifruit]
        assert store.error is not None


# =============================================================================
# Appearance Store
# =============================================================================

class TestAppearanceStore:

    def test_empty_table_uses_defaults(self, db):
        store = AppearanceStore(db)

        store.load_appearance()

        assert store.appearance == DEFAULT_APPEARANCE
        assert store.error is None

    def test_load_failure_uses_defaults(self):
        store = AppearanceStore(failing_db("select_first"))

        store.load_appearance()

        assert store.appearance == DEFAULT_APPEARANCE
        assert store.error == "boom"

    def test_empty_columns_fall_back_per_field(self):
        db = InMemorySupabase(tables={"appearance": [
            {"id": "1", "header_title": "", "company_name": "AC Fruit", "social_media": None},
        ]})
        store = AppearanceStore(db)

        store.load_appearance()

        assert store.appearance.header_title == DEFAULT_APPEARANCE.header_title
        assert store.appearance.company_name == "AC Fruit"

    def test_update_inserts_first_row(self, db):
        store = AppearanceStore(db)

        store.update_appearance(AppearanceUpdate(company_name="AC Fruit"))

        assert len(db.tables["appearance"]) == 1
        assert db.calls_to("update_row") == []
        assert store.appearance.company_name == "AC Fruit"

    def test_update_existing_row(self):
        db = InMemorySupabase(tables={"appearance": [{"id": "7", "company_name": "Ancien"}]})
        store = AppearanceStore(db)
        store.load_appearance()

        store.update_appearance(AppearanceUpdate(phone="04 90 00 00 00"))

        assert db.calls_to("insert_row") == []
        assert db.tables["appearance"][0]["phone"] == "04 90 00 00 00"
        assert db.tables["appearance"][0]["company_name"] == "Ancien"

    def test_existence_check_failure_does_not_insert(self, db):
        store = AppearanceStore(db)
        db.fail_on = {"select_first"}

        with pytest.raises(SupabaseClientError):
            store.update_appearance(AppearanceUpdate(company_name="AC Fruit"))

        assert db.calls_to("insert_row") == []
        assert store.appearance == DEFAULT_APPEARANCE


# =============================================================================
# Startup Load
# =============================================================================

class TestLoadAll:

    def test_one_failure_does_not_stop_the_others(self):
        db = InMemorySupabase(tables={"fruits": [fruit_row("a1", "abricots", "Bergeron")]})
        db.fail_on = {"select_first"}
        stores = build_stores(db)

        asyncio.run(stores.load_all())

        assert list(stores.fruits.varieties_for("abricots")) == ["a1"]
        assert stores.appearance.error is not None
        assert stores.appearance.appearance == DEFAULT_APPEARANCE
        assert all(not store.loading for store in stores.as_dict().values())

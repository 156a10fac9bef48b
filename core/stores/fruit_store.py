# =============================================================================
# core/stores/fruit_store.py - Fruit Catalog Store
# =============================================================================
# Holds the variety catalog in memory, keyed by category, and mirrors every
# change to the `fruits` table.
#
# Addressing depends on the category's variety map:
# - FlatVarieties (abricots): category -> id -> variety; the type argument
#   is ignored and stored as NULL
# - NestedVarieties (peches, nectarines): category -> type -> id -> variety;
#   a type is required
#
# Load failures reset the catalog to the empty default structure rather
# than keeping whatever was there before.
# =============================================================================

import logging
from typing import Any

from app.exceptions import InvalidVarietyAddressError
from core.models.base import changed_fields, merge
from core.models.fruit import (
    FlatVarieties,
    Fruit,
    FruitCategory,
    FruitType,
    FruitVariety,
    MaturityPeriod,
    NestedVarieties,
    VarietyUpdate,
    VideoSource,
    default_fruit_data,
)
from core.stores.base import (
    ADD_ERROR,
    DELETE_ERROR,
    UPDATE_ERROR,
    BaseStore,
)

logger = logging.getLogger(__name__)

MATURITY_COLUMNS = (
    "maturity_start_day",
    "maturity_start_month",
    "maturity_end_day",
    "maturity_end_month",
)


# =============================================================================
# Row Mapping
# =============================================================================

def is_youtube_url(url: str) -> bool:
    return "youtube.com" in url or "youtu.be" in url


def variety_from_row(row: dict[str, Any]) -> FruitVariety:
    """Build a FruitVariety from a `fruits` row."""
    video_url = row.get("video_url") or ""
    video_source = None
    if video_url:
        video_source = VideoSource(
            type="youtube" if is_youtube_url(video_url) else "local",
            url=video_url,
        )

    # A period is only kept when all four bounds are set
    maturity_period = None
    if all(row.get(column) for column in MATURITY_COLUMNS):
        maturity_period = MaturityPeriod(
            start_day=row["maturity_start_day"],
            start_month=row["maturity_start_month"],
            end_day=row["maturity_end_day"],
            end_month=row["maturity_end_month"],
        )

    return FruitVariety(
        name=row["name"],
        description=row.get("description") or "",
        image=row.get("image") or "",
        images=row.get("images") or [],
        technical_sheet=row.get("technical_sheet") or "",
        video_source=video_source,
        maturity_period=maturity_period,
    )


def variety_columns(fields: dict[str, Any]) -> dict[str, Any]:
    """
    Translate variety fields to `fruits` columns.

    Works on a full set of fields (insert) as well as on a partial one
    (update): only the columns of the given fields are produced.
    """
    row: dict[str, Any] = {}
    for name, value in fields.items():
        if name == "images":
            row["images"] = value or []
        elif name == "technical_sheet":
            row["technical_sheet"] = value or None
        elif name == "video_source":
            row["video_url"] = value.url if value and value.url else None
        elif name == "maturity_period":
            if value is None:
                row.update({column: None for column in MATURITY_COLUMNS})
            else:
                row["maturity_start_day"] = value.start_day
                row["maturity_start_month"] = value.start_month
                row["maturity_end_day"] = value.end_day
                row["maturity_end_month"] = value.end_month
        else:
            row[name] = value
    return row


def _all_fields(variety: FruitVariety) -> dict[str, Any]:
    return {name: getattr(variety, name) for name in FruitVariety.model_fields}


# =============================================================================
# Store
# =============================================================================

class FruitStore(BaseStore):
    """
    In-memory variety catalog synchronized with the `fruits` table.

    Example:
        store = FruitStore(db)
        store.load_fruits()

        variety_id = store.add_variety("peches", "jaune", variety)
        store.update_variety("peches", "jaune", variety_id,
                             VarietyUpdate(description="Chair fondante"))
        store.delete_variety("peches", "jaune", variety_id)
    """

    table = "fruits"

    def __init__(self, db):
        super().__init__(db)
        self.fruit_data: dict[FruitCategory, Fruit] = default_fruit_data()

    # -------------------------------------------------------------------------
    # Addressing
    # -------------------------------------------------------------------------

    def _slot(
        self,
        category: FruitCategory | str,
        fruit_type: FruitType | str | None,
    ) -> dict[str, FruitVariety]:
        """
        Return the id -> variety map a (category, type) address points at.

        Raises:
            InvalidVarietyAddressError: If a sub-categorized fruit is
                addressed without a type
        """
        category = FruitCategory(category)
        varieties = self.fruit_data[category].varieties

        if isinstance(varieties, NestedVarieties):
            if fruit_type is None:
                raise InvalidVarietyAddressError(category.value)
            return varieties.varieties.setdefault(FruitType(fruit_type), {})

        return varieties.varieties

    def _stored_type(
        self,
        category: FruitCategory | str,
        fruit_type: FruitType | str | None,
    ) -> str | None:
        """Type column value for an address (NULL for flat categories)."""
        fruit = self.fruit_data[FruitCategory(category)]
        if isinstance(fruit.varieties, NestedVarieties) and fruit_type is not None:
            return FruitType(fruit_type).value
        return None

    def varieties_for(
        self,
        category: FruitCategory | str,
        fruit_type: FruitType | str | None = None,
    ) -> dict[str, FruitVariety]:
        """Varieties held under an address (a live view, do not mutate)."""
        return self._slot(category, fruit_type)

    def get_variety(
        self,
        category: FruitCategory | str,
        fruit_type: FruitType | str | None,
        variety_id: str,
    ) -> FruitVariety | None:
        return self._slot(category, fruit_type).get(variety_id)

    # -------------------------------------------------------------------------
    # Load
    # -------------------------------------------------------------------------

    def load_fruits(self) -> None:
        """
        Replace the catalog with the contents of the `fruits` table.

        On failure the error is recorded and the catalog falls back to the
        empty default structure. Never raises.
        """
        self._begin_load()
        try:
            logger.info("Loading fruits from Supabase")
            rows = self._db.select_rows(self.table, order_by="created_at", desc=True)

            fruit_data = default_fruit_data()
            for row in rows:
                self._place_row(fruit_data, row)

            self.fruit_data = fruit_data
            self.loading = False
            logger.info(f"Loaded {len(rows)} varieties")

        except Exception as e:
            self._fail_load(e)
            self.fruit_data = default_fruit_data()

    @staticmethod
    def _place_row(fruit_data: dict[FruitCategory, Fruit], row: dict[str, Any]) -> None:
        """Put one row into the catalog structure, skipping unaddressable rows."""
        try:
            category = FruitCategory(row.get("category"))
        except ValueError:
            logger.warning(f"Skipping variety {row.get('id')}: unknown category {row.get('category')!r}")
            return

        variety = variety_from_row(row)
        varieties = fruit_data[category].varieties

        if isinstance(varieties, FlatVarieties):
            varieties.varieties[row["id"]] = variety
            return

        try:
            fruit_type = FruitType(row.get("type"))
        except ValueError:
            logger.warning(f"Skipping variety {row.get('id')}: {category.value} needs a type, got {row.get('type')!r}")
            return
        varieties.varieties.setdefault(fruit_type, {})[row["id"]] = variety

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_variety(
        self,
        category: FruitCategory | str,
        fruit_type: FruitType | str | None,
        variety: FruitVariety,
    ) -> str:
        """
        Insert a variety and add it to the catalog.

        Returns:
            The id assigned by the database

        Raises:
            InvalidVarietyAddressError: Bad address (checked before any call)
            SupabaseClientError: If the insert fails
        """
        slot = self._slot(category, fruit_type)

        with self._mutation("adding variety", ADD_ERROR):
            row = {
                "category": FruitCategory(category).value,
                "type": self._stored_type(category, fruit_type),
                **variety_columns(_all_fields(variety)),
            }
            inserted = self._db.insert_row(self.table, row)

            variety_id = str(inserted["id"])
            slot[variety_id] = variety
            logger.info(f"Added variety {variety.name} ({variety_id})")
            return variety_id

    def update_variety(
        self,
        category: FruitCategory | str,
        fruit_type: FruitType | str | None,
        variety_id: str,
        changes: VarietyUpdate | FruitVariety,
    ) -> FruitVariety | None:
        """
        Update a variety remotely, then shallow-merge the same fields locally.

        A full FruitVariety counts as a change of every field.

        Returns:
            The variety as now held locally (None if it is not held locally)

        Raises:
            InvalidVarietyAddressError: Bad address (checked before any call)
            SupabaseClientError: If the update fails
        """
        slot = self._slot(category, fruit_type)
        if isinstance(changes, FruitVariety):
            fields = _all_fields(changes)
        else:
            fields = changed_fields(changes)

        with self._mutation("updating variety", UPDATE_ERROR):
            if fields:
                self._db.update_row(self.table, variety_id, variety_columns(fields))

            current = slot.get(variety_id)
            if current is not None:
                slot[variety_id] = merge(current, fields)
            elif isinstance(changes, FruitVariety):
                slot[variety_id] = changes
            else:
                logger.warning(f"Updated variety {variety_id} is not in the local catalog")
            return slot.get(variety_id)

    def delete_variety(
        self,
        category: FruitCategory | str,
        fruit_type: FruitType | str | None,
        variety_id: str,
    ) -> None:
        """
        Delete a variety remotely, then drop it from the catalog.

        Deleting an id the catalog does not hold is a no-op locally.

        Raises:
            InvalidVarietyAddressError: Bad address (checked before any call)
            SupabaseClientError: If the delete fails
        """
        slot = self._slot(category, fruit_type)

        with self._mutation("deleting variety", DELETE_ERROR):
            self._db.delete_row(self.table, variety_id)
            slot.pop(variety_id, None)

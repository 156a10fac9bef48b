# =============================================================================
# core/stores/planifruit_store.py - Planifruit Store
# =============================================================================
# Holds maturity-calendar charts (newest first) and mirrors changes to the
# `planifruits` table. A failed load keeps the charts already held.
# =============================================================================

import logging
from typing import Any

from core.models.base import changed_fields, merge
from core.models.fruit import FruitCategory, FruitType
from core.models.planifruit import Planifruit, PlanifruitCreate, PlanifruitUpdate
from core.stores.base import (
    ADD_ERROR,
    DELETE_ERROR,
    UPDATE_ERROR,
    BaseStore,
)

logger = logging.getLogger(__name__)

PLANIFRUIT_FIELDS = ("category", "type", "image")


def planifruit_from_row(row: dict[str, Any]) -> Planifruit:
    return Planifruit(
        id=str(row["id"]),
        category=row["category"],
        type=row.get("type") or None,
        image=row.get("image") or "",
        created_at=row.get("created_at") or None,
        updated_at=row.get("updated_at") or None,
    )


def planifruit_columns(fields: dict[str, Any]) -> dict[str, Any]:
    row: dict[str, Any] = {}
    for name, value in fields.items():
        if name not in PLANIFRUIT_FIELDS:
            continue
        if isinstance(value, (FruitCategory, FruitType)):
            value = value.value
        row[name] = value
    return row


class PlanifruitStore(BaseStore):
    """In-memory planifruits synchronized with the `planifruits` table."""

    table = "planifruits"

    def __init__(self, db):
        super().__init__(db)
        self.planifruits: list[Planifruit] = []

    def get_planifruit(self, planifruit_id: str) -> Planifruit | None:
        return next((p for p in self.planifruits if p.id == planifruit_id), None)

    def find(
        self,
        category: FruitCategory | str | None = None,
        fruit_type: FruitType | str | None = None,
    ) -> list[Planifruit]:
        """Planifruits matching a category and, optionally, a type."""
        result = self.planifruits
        if category is not None:
            result = [p for p in result if p.category == FruitCategory(category)]
        if fruit_type is not None:
            result = [p for p in result if p.type == FruitType(fruit_type)]
        return result

    def load_planifruits(self) -> None:
        """Replace the planifruits with the table contents. Never raises."""
        self._begin_load()
        try:
            rows = self._db.select_rows(self.table, order_by="created_at", desc=True)
            self.planifruits = [planifruit_from_row(row) for row in rows]
            self.loading = False
            logger.info(f"Loaded {len(self.planifruits)} planifruits")
        except Exception as e:
            self._fail_load(e)

    def add_planifruit(self, planifruit: PlanifruitCreate) -> Planifruit:
        with self._mutation("adding planifruit", ADD_ERROR):
            fields = {name: getattr(planifruit, name) for name in PLANIFRUIT_FIELDS}
            row = self._db.insert_row(self.table, planifruit_columns(fields))

            new_planifruit = planifruit_from_row(row)
            self.planifruits = [new_planifruit, *self.planifruits]
            return new_planifruit

    def update_planifruit(
        self,
        planifruit_id: str,
        changes: PlanifruitUpdate,
    ) -> Planifruit | None:
        fields = changed_fields(changes)

        with self._mutation("updating planifruit", UPDATE_ERROR):
            if fields:
                self._db.update_row(self.table, planifruit_id, planifruit_columns(fields))

            self.planifruits = [
                merge(p, fields) if p.id == planifruit_id else p
                for p in self.planifruits
            ]
            return self.get_planifruit(planifruit_id)

    def delete_planifruit(self, planifruit_id: str) -> None:
        with self._mutation("deleting planifruit", DELETE_ERROR):
            self._db.delete_row(self.table, planifruit_id)
            self.planifruits = [p for p in self.planifruits if p.id != planifruit_id]

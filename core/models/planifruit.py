# =============================================================================
# core/models/planifruit.py - Planifruit Schemas
# =============================================================================
# A planifruit is a maturity-calendar chart (one image) for a category, or
# for a category/type pair when the fruit is split by type.
#
# Nothing prevents two planifruits for the same (category, type).
# =============================================================================

from datetime import datetime
from typing import ClassVar

from pydantic import Field, model_validator

from .base import DomainModel, PartialUpdate
from .fruit import FruitCategory, FruitType, SUB_CATEGORIZED


class PlanifruitTypeError(ValueError):
    """Raised when a Pêches or Nectarines chart has no type."""


def resolve_planifruit_type(
    category: FruitCategory,
    fruit_type: FruitType | None,
) -> FruitType | None:
    """
    Return the type a chart of this category should carry.

    Sub-categorized fruits need one; for any other category it is dropped.

    Raises:
        PlanifruitTypeError: If a sub-categorized category has no type
    """
    if category not in SUB_CATEGORIZED:
        return None
    if fruit_type is None:
        raise PlanifruitTypeError("Veuillez sélectionner un type")
    return fruit_type


class Planifruit(DomainModel):
    id: str
    category: FruitCategory
    type: FruitType | None = None
    image: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PlanifruitCreate(DomainModel):
    """
    Admin form payload for a new planifruit.

    A type is required for Pêches and Nectarines and ignored otherwise.
    """

    category: FruitCategory
    type: FruitType | None = None
    image: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_type(self) -> "PlanifruitCreate":
        self.type = resolve_planifruit_type(self.category, self.type)
        return self


class PlanifruitUpdate(PartialUpdate):
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"type"})

    category: FruitCategory | None = None
    type: FruitType | None = None
    image: str | None = None

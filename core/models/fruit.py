# =============================================================================
# core/models/fruit.py - Fruit Catalog Schemas
# =============================================================================
# These models describe the fruit catalog:
# - FruitCategory / FruitType: the two levels of classification
# - FruitVariety: one cultivar (name, images, technical sheet, video, maturity)
# - FlatVarieties / NestedVarieties: the two addressing shapes of a category
# - Fruit: a category with its variety map
#
# Abricots have no sub-type, so their varieties live in a flat map
# (id -> variety). Pêches and Nectarines are split by flesh type, so their
# varieties live in a nested map (type -> id -> variety). The shape is a
# tagged variant: code checks which variant it holds instead of a flag.
# =============================================================================

from enum import Enum
from typing import Annotated, ClassVar, Literal, Union

from pydantic import Field

from .base import DomainModel, PartialUpdate


class FruitCategory(str, Enum):
    """Top-level fruit classification."""
    ABRICOTS = "abricots"
    PECHES = "peches"
    NECTARINES = "nectarines"


class FruitType(str, Enum):
    """Flesh-colour sub-classification (Pêches and Nectarines only)."""
    JAUNE = "jaune"
    BLANCHE = "blanche"
    SANGUINE = "sanguine"
    PLATE = "plate"


# Categories whose varieties are split by FruitType
SUB_CATEGORIZED = frozenset({FruitCategory.PECHES, FruitCategory.NECTARINES})

CATEGORY_NAMES: dict[FruitCategory, str] = {
    FruitCategory.ABRICOTS: "Abricots",
    FruitCategory.PECHES: "Pêches",
    FruitCategory.NECTARINES: "Nectarines",
}


class MaturityPeriod(DomainModel):
    """
    Harvest window as day/month pairs, with no year.

    A window may wrap over the year end (start in December, end in
    January); nothing special is done about it.
    """
    start_day: int = Field(..., ge=1, le=31)
    start_month: int = Field(..., ge=1, le=12)
    end_day: int = Field(..., ge=1, le=31)
    end_month: int = Field(..., ge=1, le=12)


class VideoSource(DomainModel):
    """Video attached to a variety: an uploaded file or a YouTube link."""
    type: Literal["local", "youtube"] = "local"
    url: str = ""


class FruitVariety(DomainModel):
    """
    A specific cultivar within a category (and type, where applicable).

    The id is not part of the variety: it is the key under which the
    variety is stored in its category map.
    """

    name: str = Field(..., min_length=1, description="Variety name")
    description: str = Field(..., description="Free-text description")
    image: str = Field(..., description="Primary image URL")
    images: list[str] = Field(
        default_factory=list,
        description="Ordered gallery of image URLs"
    )
    technical_sheet: str = Field(
        default="",
        description="Technical sheet (PDF) URL"
    )
    video_source: VideoSource | None = None
    maturity_period: MaturityPeriod | None = None


class VarietyUpdate(PartialUpdate):
    """Partial update of a variety. Unset fields are left as they are."""
    nullable_fields: ClassVar[frozenset[str]] = frozenset({"video_source", "maturity_period"})

    name: str | None = None
    description: str | None = None
    image: str | None = None
    images: list[str] | None = None
    technical_sheet: str | None = None
    video_source: VideoSource | None = None
    maturity_period: MaturityPeriod | None = None


class FlatVarieties(DomainModel):
    """Variety map of a category without sub-types: id -> variety."""
    kind: Literal["flat"] = "flat"
    varieties: dict[str, FruitVariety] = Field(default_factory=dict)


class NestedVarieties(DomainModel):
    """Variety map of a sub-categorized fruit: type -> id -> variety."""
    kind: Literal["nested"] = "nested"
    varieties: dict[FruitType, dict[str, FruitVariety]] = Field(
        default_factory=lambda: {fruit_type: {} for fruit_type in FruitType}
    )


VarietyMap = Annotated[
    Union[FlatVarieties, NestedVarieties],
    Field(discriminator="kind"),
]


class Fruit(DomainModel):
    """A fruit category with its varieties."""
    name: str
    varieties: VarietyMap

    @property
    def has_sub_categories(self) -> bool:
        return isinstance(self.varieties, NestedVarieties)


def default_fruit_data() -> dict[FruitCategory, Fruit]:
    """
    Build the empty catalog structure.

    Returns a fresh structure on every call so callers can mutate it.
    """
    data: dict[FruitCategory, Fruit] = {}
    for category in FruitCategory:
        if category in SUB_CATEGORIZED:
            varieties: FlatVarieties | NestedVarieties = NestedVarieties()
        else:
            varieties = FlatVarieties()
        data[category] = Fruit(name=CATEGORY_NAMES[category], varieties=varieties)
    return data


class VarietyForm(FruitVariety):
    """
    Admin form payload for a new variety.

    Name, description and image must be filled in. `type` is only read for
    sub-categorized fruits.
    """

    type: FruitType | None = None
    description: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)

    def to_variety(self) -> FruitVariety:
        return FruitVariety(**{name: getattr(self, name) for name in FruitVariety.model_fields})

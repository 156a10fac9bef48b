# =============================================================================
# app/routers/fruits.py - Fruit Catalog Endpoints
# =============================================================================
# Public:
#   GET /fruits                                   - category overview
#   GET /fruits/search?q=                         - name/description search
#   GET /fruits/{category}                        - one category (?sort=maturity)
#   GET /fruits/{category}/{type_or_variety}      - type listing or flat variety
#   GET /fruits/{category}/{type}/{variety_id}    - nested variety
#
# Admin (mounted under /admin/dashboard, sign-in required):
#   POST   /varieties/{category}
#   PATCH  /varieties/{category}/{variety_id}?type=
#   DELETE /varieties/{category}/{variety_id}?type=
# =============================================================================

from typing import Any, Literal

from fastapi import APIRouter, Query

from app.dependencies import MediaDep, StoresDep
from app.exceptions import NotFoundError
from core.models import (
    SUB_CATEGORIZED,
    FruitCategory,
    FruitType,
    FruitVariety,
    NestedVarieties,
    VarietyForm,
    VarietyUpdate,
)
from core.services.media_service import (
    DOCUMENT_BUCKET,
    IMAGE_BUCKET,
    MediaService,
    get_youtube_embed_url,
)
from lib.catalog import format_maturity_period, search_varieties, sort_by_maturity


router = APIRouter()
admin_router = APIRouter()


# =============================================================================
# View Helpers
# =============================================================================

def variety_view(
    variety_id: str,
    variety: FruitVariety,
    media: MediaService,
) -> dict[str, Any]:
    """Serialize a variety for display, with repaired media URLs."""
    data = variety.model_dump(by_alias=True)
    data["id"] = variety_id
    data["image"] = media.get_correct_public_url(variety.image, IMAGE_BUCKET)
    data["images"] = [media.get_correct_public_url(url, IMAGE_BUCKET) for url in variety.images]
    data["technicalSheet"] = media.get_correct_public_url(variety.technical_sheet, DOCUMENT_BUCKET)
    data["maturityLabel"] = format_maturity_period(variety.maturity_period)

    if variety.video_source is not None and variety.video_source.type == "youtube":
        data["embedUrl"] = get_youtube_embed_url(variety.video_source.url)

    return data


def _ordered(
    varieties: dict[str, FruitVariety],
    sort: str | None,
) -> list[tuple[str, FruitVariety]]:
    if sort == "maturity":
        return sort_by_maturity(varieties)
    return list(varieties.items())


def _list_view(
    varieties: dict[str, FruitVariety],
    media: MediaService,
    sort: str | None = None,
) -> list[dict[str, Any]]:
    return [variety_view(vid, variety, media) for vid, variety in _ordered(varieties, sort)]


# =============================================================================
# Public Endpoints
# =============================================================================

@router.get("/fruits")
async def list_categories(stores: StoresDep):
    """
    Overview of the three categories.

    Sub-categorized fruits report a count per type.
    """
    overview = []
    for category, fruit in stores.fruits.fruit_data.items():
        entry: dict[str, Any] = {
            "category": category.value,
            "name": fruit.name,
            "hasSubCategories": fruit.has_sub_categories,
        }
        if isinstance(fruit.varieties, NestedVarieties):
            entry["types"] = {
                fruit_type.value: len(varieties)
                for fruit_type, varieties in fruit.varieties.varieties.items()
            }
            entry["count"] = sum(entry["types"].values())
        else:
            entry["count"] = len(fruit.varieties.varieties)
        overview.append(entry)

    return {"categories": overview}


@router.get("/fruits/search")
async def search(stores: StoresDep, q: str = Query(default="")):
    """
    Case-insensitive search over variety names and descriptions.

    A blank query returns no results.
    """
    results = search_varieties(stores.fruits.fruit_data, q)
    return {"query": q, "results": results, "total": len(results)}


@router.get("/fruits/{category}")
async def get_category(
    category: FruitCategory,
    stores: StoresDep,
    media: MediaDep,
    sort: Literal["maturity"] | None = Query(default=None),
):
    """
    One category with its varieties.

    Flat categories list their varieties directly; sub-categorized ones
    group them by type.
    """
    fruit = stores.fruits.fruit_data[category]
    body: dict[str, Any] = {
        "category": category.value,
        "name": fruit.name,
        "hasSubCategories": fruit.has_sub_categories,
    }

    if isinstance(fruit.varieties, NestedVarieties):
        body["types"] = {
            fruit_type.value: _list_view(varieties, media, sort)
            for fruit_type, varieties in fruit.varieties.varieties.items()
        }
    else:
        body["varieties"] = _list_view(fruit.varieties.varieties, media, sort)

    return body


@router.get("/fruits/{category}/{type_or_variety}")
async def get_type_or_variety(
    category: FruitCategory,
    type_or_variety: str,
    stores: StoresDep,
    media: MediaDep,
    sort: Literal["maturity"] | None = Query(default=None),
):
    """
    For Pêches and Nectarines, the varieties of one type.
    For Abricots, one variety by id.
    """
    if category in SUB_CATEGORIZED:
        try:
            fruit_type = FruitType(type_or_variety)
        except ValueError:
            raise NotFoundError("Fruit type", type_or_variety)

        varieties = stores.fruits.varieties_for(category, fruit_type)
        return {
            "category": category.value,
            "type": fruit_type.value,
            "varieties": _list_view(varieties, media, sort),
        }

    variety = stores.fruits.get_variety(category, None, type_or_variety)
    if variety is None:
        raise NotFoundError("Variety", type_or_variety)
    return variety_view(type_or_variety, variety, media)


@router.get("/fruits/{category}/{fruit_type}/{variety_id}")
async def get_nested_variety(
    category: FruitCategory,
    fruit_type: FruitType,
    variety_id: str,
    stores: StoresDep,
    media: MediaDep,
):
    """One variety of a sub-categorized fruit."""
    if category not in SUB_CATEGORIZED:
        raise NotFoundError("Variety", variety_id)

    variety = stores.fruits.get_variety(category, fruit_type, variety_id)
    if variety is None:
        raise NotFoundError("Variety", variety_id)
    return variety_view(variety_id, variety, media)


# =============================================================================
# Admin Endpoints
# =============================================================================

@admin_router.post("/varieties/{category}", status_code=201)
def create_variety(category: FruitCategory, form: VarietyForm, stores: StoresDep):
    """
    Add a variety.

    Pêches and Nectarines require `type`; Abricots ignore it.
    """
    variety = form.to_variety()
    variety_id = stores.fruits.add_variety(category, form.type, variety)
    return {"id": variety_id, "variety": variety}


@admin_router.patch("/varieties/{category}/{variety_id}")
def update_variety(
    category: FruitCategory,
    variety_id: str,
    changes: VarietyUpdate,
    stores: StoresDep,
    fruit_type: FruitType | None = Query(default=None, alias="type"),
):
    """Update the fields present in the body. Returns 404 for unknown ids."""
    if stores.fruits.get_variety(category, fruit_type, variety_id) is None:
        raise NotFoundError("Variety", variety_id)

    variety = stores.fruits.update_variety(category, fruit_type, variety_id, changes)
    return {"id": variety_id, "variety": variety}


@admin_router.delete("/varieties/{category}/{variety_id}", status_code=204)
def delete_variety(
    category: FruitCategory,
    variety_id: str,
    stores: StoresDep,
    fruit_type: FruitType | None = Query(default=None, alias="type"),
):
    """Delete a variety. Deleting an unknown id is not an error."""
    stores.fruits.delete_variety(category, fruit_type, variety_id)

# =============================================================================
# app/routers/planifruits.py - Planifruit Endpoints
# =============================================================================
# Public:
#   GET /planifruits                         - every chart
#   GET /planifruits/{category}              - charts of one category
#   GET /planifruits/{category}/{type}       - charts of one category/type
#
# Admin (mounted under /admin/dashboard, sign-in required):
#   POST   /planifruits
#   PATCH  /planifruits/{planifruit_id}
#   DELETE /planifruits/{planifruit_id}
# =============================================================================

from fastapi import APIRouter

from app.dependencies import MediaDep, StoresDep
from app.exceptions import FormValidationError, NotFoundError
from core.models import (
    FruitCategory,
    FruitType,
    Planifruit,
    PlanifruitCreate,
    PlanifruitTypeError,
    PlanifruitUpdate,
    changed_fields,
    merge,
    resolve_planifruit_type,
)
from core.services.media_service import IMAGE_BUCKET, MediaService

router = APIRouter()
admin_router = APIRouter()


def _with_public_urls(planifruits: list[Planifruit], media: MediaService) -> list[Planifruit]:
    return [
        p.model_copy(update={"image": media.get_correct_public_url(p.image, IMAGE_BUCKET)})
        for p in planifruits
    ]


# =============================================================================
# Public Endpoints
# =============================================================================

@router.get("/planifruits")
async def list_planifruits(stores: StoresDep, media: MediaDep):
    planifruits = _with_public_urls(stores.planifruits.planifruits, media)
    return {"planifruits": planifruits, "total": len(planifruits)}


@router.get("/planifruits/{category}")
async def list_category_planifruits(category: FruitCategory, stores: StoresDep, media: MediaDep):
    planifruits = _with_public_urls(stores.planifruits.find(category), media)
    return {"planifruits": planifruits, "total": len(planifruits)}


@router.get("/planifruits/{category}/{fruit_type}")
async def list_type_planifruits(
    category: FruitCategory,
    fruit_type: FruitType,
    stores: StoresDep,
    media: MediaDep,
):
    planifruits = _with_public_urls(stores.planifruits.find(category, fruit_type), media)
    return {"planifruits": planifruits, "total": len(planifruits)}


# =============================================================================
# Admin Endpoints
# =============================================================================

@admin_router.post("/planifruits", response_model=Planifruit, status_code=201)
def create_planifruit(planifruit: PlanifruitCreate, stores: StoresDep):
    """
    Add a chart.

    Pêches and Nectarines need a type ("Veuillez sélectionner un type").
    """
    return stores.planifruits.add_planifruit(planifruit)


@admin_router.patch("/planifruits/{planifruit_id}", response_model=Planifruit)
def update_planifruit(planifruit_id: str, changes: PlanifruitUpdate, stores: StoresDep):
    """
    Update a chart.

    The type rule is checked against the chart as it would end up: moving
    to Pêches or Nectarines needs a type, moving to Abricots clears it.
    """
    current = stores.planifruits.get_planifruit(planifruit_id)
    if current is None:
        raise NotFoundError("Planifruit", planifruit_id)

    fields = changed_fields(changes)
    updated = merge(current, fields)
    try:
        fruit_type = resolve_planifruit_type(updated.category, updated.type)
    except PlanifruitTypeError as e:
        raise FormValidationError(str(e), {"category": updated.category.value})

    if fruit_type != updated.type:
        changes = PlanifruitUpdate(**{**fields, "type": fruit_type})
    return stores.planifruits.update_planifruit(planifruit_id, changes)


@admin_router.delete("/planifruits/{planifruit_id}", status_code=204)
def delete_planifruit(planifruit_id: str, stores: StoresDep):
    stores.planifruits.delete_planifruit(planifruit_id)

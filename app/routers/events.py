# =============================================================================
# app/routers/events.py - Event Endpoints
# =============================================================================
# Public:
#   GET /evenements                  - published events, by start date
#   GET /calendar                    - every event as calendar entries (admin)
#
# Admin (mounted under /admin/dashboard, sign-in required):
#   GET    /events
#   POST   /events
#   PATCH  /events/{event_id}
#   DELETE /events/{event_id}
#   POST   /events/{event_id}/toggle-published
#
# The end-not-before-start rule is checked here on every create and update,
# before the store is called.
# =============================================================================

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query

from app.auth import require_admin
from app.dependencies import MediaDep, StoresDep
from app.exceptions import FormValidationError, NotFoundError
from core.models import DateRangeError, Event, EventCreate, EventUpdate, validate_date_range
from core.services.media_service import IMAGE_BUCKET, MediaService
from lib.catalog import format_date

router = APIRouter()
admin_router = APIRouter()


def event_view(event: Event, media: MediaService) -> dict[str, Any]:
    data = event.model_dump(by_alias=True, mode="json")
    data["image"] = media.get_correct_public_url(event.image, IMAGE_BUCKET)
    data["startLabel"] = format_date(event.start_date)
    data["endLabel"] = format_date(event.end_date)
    return data


def _overlaps_month(event: Event, month: str) -> bool:
    """True if the event touches the given YYYY-MM month."""
    return event.start_date.isoformat()[:7] <= month <= event.end_date.isoformat()[:7]


# =============================================================================
# Public Endpoints
# =============================================================================

@router.get("/evenements")
async def list_published_events(stores: StoresDep, media: MediaDep):
    """Published events only."""
    events = [event_view(e, media) for e in stores.events.published_events()]
    return {"events": events, "total": len(events)}


@router.get("/calendar", dependencies=[Depends(require_admin)])
async def calendar(
    stores: StoresDep,
    month: str | None = Query(default=None, pattern=r"^\d{4}-\d{2}$"),
):
    """
    Calendar entries for every event, published or not.

    Pass `month=YYYY-MM` to keep only the events overlapping that month.
    """
    events = stores.events.events
    if month is not None:
        events = [e for e in events if _overlaps_month(e, month)]

    entries = [
        {
            "id": e.id,
            "title": e.title,
            "start": e.start_date.isoformat(),
            "end": e.end_date.isoformat(),
            "location": e.location,
            "published": e.published,
        }
        for e in sorted(events, key=lambda e: e.start_date)
    ]
    return {"entries": entries, "total": len(entries)}


# =============================================================================
# Admin Endpoints
# =============================================================================

@admin_router.get("/events")
async def list_events(stores: StoresDep):
    return {"events": stores.events.events, "total": len(stores.events.events)}


@admin_router.post("/events", response_model=Event, status_code=201)
def create_event(event: EventCreate, stores: StoresDep):
    """Create an event. Reversed date ranges are rejected with 422."""
    return stores.events.add_event(event)


@admin_router.patch("/events/{event_id}", response_model=Event)
def update_event(event_id: str, changes: EventUpdate, stores: StoresDep):
    """
    Update an event.

    The date rule is checked against the dates the event would end up
    with, so changing only one side is still validated.
    """
    current = stores.events.get_event(event_id)
    if current is None:
        raise NotFoundError("Event", event_id)

    start_date: date = changes.start_date or current.start_date
    end_date: date = changes.end_date or current.end_date
    try:
        validate_date_range(start_date, end_date)
    except DateRangeError as e:
        raise FormValidationError(str(e), {"start_date": str(start_date), "end_date": str(end_date)})

    return stores.events.update_event(event_id, changes)


@admin_router.delete("/events/{event_id}", status_code=204)
def delete_event(event_id: str, stores: StoresDep):
    stores.events.delete_event(event_id)


@admin_router.post("/events/{event_id}/toggle-published", response_model=Event)
def toggle_event(event_id: str, stores: StoresDep):
    event = stores.events.toggle_published(event_id)
    if event is None:
        raise NotFoundError("Event", event_id)
    return event

# =============================================================================
# core/stores/event_store.py - Event Store
# =============================================================================
# Holds events ordered by start date and mirrors changes to the `events`
# table. A failed load keeps whatever events were already held.
#
# The store does not check that an event ends after it starts; that is the
# form's job (see core.models.event.validate_date_range).
# =============================================================================

import logging
from datetime import date
from typing import Any

from core.models.base import changed_fields, merge
from core.models.event import Event, EventCreate, EventUpdate
from core.stores.base import (
    ADD_ERROR,
    DELETE_ERROR,
    UPDATE_ERROR,
    BaseStore,
)

logger = logging.getLogger(__name__)

EVENT_FIELDS = ("title", "description", "start_date", "end_date", "image", "location", "published")


def _as_date(value: Any) -> date:
    # Columns may come back as dates or as full timestamps
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def event_from_row(row: dict[str, Any]) -> Event:
    return Event(
        id=str(row["id"]),
        title=row["title"],
        description=row.get("description") or "",
        start_date=_as_date(row["start_date"]),
        end_date=_as_date(row["end_date"]),
        image=row.get("image") or "",
        location=row.get("location") or "",
        published=bool(row.get("published")),
    )


def event_columns(fields: dict[str, Any]) -> dict[str, Any]:
    """Translate event fields to `events` columns."""
    row: dict[str, Any] = {}
    for name, value in fields.items():
        if name not in EVENT_FIELDS:
            continue
        if isinstance(value, date):
            value = value.isoformat()
        row[name] = value
    return row


class EventStore(BaseStore):
    """In-memory events synchronized with the `events` table."""

    table = "events"

    def __init__(self, db):
        super().__init__(db)
        self.events: list[Event] = []

    def get_event(self, event_id: str) -> Event | None:
        return next((e for e in self.events if e.id == event_id), None)

    def published_events(self) -> list[Event]:
        return [e for e in self.events if e.published]

    def load_events(self) -> None:
        """Replace the events with the table contents. Never raises."""
        self._begin_load()
        try:
            rows = self._db.select_rows(self.table, order_by="start_date", desc=False)
            self.events = [event_from_row(row) for row in rows]
            self.loading = False
            logger.info(f"Loaded {len(self.events)} events")
        except Exception as e:
            self._fail_load(e)

    def add_event(self, event: EventCreate) -> Event:
        """
        Insert an event and append it to the list.

        Returns:
            The stored event, with the id assigned by the database
        """
        with self._mutation("adding event", ADD_ERROR):
            fields = {name: getattr(event, name) for name in EVENT_FIELDS}
            row = self._db.insert_row(self.table, event_columns(fields))

            new_event = event_from_row(row)
            self.events = [*self.events, new_event]
            return new_event

    def update_event(self, event_id: str, changes: EventUpdate) -> Event | None:
        """Update an event remotely, then shallow-merge the same fields locally."""
        fields = changed_fields(changes)

        with self._mutation("updating event", UPDATE_ERROR):
            if fields:
                self._db.update_row(self.table, event_id, event_columns(fields))

            self.events = [
                merge(e, fields) if e.id == event_id else e
                for e in self.events
            ]
            return self.get_event(event_id)

    def delete_event(self, event_id: str) -> None:
        with self._mutation("deleting event", DELETE_ERROR):
            self._db.delete_row(self.table, event_id)
            self.events = [e for e in self.events if e.id != event_id]

    def toggle_published(self, event_id: str) -> Event | None:
        """Flip an event's published flag. Unknown ids are ignored."""
        event = self.get_event(event_id)
        if event is None:
            return None

        with self._mutation("toggling event", UPDATE_ERROR):
            published = not event.published
            self._db.update_row(self.table, event_id, {"published": published})

            self.events = [
                merge(e, {"published": published}) if e.id == event_id else e
                for e in self.events
            ]
            return self.get_event(event_id)

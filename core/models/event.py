# =============================================================================
# core/models/event.py - Event Schemas
# =============================================================================
# - Event: an event as held by the event store
# - EventCreate: admin form payload, checked at submit time
# - EventUpdate: partial update
# - validate_date_range(): the end-not-before-start rule
#
# The date rule is a form rule. The store and the database do not enforce
# it; a form that skips validate_date_range() can still write a reversed
# range.
# =============================================================================

from datetime import date

from pydantic import Field, model_validator

from .base import DomainModel, PartialUpdate


class DateRangeError(ValueError):
    """Raised when an event ends before it starts."""


def validate_date_range(start_date: date, end_date: date) -> None:
    """
    Check that an event does not end before it starts.

    A one-day event (same start and end) is valid.

    Raises:
        DateRangeError: If end_date precedes start_date
    """
    if end_date < start_date:
        raise DateRangeError("La date de fin doit être postérieure à la date de début")


class Event(DomainModel):
    """An event shown on the events page and the calendar."""

    id: str
    title: str
    description: str = ""
    start_date: date
    end_date: date
    image: str = ""
    location: str
    published: bool = False


class EventCreate(DomainModel):
    """
    Admin form payload for a new event.

    Title, dates and location are required. Submitting an end date before
    the start date is rejected here, before anything reaches the store.
    """

    title: str = Field(..., min_length=1)
    description: str = ""
    start_date: date
    end_date: date
    image: str = ""
    location: str = Field(..., min_length=1)
    published: bool = False

    @model_validator(mode="after")
    def check_dates(self) -> "EventCreate":
        validate_date_range(self.start_date, self.end_date)
        return self


class EventUpdate(PartialUpdate):
    """Partial update of an event."""
    title: str | None = None
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    image: str | None = None
    location: str | None = None
    published: bool | None = None

# =============================================================================
# core/stores/base.py - Shared Store Behaviour
# =============================================================================
# Every domain store owns one slice of catalog data in memory and keeps it
# in step with one Supabase table. The rules they share live here:
#
# - `loading` is set before a remote call and cleared on every exit path
# - `error` holds the message of the last failure (None after a success)
# - a failed mutation records the error and re-raises it to the caller
# - local state is only changed AFTER the remote call succeeded, so a
#   failure never needs a rollback
#
# There is no retry and no offline queue: a failed write is lost unless the
# user submits again.
# =============================================================================

import logging
from contextlib import contextmanager
from typing import Iterator

from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Fallback messages shown when an exception carries no text of its own
LOAD_ERROR = "Erreur de chargement"
ADD_ERROR = "Erreur d'ajout"
UPDATE_ERROR = "Erreur de mise à jour"
DELETE_ERROR = "Erreur de suppression"


def error_message(exc: Exception, fallback: str) -> str:
    """Extract a user-facing message from an exception."""
    message = getattr(exc, "message", None) or str(exc)
    return message or fallback


class BaseStore:
    """
    Common state and bookkeeping for the domain stores.

    Subclasses set `table` and implement their own load and mutation
    methods, wrapping each remote call in `_mutation()`.
    """

    table: str = ""

    def __init__(self, db: SupabaseClient):
        self._db = db
        self.loading = False
        self.error: str | None = None

    @contextmanager
    def _mutation(self, action: str, fallback: str) -> Iterator[None]:
        """
        Run one mutation with loading/error bookkeeping.

        Args:
            action: Short description used in log lines ("adding article")
            fallback: Message recorded when the exception has none

        Raises:
            Exception: Whatever the wrapped block raised, unchanged
        """
        self.loading = True
        self.error = None
        try:
            yield
        except Exception as e:
            self.error = error_message(e, fallback)
            logger.error(f"Error {action} ({self.table}): {e}")
            raise
        finally:
            self.loading = False

    def _begin_load(self) -> None:
        self.loading = True
        self.error = None

    def _fail_load(self, exc: Exception) -> None:
        self.error = error_message(exc, LOAD_ERROR)
        self.loading = False
        logger.error(f"Error loading {self.table}: {exc}")

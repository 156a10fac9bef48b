# =============================================================================
# core/stores/ - Domain Stores
# =============================================================================
# Client-side state containers, one per catalog table:
# - fruit_store.py: varieties by category (flat or nested by type)
# - news_store.py: news articles
# - event_store.py: events
# - planifruit_store.py: maturity-calendar charts
# - appearance_store.py: the site appearance singleton
#
# Stores are plain objects built once around a SupabaseClient (see
# build_stores) and passed to whoever needs them. There are no module-level
# store instances.
# =============================================================================

import asyncio
import logging
from dataclasses import dataclass

from lib.supabase_client import SupabaseClient

from .appearance_store import AppearanceStore
from .base import BaseStore
from .event_store import EventStore
from .fruit_store import FruitStore
from .news_store import NewsStore
from .planifruit_store import PlanifruitStore

logger = logging.getLogger(__name__)

# Every table a store synchronizes with
TABLES = tuple(
    store.table
    for store in (FruitStore, NewsStore, EventStore, PlanifruitStore, AppearanceStore)
)


@dataclass
class Stores:
    """The five domain stores of one application instance."""

    fruits: FruitStore
    news: NewsStore
    events: EventStore
    planifruits: PlanifruitStore
    appearance: AppearanceStore

    async def load_all(self) -> None:
        """
        Load every store concurrently and wait until all have settled.

        Loads record their own failures, so this returns normally even when
        some (or all) of them failed; check each store's `error`.
        """
        loaders = [
            self.fruits.load_fruits,
            self.news.load_articles,
            self.events.load_events,
            self.planifruits.load_planifruits,
            self.appearance.load_appearance,
        ]

        logger.info("Loading initial data")
        results = await asyncio.gather(
            *(asyncio.to_thread(loader) for loader in loaders),
            return_exceptions=True,
        )

        for loader, result in zip(loaders, results):
            if isinstance(result, Exception):
                logger.error(f"{loader.__qualname__} raised: {result}")

        failed = [name for name, store in self.as_dict().items() if store.error]
        if failed:
            logger.warning(f"Initial data loaded with errors in: {', '.join(failed)}")
        else:
            logger.info("All data loaded successfully")

    def as_dict(self) -> dict[str, BaseStore]:
        return {
            "fruits": self.fruits,
            "news": self.news,
            "events": self.events,
            "planifruits": self.planifruits,
            "appearance": self.appearance,
        }


def build_stores(db: SupabaseClient) -> Stores:
    """Build one instance of every store around the same client."""
    return Stores(
        fruits=FruitStore(db),
        news=NewsStore(db),
        events=EventStore(db),
        planifruits=PlanifruitStore(db),
        appearance=AppearanceStore(db),
    )


__all__ = [
    "AppearanceStore",
    "BaseStore",
    "EventStore",
    "FruitStore",
    "NewsStore",
    "PlanifruitStore",
    "Stores",
    "TABLES",
    "build_stores",
]

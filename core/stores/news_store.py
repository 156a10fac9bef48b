# =============================================================================
# core/stores/news_store.py - News Store
# =============================================================================
# Holds news articles (newest first) and mirrors changes to the `news`
# table. A failed load keeps whatever articles were already held.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from core.models.base import changed_fields, merge
from core.models.news import NewsArticle, NewsArticleCreate, NewsArticleUpdate
from core.stores.base import (
    ADD_ERROR,
    DELETE_ERROR,
    UPDATE_ERROR,
    BaseStore,
)

logger = logging.getLogger(__name__)

# Article fields that are stored under the same column name
NEWS_COLUMNS = ("title", "content", "image", "published")


def article_from_row(row: dict[str, Any]) -> NewsArticle:
    return NewsArticle(
        id=str(row["id"]),
        title=row["title"],
        content=row.get("content") or "",
        image=row.get("image") or "",
        published=bool(row.get("published")),
        date=row.get("created_at") or datetime.now(timezone.utc),
    )


def news_columns(fields: dict[str, Any]) -> dict[str, Any]:
    """Translate article fields to `news` columns (id and date are not writable)."""
    return {name: value for name, value in fields.items() if name in NEWS_COLUMNS}


class NewsStore(BaseStore):
    """In-memory news articles synchronized with the `news` table."""

    table = "news"

    def __init__(self, db):
        super().__init__(db)
        self.articles: list[NewsArticle] = []

    def get_article(self, article_id: str) -> NewsArticle | None:
        return next((a for a in self.articles if a.id == article_id), None)

    def published_articles(self) -> list[NewsArticle]:
        return [a for a in self.articles if a.published]

    def load_articles(self) -> None:
        """Replace the articles with the table contents. Never raises."""
        self._begin_load()
        try:
            rows = self._db.select_rows(self.table, order_by="created_at", desc=True)
            self.articles = [article_from_row(row) for row in rows]
            self.loading = False
            logger.info(f"Loaded {len(self.articles)} news articles")
        except Exception as e:
            self._fail_load(e)

    def add_article(self, article: NewsArticleCreate) -> NewsArticle:
        """
        Insert an article and put it at the top of the list.

        Returns:
            The stored article, with the id and date assigned by the database
        """
        with self._mutation("adding article", ADD_ERROR):
            fields = {name: getattr(article, name) for name in NEWS_COLUMNS}
            row = self._db.insert_row(self.table, news_columns(fields))

            new_article = article_from_row(row)
            self.articles = [new_article, *self.articles]
            return new_article

    def update_article(self, article_id: str, changes: NewsArticleUpdate) -> NewsArticle | None:
        """Update an article remotely, then shallow-merge the same fields locally."""
        fields = changed_fields(changes)

        with self._mutation("updating article", UPDATE_ERROR):
            if fields:
                self._db.update_row(self.table, article_id, news_columns(fields))

            self.articles = [
                merge(a, fields) if a.id == article_id else a
                for a in self.articles
            ]
            return self.get_article(article_id)

    def delete_article(self, article_id: str) -> None:
        with self._mutation("deleting article", DELETE_ERROR):
            self._db.delete_row(self.table, article_id)
            self.articles = [a for a in self.articles if a.id != article_id]

    def toggle_published(self, article_id: str) -> NewsArticle | None:
        """
        Flip an article's published flag.

        Unknown ids are ignored: nothing is sent and None is returned.
        """
        article = self.get_article(article_id)
        if article is None:
            return None

        with self._mutation("toggling article", UPDATE_ERROR):
            published = not article.published
            self._db.update_row(self.table, article_id, {"published": published})

            self.articles = [
                merge(a, {"published": published}) if a.id == article_id else a
                for a in self.articles
            ]
            return self.get_article(article_id)

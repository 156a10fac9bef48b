# =============================================================================
# app/routers/news.py - News Endpoints
# =============================================================================
# Public:
#   GET /actualites                  - published articles, newest first
#
# Admin (mounted under /admin/dashboard, sign-in required):
#   GET    /news                     - every article, published or not
#   POST   /news
#   PATCH  /news/{article_id}
#   DELETE /news/{article_id}
#   POST   /news/{article_id}/toggle-published
# =============================================================================

from typing import Any

from fastapi import APIRouter

from app.dependencies import MediaDep, StoresDep
from app.exceptions import NotFoundError
from core.models import NewsArticle, NewsArticleCreate, NewsArticleUpdate
from core.services.media_service import IMAGE_BUCKET, MediaService
from lib.catalog import format_date

router = APIRouter()
admin_router = APIRouter()


def article_view(article: NewsArticle, media: MediaService) -> dict[str, Any]:
    """Public rendering: paragraphs split out and a French date label."""
    data = article.model_dump(by_alias=True, mode="json")
    data["image"] = media.get_correct_public_url(article.image, IMAGE_BUCKET)
    data["paragraphs"] = article.paragraphs
    data["dateLabel"] = format_date(article.date)
    return data


# =============================================================================
# Public Endpoints
# =============================================================================

@router.get("/actualites")
async def list_published_news(stores: StoresDep, media: MediaDep):
    """Published articles only. Drafts never appear here."""
    articles = [article_view(a, media) for a in stores.news.published_articles()]
    return {"articles": articles, "total": len(articles)}


# =============================================================================
# Admin Endpoints
# =============================================================================

@admin_router.get("/news")
async def list_news(stores: StoresDep):
    return {"articles": stores.news.articles, "total": len(stores.news.articles)}


@admin_router.post("/news", response_model=NewsArticle, status_code=201)
def create_article(article: NewsArticleCreate, stores: StoresDep):
    """Create an article. It is added at the top of the list."""
    return stores.news.add_article(article)


@admin_router.patch("/news/{article_id}", response_model=NewsArticle)
def update_article(article_id: str, changes: NewsArticleUpdate, stores: StoresDep):
    if stores.news.get_article(article_id) is None:
        raise NotFoundError("Article", article_id)
    return stores.news.update_article(article_id, changes)


@admin_router.delete("/news/{article_id}", status_code=204)
def delete_article(article_id: str, stores: StoresDep):
    stores.news.delete_article(article_id)


@admin_router.post("/news/{article_id}/toggle-published", response_model=NewsArticle)
def toggle_article(article_id: str, stores: StoresDep):
    """
    Flip the published flag.

    Unknown ids return 404 without touching the database.
    """
    article = stores.news.toggle_published(article_id)
    if article is None:
        raise NotFoundError("Article", article_id)
    return article

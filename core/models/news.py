# =============================================================================
# core/models/news.py - News Article Schemas
# =============================================================================
# - NewsArticle: an article as held by the news store
# - NewsArticleCreate: what the admin form submits for a new article
# - NewsArticleUpdate: partial update (only set fields are applied)
#
# Only published articles are shown on the public news page.
# =============================================================================

from datetime import datetime

from pydantic import Field

from .base import DomainModel, PartialUpdate


class NewsArticle(DomainModel):
    """A news article. `date` is the creation timestamp."""

    id: str
    title: str
    content: str = Field(..., description="Newline-delimited paragraphs")
    image: str
    published: bool = False
    date: datetime

    @property
    def paragraphs(self) -> list[str]:
        """Non-empty paragraphs of the content, in order."""
        return [line.strip() for line in self.content.split("\n") if line.strip()]


class NewsArticleCreate(DomainModel):
    """
    Admin form payload for a new article.

    Title, content and image are required; the article starts unpublished
    unless the form says otherwise.
    """

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    published: bool = False


class NewsArticleUpdate(PartialUpdate):
    """Partial update of an article."""
    title: str | None = None
    content: str | None = None
    image: str | None = None
    published: bool | None = None

"""Core data models used throughout the folio article engine."""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ArticleMetadata(BaseModel):
    """Typed frontmatter of a single article."""

    model_config = {"frozen": True}

    title: str = Field(min_length=1)
    date: datetime.date
    tags: list[str] = Field(default_factory=list)
    summary: str = ""
    author: str = Field(min_length=1)
    slug: str = Field(min_length=1)


class ArticleListItem(BaseModel):
    """An article without its markdown body, used for listings."""

    model_config = {"frozen": True}

    metadata: ArticleMetadata
    excerpt: str
    reading_time: int = Field(ge=1)
    source_id: str
    public_path: str

    @property
    def slug(self) -> str:
        return self.metadata.slug


class Article(ArticleListItem):
    """A fully loaded article, owned by the article index."""

    content: str

    def to_list_item(self) -> ArticleListItem:
        return ArticleListItem(
            metadata=self.metadata,
            excerpt=self.excerpt,
            reading_time=self.reading_time,
            source_id=self.source_id,
            public_path=self.public_path,
        )


class SearchParams(BaseModel):
    """Filters, ordering and page requested by a listing."""

    query: str | None = None
    tag: str | None = None
    sort_by: Literal["date", "title"] = "date"
    sort_order: Literal["asc", "desc"] = "desc"
    page: int = Field(default=1, ge=1)


class SearchResult(BaseModel):
    """One page of listing items plus pagination state."""

    articles: list[ArticleListItem] = Field(default_factory=list)
    total_count: int = 0
    current_page: int = 1
    total_pages: int = 0
    has_next_page: bool = False
    has_previous_page: bool = False


class TagCount(BaseModel):
    """A tag and the number of articles carrying it."""

    tag: str
    count: int


class NavigationLink(BaseModel):
    """Title and slug of a neighbouring article."""

    title: str
    slug: str


class ArticleNavigation(BaseModel):
    """Neighbours of an article in the canonical newest-first order."""

    previous: NavigationLink | None = None
    next: NavigationLink | None = None


class BlogConfig(BaseModel):
    """Display options shared by listings and article pages."""

    articles_per_page: int = Field(default=10, ge=1)
    excerpt_length: int = Field(default=200, ge=1)
    date_format: str = "%B %d, %Y"


class BlogSettings(BaseModel):
    """Configuration bundled with popular tags and recent articles."""

    config: BlogConfig
    all_tags: list[TagCount] = Field(default_factory=list)
    recent_articles: list[ArticleListItem] = Field(default_factory=list)

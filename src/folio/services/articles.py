"""Public article API consumed by the CLI and the web application."""

from __future__ import annotations

import datetime
from collections.abc import Sequence

import structlog

from folio.models import (
    Article,
    ArticleListItem,
    ArticleNavigation,
    BlogConfig,
    BlogSettings,
    SearchParams,
    SearchResult,
    TagCount,
)
from folio.settings import Settings
from .index import ArticleIndex, LoadReport
from .loader import ContentLoader
from .query import all_tags, navigation_for, recent_articles, search_articles
from .sources import DocumentSource

logger = structlog.get_logger(__name__)


class ArticlesService:
    """Facade over one article index.

    Construct a single instance at application start, call
    :meth:`initialize`, and pass it to whatever needs articles.
    """

    def __init__(self, index: ArticleIndex, config: BlogConfig | None = None) -> None:
        self._index = index
        self._config = config or BlogConfig()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        source: DocumentSource,
        document_ids: Sequence[str] | None = None,
    ) -> "ArticlesService":
        loader = ContentLoader(
            source,
            settings.resolved_document_ids() if document_ids is None else document_ids,
            excerpt_length=settings.excerpt_length,
            article_path_prefix=settings.article_path_prefix,
            slug_collision=settings.slug_collision,
            concurrency=settings.fetch_concurrency,
        )
        return cls(ArticleIndex(loader), settings.blog_config)

    @property
    def config(self) -> BlogConfig:
        return self._config

    @property
    def index(self) -> ArticleIndex:
        return self._index

    async def initialize(self) -> LoadReport:
        report = await self._index.load()
        if not report.ok:
            logger.warning("articles.initialize_failed", error=report.error)
        return report

    async def reload_articles(self) -> LoadReport:
        logger.info("articles.reload")
        return await self._index.invalidate_and_reload()

    async def get_articles(self) -> list[Article]:
        return list(await self._index.get_all())

    async def get_articles_list(self) -> list[ArticleListItem]:
        return [article.to_list_item() for article in await self._index.get_all()]

    async def get_article_by_slug(self, slug: str) -> Article | None:
        return await self._index.find_by_slug(slug)

    async def search_articles(self, params: SearchParams | None = None) -> SearchResult:
        articles = await self._index.get_all()
        return search_articles(
            articles,
            params or SearchParams(),
            page_size=self._config.articles_per_page,
        )

    async def get_all_tags(self) -> list[TagCount]:
        return all_tags(await self._index.get_all())

    async def get_article_navigation(self, slug: str) -> ArticleNavigation:
        return navigation_for(await self._index.get_all(), slug)

    async def get_recent_articles(self, limit: int = 5) -> list[ArticleListItem]:
        return recent_articles(await self._index.get_all(), limit)

    async def get_blog_settings(self) -> BlogSettings:
        articles = await self._index.get_all()
        return BlogSettings(
            config=self._config,
            all_tags=all_tags(articles),
            recent_articles=recent_articles(articles),
        )

    def format_date(self, value: datetime.date | str) -> str:
        if isinstance(value, str):
            value = datetime.date.fromisoformat(value)
        return value.strftime(self._config.date_format)

"""In-memory article index with a single-flight loading guard."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

import structlog

from folio.models import Article
from .loader import ContentLoader, SkippedDocument
from .sources import DocumentSourceError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class IndexGeneration:
    """One complete, immutable snapshot of the index."""

    number: int
    articles: tuple[Article, ...] = ()
    by_slug: Mapping[str, Article] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(cls, number: int, articles: list[Article]) -> "IndexGeneration":
        return cls(
            number=number,
            articles=tuple(articles),
            by_slug=MappingProxyType({article.metadata.slug: article for article in articles}),
        )


@dataclass(slots=True)
class LoadReport:
    loaded: int = 0
    skipped: list[SkippedDocument] = field(default_factory=list)
    error: str | None = None
    generation: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class ArticleIndex:
    """Owns the loaded articles and replaces them one whole generation at a time.

    Concurrent callers share a single in-flight load. Readers always see a
    complete generation: either the one before a reload or the one after it.
    """

    def __init__(self, loader: ContentLoader) -> None:
        self._loader = loader
        self._generation = IndexGeneration(number=0)
        self._loaded = False
        self._pending: asyncio.Future[LoadReport] | None = None
        self._last_report: LoadReport | None = None

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def last_report(self) -> LoadReport | None:
        return self._last_report

    def snapshot(self) -> IndexGeneration:
        """The current generation, without triggering a load."""
        return self._generation

    async def load(self) -> LoadReport:
        """Start a load, or join the one already running."""
        if self._pending is None:
            pending = asyncio.ensure_future(self._run_load())
            pending.add_done_callback(self._clear_pending)
            self._pending = pending
        # Shielded so a cancelled waiter does not cancel the shared load.
        return await asyncio.shield(self._pending)

    async def ensure_loaded(self) -> IndexGeneration:
        if not self._loaded:
            await self.load()
        return self._generation

    async def get_all(self) -> tuple[Article, ...]:
        generation = await self.ensure_loaded()
        return generation.articles

    async def find_by_slug(self, slug: str) -> Article | None:
        generation = await self.ensure_loaded()
        return generation.by_slug.get(slug)

    async def invalidate_and_reload(self) -> LoadReport:
        """Load a fresh generation; readers keep the current one until it lands."""
        if self._pending is not None:
            # The in-flight load may have read documents before the
            # invalidation, so wait for it and start another.
            await asyncio.shield(self._pending)
        return await self.load()

    async def _run_load(self) -> LoadReport:
        number = self._generation.number + 1
        try:
            outcome = await self._loader.load()
        except DocumentSourceError as exc:
            logger.error("index.load_failed", error=str(exc))
            self._generation = IndexGeneration(number=number)
            self._loaded = False
            report = LoadReport(error=str(exc), generation=number)
        else:
            self._generation = IndexGeneration.build(number, outcome.articles)
            self._loaded = True
            logger.info(
                "index.generation_installed",
                generation=number,
                count=len(outcome.articles),
                skipped=len(outcome.skipped),
            )
            report = LoadReport(
                loaded=len(outcome.articles),
                skipped=outcome.skipped,
                generation=number,
            )
        self._last_report = report
        return report

    def _clear_pending(self, future: asyncio.Future[LoadReport]) -> None:
        if self._pending is future:
            self._pending = None

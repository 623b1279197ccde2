"""Turns raw documents from a source into validated, sorted articles."""

from __future__ import annotations

import asyncio
import datetime
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

import structlog
from pydantic import ValidationError

from folio.models import Article, ArticleMetadata
from folio.utils import compute_excerpt, derive_slug, estimate_reading_time
from .frontmatter import ParseError, parse_frontmatter
from .sources import (
    DocumentNotFoundError,
    DocumentReadError,
    DocumentSource,
    DocumentSourceError,
)

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("title", "date", "author")


class MetadataError(ValueError):
    """Raised when frontmatter lacks a required field or holds an unusable value."""


@dataclass(slots=True)
class SkippedDocument:
    document_id: str
    reason: str


@dataclass(slots=True)
class LoadOutcome:
    articles: list[Article]
    skipped: list[SkippedDocument] = field(default_factory=list)


class ContentLoader:
    """Coordinates document retrieval, frontmatter parsing and field derivation."""

    def __init__(
        self,
        source: DocumentSource,
        document_ids: Sequence[str],
        *,
        excerpt_length: int = 200,
        article_path_prefix: str = "/article",
        slug_collision: Literal["skip", "overwrite"] = "skip",
        concurrency: int = 4,
    ) -> None:
        self._source = source
        self._document_ids = list(document_ids)
        self._excerpt_length = excerpt_length
        self._path_prefix = article_path_prefix.rstrip("/")
        self._slug_collision = slug_collision
        self._concurrency = concurrency

    @property
    def document_ids(self) -> list[str]:
        return list(self._document_ids)

    async def load(self) -> LoadOutcome:
        """Build every loadable article, newest first.

        Per-document problems, including unreadable files, are recorded as
        skips. A :class:`DocumentSourceError` from any fetch aborts the whole
        load.
        """
        logger.info("loader.start", documents=len(self._document_ids))
        raw_documents = await self._fetch_all()

        skipped: list[SkippedDocument] = []
        by_slug: dict[str, Article] = {}
        for document_id, text in zip(self._document_ids, raw_documents):
            if isinstance(text, SkippedDocument):
                self._skip(skipped, document_id, text.reason)
                continue
            try:
                article = self.build_article(document_id, text)
            except (ParseError, MetadataError) as exc:
                self._skip(skipped, document_id, str(exc))
                continue
            slug = article.metadata.slug
            existing = by_slug.get(slug)
            if existing is not None:
                if self._slug_collision == "skip":
                    self._skip(
                        skipped,
                        document_id,
                        f"slug '{slug}' already used by {existing.source_id}",
                    )
                    continue
                logger.warning(
                    "loader.slug_overwritten",
                    slug=slug,
                    previous=existing.source_id,
                    document_id=document_id,
                )
                del by_slug[slug]
            by_slug[slug] = article

        # sorted() is stable, so equal dates keep document-set order.
        articles = sorted(by_slug.values(), key=lambda item: item.metadata.date, reverse=True)
        logger.info("loader.complete", loaded=len(articles), skipped=len(skipped))
        return LoadOutcome(articles=articles, skipped=skipped)

    def build_article(self, document_id: str, text: str) -> Article:
        data, body = parse_frontmatter(text)
        metadata = self._build_metadata(data)
        return Article(
            metadata=metadata,
            content=body,
            excerpt=compute_excerpt(body, self._excerpt_length),
            reading_time=estimate_reading_time(body),
            source_id=document_id,
            public_path=f"{self._path_prefix}/{metadata.slug}",
        )

    async def _fetch_all(self) -> list[str | SkippedDocument]:
        semaphore = asyncio.Semaphore(self._concurrency)

        async def fetch_one(document_id: str) -> str | SkippedDocument:
            async with semaphore:
                try:
                    return await self._source.fetch(document_id)
                except DocumentSourceError:
                    raise
                except DocumentNotFoundError:
                    return SkippedDocument(document_id=document_id, reason="document not found")
                except DocumentReadError as exc:
                    return SkippedDocument(document_id=document_id, reason=str(exc))
                except Exception as exc:
                    return SkippedDocument(
                        document_id=document_id,
                        reason=f"failed to fetch: {type(exc).__name__}: {exc}",
                    )

        results = await asyncio.gather(
            *(fetch_one(document_id) for document_id in self._document_ids),
            return_exceptions=True,
        )
        for result in results:
            # Only a DocumentSourceError or a cancellation can surface here.
            if isinstance(result, BaseException):
                raise result
        return results

    def _build_metadata(self, data: dict[str, Any]) -> ArticleMetadata:
        missing = [name for name in REQUIRED_FIELDS if not _present(data.get(name))]
        if missing:
            raise MetadataError(f"missing required metadata: {', '.join(missing)}")
        title = str(data["title"]).strip()
        raw_tags = data.get("tags")
        tags = [str(tag) for tag in raw_tags] if isinstance(raw_tags, list) else []
        summary = data.get("summary")
        slug = data.get("slug")
        slug = str(slug).strip() if _present(slug) else derive_slug(title)
        try:
            return ArticleMetadata(
                title=title,
                date=_coerce_date(data["date"]),
                tags=tags,
                summary=str(summary) if summary is not None else "",
                author=str(data["author"]).strip(),
                slug=slug,
            )
        except ValidationError as exc:
            raise MetadataError(f"invalid metadata: {exc.errors()[0]['msg']}") from exc

    def _skip(self, skipped: list[SkippedDocument], document_id: str, reason: str) -> None:
        logger.warning("loader.document_skipped", document_id=document_id, reason=reason)
        skipped.append(SkippedDocument(document_id=document_id, reason=reason))


def _present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _coerce_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError as exc:
            raise MetadataError(f"unrecognized date: {value!r}") from exc
    raise MetadataError(f"unrecognized date: {value!r}")

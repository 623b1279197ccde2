"""Read-only queries over a snapshot of the article index."""

from __future__ import annotations

import math
import unicodedata
from typing import Iterable, Sequence

from folio.models import (
    Article,
    ArticleListItem,
    ArticleNavigation,
    NavigationLink,
    SearchParams,
    SearchResult,
    TagCount,
)


def search_articles(
    articles: Iterable[Article | ArticleListItem],
    params: SearchParams,
    *,
    page_size: int = 10,
) -> SearchResult:
    """Filter, sort and paginate listing items."""
    items = [_as_list_item(article) for article in articles]

    query = (params.query or "").strip().lower()
    if query:
        items = [item for item in items if _matches(item, query)]
    if params.tag:
        items = [item for item in items if params.tag in item.metadata.tags]

    descending = params.sort_order == "desc"
    if params.sort_by == "title":
        items.sort(key=lambda item: title_sort_key(item.metadata.title), reverse=descending)
    else:
        items.sort(key=lambda item: item.metadata.date, reverse=descending)

    total_count = len(items)
    total_pages = math.ceil(total_count / page_size) if total_count else 0
    start = (params.page - 1) * page_size
    return SearchResult(
        articles=items[start : start + page_size],
        total_count=total_count,
        current_page=params.page,
        total_pages=total_pages,
        has_next_page=params.page < total_pages,
        has_previous_page=params.page > 1,
    )


def all_tags(articles: Iterable[Article | ArticleListItem]) -> list[TagCount]:
    """Tag frequencies across the whole index, most used first.

    A tag repeated within one article counts once for it. Ties keep the
    order in which tags were first seen.
    """
    counts: dict[str, int] = {}
    for article in articles:
        for tag in dict.fromkeys(article.metadata.tags):
            counts[tag] = counts.get(tag, 0) + 1
    ordered = sorted(counts.items(), key=lambda entry: entry[1], reverse=True)
    return [TagCount(tag=tag, count=count) for tag, count in ordered]


def navigation_for(articles: Sequence[Article | ArticleListItem], slug: str) -> ArticleNavigation:
    """Newer (previous) and older (next) neighbours of ``slug``."""
    position = next(
        (index for index, article in enumerate(articles) if article.metadata.slug == slug),
        None,
    )
    if position is None:
        return ArticleNavigation()
    navigation = ArticleNavigation()
    if position > 0:
        navigation.previous = _link(articles[position - 1])
    if position < len(articles) - 1:
        navigation.next = _link(articles[position + 1])
    return navigation


def recent_articles(
    articles: Sequence[Article | ArticleListItem], limit: int = 5
) -> list[ArticleListItem]:
    if limit <= 0:
        return []
    return [_as_list_item(article) for article in articles[:limit]]


def title_sort_key(title: str) -> tuple[str, str]:
    """Accent- and case-insensitive ordering, falling back to the raw title."""
    decomposed = unicodedata.normalize("NFKD", title)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base.casefold(), title


def _matches(item: ArticleListItem, query: str) -> bool:
    metadata = item.metadata
    if query in metadata.title.lower() or query in metadata.summary.lower():
        return True
    if any(query in tag.lower() for tag in metadata.tags):
        return True
    return query in item.excerpt.lower()


def _as_list_item(article: Article | ArticleListItem) -> ArticleListItem:
    if isinstance(article, Article):
        return article.to_list_item()
    return article


def _link(article: Article | ArticleListItem) -> NavigationLink:
    return NavigationLink(title=article.metadata.title, slug=article.metadata.slug)

from datetime import date, timedelta

from folio.models import Article, ArticleMetadata, SearchParams, TagCount
from folio.services.query import all_tags, navigation_for, recent_articles, search_articles


def _article(
    title: str,
    day: date,
    *,
    tags: list[str] | None = None,
    summary: str = "",
    excerpt: str = "",
) -> Article:
    slug = title.lower().replace(" ", "-")
    return Article(
        metadata=ArticleMetadata(
            title=title, date=day, tags=tags or [], summary=summary, author="Jane", slug=slug
        ),
        content=f"# {title}",
        excerpt=excerpt,
        reading_time=1,
        source_id=f"{slug}.md",
        public_path=f"/article/{slug}",
    )


def _sample_index() -> list[Article]:
    return [
        _article("AI on Kubernetes", date(2024, 1, 20), tags=["ai", "devops"]),
        _article("Linux Performance", date(2023, 11, 8), tags=["linux", "devops"]),
        _article(
            "Docker Optimization",
            date(2023, 6, 1),
            tags=["docker", "devops"],
            summary="Shrinking images before shipping to KUBERNETES",
        ),
        _article("Apache and FPM", date(2022, 12, 2), tags=["linux"], excerpt="Notes on ExecCGI."),
        _article("Rust System Tools", date(2022, 9, 22), tags=["rust", "kubernetes-tools"]),
    ]


def test_search_defaults_to_newest_first_and_excludes_content() -> None:
    result = search_articles(_sample_index(), SearchParams())
    assert [item.metadata.date for item in result.articles] == sorted(
        (a.metadata.date for a in _sample_index()), reverse=True
    )
    assert not hasattr(result.articles[0], "content")


def test_search_sorts_by_date_ascending() -> None:
    index = _sample_index()[:3]
    result = search_articles(index, SearchParams(sort_by="date", sort_order="asc"))
    assert [item.metadata.title for item in result.articles] == [
        "Docker Optimization",
        "Linux Performance",
        "AI on Kubernetes",
    ]


def test_search_query_matches_title_summary_tags_and_excerpt() -> None:
    result = search_articles(_sample_index(), SearchParams(query="kubernetes"))
    assert {item.metadata.title for item in result.articles} == {
        "AI on Kubernetes",
        "Docker Optimization",
        "Rust System Tools",
    }
    excerpt_hit = search_articles(_sample_index(), SearchParams(query="execcgi"))
    assert [item.metadata.title for item in excerpt_hit.articles] == ["Apache and FPM"]


def test_blank_query_is_no_filter() -> None:
    result = search_articles(_sample_index(), SearchParams(query="   "))
    assert result.total_count == 5


def test_tag_filter_is_exact_and_case_sensitive() -> None:
    result = search_articles(_sample_index(), SearchParams(tag="docker"))
    assert [item.metadata.title for item in result.articles] == ["Docker Optimization"]
    assert search_articles(_sample_index(), SearchParams(tag="Docker")).total_count == 0
    assert search_articles(_sample_index(), SearchParams(tag="kubernetes")).total_count == 0


def test_sort_by_title_ignores_case_and_accents() -> None:
    index = [
        _article("banana", date(2024, 1, 1)),
        _article("Éclair", date(2024, 1, 2)),
        _article("Apple", date(2024, 1, 3)),
        _article("cherry", date(2024, 1, 4)),
    ]
    asc = search_articles(index, SearchParams(sort_by="title", sort_order="asc"))
    assert [item.metadata.title for item in asc.articles] == ["Apple", "banana", "cherry", "Éclair"]
    desc = search_articles(index, SearchParams(sort_by="title"))
    assert [item.metadata.title for item in desc.articles] == ["Éclair", "cherry", "banana", "Apple"]


def test_pagination_covers_every_match_once() -> None:
    start = date(2020, 1, 1)
    index = [_article(f"Post {n}", start + timedelta(days=n)) for n in range(23)]

    first = search_articles(index, SearchParams(page=1), page_size=10)
    assert first.total_count == 23
    assert first.total_pages == 3
    assert first.has_next_page and not first.has_previous_page

    pages = [search_articles(index, SearchParams(page=p), page_size=10) for p in (1, 2, 3)]
    slugs = [item.slug for page in pages for item in page.articles]
    full = search_articles(index, SearchParams(), page_size=100)
    assert slugs == [item.slug for item in full.articles]
    assert len(set(slugs)) == 23
    assert not pages[-1].has_next_page and pages[-1].has_previous_page

    beyond = search_articles(index, SearchParams(page=4), page_size=10)
    assert beyond.articles == []
    assert beyond.current_page == 4
    assert not beyond.has_next_page and beyond.has_previous_page


def test_search_on_empty_index() -> None:
    result = search_articles([], SearchParams(query="anything"))
    assert result.articles == []
    assert result.total_count == 0
    assert result.total_pages == 0
    assert not result.has_next_page and not result.has_previous_page


def test_all_tags_counts_whole_index() -> None:
    tags = all_tags(_sample_index())
    assert tags[0] == TagCount(tag="devops", count=3)
    assert TagCount(tag="docker", count=1) in tags
    assert [t.tag for t in tags if t.count == 2] == ["linux"]
    singles = [t.tag for t in tags if t.count == 1]
    assert singles == ["ai", "docker", "rust", "kubernetes-tools"]


def test_all_tags_counts_repeated_tag_once_per_article() -> None:
    index = [_article("Twice", date(2024, 1, 1), tags=["go", "go"])]
    assert all_tags(index) == [TagCount(tag="go", count=1)]


def test_navigation_for_neighbours() -> None:
    index = _sample_index()
    oldest = navigation_for(index, "rust-system-tools")
    assert oldest.next is None
    assert oldest.previous is not None
    assert oldest.previous.slug == "apache-and-fpm"
    assert oldest.previous.title == "Apache and FPM"

    newest = navigation_for(index, "ai-on-kubernetes")
    assert newest.previous is None
    assert newest.next.slug == "linux-performance"

    missing = navigation_for(index, "unknown")
    assert missing.previous is None and missing.next is None


def test_recent_articles() -> None:
    index = _sample_index()
    assert [item.slug for item in recent_articles(index, 2)] == ["ai-on-kubernetes", "linux-performance"]
    assert recent_articles(index, 0) == []

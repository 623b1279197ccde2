"""Command-line interface for browsing folio articles."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import httpx
import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from folio.log import configure_logging
from folio.models import ArticleListItem, SearchParams
from folio.services import ArticlesService, build_document_source
from folio.settings import get_settings

console = Console()
app = typer.Typer(help="Folio – portfolio article engine")
T = TypeVar("T")


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    configure_logging(get_settings().log_level)


def _run(action: Callable[[ArticlesService], Awaitable[T]]) -> T:
    """Load the index once, then run ``action`` against it."""

    async def runner() -> T:
        settings = get_settings()
        async with httpx.AsyncClient(timeout=30) as client:
            service = ArticlesService.from_settings(settings, build_document_source(settings, client))
            report = await service.initialize()
            if not report.ok:
                console.print(f"[red]Articles unavailable:[/red] {report.error}")
                raise typer.Exit(code=1)
            for skipped in report.skipped:
                console.print(f"[yellow]Skipped {skipped.document_id}:[/yellow] {skipped.reason}")
            return await action(service)

    return asyncio.run(runner())


def _articles_table(title: str, items: list[ArticleListItem], service: ArticlesService) -> Table:
    table = Table(title=title)
    table.add_column("Date")
    table.add_column("Title", overflow="fold")
    table.add_column("Slug")
    table.add_column("Tags")
    table.add_column("Read", justify="right")
    for item in items:
        table.add_row(
            service.format_date(item.metadata.date),
            item.metadata.title,
            item.metadata.slug,
            ", ".join(item.metadata.tags) or "—",
            f"{item.reading_time} min",
        )
    return table


@app.command()
def config(
    json_output: bool = typer.Option(False, "--json", help="Output settings as JSON"),
) -> None:
    """Display the resolved settings."""
    settings = get_settings()
    if json_output:
        typer.echo(settings.model_dump_json(indent=2))
        return
    table = Table(title="Folio Settings")
    table.add_column("Key")
    table.add_column("Value", overflow="fold")
    for key, value in settings.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)


@app.command("list")
def list_articles(limit: int = typer.Option(5, help="Number of recent articles to show")) -> None:
    """Show the most recent articles."""

    async def action(service: ArticlesService) -> None:
        items = await service.get_recent_articles(limit)
        if not items:
            console.print("[yellow]No articles found.")
            return
        console.print(_articles_table("Recent articles", items, service))

    _run(action)


@app.command()
def search(
    query: Optional[str] = typer.Argument(None, help="Free-text query"),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only articles with this tag"),
    sort: str = typer.Option("date", help="Sort key: date or title"),
    order: str = typer.Option("desc", help="Sort order: asc or desc"),
    page: int = typer.Option(1, min=1, help="Result page"),
) -> None:
    """Search articles by text and tag."""
    if sort not in {"date", "title"}:
        raise typer.BadParameter("sort must be 'date' or 'title'")
    if order not in {"asc", "desc"}:
        raise typer.BadParameter("order must be 'asc' or 'desc'")
    params = SearchParams(query=query, tag=tag, sort_by=sort, sort_order=order, page=page)

    async def action(service: ArticlesService) -> None:
        result = await service.search_articles(params)
        if not result.total_count:
            console.print("[yellow]No articles matched.")
            return
        title = f"Page {result.current_page}/{result.total_pages} ({result.total_count} matches)"
        console.print(_articles_table(title, result.articles, service))
        if result.has_next_page:
            console.print(f"More results: --page {result.current_page + 1}")

    _run(action)


@app.command()
def tags() -> None:
    """Show tag usage across all articles."""

    async def action(service: ArticlesService) -> None:
        counts = await service.get_all_tags()
        if not counts:
            console.print("[yellow]No tags found.")
            return
        table = Table(title="Tags")
        table.add_column("Tag")
        table.add_column("Articles", justify="right")
        for entry in counts:
            table.add_row(entry.tag, str(entry.count))
        console.print(table)

    _run(action)


@app.command()
def show(slug: str = typer.Argument(..., help="Article slug")) -> None:
    """Render a single article."""

    async def action(service: ArticlesService) -> None:
        article = await service.get_article_by_slug(slug)
        if article is None:
            console.print(f"[red]No article with slug '{slug}'.")
            raise typer.Exit(code=1)
        metadata = article.metadata
        console.print(f"[bold]{metadata.title}[/bold]")
        console.print(
            f"{metadata.author} • {service.format_date(metadata.date)} • {article.reading_time} min read"
        )
        if metadata.tags:
            console.print(", ".join(metadata.tags))
        console.print(Markdown(article.content))

    _run(action)


@app.command()
def nav(slug: str = typer.Argument(..., help="Article slug")) -> None:
    """Show the newer and older neighbours of an article."""

    async def action(service: ArticlesService) -> None:
        navigation = await service.get_article_navigation(slug)
        if navigation.previous is None and navigation.next is None:
            console.print(f"[yellow]No neighbours for '{slug}'.")
            return
        if navigation.previous:
            console.print(f"Newer: {navigation.previous.title} ({navigation.previous.slug})")
        if navigation.next:
            console.print(f"Older: {navigation.next.title} ({navigation.next.slug})")

    _run(action)

"""FastAPI application exposing the article API as JSON."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Literal, Optional

import httpx
from fastapi import Depends, FastAPI, HTTPException, Query, Request, status

from folio.log import configure_logging
from folio.models import (
    Article,
    ArticleListItem,
    ArticleNavigation,
    BlogSettings,
    SearchParams,
    SearchResult,
    TagCount,
)
from folio.services import ArticlesService, build_document_source
from folio.settings import Settings, get_settings


def create_app(
    settings: Optional[Settings] = None, service: Optional[ArticlesService] = None
) -> FastAPI:
    """Factory used by uvicorn."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with httpx.AsyncClient(timeout=30) as client:
            articles_service = service or ArticlesService.from_settings(
                settings, build_document_source(settings, client)
            )
            app.state.articles = articles_service
            await articles_service.initialize()
            yield

    app = FastAPI(title="Folio Articles", lifespan=lifespan)

    def articles(request: Request) -> ArticlesService:
        return request.app.state.articles

    @app.get("/articles", response_model=SearchResult)
    async def list_articles(
        query: Optional[str] = None,
        tag: Optional[str] = None,
        sort_by: Literal["date", "title"] = "date",
        sort_order: Literal["asc", "desc"] = "desc",
        page: int = Query(1, ge=1),
        service: ArticlesService = Depends(articles),
    ) -> SearchResult:
        params = SearchParams(
            query=query, tag=tag, sort_by=sort_by, sort_order=sort_order, page=page
        )
        return await service.search_articles(params)

    @app.get("/articles/recent", response_model=list[ArticleListItem])
    async def recent(
        limit: int = Query(5, ge=0), service: ArticlesService = Depends(articles)
    ) -> list[ArticleListItem]:
        return await service.get_recent_articles(limit)

    @app.post("/articles/reload")
    async def reload(service: ArticlesService = Depends(articles)) -> dict:
        report = await service.reload_articles()
        if not report.ok:
            raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, detail=report.error)
        return {
            "loaded": report.loaded,
            "generation": report.generation,
            "skipped": [
                {"document_id": item.document_id, "reason": item.reason}
                for item in report.skipped
            ],
        }

    @app.get("/articles/{slug}", response_model=Article)
    async def article_detail(slug: str, service: ArticlesService = Depends(articles)) -> Article:
        article = await service.get_article_by_slug(slug)
        if article is None:
            raise HTTPException(status.HTTP_404_NOT_FOUND, detail=f"No article '{slug}'")
        return article

    @app.get("/articles/{slug}/navigation", response_model=ArticleNavigation)
    async def article_navigation(
        slug: str, service: ArticlesService = Depends(articles)
    ) -> ArticleNavigation:
        return await service.get_article_navigation(slug)

    @app.get("/tags", response_model=list[TagCount])
    async def tags(service: ArticlesService = Depends(articles)) -> list[TagCount]:
        return await service.get_all_tags()

    @app.get("/settings", response_model=BlogSettings)
    async def blog_settings(service: ArticlesService = Depends(articles)) -> BlogSettings:
        return await service.get_blog_settings()

    return app

"""Configuration helpers for folio."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from folio.models import BlogConfig

DEFAULT_CONTENT_DIR = Path("content") / "articles"


class Settings(BaseModel):
    """Runtime configuration loaded from env vars with sensible defaults."""

    content_dir: Path = Field(default_factory=lambda: DEFAULT_CONTENT_DIR)
    source_url: str | None = None
    document_ids: list[str] = Field(default_factory=list)
    articles_per_page: int = Field(default=10, ge=1)
    excerpt_length: int = Field(default=200, ge=1)
    date_format: str = "%B %d, %Y"
    article_path_prefix: str = "/article"
    slug_collision: Literal["skip", "overwrite"] = "skip"
    fetch_concurrency: int = Field(default=4, ge=1)
    log_level: str = "INFO"

    @property
    def blog_config(self) -> BlogConfig:
        return BlogConfig(
            articles_per_page=self.articles_per_page,
            excerpt_length=self.excerpt_length,
            date_format=self.date_format,
        )

    def resolved_document_ids(self) -> list[str]:
        """Configured ids, or the markdown files sitting in the content directory."""
        if self.document_ids:
            return list(self.document_ids)
        if self.source_url or not self.content_dir.is_dir():
            return []
        return sorted(path.name for path in self.content_dir.glob("*.md") if path.is_file())

    @classmethod
    def load(cls) -> "Settings":
        load_dotenv()
        documents = os.environ.get("FOLIO_DOCUMENTS", "")
        return cls(
            content_dir=Path(os.environ.get("FOLIO_CONTENT_DIR", DEFAULT_CONTENT_DIR)),
            source_url=os.environ.get("FOLIO_SOURCE_URL") or None,
            document_ids=[item.strip() for item in documents.split(",") if item.strip()],
            articles_per_page=int(os.environ.get("FOLIO_ARTICLES_PER_PAGE", 10)),
            excerpt_length=int(os.environ.get("FOLIO_EXCERPT_LENGTH", 200)),
            date_format=os.environ.get("FOLIO_DATE_FORMAT", "%B %d, %Y"),
            article_path_prefix=os.environ.get("FOLIO_ARTICLE_PATH_PREFIX", "/article"),
            slug_collision=os.environ.get("FOLIO_SLUG_COLLISION", "skip"),
            fetch_concurrency=int(os.environ.get("FOLIO_FETCH_CONCURRENCY", 4)),
            log_level=os.environ.get("FOLIO_LOG_LEVEL", "INFO"),
        )


def get_settings() -> Settings:
    """Convenience accessor for lazy modules."""
    return Settings.load()

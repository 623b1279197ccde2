"""Service abstractions for the folio article engine."""

from .articles import ArticlesService
from .frontmatter import ParseError, parse_frontmatter
from .index import ArticleIndex, IndexGeneration, LoadReport
from .loader import ContentLoader, LoadOutcome, MetadataError, SkippedDocument
from .query import all_tags, navigation_for, recent_articles, search_articles
from .sources import (
    DocumentNotFoundError,
    DocumentReadError,
    DocumentSource,
    DocumentSourceError,
    HttpDocumentSource,
    InMemoryDocumentSource,
    LocalDocumentSource,
    build_document_source,
)

__all__ = [
    "ArticlesService",
    "ArticleIndex",
    "IndexGeneration",
    "LoadReport",
    "ContentLoader",
    "LoadOutcome",
    "MetadataError",
    "SkippedDocument",
    "ParseError",
    "parse_frontmatter",
    "search_articles",
    "all_tags",
    "navigation_for",
    "recent_articles",
    "DocumentSource",
    "DocumentSourceError",
    "DocumentNotFoundError",
    "DocumentReadError",
    "LocalDocumentSource",
    "HttpDocumentSource",
    "InMemoryDocumentSource",
    "build_document_source",
]

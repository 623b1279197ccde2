"""Document sources that hand raw article text to the content loader."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

import httpx
import structlog

from folio.settings import Settings

logger = structlog.get_logger(__name__)


class DocumentSourceError(RuntimeError):
    """The source cannot serve documents at all."""


class DocumentReadError(RuntimeError):
    """A single document exists but cannot be read or decoded."""


class DocumentNotFoundError(DocumentReadError, LookupError):
    """A single document id is unknown to the source."""


class DocumentSource(Protocol):
    """Protocol for components that retrieve raw documents by id."""

    async def fetch(self, document_id: str) -> str:
        ...


class LocalDocumentSource:
    """Reads documents from a directory on disk."""

    name = "local"

    def __init__(self, root: Path) -> None:
        self._root = Path(root)

    async def fetch(self, document_id: str) -> str:
        if not self._root.is_dir():
            raise DocumentSourceError(f"content directory not found: {self._root}")
        path = (self._root / document_id).resolve()
        if not path.is_relative_to(self._root.resolve()):
            raise DocumentNotFoundError(document_id)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError as exc:
            raise DocumentNotFoundError(document_id) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentReadError(f"failed to read {document_id}: {exc}") from exc


class HttpDocumentSource:
    """Fetches documents from ``<base_url>/<id>`` over HTTP."""

    name = "http"

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def fetch(self, document_id: str) -> str:
        url = f"{self._base_url}/{quote(document_id)}"
        try:
            response = await self._client.get(url, timeout=30)
        except httpx.TransportError as exc:
            logger.warning("source.transport_error", url=url, error=str(exc))
            raise DocumentSourceError(f"failed to fetch {document_id}: {exc}") from exc
        if response.status_code == httpx.codes.NOT_FOUND:
            raise DocumentNotFoundError(document_id)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("source.http_error", url=url, status=response.status_code)
            message = f"failed to fetch {document_id}: {response.status_code} {response.reason_phrase}"
            # Client errors concern this one document; server errors mean the source is down.
            if response.is_client_error:
                raise DocumentReadError(message) from exc
            raise DocumentSourceError(message) from exc
        return response.text


class InMemoryDocumentSource:
    """Serves documents from a mapping of id to text."""

    name = "memory"

    def __init__(self, documents: Mapping[str, str]) -> None:
        self._documents = dict(documents)

    async def fetch(self, document_id: str) -> str:
        try:
            return self._documents[document_id]
        except KeyError as exc:
            raise DocumentNotFoundError(document_id) from exc


def build_document_source(
    settings: Settings, client: httpx.AsyncClient | None = None
) -> DocumentSource:
    """Pick the HTTP source when a source URL is configured, else local files."""
    if settings.source_url:
        if client is None:
            raise ValueError("an httpx.AsyncClient is required for an HTTP document source")
        return HttpDocumentSource(client=client, base_url=settings.source_url)
    return LocalDocumentSource(settings.content_dir)

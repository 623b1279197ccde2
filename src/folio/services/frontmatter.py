"""Splits article documents into YAML frontmatter and a markdown body."""

from __future__ import annotations

from typing import Any

import yaml

DELIMITER = "---"


class ParseError(ValueError):
    """Raised when a document's frontmatter block is malformed."""


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return ``(metadata, body)`` for a raw document.

    A document that does not open with ``---`` has no frontmatter: the
    metadata is empty and the whole text is the body. An opening delimiter
    without a closing one, invalid YAML, or YAML that is not a mapping
    raises :class:`ParseError`.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.split("\n")
    if not lines or lines[0].rstrip("\r").strip() != DELIMITER:
        return {}, text

    closing_index = None
    for index in range(1, len(lines)):
        if lines[index].rstrip("\r").strip() == DELIMITER:
            closing_index = index
            break
    if closing_index is None:
        raise ParseError("unterminated frontmatter block (missing closing '---')")

    block = "\n".join(line.rstrip("\r") for line in lines[1:closing_index])
    try:
        metadata = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        raise ParseError(f"invalid frontmatter YAML: {exc}") from exc
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise ParseError("frontmatter must be a mapping")

    body = "\n".join(line.rstrip("\r") for line in lines[closing_index + 1 :])
    return {str(key): value for key, value in metadata.items()}, body.lstrip("\n")

"""Helpers deriving slugs, excerpts and reading times from article text."""

from __future__ import annotations

import math
import re
import unicodedata

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
WORDS_PER_MINUTE = 200
ELLIPSIS = "..."

# Applied in order; fenced blocks go first so their backticks never reach the
# inline-code rule.
MARKDOWN_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"#{1,6}\s+"), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"\s+"), " "),
)


def derive_slug(title: str) -> str:
    """Create a URL-safe slug from an article title."""
    value = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode()
    value = value.lower()
    value = SLUG_PATTERN.sub("-", value).strip("-")
    if not value:
        value = "article"
    return value


def strip_markdown(body: str) -> str:
    text = body
    for pattern, replacement in MARKDOWN_PATTERNS:
        text = pattern.sub(replacement, text)
    return text.strip()


def compute_excerpt(body: str, max_length: int = 200) -> str:
    """Plain-text preview of ``body`` no longer than ``max_length`` plus an ellipsis.

    The cut backs up to the last space only when that space sits within the
    final fifth of the limit; otherwise the hard cut is kept.
    """
    plain = strip_markdown(body)
    if len(plain) <= max_length:
        return plain
    truncated = plain[:max_length]
    last_space = truncated.rfind(" ")
    if last_space >= max_length * 0.8:
        truncated = truncated[:last_space]
    return truncated + ELLIPSIS


def count_words(body: str) -> int:
    return len(body.split())


def estimate_reading_time(body: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Minutes needed to read ``body``, rounded up, never below one."""
    return max(1, math.ceil(count_words(body) / words_per_minute))

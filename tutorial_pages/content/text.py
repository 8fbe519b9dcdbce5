"""Text shaping helpers for slugs, summaries, and reading metrics."""

from __future__ import annotations

import math
import re

from tutorial_pages._constants import SHORT_DESC_LIMIT, WORDS_PER_MINUTE

_SEPARATOR_PATTERN = re.compile(r"[_\s]+")
_DISALLOWED_PATTERN = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN_PATTERN = re.compile(r"-{2,}")

_HEADING_PATTERN = re.compile(r"#{1,6}\s+")
_FENCED_CODE_PATTERN = re.compile(r"```[\s\S]*?```")
_INLINE_CODE_PATTERN = re.compile(r"`[^`]*`")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_EXCESS_NEWLINES_PATTERN = re.compile(r"\n{3,}")


def slugify(value: str) -> str:
    """Convert a display name or filename stem into a URL-safe slug.

    Examples
    --------
    >>> slugify("Jetpack_Compose")
    'jetpack-compose'
    >>> slugify(slugify("  C++ & Data  Structures "))
    'c-data-structures'
    """
    lowered = value.strip().lower()
    hyphenated = _SEPARATOR_PATTERN.sub("-", lowered)
    cleaned = _DISALLOWED_PATTERN.sub("", hyphenated)
    return _HYPHEN_RUN_PATTERN.sub("-", cleaned).strip("-")


def extract_short_desc(content: str, limit: int = SHORT_DESC_LIMIT) -> str:
    """Return a plain-text summary of markdown ``content``.

    Heading markers, bold markers, fenced blocks, and inline code are removed,
    whitespace is collapsed, and the result is cut at ``limit`` characters with
    a trailing ellipsis when longer.

    Examples
    --------
    >>> extract_short_desc("# Intro\\nHello world")
    'Intro Hello world'
    """
    if not content:
        return ""
    cleaned = _HEADING_PATTERN.sub("", content)
    cleaned = cleaned.replace("**", "")
    cleaned = _FENCED_CODE_PATTERN.sub("", cleaned)
    cleaned = _INLINE_CODE_PATTERN.sub("", cleaned)
    cleaned = _WHITESPACE_PATTERN.sub(" ", cleaned).strip()
    if len(cleaned) > limit:
        return f"{cleaned[:limit]}..."
    return cleaned


def optimize_content(content: str) -> str:
    """Normalize line endings and squeeze runs of blank lines."""
    if not content:
        return ""
    normalized = content.replace("\r\n", "\n")
    return _EXCESS_NEWLINES_PATTERN.sub("\n\n", normalized).strip()


def word_count(content: str) -> int:
    return len(content.split()) if content else 0


def reading_time(content: str) -> int:
    """Return the estimated reading time in whole minutes, at least one."""
    return max(1, math.ceil(word_count(content) / WORDS_PER_MINUTE))


def display_name(stem: str) -> str:
    """Turn a filename stem such as ``jetpack_compose`` into ``Jetpack compose``."""
    words = _SEPARATOR_PATTERN.sub(" ", stem.replace("-", " ")).strip()
    return words[:1].upper() + words[1:]


__all__ = [
    "display_name",
    "extract_short_desc",
    "optimize_content",
    "reading_time",
    "slugify",
    "word_count",
]

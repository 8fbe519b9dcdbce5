"""Turn parsed spreadsheet rows into subject and homepage documents.

Rows arrive as plain mappings keyed by the spreadsheet header row. Subject
files become a :class:`~tutorial_pages.content.models.Subject` with one
:class:`~tutorial_pages.content.models.ContentItem` per row; homepage files
become a :class:`~tutorial_pages.content.models.HomepageDocument`.

Malformed rows degrade to defaults instead of failing the file. Only a file
that yields no rows at all is rejected, via :class:`EmptySourceError`.

Example
-------
>>> from pathlib import Path
>>> from tutorial_pages.content.sources import SourceFile
>>> transformer = ContentTransformer(generated_at="2026-01-01T00:00:00+00:00")
>>> source = SourceFile.from_path(Path("kotlin.xlsx"))
>>> result = transformer.transform(
...     source, [{"title": "Intro", "url": "intro", "content": "# Intro"}]
... )
>>> result.document.content[0].short_desc
'Intro'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import logging
import typing as typ

from tutorial_pages._constants import DEFAULT_ITEM_TYPE, DEFAULT_SECTION

from .models import (
    ContentItem,
    HomepageDocument,
    HomepageSection,
    HomepageTutorial,
    Subject,
)
from .sources import SourceFile, SourceKind
from .text import extract_short_desc, optimize_content, reading_time, word_count

logger = logging.getLogger(__name__)

Row = cabc.Mapping[str, typ.Any]

SECTION_FIELDS = ("sectionName", "tutorialTitles", "tutorialUrls")


class TransformError(ValueError):
    """Raised when a source file cannot be turned into a document."""


class EmptySourceError(TransformError):
    """Raised when a spreadsheet yields zero rows."""


@dc.dataclass(slots=True)
class TransformResult:
    """A transformed document together with the diagnostics it raised."""

    document: Subject | HomepageDocument
    warnings: list[str] = dc.field(default_factory=list)


class ContentTransformer:
    """Normalize heterogeneous spreadsheet rows into the JSON content model."""

    def __init__(
        self,
        *,
        blog_subjects: cabc.Collection[str] = ("blogs",),
        generated_at: str | None = None,
    ) -> None:
        """Initialize the transformer.

        Parameters
        ----------
        blog_subjects : Collection[str], optional
            Subject slugs rendered as blogs. Blog subjects omit the
            ``section``/``type`` item fields and the ``sections`` aggregate.
        generated_at : str, optional
            ISO-8601 timestamp stamped on items without ``lastModified`` and
            on ``lastUpdated``; defaults to the current UTC time.
        """
        self.blog_subjects = frozenset(blog_subjects)
        self.generated_at = generated_at or dt.datetime.now(dt.UTC).isoformat()

    def transform(self, source: SourceFile, rows: cabc.Sequence[Row]) -> TransformResult:
        """Dispatch ``rows`` to the subject or homepage transformation.

        Raises
        ------
        EmptySourceError
            If ``rows`` is empty.
        """
        if not rows:
            msg = f"No data found in {source.filename}"
            raise EmptySourceError(msg)
        warnings: list[str] = []
        if source.kind is SourceKind.HOMEPAGE:
            document: Subject | HomepageDocument = self.transform_homepage(
                source, rows, warnings
            )
        else:
            document = self.transform_subject(source, rows, warnings)
        return TransformResult(document=document, warnings=warnings)

    def transform_subject(
        self, source: SourceFile, rows: cabc.Sequence[Row], warnings: list[str]
    ) -> Subject:
        """Build a Subject with one content item per row, in row order."""
        is_blog = source.slug in self.blog_subjects
        content = [
            self._build_item(index, row, is_blog=is_blog, warnings=warnings)
            for index, row in enumerate(rows, start=1)
        ]
        self._warn_duplicate_urls(source, content, warnings)

        base_url = "/blogs" if is_blog else f"/{source.slug}"
        first = content[0] if content else None
        sections = None if is_blog else _distinct(item.section for item in content)
        return Subject(
            id=source.slug,
            name=source.name,
            base_url=base_url,
            content=content,
            keywords=first.keywords if first else "",
            title_tag=first.title_tag if first else f"{source.name} Tutorial",
            description_tag=(
                first.description_tag
                if first
                else f"Learn {source.name} programming with comprehensive tutorials."
            ),
            last_updated=self.generated_at,
            sections=sections,
        )

    def transform_homepage(
        self, source: SourceFile, rows: cabc.Sequence[Row], warnings: list[str]
    ) -> HomepageDocument:
        """Build a HomepageDocument, auto-detecting the row layout."""
        if _is_metadata_row(rows[0]):
            metadata, section_rows = rows[0], rows[1:]
        else:
            metadata = next((row for row in rows if _text(row, "title")), rows[0])
            section_rows = rows

        sections: dict[str, HomepageSection] = {}
        for index, row in enumerate(section_rows, start=1):
            if not any(_text(row, key) for key in SECTION_FIELDS):
                continue
            self._merge_section_row(source, index, row, sections, warnings)

        return HomepageDocument(
            id=source.slug,
            title=_text(metadata, "title") or f"{source.name} Tutorials",
            short_desc=_text(metadata, "shortDesc") or _text(metadata, "description"),
            sections=list(sections.values()),
        )

    def _build_item(
        self, index: int, row: Row, *, is_blog: bool, warnings: list[str]
    ) -> ContentItem:
        title = _text(row, "title")
        url = _text(row, "url")
        raw_content = _text(row, "content")
        if not (title and url and raw_content):
            message = f"Missing required fields in row {index}"
            logger.warning(message)
            warnings.append(message)

        title = title or f"Untitled {index}"
        content = optimize_content(raw_content)
        return ContentItem(
            id=_value(row, "id") or index,
            title=title,
            url=url or f"page-{index}",
            content=content,
            keywords=_text(row, "keywords"),
            title_tag=_text(row, "titleTag") or title,
            description_tag=_text(row, "descriptionTag"),
            short_desc=_text(row, "shortDesc") or extract_short_desc(content),
            word_count=word_count(content),
            reading_time=reading_time(content),
            last_modified=_text(row, "lastModified") or self.generated_at,
            section=None if is_blog else (_text(row, "section") or DEFAULT_SECTION),
            type=None if is_blog else (_value(row, "type") or DEFAULT_ITEM_TYPE),
        )

    @staticmethod
    def _warn_duplicate_urls(
        source: SourceFile, content: list[ContentItem], warnings: list[str]
    ) -> None:
        seen: set[str] = set()
        for item in content:
            if item.url in seen:
                message = (
                    f"Duplicate url '{item.url}' in {source.filename}; "
                    "lookups resolve to the last row"
                )
                logger.warning(message)
                warnings.append(message)
            seen.add(item.url)

    @staticmethod
    def _merge_section_row(
        source: SourceFile,
        index: int,
        row: Row,
        sections: dict[str, HomepageSection],
        warnings: list[str],
    ) -> None:
        name = _text(row, "sectionName") or DEFAULT_SECTION
        titles = _split_pipes(_text(row, "tutorialTitles"))
        urls = _split_pipes(_text(row, "tutorialUrls"))
        if len(titles) != len(urls):
            message = (
                f"{source.filename} row {index}: section '{name}' has "
                f"{len(titles)} titles but {len(urls)} urls; keeping "
                f"{min(len(titles), len(urls))}"
            )
            logger.warning(message)
            warnings.append(message)

        section = sections.get(name)
        if section is None:
            section = HomepageSection(name=name)
            sections[name] = section
        if not section.description:
            section.description = _text(row, "sectionDescription")
        section.tutorials.extend(
            HomepageTutorial(title=title, url=url)
            for title, url in zip(titles, urls, strict=False)
        )


def _value(row: Row, key: str) -> typ.Any:
    """Return the raw cell value for ``key``, treating blanks as missing."""
    value = row.get(key)
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _text(row: Row, key: str) -> str:
    value = row.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _split_pipes(value: str) -> list[str]:
    return [segment.strip() for segment in value.split("|") if segment.strip()]


def _is_metadata_row(row: Row) -> bool:
    """Return whether ``row`` is a dedicated metadata row (layout b)."""
    return bool(_text(row, "title")) and not any(
        _text(row, key) for key in SECTION_FIELDS
    )


def _distinct(values: cabc.Iterable[str | None]) -> list[str]:
    """Return distinct non-empty values in first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        if value:
            seen.setdefault(value, None)
    return list(seen)


__all__ = [
    "ContentTransformer",
    "EmptySourceError",
    "TransformError",
    "TransformResult",
]

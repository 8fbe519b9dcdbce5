"""Unit tests for the spreadsheet row transformer.

These tests feed plain row mappings into ``ContentTransformer`` and check
the defaulting, blog, and homepage layout policies without touching disk.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tutorial_pages.content.models import HomepageDocument, Subject
from tutorial_pages.content.sources import SourceFile
from tutorial_pages.content.transformer import ContentTransformer, EmptySourceError

GENERATED_AT = "2026-10-18T00:00:00+00:00"


@pytest.fixture
def transformer() -> ContentTransformer:
    """Return a transformer with a fixed timestamp."""
    return ContentTransformer(blog_subjects=["blogs"], generated_at=GENERATED_AT)


def _subject(transformer: ContentTransformer, filename: str, rows: list[dict]) -> Subject:
    result = transformer.transform(SourceFile.from_path(Path(filename)), rows)
    assert isinstance(result.document, Subject), "expected a Subject document"
    return result.document


def _homepage(
    transformer: ContentTransformer, rows: list[dict]
) -> tuple[HomepageDocument, list[str]]:
    result = transformer.transform(SourceFile.from_path(Path("kotlin_home.xlsx")), rows)
    assert isinstance(result.document, HomepageDocument), "expected a homepage"
    return result.document, result.warnings


def test_subject_row_yields_expected_item(transformer: ContentTransformer) -> None:
    """A complete row maps onto a content item with a derived summary."""
    subject = _subject(
        transformer,
        "Kotlin.xlsx",
        [{"title": "Intro", "content": "# Intro\nHello world", "url": "intro"}],
    )
    item = subject.content[0]
    assert subject.id == "kotlin"
    assert subject.base_url == "/kotlin"
    assert item.short_desc == "Intro Hello world"
    assert item.title_tag == "Intro", "titleTag should fall back to the title"
    assert item.section == "General"
    assert item.type == 1
    assert item.last_modified == GENERATED_AT
    assert subject.sections == ["General"]


def test_subject_id_from_filename(transformer: ContentTransformer) -> None:
    """Filenames are slugified into the subject id."""
    subject = _subject(
        transformer, "Jetpack_Compose.xlsx", [{"title": "A", "url": "a", "content": "x"}]
    )
    assert subject.id == "jetpack-compose"
    assert subject.to_dict()["base_url"] == "/jetpack-compose"


def test_missing_fields_are_defaulted(transformer: ContentTransformer) -> None:
    """Rows missing title, url, or content degrade to defaults with a warning."""
    source = SourceFile.from_path(Path("kotlin.xlsx"))
    result = transformer.transform(source, [{"title": "Only title"}, {"keywords": "k"}])
    subject = result.document
    assert isinstance(subject, Subject)
    first, second = subject.content
    assert first.url == "page-1"
    assert first.content == ""
    assert second.title == "Untitled 2"
    assert second.url == "page-2"
    assert second.id == 2
    assert len(result.warnings) == 2, f"expected two warnings, got {result.warnings}"


def test_content_preserves_row_order(transformer: ContentTransformer) -> None:
    """Content order and totalPages follow the source rows."""
    rows = [{"title": f"T{i}", "url": f"u{i}", "content": "c"} for i in range(5)]
    payload = _subject(transformer, "kotlin.xlsx", rows).to_dict()
    assert [item["url"] for item in payload["content"]] == [f"u{i}" for i in range(5)]
    assert payload["totalPages"] == len(payload["content"]) == 5


def test_explicit_short_desc_is_kept(transformer: ContentTransformer) -> None:
    """An authored shortDesc wins over the derived one."""
    subject = _subject(
        transformer,
        "kotlin.xlsx",
        [{"title": "A", "url": "a", "content": "Body", "shortDesc": "Authored"}],
    )
    assert subject.content[0].short_desc == "Authored"


def test_blog_subject_omits_grouping_fields(transformer: ContentTransformer) -> None:
    """Blog subjects have no section/type on items and no sections aggregate."""
    payload = _subject(
        transformer,
        "blogs.xlsx",
        [{"title": "Post", "url": "post", "content": "Body", "section": "News"}],
    ).to_dict()
    assert payload["base_url"] == "/blogs"
    assert "sections" not in payload
    assert "section" not in payload["content"][0]
    assert "type" not in payload["content"][0]


def test_sections_are_distinct_in_first_seen_order(
    transformer: ContentTransformer,
) -> None:
    """The sections aggregate lists each label once."""
    rows = [
        {"title": "A", "url": "a", "content": "x", "section": "Basics"},
        {"title": "B", "url": "b", "content": "x", "section": "Advanced"},
        {"title": "C", "url": "c", "content": "x", "section": "Basics"},
        {"title": "D", "url": "d", "content": "x"},
    ]
    subject = _subject(transformer, "kotlin.xlsx", rows)
    assert subject.sections == ["Basics", "Advanced", "General"]


def test_duplicate_urls_are_kept_with_warning(transformer: ContentTransformer) -> None:
    """Duplicate slugs stay in the content list and raise a diagnostic."""
    source = SourceFile.from_path(Path("kotlin.xlsx"))
    rows = [
        {"title": "A", "url": "same", "content": "x"},
        {"title": "B", "url": "same", "content": "y"},
    ]
    result = transformer.transform(source, rows)
    assert isinstance(result.document, Subject)
    assert result.document.total_pages == 2
    assert any("Duplicate url 'same'" in message for message in result.warnings)


def test_empty_rows_raise(transformer: ContentTransformer) -> None:
    """A file without rows is rejected."""
    with pytest.raises(EmptySourceError, match="No data found"):
        transformer.transform(SourceFile.from_path(Path("kotlin.xlsx")), [])


def test_homepage_inline_layout(transformer: ContentTransformer) -> None:
    """Rows carrying both metadata and section data form one document."""
    rows = [
        {
            "title": "Kotlin Home",
            "shortDesc": "Learn Kotlin",
            "sectionName": "Basics",
            "sectionDescription": "Start here",
            "tutorialTitles": "Intro | Variables",
            "tutorialUrls": "intro|variables",
        },
        {
            "sectionName": "Advanced",
            "tutorialTitles": "Coroutines",
            "tutorialUrls": "coroutines",
        },
    ]
    document, warnings = _homepage(transformer, rows)
    assert document.id == "kotlin"
    assert document.title == "Kotlin Home"
    assert document.short_desc == "Learn Kotlin"
    assert [section.name for section in document.sections] == ["Basics", "Advanced"]
    assert document.sections[0].description == "Start here"
    assert [t.url for t in document.sections[0].tutorials] == ["intro", "variables"]
    assert warnings == []


def test_homepage_metadata_row_layout(transformer: ContentTransformer) -> None:
    """A first row with a title and no section fields is pure metadata."""
    rows = [
        {"title": "Kotlin Home", "shortDesc": "Learn Kotlin"},
        {"sectionName": "Basics", "tutorialTitles": "Intro", "tutorialUrls": "intro"},
    ]
    document, _ = _homepage(transformer, rows)
    payload = document.to_dict()
    assert payload["type"] == "homepage"
    assert payload["title"] == "Kotlin Home"
    assert payload["sections"] == [
        {
            "name": "Basics",
            "description": "",
            "tutorials": [{"title": "Intro", "url": "intro"}],
        }
    ]


def test_homepage_sections_merge_by_name(transformer: ContentTransformer) -> None:
    """Sections sharing a name are merged with tutorials in row order."""
    rows = [
        {"title": "Home"},
        {"sectionName": "Basics", "tutorialTitles": "A|B", "tutorialUrls": "a|b"},
        {"sectionName": "Other", "tutorialTitles": "X", "tutorialUrls": "x"},
        {"sectionName": "Basics", "tutorialTitles": "C", "tutorialUrls": "c"},
    ]
    document, _ = _homepage(transformer, rows)
    assert [section.name for section in document.sections] == ["Basics", "Other"]
    assert [t.title for t in document.sections[0].tutorials] == ["A", "B", "C"]


def test_homepage_mismatched_lists_truncate(transformer: ContentTransformer) -> None:
    """Unequal title/url lists keep the shorter length and warn."""
    rows = [
        {
            "title": "Home",
            "sectionName": "Basics",
            "tutorialTitles": "A|B|C",
            "tutorialUrls": "a|b",
        }
    ]
    document, warnings = _homepage(transformer, rows)
    tutorials = document.sections[0].tutorials
    assert [(t.title, t.url) for t in tutorials] == [("A", "a"), ("B", "b")]
    assert all(t.title and t.url for t in tutorials)
    assert len(warnings) == 1, f"expected one mismatch warning, got {warnings}"

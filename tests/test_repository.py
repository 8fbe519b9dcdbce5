"""Tests for the read-only content repository used by page rendering."""

from __future__ import annotations

import datetime as dt
import typing as typ

import pytest

from tutorial_pages.pipeline import ContentPipeline
from tutorial_pages.repository import EMPTY_MANIFEST, ContentRepository

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tests.conftest import SheetWriter
    from tutorial_pages.config import PipelineConfig


@pytest.fixture
def repository(
    pipeline_config: PipelineConfig, write_sheet: SheetWriter
) -> ContentRepository:
    """Build a cache from two subjects and a homepage and open it."""
    write_sheet(
        "Jetpack_Compose.xlsx",
        [
            {"title": "State", "url": "state", "content": "First"},
            {"title": "State again", "url": "state", "content": "Second"},
        ],
    )
    write_sheet("blogs.xlsx", [{"title": "Hello", "url": "hello", "content": "Post"}])
    write_sheet(
        "kotlin_home.xlsx",
        [
            {"title": "Kotlin"},
            {"sectionName": "Basics", "tutorialTitles": "Intro", "tutorialUrls": "intro"},
        ],
    )
    now = dt.datetime(2026, 10, 18, tzinfo=dt.UTC)
    ContentPipeline(pipeline_config, now=now).run()
    return ContentRepository(pipeline_config.cache_dir)


def test_subject_ids_follow_manifest(repository: ContentRepository) -> None:
    assert repository.subject_ids() == ["blogs", "jetpack-compose"]
    assert [subject.id for subject in repository.subjects()] == [
        "blogs",
        "jetpack-compose",
    ]


def test_get_subject_accepts_unslugged_names(repository: ContentRepository) -> None:
    subject = repository.get_subject("Jetpack_Compose")
    assert subject is not None
    assert subject.base_url == "/jetpack-compose"
    assert repository.get_subject("jetpack-compose") is subject, "expected memoized"


def test_get_item_resolves_duplicates_to_last_row(
    repository: ContentRepository,
) -> None:
    item = repository.get_item("jetpack-compose", "state")
    assert item is not None
    assert item.content == "Second"


def test_missing_lookups_return_none(repository: ContentRepository) -> None:
    assert repository.get_subject("rust") is None
    assert repository.get_item("rust", "intro") is None
    assert repository.get_item("blogs", "missing") is None
    assert repository.get_homepage("swift") is None


def test_homepage_is_not_a_subject(repository: ContentRepository) -> None:
    homepage = repository.get_homepage("kotlin")
    assert homepage is not None
    assert homepage.total_tutorials == 1
    assert repository.get_subject("kotlin_home") is None


def test_blog_items_have_no_grouping(repository: ContentRepository) -> None:
    item = repository.get_item("blogs", "hello")
    assert item is not None
    assert item.section is None
    assert item.type is None


def test_empty_cache_yields_empty_manifest(tmp_path: Path) -> None:
    repository = ContentRepository(tmp_path / "absent")
    assert repository.manifest() == EMPTY_MANIFEST
    assert repository.subjects() == []

"""Shared fixtures for the tutorial_pages test suite.

The fixtures build throwaway source/cache/public directories under pytest's
``tmp_path`` and write real ``.xlsx`` workbooks with openpyxl so the
pipeline reads spreadsheets exactly as it does in production.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

import pytest
from openpyxl import Workbook

from tutorial_pages.config import PipelineConfig

if typ.TYPE_CHECKING:
    from pathlib import Path

SheetWriter = cabc.Callable[..., "Path"]

SUBJECT_HEADER = ["id", "title", "url", "content", "keywords", "section"]
HOMEPAGE_HEADER = [
    "title",
    "shortDesc",
    "sectionName",
    "sectionDescription",
    "tutorialTitles",
    "tutorialUrls",
]


def write_workbook(
    path: Path, header: list[str], rows: cabc.Iterable[cabc.Mapping[str, object]]
) -> Path:
    """Write ``rows`` beneath ``header`` into the first sheet of ``path``."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(header)
    for row in rows:
        sheet.append([row.get(column) for column in header])
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)
    return path


@pytest.fixture
def pipeline_config(tmp_path: Path) -> PipelineConfig:
    """Return a config rooted in per-test source, cache, and public folders."""
    source_dir = tmp_path / "data" / "excel"
    source_dir.mkdir(parents=True)
    return PipelineConfig(
        source_dir=source_dir,
        cache_dir=tmp_path / ".next-cache",
        public_dir=tmp_path / "public",
        site_url="https://example.test",
        workers=2,
    )


@pytest.fixture
def write_sheet(pipeline_config: PipelineConfig) -> SheetWriter:
    """Return a helper that writes a workbook into the source directory.

    Files whose stem ends in ``_home`` get the homepage header row; every
    other file gets the subject header unless ``header`` is supplied.
    """

    def _write(
        filename: str,
        rows: cabc.Iterable[cabc.Mapping[str, object]],
        header: list[str] | None = None,
    ) -> Path:
        path = pipeline_config.source_dir / filename
        if header is None:
            is_home = path.stem.lower().endswith("_home")
            header = HOMEPAGE_HEADER if is_home else SUBJECT_HEADER
        return write_workbook(path, header, rows)

    return _write


@pytest.fixture
def workbook_writer() -> SheetWriter:
    """Return :func:`write_workbook` for tests that place files themselves."""
    return write_workbook

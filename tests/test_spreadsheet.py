from __future__ import annotations

import datetime as dt
import typing as typ
import zipfile

import pytest

from tutorial_pages.spreadsheet import SpreadsheetError, read_rows

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tests.conftest import SheetWriter


def test_read_rows_maps_header_to_values(
    tmp_path: Path, workbook_writer: SheetWriter
) -> None:
    path = workbook_writer(
        tmp_path / "kotlin.xlsx",
        ["id", "title", "url", "content"],
        [
            {"id": 1, "title": "Intro", "url": "intro", "content": "# Intro"},
            {"id": 2, "title": "Vars", "url": "vars", "content": "Body"},
        ],
    )
    rows = read_rows(path)
    assert rows == [
        {"id": 1, "title": "Intro", "url": "intro", "content": "# Intro"},
        {"id": 2, "title": "Vars", "url": "vars", "content": "Body"},
    ]


def test_read_rows_drops_blank_cells_and_rows(
    tmp_path: Path, workbook_writer: SheetWriter
) -> None:
    path = workbook_writer(
        tmp_path / "kotlin.xlsx",
        ["title", "url", "content"],
        [
            {"title": "Intro", "url": "intro", "content": "   "},
            {},
            {"title": "Second", "url": "second"},
        ],
    )
    rows = read_rows(path)
    assert rows == [
        {"title": "Intro", "url": "intro"},
        {"title": "Second", "url": "second"},
    ], f"blank cells and empty rows should be dropped, got {rows}"


def test_read_rows_strips_header_whitespace(
    tmp_path: Path, workbook_writer: SheetWriter
) -> None:
    path = workbook_writer(
        tmp_path / "kotlin.xlsx", [" title ", "url"], [{" title ": "A", "url": "a"}]
    )
    assert read_rows(path) == [{"title": "A", "url": "a"}]


def test_read_rows_converts_dates_to_iso(
    tmp_path: Path, workbook_writer: SheetWriter
) -> None:
    path = workbook_writer(
        tmp_path / "kotlin.xlsx",
        ["title", "lastModified"],
        [{"title": "A", "lastModified": dt.datetime(2026, 1, 2, 3, 4, 5)}],
    )
    (row,) = read_rows(path)
    assert row["lastModified"] == "2026-01-02T03:04:05"


def test_read_rows_rejects_corrupt_workbook(tmp_path: Path) -> None:
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip archive")
    with pytest.raises(SpreadsheetError, match="broken.xlsx"):
        read_rows(path)


def test_read_rows_wraps_malformed_sheet_xml(
    tmp_path: Path, workbook_writer: SheetWriter
) -> None:
    """Parser errors from inside a valid zip surface as SpreadsheetError."""
    path = workbook_writer(
        tmp_path / "broken.xlsx",
        ["title", "url", "content"],
        [{"title": "Intro", "url": "intro", "content": "Body"}],
    )
    member = "xl/worksheets/sheet1.xml"
    with zipfile.ZipFile(path) as archive:
        entries = {name: archive.read(name) for name in archive.namelist()}
    entries[member] = entries[member][: len(entries[member]) // 2]
    with zipfile.ZipFile(path, "w") as archive:
        for name, data in entries.items():
            archive.writestr(name, data)

    with pytest.raises(SpreadsheetError, match="broken.xlsx"):
        read_rows(path)

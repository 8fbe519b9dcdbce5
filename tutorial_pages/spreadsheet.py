"""Read the first worksheet of a spreadsheet into row mappings.

``pandas.read_excel`` picks the engine from the file extension (``openpyxl``
for ``.xlsx``, ``xlrd`` for ``.xls``). Each row becomes a ``dict`` keyed by
the header row, with empty cells dropped so callers can treat "absent" and
"blank" the same way.
"""

from __future__ import annotations

import datetime as dt
import typing as typ
from pathlib import Path

import pandas as pd


class SpreadsheetError(RuntimeError):
    """Raised when a spreadsheet cannot be opened or parsed."""


def read_rows(path: Path) -> list[dict[str, typ.Any]]:
    """Return the rows of the first worksheet in ``path``.

    Parameters
    ----------
    path : Path
        Location of an ``.xlsx`` or ``.xls`` workbook.

    Returns
    -------
    list[dict[str, Any]]
        One mapping per data row, in sheet order. Rows whose cells are all
        empty are skipped.

    Raises
    ------
    SpreadsheetError
        If the workbook cannot be read.
    """
    try:
        frame = pd.read_excel(path, sheet_name=0, dtype=object)
    except Exception as exc:
        # The engines raise their own parser errors (XML ParseError, zip and
        # xlrd errors, ...) for malformed workbooks; all of them are per-file.
        msg = f"Unable to read spreadsheet '{path.name}': {exc}"
        raise SpreadsheetError(msg) from exc

    columns = [_header(column) for column in frame.columns]
    rows: list[dict[str, typ.Any]] = []
    for values in frame.itertuples(index=False, name=None):
        row: dict[str, typ.Any] = {}
        for column, value in zip(columns, values, strict=True):
            if column is None:
                continue
            cleaned = _cell(value)
            if cleaned is not None:
                row[column] = cleaned
        if row:
            rows.append(row)
    return rows


def _header(column: object) -> str | None:
    """Return a stripped header name, or None for blank/unnamed columns."""
    text = str(column).strip()
    if not text or text.startswith("Unnamed:"):
        return None
    return text


def _cell(value: object) -> typ.Any:
    """Normalize a cell value; blanks become None and dates ISO strings."""
    if value is None:
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    if pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime().isoformat()
    if isinstance(value, dt.datetime | dt.date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


__all__ = ["SpreadsheetError", "read_rows"]

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from typing import Any

"""Cell accessor helpers.

Rows are plain sequences of raw cell values (None, str, int, float, bool) as
produced by excel/reader.py. Nothing in here raises on a short or missing row:
absent cells read as None and stringify to "".
"""

__all__ = [
    "Row",
    "Sheet",
    "cell_at",
    "as_trimmed_string",
    "is_blank",
    "column_index",
    "column_letter",
    "parse_cell_ref",
]

Row = Sequence[Any]
Sheet = Sequence[Row]

_CELL_REF = re.compile(r"^([A-Za-z]+)([1-9][0-9]*)$")


def cell_at(row: Row | None, index: int) -> Any:
    """Return the raw value at ``index`` or None when the cell does not exist."""
    if row is None or index < 0 or index >= len(row):
        return None
    return row[index]


def as_trimmed_string(value: Any) -> str:
    """Coerce a raw cell value to trimmed text.

    Integral floats drop their fractional part so that a numeric 1 read back as
    1.0 compares equal to "1".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def is_blank(value: Any) -> bool:
    return as_trimmed_string(value) == ""


def column_index(letters: str) -> int:
    """Spreadsheet column letters to 0-based index (A=0, Z=25, AA=26)."""
    letters = letters.strip().upper()
    if not letters or not letters.isalpha() or not letters.isascii():
        raise ValueError(f"invalid column letters: {letters!r}")
    index = 0
    for ch in letters:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def column_letter(index: int) -> str:
    """0-based index to spreadsheet column letters (inverse of column_index)."""
    if index < 0:
        raise ValueError(f"column index must be >= 0: {index}")
    letters = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def parse_cell_ref(ref: str) -> tuple[int, int]:
    """Parse "H2" into (row, column) with a 1-based row and 0-based column."""
    m = _CELL_REF.match(ref.strip())
    if not m:
        raise ValueError(f"invalid cell reference: {ref!r}")
    return int(m.group(2)), column_index(m.group(1))

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

"""Sheet reader adapter.

Converts a workbook (.xlsx / .xls) or a .csv file into the Sheet the rule
engine consumes: a list of rows, each a list of raw cell values indexed from
column A = 0. Only the first sheet is read. Empty cells become None.

Row i of the result is always spreadsheet row i+1: blank lines and leading
blank rows are kept as rows of None, and CSV rows of uneven width are padded.

Any failure to decode the file is raised as SheetReadError, which the
orchestrator reports as a file-level error without stopping the batch.
"""

__all__ = [
    "SUPPORTED_SUFFIXES",
    "SheetReadError",
    "SheetData",
    "read_first_sheet",
    "frame_to_rows",
    "csv_width",
]

SUPPORTED_SUFFIXES = {".xlsx", ".xlsm", ".xls", ".csv"}
CSV_ENCODING = "utf-8"


class SheetReadError(Exception):
    """Raised when a file cannot be decoded into a sheet."""


@dataclass(frozen=True)
class SheetData:
    sheet_name: str
    rows: list[list[Any]]


def frame_to_rows(df: pd.DataFrame) -> list[list[Any]]:
    """Convert a header-less DataFrame into rows with NaN replaced by None."""
    rows: list[list[Any]] = []
    for raw in df.itertuples(index=False, name=None):
        rows.append([None if _is_missing(v) else v for v in raw])
    return rows


def _is_missing(value: Any) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def csv_width(path: Path) -> int:
    """Number of fields on the widest line of a CSV file (0 when empty)."""
    with path.open(newline="", encoding=CSV_ENCODING) as fh:
        return max((len(record) for record in csv.reader(fh)), default=0)


def _read_csv(path: Path) -> SheetData:
    # pandas sizes the frame from the first line unless names are given
    width = csv_width(path)
    if width == 0:
        return SheetData(sheet_name=path.stem, rows=[])
    df = pd.read_csv(
        path,
        header=None,
        names=list(range(width)),
        skip_blank_lines=False,
        keep_default_na=False,
        na_values=[""],
        encoding=CSV_ENCODING,
    )
    return SheetData(sheet_name=path.stem, rows=frame_to_rows(df))


def read_first_sheet(path: Path) -> SheetData:
    """Read the first sheet of a workbook, or a CSV file, into raw rows.

    Only empty strings are treated as missing so that literal values such as
    "NA" or "None" survive as text (pandas would otherwise turn them into NaN).
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise SheetReadError(f"unsupported file type: {path.name}")
    if not path.exists():
        raise SheetReadError(f"file not found: {path}")
    try:
        if suffix == ".csv":
            return _read_csv(path)
        with pd.ExcelFile(path) as xls:
            if not xls.sheet_names:
                raise SheetReadError(f"workbook has no sheets: {path.name}")
            name = str(xls.sheet_names[0])
            df = xls.parse(xls.sheet_names[0], header=None, keep_default_na=False, na_values=[""])
    except SheetReadError:
        raise
    except pd.errors.EmptyDataError:
        return SheetData(sheet_name=path.stem, rows=[])
    except Exception as e:
        raise SheetReadError(f"failed to read {path.name}: {e}") from e
    return SheetData(sheet_name=name, rows=frame_to_rows(df))

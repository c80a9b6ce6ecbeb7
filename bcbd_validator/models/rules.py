from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

"""Declarative rule models for the BCBD validation engine.

A brand catalog is a list of rules. Each rule is one of four tagged variants:

- MarkerLookup: scan a column for a label, read a neighbouring cell on that row
- FixedCell: read one specific cell (e.g. H2)
- CategoryRange: collect every row tagged with a category (or, without a
  category, every row of a section) and validate each one
- SpecialCaseRow: like CategoryRange, but rows branch on a secondary condition

What a value must look like is described by an Expectation, whose mode decides
how the raw cell is compared (see services/normalize.py).
"""

__all__ = [
    "ComparisonMode",
    "Expectation",
    "Section",
    "CellCheck",
    "MarkerLookup",
    "FixedCell",
    "CategoryRange",
    "SpecialCaseRow",
    "Rule",
]


class ComparisonMode(Enum):
    """How a raw cell value is compared against the expectation."""
    EXACT = "exact"
    NUMERIC = "numeric"
    RANGE = "range"
    PERCENTAGE = "percentage"
    PERCENTAGE_RANGE = "percentage_range"
    CONTAINS = "contains"


@dataclass(frozen=True)
class Expectation:
    """Expected value of a cell.

    Only the fields relevant to ``mode`` are used:

    - EXACT: text, case_sensitive
    - NUMERIC: value, tolerance
    - RANGE: minimum, maximum (plain numbers, inclusive)
    - PERCENTAGE: value (as decimal, 0.05 == 5%), tolerance, whole_tolerance
    - PERCENTAGE_RANGE: minimum, maximum (as decimals, inclusive)
    - CONTAINS: options (the text must contain at least one, case-insensitive)
    """
    mode: ComparisonMode
    text: str | None = None
    value: float | None = None
    minimum: float | None = None
    maximum: float | None = None
    tolerance: float = 0.0001
    whole_tolerance: float = 0.01
    case_sensitive: bool = False
    options: tuple[str, ...] = ()

    @property
    def display(self) -> str:
        """Human readable form used in the Expected column."""
        if self.mode is ComparisonMode.EXACT:
            return self.text or ""
        if self.mode is ComparisonMode.NUMERIC:
            return _plain_number(self.value)
        if self.mode is ComparisonMode.RANGE:
            return f"{self.minimum:.2f} - {self.maximum:.2f}"
        if self.mode is ComparisonMode.CONTAINS:
            return "Contains " + " or ".join(f'"{o}"' for o in self.options)
        if self.mode is ComparisonMode.PERCENTAGE:
            return f"{_plain_number((self.value or 0.0) * 100)}%"
        return (
            f"{_plain_number((self.minimum or 0.0) * 100)}% - "
            f"{_plain_number((self.maximum or 0.0) * 100)}%"
        )


def _plain_number(value: float | None) -> str:
    if value is None:
        return ""
    rounded = round(value, 6)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:g}"


@dataclass(frozen=True)
class Section:
    """Row window for grouped rules.

    Rows strictly after the first ``start_marker`` row and strictly before the
    next ``stop_marker`` row are scanned. Without a start marker the window
    opens at the top of the sheet. Columns are 0-based indices.

    Marker text is read from ``span`` adjacent columns joined by a space, and
    compared with ``match`` ("equals" or "contains", case-insensitive).
    """
    start_column: int = 0
    start_marker: str | None = None
    stop_column: int | None = None
    stop_marker: str | None = None
    match: str = "equals"  # equals | contains
    span: int = 1
    closed: bool = False  # the window is not located when the stop marker is missing


@dataclass(frozen=True)
class CellCheck:
    """Single cell validated on a special-case row."""
    column: int
    expectation: Expectation


@dataclass(frozen=True)
class MarkerLookup:
    name: str
    marker_column: int
    marker: str
    check_column: int
    expectation: Expectation
    match: str = "equals"  # equals | contains
    exclude: tuple[str, ...] = ()


@dataclass(frozen=True)
class FixedCell:
    name: str
    row: int  # 1-based, spreadsheet convention
    column: int  # 0-based
    expectation: Expectation


@dataclass(frozen=True)
class CategoryRange:
    """Rows selected by their label, each validated on ``value_column``.

    A row belongs to the category when its label equals ``category``, or, with
    ``label_terms``, when the label contains every term and none of
    ``label_exclude``. With ``continue_until`` the rows following a category row
    stay in the group until a label containing one of those terms. Without a
    category every row of ``section`` is taken, less the rows whose label
    contains a ``label_exclude`` term. ``first_match`` keeps only the first
    selected row.

    ``skip_blank`` drops rows whose value cell is empty, ``skip_text`` also
    drops rows whose value cell is not numeric.
    """
    name: str
    category: str | None
    expectation: Expectation
    label_column: int = 0
    sequence_column: int = 1
    value_column: int = 11
    section: Section | None = None
    label_terms: tuple[str, ...] = ()
    label_exclude: tuple[str, ...] = ()
    continue_until: tuple[str, ...] = ()
    first_match: bool = False
    skip_blank: bool = False
    skip_text: bool = False


@dataclass(frozen=True)
class SpecialCaseRow:
    """Category rows that branch on the content of a condition cell.

    Rows whose condition cell contains ``condition_text`` (or every row, when no
    condition is configured) validate ``cell_checks``. Other rows validate the
    ``fallback`` cell when one is configured and are skipped otherwise. Row
    selection works as for CategoryRange; ``skip_blank`` drops rows whose
    checked cells are all empty.
    """
    name: str
    category: str | None
    cell_checks: tuple[CellCheck, ...]
    label_column: int = 0
    sequence_column: int = 1
    condition_column: int | None = None
    condition_text: str | None = None
    fallback: CellCheck | None = None
    section: Section | None = None
    expected_display: str | None = None
    label_terms: tuple[str, ...] = ()
    label_exclude: tuple[str, ...] = ()
    continue_until: tuple[str, ...] = ()
    first_match: bool = False
    skip_blank: bool = False


Rule = Union[MarkerLookup, FixedCell, CategoryRange, SpecialCaseRow]

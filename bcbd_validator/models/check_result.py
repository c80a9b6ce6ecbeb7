from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

"""Check result models produced by the rule matchers.

A CheckResult is one finding (one row in the report). CategoryGroupResult is the
variant for rules that match many rows; it carries one CategoryEntry per row and
is valid only if every entry is valid.
"""

__all__ = [
    "EMPTY",
    "NO_ROW",
    "CheckResult",
    "CellValidation",
    "CategoryEntry",
    "CategoryGroupResult",
]

# actual value for a matched row whose check cell is blank
EMPTY = "Empty"
# row_number when a result is not tied to a single row
NO_ROW = -1


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a single rule against a sheet.

    Attributes:
        name: Rule display name
        found: Whether the marker / cell / category was located
        row_number: 1-based row of the match, -1 if not applicable
        actual: Display value read from the sheet ("Empty" for a blank cell)
        expected: Display form of the expectation
        is_valid: Comparison outcome. Always False when found is False
        marker_column: Column letter(s) scanned for the marker
        check_column: Column letter(s) holding the validated value
        deviation: Absolute distance from the expected value or nearest bound
            for numeric comparisons, None otherwise
    """
    name: str
    found: bool
    row_number: int
    actual: str
    expected: str
    is_valid: bool
    marker_column: str
    check_column: str
    deviation: float | None = None

    def __post_init__(self) -> None:
        if self.is_valid and not self.found:
            raise ValueError(f"check '{self.name}' cannot be valid when not found")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CellValidation:
    column: str
    value: str
    expected: str
    is_valid: bool


@dataclass(frozen=True)
class CategoryEntry:
    """One matched category row.

    ``branch`` is "default" for plain value checks and "special" for rows that
    validated a set of cells (their per-cell outcome is in cell_validations).
    """
    sequence: str
    value: str
    is_valid: bool
    row_number: int
    branch: str = "default"
    cell_validations: tuple[CellValidation, ...] = ()


@dataclass(frozen=True)
class CategoryGroupResult(CheckResult):
    category: str = ""
    entries: tuple[CategoryEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        super().__post_init__()
        if not self.entries:
            raise ValueError(f"group '{self.name}' must hold at least one entry")
        if self.is_valid != all(e.is_valid for e in self.entries):
            raise ValueError(f"group '{self.name}' validity must equal the AND of its entries")

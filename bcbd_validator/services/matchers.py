from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Union

from ..models.check_result import (
    EMPTY,
    NO_ROW,
    CategoryEntry,
    CategoryGroupResult,
    CellValidation,
    CheckResult,
)
from ..models.rules import CategoryRange, FixedCell, MarkerLookup, Section, SpecialCaseRow
from .cells import Row, Sheet, as_trimmed_string, cell_at, column_letter, is_blank
from .normalize import as_number, evaluate

logger = logging.getLogger(__name__)

"""Rule matchers: the scan strategies run over a whole sheet.

Each matcher takes one rule and the full sheet and returns CheckResults. A rule
whose marker, cell or category is missing is reported with found=False; nothing
in here raises for missing data.

- match_marker: first row whose marker column equals the label
- match_fixed_cell: one (row, column) pair
- match_category: every row tagged with a category, grouped
- match_special_case: category rows branching on a condition cell

Grouped rules select rows by label (exact category, or contained terms),
optionally carry a block on to the unlabelled rows that follow, and may be
limited to a section window.
"""

__all__ = [
    "match_marker",
    "match_fixed_cell",
    "match_category",
    "match_special_case",
    "section_rows",
]

GroupedRule = Union[CategoryRange, SpecialCaseRow]


def _marker_matches(cell_text: str, rule: MarkerLookup) -> bool:
    text = cell_text.lower()
    marker = rule.marker.strip().lower()
    if rule.match == "contains":
        if marker not in text:
            return False
        return not any(ex.lower() in text for ex in rule.exclude)
    return text == marker


def match_marker(sheet: Sheet, rule: MarkerLookup) -> CheckResult:
    """Marker-row lookup: stop at the first matching row."""
    expected = rule.expectation.display
    for i, row in enumerate(sheet):
        marker_text = as_trimmed_string(cell_at(row, rule.marker_column))
        if not marker_text or not _marker_matches(marker_text, rule):
            continue
        reading = evaluate(cell_at(row, rule.check_column), rule.expectation)
        logger.debug("rule=%s matched row=%d actual=%s", rule.name, i + 1, reading.display)
        return CheckResult(
            name=rule.name,
            found=True,
            row_number=i + 1,
            actual=reading.display,
            expected=expected,
            is_valid=reading.is_valid,
            marker_column=column_letter(rule.marker_column),
            check_column=column_letter(rule.check_column),
            deviation=reading.deviation,
        )
    return CheckResult(
        name=rule.name,
        found=False,
        row_number=NO_ROW,
        actual=f"{rule.marker} not found",
        expected=expected,
        is_valid=False,
        marker_column=column_letter(rule.marker_column),
        check_column=column_letter(rule.check_column),
    )


def match_fixed_cell(sheet: Sheet, rule: FixedCell) -> CheckResult:
    """Fixed-cell lookup: found iff the cell holds a value."""
    letter = column_letter(rule.column)
    base = dict(
        name=rule.name,
        row_number=rule.row,
        expected=rule.expectation.display,
        marker_column=letter,
        check_column=letter,
    )
    if rule.row < 1 or len(sheet) < rule.row:
        return CheckResult(found=False, actual="Row not found", is_valid=False, **base)
    value = cell_at(sheet[rule.row - 1], rule.column)
    if value is None:
        return CheckResult(found=False, actual=EMPTY, is_valid=False, **base)
    reading = evaluate(value, rule.expectation)
    return CheckResult(
        found=True,
        actual=reading.display,
        is_valid=reading.is_valid,
        deviation=reading.deviation,
        **base,
    )


def _marker_text(row: Row, column: int, span: int) -> str:
    parts = (as_trimmed_string(cell_at(row, column + k)) for k in range(max(span, 1)))
    return " ".join(p for p in parts if p).lower()


def _text_matches(text: str, marker: str, match: str) -> bool:
    marker = marker.strip().lower()
    if match == "contains":
        return marker in text
    return text == marker


def _section_bounds(sheet: Sheet, section: Section) -> tuple[int, int] | None:
    start = 0
    if section.start_marker:
        start = None
        for i, row in enumerate(sheet):
            text = _marker_text(row, section.start_column, section.span)
            if _text_matches(text, section.start_marker, section.match):
                start = i + 1
                break
        if start is None:
            return None
    end = len(sheet)
    if section.stop_column is not None and section.stop_marker:
        for i in range(start, len(sheet)):
            text = _marker_text(sheet[i], section.stop_column, section.span)
            if _text_matches(text, section.stop_marker, section.match):
                end = i
                break
        else:
            if section.closed:
                return None
    return start, end


def section_rows(sheet: Sheet, section: Section | None) -> Iterator[tuple[int, Row]] | None:
    """Yield (index, row) pairs inside the section, None if it cannot be located."""
    if section is None:
        return iter(enumerate(sheet))
    bounds = _section_bounds(sheet, section)
    if bounds is None:
        return None
    start, end = bounds
    return ((i, sheet[i]) for i in range(start, end))


def _label_matches(label: str, rule: GroupedRule) -> bool:
    lowered = label.lower()
    if any(term.lower() in lowered for term in rule.label_exclude):
        return False
    if rule.label_terms:
        return all(term.lower() in lowered for term in rule.label_terms)
    return label.upper() == (rule.category or "").strip().upper()


def _grouped_rows(sheet: Sheet, rule: GroupedRule) -> Iterator[tuple[int, Row]]:
    rows = section_rows(sheet, rule.section)
    if rows is None:
        return
    stops = tuple(term.lower() for term in rule.continue_until)
    every_row = rule.category is None and not rule.label_terms
    in_block = False
    for i, row in rows:
        label = as_trimmed_string(cell_at(row, rule.label_column))
        if every_row:
            lowered = label.lower()
            if any(term.lower() in lowered for term in rule.label_exclude):
                continue
            yield i, row
        elif label and _label_matches(label, rule):
            in_block = bool(stops)
            yield i, row
        elif in_block:
            if label and any(term in label.lower() for term in stops):
                in_block = False
                continue
            yield i, row
        else:
            continue
        if rule.first_match:
            return


def _not_found(name: str, category: str, expected: str, marker_col: str, check_col: str) -> CheckResult:
    return CheckResult(
        name=name,
        found=False,
        row_number=NO_ROW,
        actual=f"No {category} rows found",
        expected=expected,
        is_valid=False,
        marker_column=marker_col,
        check_column=check_col,
    )


def match_category(sheet: Sheet, rule: CategoryRange) -> CheckResult:
    """Category range lookup: one group per category, not-found when empty."""
    expected = rule.expectation.display
    category = rule.category or rule.name
    entries: list[CategoryEntry] = []
    for i, row in _grouped_rows(sheet, rule):
        value = cell_at(row, rule.value_column)
        if is_blank(value) and is_blank(cell_at(row, rule.label_column)):
            continue
        if (rule.skip_blank or rule.skip_text) and is_blank(value):
            continue
        if rule.skip_text and as_number(value, strip_symbols=True) is None:
            continue
        reading = evaluate(value, rule.expectation)
        entries.append(
            CategoryEntry(
                sequence=as_trimmed_string(cell_at(row, rule.sequence_column)),
                value=reading.display,
                is_valid=reading.is_valid,
                row_number=i + 1,
            )
        )
    marker_col = column_letter(rule.label_column)
    check_col = column_letter(rule.value_column)
    if not entries:
        return _not_found(rule.name, category, expected, marker_col, check_col)
    return CategoryGroupResult(
        name=rule.name,
        found=True,
        row_number=NO_ROW,
        actual="",
        expected=expected,
        is_valid=all(e.is_valid for e in entries),
        marker_column=marker_col,
        check_column=check_col,
        category=category,
        entries=tuple(entries),
    )


def _special_expected(rule: SpecialCaseRow) -> str:
    if rule.expected_display:
        return rule.expected_display
    checks = ", ".join(
        f"{column_letter(c.column)}={c.expectation.display}" for c in rule.cell_checks
    )
    if rule.condition_text:
        checks = f"{rule.condition_text}: {checks}"
    if rule.fallback is not None:
        checks = f"{checks} | Other: {rule.fallback.expectation.display}"
    return checks


def _check_columns(rule: SpecialCaseRow) -> str:
    cols = []
    if rule.condition_column is not None:
        cols.append(rule.condition_column)
    cols.extend(c.column for c in rule.cell_checks)
    if rule.fallback is not None:
        cols.append(rule.fallback.column)
    seen: list[str] = []
    for col in cols:
        letter = column_letter(col)
        if letter not in seen:
            seen.append(letter)
    return ",".join(seen)


def match_special_case(sheet: Sheet, rule: SpecialCaseRow) -> CheckResult:
    """Special-case row logic: branch each category row on its condition cell."""
    expected = _special_expected(rule)
    category = rule.category or rule.name
    needle = (rule.condition_text or "").strip().lower()
    entries: list[CategoryEntry] = []
    for i, row in _grouped_rows(sheet, rule):
        sequence = as_trimmed_string(cell_at(row, rule.sequence_column))
        condition_text = ""
        if rule.condition_column is not None:
            condition_text = as_trimmed_string(cell_at(row, rule.condition_column))
        special = not needle or needle in condition_text.lower()
        if rule.skip_blank:
            checked = rule.cell_checks if special else ()
            if not special and rule.fallback is not None:
                checked = (rule.fallback,)
            if all(is_blank(cell_at(row, c.column)) for c in checked):
                continue

        if special:
            validations: list[CellValidation] = []
            if rule.condition_column is not None:
                validations.append(
                    CellValidation(
                        column=column_letter(rule.condition_column),
                        value=condition_text or EMPTY,
                        expected=rule.condition_text or "",
                        is_valid=True,
                    )
                )
            for check in rule.cell_checks:
                reading = evaluate(cell_at(row, check.column), check.expectation)
                validations.append(
                    CellValidation(
                        column=column_letter(check.column),
                        value=reading.display,
                        expected=check.expectation.display,
                        is_valid=reading.is_valid,
                    )
                )
            entries.append(
                CategoryEntry(
                    sequence=sequence,
                    value=" | ".join(v.value for v in validations),
                    is_valid=all(v.is_valid for v in validations),
                    row_number=i + 1,
                    branch="special",
                    cell_validations=tuple(validations),
                )
            )
        elif rule.fallback is not None:
            reading = evaluate(cell_at(row, rule.fallback.column), rule.fallback.expectation)
            entries.append(
                CategoryEntry(
                    sequence=sequence,
                    value=reading.display,
                    is_valid=reading.is_valid,
                    row_number=i + 1,
                )
            )

    marker_col = column_letter(rule.label_column)
    check_col = _check_columns(rule)
    if not entries:
        return _not_found(rule.name, category, expected, marker_col, check_col)
    return CategoryGroupResult(
        name=rule.name,
        found=True,
        row_number=NO_ROW,
        actual="",
        expected=expected,
        is_valid=all(e.is_valid for e in entries),
        marker_column=marker_col,
        check_column=check_col,
        category=category,
        entries=tuple(entries),
    )

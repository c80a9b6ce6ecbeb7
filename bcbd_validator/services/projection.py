from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..models.catalog import BrandCatalog
from ..models.check_result import CategoryEntry, CategoryGroupResult, CheckResult
from ..models.file_result import FileResult
from .aggregator import summarize_file
from .summary import render_file_summary

"""Report projection.

Maps FileResults into a renderer-neutral report model: per file a summary
sentence and one three-column row per check, each cell tagged with a status
("normal", "valid", "warning" or "invalid"). The same model backs the JSON
output of the CLI and the PDF export configuration.

Two row layouts exist. "checks" shows (name, value, expected); "cells" shows
(name, checked column, cell references), invalid cells carrying their actual
and expected values.
"""

__all__ = [
    "NORMAL",
    "VALID",
    "WARNING",
    "INVALID",
    "NOT_FOUND_TEXT",
    "ReportRow",
    "FileReport",
    "BrandReportModel",
    "project",
    "project_check",
    "project_cells",
]

NORMAL = "normal"
VALID = "valid"
WARNING = "warning"
INVALID = "invalid"

NOT_FOUND_TEXT = "Not Found"


@dataclass(frozen=True)
class ReportRow:
    cells: tuple[str, str, str]
    statuses: tuple[str, str, str]


@dataclass(frozen=True)
class FileReport:
    file_name: str
    sheet_name: str | None
    summary: str
    rows: tuple[ReportRow, ...] = ()
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "sheet_name": self.sheet_name,
            "summary": self.summary,
            "error": self.error,
            "rows": [
                {"cells": list(r.cells), "statuses": list(r.statuses)} for r in self.rows
            ],
        }


@dataclass(frozen=True)
class BrandReportModel:
    brand: str
    title: str
    filename_prefix: str
    headers: tuple[str, ...]
    column_widths: tuple[int, ...]
    files: tuple[FileReport, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "brand": self.brand,
            "title": self.title,
            "headers": list(self.headers),
            "files": [f.to_dict() for f in self.files],
        }


def _entry_line(category: str, entry: CategoryEntry) -> str:
    label = f"{category} {entry.sequence}" if entry.sequence else category
    if entry.branch == "special":
        return f"{label}: {entry.value}"
    return f"{label} {entry.value}"


def _value_status(check: CheckResult, warning_tolerance: float | None) -> str:
    if check.is_valid:
        return VALID
    if (
        check.found
        and warning_tolerance is not None
        and check.deviation is not None
        and check.deviation <= warning_tolerance
    ):
        return WARNING
    return INVALID


def project_check(
    check: CheckResult,
    warning_tolerance: float | None = None,
    missing_status: str = INVALID,
) -> ReportRow:
    """Project one check into a report row."""
    if isinstance(check, CategoryGroupResult):
        value_text = "\n".join(_entry_line(check.category, e) for e in check.entries)
        status = VALID if check.is_valid else INVALID
    elif not check.found:
        value_text = NOT_FOUND_TEXT
        status = missing_status
    else:
        value_text = check.actual
        status = _value_status(check, warning_tolerance)
    return ReportRow(
        cells=(check.name, value_text, check.expected),
        statuses=(NORMAL, status, NORMAL),
    )


def _cell_text(ref: str, is_valid: bool, actual: str, expected: str) -> str:
    if is_valid:
        return ref
    return f"{ref} (Actual: {actual}, Expected: {expected})"


def project_cells(check: CheckResult, missing_status: str = INVALID) -> ReportRow:
    """Project one check into a (name, column, cell references) row."""
    column = check.check_column.split(",")[-1]
    described = f"{column} ({check.expected})"
    if isinstance(check, CategoryGroupResult):
        text = ", ".join(
            _cell_text(f"{column}{e.row_number}", e.is_valid, e.value, check.expected)
            for e in check.entries
        )
        status = VALID if check.is_valid else INVALID
    elif not check.found:
        text = NOT_FOUND_TEXT
        status = missing_status
    else:
        text = _cell_text(f"{column}{check.row_number}", check.is_valid, check.actual, check.expected)
        status = VALID if check.is_valid else INVALID
    return ReportRow(cells=(check.name, described, text), statuses=(NORMAL, NORMAL, status))


def _project_row(catalog: BrandCatalog, check: CheckResult) -> ReportRow:
    if catalog.layout == "cells":
        return project_cells(check, catalog.missing_status)
    return project_check(check, catalog.warning_tolerance, catalog.missing_status)


def _project_file(catalog: BrandCatalog, result: FileResult) -> FileReport:
    summary = render_file_summary(summarize_file(result))
    if result.error is not None:
        return FileReport(
            file_name=result.file_name,
            sheet_name=result.sheet_name,
            summary=summary,
            rows=(),
            error=result.error,
        )
    return FileReport(
        file_name=result.file_name,
        sheet_name=result.sheet_name,
        summary=summary,
        rows=tuple(_project_row(catalog, c) for c in result.checks),
    )


def project(catalog: BrandCatalog, file_results: Iterable[FileResult]) -> BrandReportModel:
    """Build the report model for a batch. Pure and total over its input."""
    return BrandReportModel(
        brand=catalog.brand,
        title=catalog.title,
        filename_prefix=catalog.filename_prefix,
        headers=tuple(catalog.headers),
        column_widths=tuple(catalog.column_widths),
        files=tuple(_project_file(catalog, r) for r in file_results),
    )

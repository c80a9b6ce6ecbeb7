from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .check_result import CategoryGroupResult, CheckResult

"""FileResult domain model.

One FileResult is built per processed spreadsheet. It is immutable once built and
is the unit consumed by the aggregator and the report projection.

A file that could not be read carries ``error`` and no checks.
"""

__all__ = [
    "FileResult",
]


@dataclass(frozen=True)
class FileResult:
    file_name: str
    sheet_name: str | None
    checks: tuple[CheckResult, ...] = ()
    error: str | None = None

    @staticmethod
    def failed(file_name: str, message: str) -> FileResult:
        return FileResult(file_name=file_name, sheet_name=None, checks=(), error=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Plain dict form (used by the JSON report output)."""
        checks: list[dict[str, Any]] = []
        for check in self.checks:
            data = check.to_dict()
            data["kind"] = "group" if isinstance(check, CategoryGroupResult) else "single"
            checks.append(data)
        return {
            "file_name": self.file_name,
            "sheet_name": self.sheet_name,
            "error": self.error,
            "checks": checks,
        }

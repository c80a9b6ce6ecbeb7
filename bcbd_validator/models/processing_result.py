from __future__ import annotations

from dataclasses import dataclass

"""Aggregated result models for a validation batch.

FileSummary holds the per-file counts shown in the summary line, BatchSummary
accumulates them over all files of one "Generate" run.
"""


@dataclass(frozen=True)
class FileSummary:
    """Per-file check counts."""
    file_name: str
    total_checks: int
    found_checks: int
    valid_checks: int
    error: str | None = None


@dataclass(frozen=True)
class BatchSummary:
    """Aggregated counts over a batch, files listed in input order.

    Errored files are listed and counted in failed_files but contribute no checks,
    so they are excluded from valid_ratio.
    """
    files: tuple[FileSummary, ...]
    total_files: int
    failed_files: int
    total_checks: int
    found_checks: int
    valid_checks: int

    @property
    def valid_ratio(self) -> float | None:
        if self.total_checks == 0:
            return None
        return self.valid_checks / self.total_checks

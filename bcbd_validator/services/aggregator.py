from __future__ import annotations

from collections.abc import Iterable

from ..models.file_result import FileResult
from ..models.processing_result import BatchSummary, FileSummary

"""Result aggregation.

Counts are taken per file and summed over the batch in input order. A file with
a file-level error contributes no checks; it is still listed and counted as
failed.
"""

__all__ = [
    "summarize_file",
    "summarize_batch",
]


def summarize_file(result: FileResult) -> FileSummary:
    checks = result.checks if result.error is None else ()
    return FileSummary(
        file_name=result.file_name,
        total_checks=len(checks),
        found_checks=sum(1 for c in checks if c.found),
        valid_checks=sum(1 for c in checks if c.is_valid),
        error=result.error,
    )


def summarize_batch(results: Iterable[FileResult]) -> BatchSummary:
    files = tuple(summarize_file(r) for r in results)
    return BatchSummary(
        files=files,
        total_files=len(files),
        failed_files=sum(1 for f in files if f.error is not None),
        total_checks=sum(f.total_checks for f in files),
        found_checks=sum(f.found_checks for f in files),
        valid_checks=sum(f.valid_checks for f in files),
    )

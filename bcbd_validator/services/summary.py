from __future__ import annotations

from ..models.processing_result import BatchSummary, FileSummary

"""Summary line rendering.

Two formats:

- per file (shown above each result table and in the PDF export):
  ``"X out of Y found checks are valid (Z total rules)"``
- per batch (logged at SUMMARY level by the CLI):
  ``"SUMMARY files=N failed=F checks=C found=D valid=V"``
"""


def render_file_summary(summary: FileSummary) -> str:
    """Render the per-file summary sentence.

    Examples:
        >>> render_file_summary(FileSummary("a.xlsx", total_checks=10, found_checks=8, valid_checks=6))
        '6 out of 8 found checks are valid (10 total rules)'
    """
    return (
        f"{summary.valid_checks} out of {summary.found_checks} "
        f"found checks are valid ({summary.total_checks} total rules)"
    )


def render_summary_line(summary: BatchSummary) -> str:
    """Render the batch SUMMARY line.

    Examples:
        >>> s = BatchSummary(files=(), total_files=3, failed_files=1,
        ...                  total_checks=20, found_checks=18, valid_checks=15)
        >>> render_summary_line(s)
        'SUMMARY files=3 failed=1 checks=20 found=18 valid=15'
    """
    return (
        f"SUMMARY files={summary.total_files} "
        f"failed={summary.failed_files} "
        f"checks={summary.total_checks} "
        f"found={summary.found_checks} "
        f"valid={summary.valid_checks}"
    )

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from ..excel.reader import SheetReadError, read_first_sheet
from ..logging.error_log import FILE_LEVEL_SHEET, BatchErrorLog
from ..models.file_result import FileResult
from .engine import RuleEngine
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Batch orchestration.

Processes the selected files sequentially in input order. Each file is read
and validated on its own; a file that cannot be read becomes a failed
FileResult and the batch continues with the next file. File-level failures are
recorded in the batch error log, which is written once at the end.
"""

__all__ = [
    "FILE_LEVEL_SHEET",
    "process_files",
    "process_file",
]


def process_file(path: Path, engine: RuleEngine, error_log: BatchErrorLog | None = None) -> FileResult:
    """Read and validate a single file.

    Returns a failed FileResult instead of raising when the file cannot be read.
    """
    try:
        sheet = read_first_sheet(path)
    except SheetReadError as e:
        logger.error("file=%s %s", path.name, e)
        if error_log is not None:
            error_log.record_read_failure(path.name, str(e))
        return FileResult.failed(path.name, str(e))

    result = engine.validate_file(path.name, sheet.sheet_name, sheet.rows)
    logger.info(
        "file=%s sheet=%s checks=%d",
        path.name,
        sheet.sheet_name,
        len(result.checks),
    )
    return result


def process_files(
    paths: Iterable[Path],
    engine: RuleEngine,
    error_log: BatchErrorLog | None = None,
) -> list[FileResult]:
    """Validate every file in order; one FileResult per input path.

    Args:
        paths: Files to validate (order is preserved in the result)
        engine: Rule engine of the selected brand
        error_log: Error log of this batch; a fresh one is opened when None

    Returns:
        FileResults in input order
    """
    file_paths = [Path(p) for p in paths]
    log = error_log if error_log is not None else BatchErrorLog()

    results: list[FileResult] = []
    failed = 0
    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            result = process_file(file_path, engine, log)
            if not result.ok:
                failed += 1
            results.append(result)
            progress.set_postfix(done=len(results), failed=failed)
            progress.finish_file()

    path = log.write()
    if path is not None:
        logger.warning("%d file error(s) written to %s", len(log.failed_files), path)
    return results

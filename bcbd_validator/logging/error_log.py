from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""Per-batch error log.

One BatchErrorLog is opened per validation batch. Files that could not be
validated are recorded against it, and write() appends the records as JSON
Lines to ``logs/errors-YYYYMMDD-HHMMSS.log``, stamped with the UTC start of
the batch. A batch without failures leaves no file behind.
"""

__all__ = [
    "BatchErrorLog",
    "ErrorRecord",
    "FILE_LEVEL_SHEET",
    "SHEET_READ_ERROR",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

# sheet name recorded when the workbook itself could not be read
FILE_LEVEL_SHEET = "<FILE_LEVEL>"
SHEET_READ_ERROR = "SHEET_READ_ERROR"


class BatchErrorLog:
    def __init__(self, logs_dir: Path | None = None, started: datetime | None = None) -> None:
        self.started = started or datetime.now(UTC)
        self.path = (logs_dir or LOGS_DIR) / f"errors-{self.started.strftime(TIMESTAMP_FMT)}.log"
        self._pending: list[ErrorRecord] = []
        self._failed_files: list[str] = []

    @property
    def pending(self) -> tuple[ErrorRecord, ...]:
        """Records not yet written."""
        return tuple(self._pending)

    @property
    def failed_files(self) -> tuple[str, ...]:
        """Names of the files recorded in this batch, first failure order."""
        return tuple(self._failed_files)

    def record_read_failure(self, file_name: str, message: str) -> ErrorRecord:
        """Record a file whose sheet could not be read (row -1, file level)."""
        record = ErrorRecord.create(
            file=file_name,
            sheet=FILE_LEVEL_SHEET,
            row=-1,
            error_type=SHEET_READ_ERROR,
            message=message,
        )
        self._pending.append(record)
        if file_name not in self._failed_files:
            self._failed_files.append(file_name)
        return record

    def write(self) -> Path | None:
        """Append pending records to the batch file.

        Returns:
            The log path, or None when there was nothing to write
        """
        if not self._pending:
            return None
        self.path.parent.mkdir(parents=True, exist_ok=True)
        lines = "".join(r.to_json_line() + "\n" for r in self._pending)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(lines)
        self._pending.clear()
        return self.path

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from pathlib import Path

from ..logging.error_log import BatchErrorLog
from ..models.file_result import FileResult
from .engine import RuleEngine
from .export import NoResultsError, PdfRenderer, export_pdf
from .orchestrator import process_files
from .projection import BrandReportModel, project

"""Validation session.

Holds the results of the last "Generate" action for one brand. A new generate
replaces the held results; export works on whatever was generated last.
"""

__all__ = [
    "ValidationSession",
]


class ValidationSession:
    def __init__(self, engine: RuleEngine, logs_dir: Path | None = None) -> None:
        self.engine = engine
        self._logs_dir = logs_dir
        self._results: tuple[FileResult, ...] | None = None

    @property
    def results(self) -> tuple[FileResult, ...]:
        return self._results or ()

    @property
    def has_results(self) -> bool:
        return self._results is not None

    def generate(self, paths: Iterable[Path]) -> tuple[FileResult, ...]:
        results = process_files(paths, self.engine, BatchErrorLog(self._logs_dir))
        self._results = tuple(results)
        return self._results

    def report(self) -> BrandReportModel:
        return project(self.engine.catalog, self.results)

    def export(self, renderer: PdfRenderer | None, output_dir: Path, today: date | None = None) -> Path:
        if self._results is None:
            raise NoResultsError("no results to export, generate results first")
        return export_pdf(self.report(), renderer, output_dir, today=today)

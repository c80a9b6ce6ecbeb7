from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from importlib.metadata import entry_points
from pathlib import Path
from typing import Protocol

from .projection import BrandReportModel, FileReport

logger = logging.getLogger(__name__)

"""Export boundary.

The PDF itself is drawn by an external renderer. This module builds the
renderer-neutral export configuration (title, headers, widths, per-file
summary and the row/status extractors) and hands it to the renderer together
with the output path ``{prefix}_{YYYY-MM-DD}.pdf``.

Renderers are installed separately and registered under the
``bcbd_validator.renderers`` entry point group; load_renderer() returns the
first one registered, or None.
"""

__all__ = [
    "RendererUnavailableError",
    "NoResultsError",
    "PdfRenderer",
    "ExportFile",
    "ExportConfig",
    "build_export_config",
    "export_filename",
    "export_pdf",
    "load_renderer",
    "RENDERER_GROUP",
]

RENDERER_GROUP = "bcbd_validator.renderers"


class RendererUnavailableError(Exception):
    """Raised when an export is requested but no PDF renderer is available."""


class NoResultsError(Exception):
    """Raised when an export is requested before any results exist."""


class PdfRenderer(Protocol):
    def render(self, config: ExportConfig, path: Path) -> None: ...


@dataclass(frozen=True)
class ExportFile:
    file_name: str
    sheet_name: str | None
    summary: str
    report: FileReport


@dataclass(frozen=True)
class ExportConfig:
    title: str
    file_results: tuple[ExportFile, ...]
    filename_prefix: str
    column_widths: tuple[int, ...]
    headers: tuple[str, ...]
    extract_row_data: Callable[[ExportFile], list[list[str]]]
    get_cell_statuses: Callable[[ExportFile], list[list[str]]]


def _rows(export_file: ExportFile) -> list[list[str]]:
    return [list(r.cells) for r in export_file.report.rows]


def _statuses(export_file: ExportFile) -> list[list[str]]:
    return [list(r.statuses) for r in export_file.report.rows]


def build_export_config(model: BrandReportModel) -> ExportConfig:
    files = tuple(
        ExportFile(
            file_name=f.file_name,
            sheet_name=f.sheet_name,
            summary=f"Summary: {f.summary}" if f.error is None else f"Error: {f.error}",
            report=f,
        )
        for f in model.files
    )
    return ExportConfig(
        title=model.title,
        file_results=files,
        filename_prefix=model.filename_prefix,
        column_widths=tuple(model.column_widths),
        headers=tuple(model.headers),
        extract_row_data=_rows,
        get_cell_statuses=_statuses,
    )


def export_filename(prefix: str, today: date | None = None) -> str:
    day = today or date.today()
    return f"{prefix}_{day.isoformat()}.pdf"


def export_pdf(
    model: BrandReportModel,
    renderer: PdfRenderer | None,
    output_dir: Path,
    today: date | None = None,
) -> Path:
    """Hand the report to the renderer and return the written path.

    Raises:
        RendererUnavailableError: renderer is None (nothing is written)
        NoResultsError: the model holds no files
    """
    if renderer is None:
        raise RendererUnavailableError("PDF renderer is not available")
    if not model.files:
        raise NoResultsError("no results to export, generate results first")
    config = build_export_config(model)
    path = Path(output_dir) / export_filename(model.filename_prefix, today)
    path.parent.mkdir(parents=True, exist_ok=True)
    renderer.render(config, path)
    logger.info("exported %d file(s) to %s", len(config.file_results), path)
    return path


def load_renderer(group: str = RENDERER_GROUP) -> PdfRenderer | None:
    """Instantiate the first renderer registered under ``group``."""
    for ep in sorted(entry_points(group=group), key=lambda e: e.name):
        logger.debug("loading renderer %s from %s", ep.name, ep.value)
        return ep.load()()
    return None

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from bcbd_validator.config.loader import ConfigError, available_brands, load_brand
from bcbd_validator.logging.init import log_summary, setup_logging
from bcbd_validator.services.aggregator import summarize_batch
from bcbd_validator.services.engine import RuleEngine
from bcbd_validator.services.export import (
    NoResultsError,
    PdfRenderer,
    RendererUnavailableError,
    load_renderer,
)
from bcbd_validator.services.session import ValidationSession
from bcbd_validator.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (BCBD_CATALOG_DIR may point at a custom catalog directory)
- Load and validate the brand catalog
- Validate every given file, in order
- Log one SUMMARY line per file and one for the batch
- Optionally write the report model as JSON
- Optionally export the report as PDF through an installed renderer

Exit codes: 0 all files read, 2 at least one file could not be read,
1 fatal (catalog error, unknown brand, no input files, export failure).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="bcbd-validate",
        description="Validate buyer cost breakdown spreadsheets against a brand rule catalog",
    )
    p.add_argument("files", nargs="*", type=Path, help="Spreadsheets to validate (.xlsx, .xls, .csv)")
    p.add_argument("--brand", help="Brand catalog key, e.g. rossignol")
    p.add_argument("--catalog-dir", type=Path, default=None, help="Directory holding brand catalog YAML files")
    p.add_argument("--json-out", type=Path, default=None, help="Write the report model as JSON to this file")
    p.add_argument(
        "--export-pdf", type=Path, default=None, metavar="DIR", help="Export the report as PDF into this directory"
    )
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--list-brands", action="store_true", help="List available brands and exit")
    return p.parse_args(argv)


def main(argv: list[str] | None = None, renderer: PdfRenderer | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest flags)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    if args.list_brands:
        try:
            brands = available_brands(args.catalog_dir)
        except ConfigError as e:
            logger.error(f"config: {e}")
            return EXIT_FATAL
        for brand in brands:
            logger.info(brand)
        return EXIT_SUCCESS_ALL

    if not args.brand:
        logger.error("--brand is required")
        return EXIT_FATAL
    try:
        catalog = load_brand(args.brand, args.catalog_dir)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if not args.files:
        logger.error("no input files given")
        return EXIT_FATAL

    logger.info(f"brand={catalog.brand} rules={len(catalog.rules)} files={len(args.files)}")

    session = ValidationSession(RuleEngine(catalog))
    results = session.generate(args.files)
    report = session.report()

    for file_report in report.files:
        if file_report.error is not None:
            log_summary(f"file={file_report.file_name} error={file_report.error}")
        else:
            log_summary(f"file={file_report.file_name} {file_report.summary}")

    batch = summarize_batch(results)
    # log_summary adds the "SUMMARY" label itself
    log_summary(render_summary_line(batch).removeprefix("SUMMARY "))

    if args.json_out is not None:
        args.json_out.parent.mkdir(parents=True, exist_ok=True)
        args.json_out.write_text(
            json.dumps(report.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
        )
        logger.info(f"report written to {args.json_out}")

    if args.export_pdf is not None:
        try:
            path = session.export(renderer or load_renderer(), args.export_pdf)
        except (RendererUnavailableError, NoResultsError) as e:
            logger.error(f"export: {e}")
            return EXIT_FATAL
        logger.info(f"pdf written to {path}")

    if batch.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

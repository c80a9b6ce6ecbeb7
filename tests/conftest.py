# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from bcbd_validator.config.loader import load_brand
from bcbd_validator.logging.init import reset_logging
from bcbd_validator.models.catalog import BrandCatalog
from bcbd_validator.services.cells import parse_cell_ref


def build_sheet(cells: Mapping[str, Any], n_rows: int | None = None, n_cols: int = 13) -> list[list[Any]]:
    """Build a rectangular sheet from {"E5": value} style cell assignments."""
    refs = {parse_cell_ref(ref): value for ref, value in cells.items()}
    max_row = max((r for r, _ in refs), default=0)
    max_col = max((c for _, c in refs), default=0)
    rows = n_rows if n_rows is not None else max_row
    cols = max(n_cols, max_col + 1)
    sheet: list[list[Any]] = [[None] * cols for _ in range(rows)]
    for (r, c), value in refs.items():
        sheet[r - 1][c] = value
    return sheet


def make_excel(path: Path, rows: list[list[Any]], sheet_name: str = "BCBD") -> Path:
    """Write rows to a real .xlsx file (no header, no index)."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


# A complete, fully valid Rossignol V23 sheet
ROSSIGNOL_CELLS: dict[str, Any] = {
    "A1": "BUYER COST BREAKDOWN",
    "H2": 0.07,
    "D5": "VENDOR NAME",
    "E5": "Madison 88",
    "D6": "CURRENCY",
    "E6": "USD",
    "I7": "FACTORY MARGIN",
    "J7": 0.55,
    "A10": "FABRIC", "B10": 1, "L10": 0.05,
    "A11": "FABRIC", "B11": 2, "L11": 5,
    "A12": "TRIM", "B12": 1, "L12": 0.03,
    "A13": "ACCESSORIES", "B13": 1, "L13": 3,
    "A14": "GRAPHIC", "B14": 1, "L14": 0.03,
    "A15": "LABELLING", "B15": 1, "L15": 0.03,
    "A16": "PACKAGING", "B16": 1, "D16": "Generic Packaging", "G16": "M88", "J16": "PC", "L16": 1,
    "A17": "PACKAGING", "B17": 2, "D17": "Polybag", "L17": 0.03,
}


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        # registered so that values loaded from .env are undone at teardown
        monkeypatch.setenv("BCBD_CATALOG_DIR", "")
        monkeypatch.delenv("BCBD_CATALOG_DIR")
        yield p


@pytest.fixture()
def rossignol() -> BrandCatalog:
    return load_brand("rossignol")


@pytest.fixture()
def rossignol_sheet() -> list[list[Any]]:
    return build_sheet(ROSSIGNOL_CELLS)


@pytest.fixture()
def rossignol_cells() -> dict[str, Any]:
    return dict(ROSSIGNOL_CELLS)


@pytest.fixture()
def sheet_builder():
    return build_sheet


@pytest.fixture()
def excel_writer():
    return make_excel

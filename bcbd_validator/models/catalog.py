from __future__ import annotations

from dataclasses import dataclass

from .rules import Rule

"""Brand catalog model.

A BrandCatalog bundles a brand's rule list with the display metadata the report
projection needs (title, export filename prefix, column headers and widths).
It is built from YAML by config/loader.py.
"""

__all__ = [
    "BrandCatalog",
]

DEFAULT_HEADERS = ("Check Name", "Value", "Expected")
DEFAULT_COLUMN_WIDTHS = (35, 90, 35)


@dataclass(frozen=True)
class BrandCatalog:
    brand: str  # catalog key, e.g. "rossignol"
    title: str  # report / PDF title
    filename_prefix: str  # export filename prefix
    rules: tuple[Rule, ...]
    headers: tuple[str, ...] = DEFAULT_HEADERS
    column_widths: tuple[int, ...] = DEFAULT_COLUMN_WIDTHS  # mm, PDF layout
    # Invalid numeric checks within this distance of the expectation are tagged
    # "warning" instead of "invalid". None disables the warning tag.
    warning_tolerance: float | None = None
    # "checks": one row per check (name, value, expected)
    # "cells": one row per check listing the cell references it validated
    layout: str = "checks"
    # status tag of a check whose marker, cell or rows were not found
    missing_status: str = "invalid"

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.catalog import DEFAULT_COLUMN_WIDTHS, DEFAULT_HEADERS, BrandCatalog
from ..models.rules import (
    CategoryRange,
    CellCheck,
    ComparisonMode,
    Expectation,
    FixedCell,
    MarkerLookup,
    Rule,
    Section,
    SpecialCaseRow,
)
from ..services.cells import column_index, parse_cell_ref

"""Brand catalog loader.

Responsibilities:
- Locate catalog YAML files (packaged catalog/ directory, or BCBD_CATALOG_DIR)
- Validate each file against config/catalog_schema.json
- Convert the validated data into BrandCatalog / rule dataclasses

Columns are written as spreadsheet letters in YAML and converted to 0-based
indices here.
"""

__all__ = [
    "ConfigError",
    "UnknownBrandError",
    "SCHEMA_PATH",
    "DEFAULT_CATALOG_DIR",
    "CATALOG_DIR_ENV",
    "catalog_dir",
    "available_brands",
    "load_catalog",
    "load_brand",
]

_package_root = Path(__file__).parent.parent
SCHEMA_PATH = Path(__file__).parent / "catalog_schema.json"
DEFAULT_CATALOG_DIR = _package_root / "catalog"
CATALOG_DIR_ENV = "BCBD_CATALOG_DIR"


class ConfigError(Exception):
    pass


class UnknownBrandError(ConfigError):
    pass


def catalog_dir(directory: Path | None = None) -> Path:
    """Resolve the catalog directory: explicit > BCBD_CATALOG_DIR > packaged."""
    if directory is not None:
        return directory
    env = os.getenv(CATALOG_DIR_ENV)
    if env:
        return Path(env)
    return DEFAULT_CATALOG_DIR


def available_brands(directory: Path | None = None) -> list[str]:
    d = catalog_dir(directory)
    if not d.is_dir():
        raise ConfigError(f"catalog directory not found: {d}")
    return sorted(p.stem for p in d.glob("*.yml"))


def _validate_catalog_schema(data: dict[str, Any]) -> None:
    """Validate catalog data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            catalog data fails schema validation.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"catalog schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"catalog validation failed at {where}: {e.message}") from e


def _expectation(raw: dict[str, Any]) -> Expectation:
    mode = ComparisonMode(raw["mode"])
    kwargs: dict[str, Any] = {"mode": mode}
    if "text" in raw:
        kwargs["text"] = str(raw["text"])
    if "value" in raw:
        kwargs["value"] = float(raw["value"])
    if "min" in raw:
        kwargs["minimum"] = float(raw["min"])
    if "max" in raw:
        kwargs["maximum"] = float(raw["max"])
    if "tolerance" in raw:
        kwargs["tolerance"] = float(raw["tolerance"])
    elif mode is ComparisonMode.NUMERIC:
        kwargs["tolerance"] = 0.001
    if "whole_tolerance" in raw:
        kwargs["whole_tolerance"] = float(raw["whole_tolerance"])
    if "case_sensitive" in raw:
        kwargs["case_sensitive"] = bool(raw["case_sensitive"])
    if "options" in raw:
        kwargs["options"] = tuple(str(o) for o in raw["options"])
    exp = Expectation(**kwargs)
    if exp.minimum is not None and exp.maximum is not None and exp.minimum > exp.maximum:
        raise ConfigError(f"expectation min {exp.minimum} exceeds max {exp.maximum}")
    return exp


def _section(raw: dict[str, Any] | None) -> Section | None:
    if raw is None:
        return None
    return Section(
        start_column=column_index(raw.get("start_column", "A")),
        start_marker=raw.get("start_marker"),
        stop_column=column_index(raw["stop_column"]) if "stop_column" in raw else None,
        stop_marker=raw.get("stop_marker"),
        match=raw.get("match", "equals"),
        span=int(raw.get("span", 1)),
        closed=bool(raw.get("closed", False)),
    )


def _row_selection(raw: dict[str, Any]) -> dict[str, Any]:
    """Keyword arguments shared by the grouped rule types."""
    category = raw.get("category")
    return {
        "name": raw.get("name", f"{category} Rows"),
        "category": category,
        "label_column": column_index(raw.get("label_column", "A")),
        "sequence_column": column_index(raw.get("sequence_column", "B")),
        "section": _section(raw.get("section")),
        "label_terms": tuple(raw.get("label_terms", ())),
        "label_exclude": tuple(raw.get("label_exclude", ())),
        "continue_until": tuple(raw.get("continue_until", ())),
        "first_match": bool(raw.get("first_match", False)),
        "skip_blank": bool(raw.get("skip_blank", False)),
    }


def _cell_check(raw: dict[str, Any]) -> CellCheck:
    return CellCheck(column=column_index(raw["column"]), expectation=_expectation(raw["expect"]))


def _build_rule(raw: dict[str, Any]) -> Rule:
    kind = raw["type"]
    if kind == "marker":
        return MarkerLookup(
            name=raw["name"],
            marker_column=column_index(raw["marker_column"]),
            marker=raw["marker"],
            check_column=column_index(raw["check_column"]),
            expectation=_expectation(raw["expect"]),
            match=raw.get("match", "equals"),
            exclude=tuple(raw.get("exclude", ())),
        )
    if kind == "fixed_cell":
        row, col = parse_cell_ref(raw["cell"])
        return FixedCell(name=raw["name"], row=row, column=col, expectation=_expectation(raw["expect"]))
    if kind == "category":
        return CategoryRange(
            expectation=_expectation(raw["expect"]),
            value_column=column_index(raw["value_column"]),
            skip_text=bool(raw.get("skip_text", False)),
            **_row_selection(raw),
        )
    if kind == "special_case":
        return SpecialCaseRow(
            cell_checks=tuple(_cell_check(c) for c in raw["cell_checks"]),
            condition_column=(
                column_index(raw["condition_column"]) if "condition_column" in raw else None
            ),
            condition_text=raw.get("condition_text"),
            fallback=_cell_check(raw["fallback"]) if "fallback" in raw else None,
            expected_display=raw.get("expected_display"),
            **_row_selection(raw),
        )
    raise ConfigError(f"unknown rule type: {kind}")  # pragma: no cover (schema rejects)


def load_catalog(path: Path) -> BrandCatalog:
    if not path.exists():
        raise ConfigError(f"catalog file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml in {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"catalog {path.name} must be a mapping")

    _validate_catalog_schema(data)

    rules = tuple(_build_rule(r) for r in data["rules"])
    names = [r.name for r in rules]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ConfigError(f"duplicate rule names in {path.name}: {duplicates}")

    return BrandCatalog(
        brand=data["brand"],
        title=data["title"],
        filename_prefix=data["filename_prefix"],
        rules=rules,
        headers=tuple(data.get("headers", DEFAULT_HEADERS)),
        column_widths=tuple(data.get("column_widths", DEFAULT_COLUMN_WIDTHS)),
        warning_tolerance=data.get("warning_tolerance"),
        layout=data.get("layout", "checks"),
        missing_status=data.get("missing_status", "invalid"),
    )


def load_brand(brand: str, directory: Path | None = None) -> BrandCatalog:
    key = brand.strip().lower().replace("-", "_").replace(" ", "_")
    d = catalog_dir(directory)
    path = d / f"{key}.yml"
    if not path.exists():
        known = available_brands(d) if d.is_dir() else []
        raise UnknownBrandError(f"unknown brand '{brand}' (available: {', '.join(known) or 'none'})")
    catalog = load_catalog(path)
    if catalog.brand != key:
        raise ConfigError(f"catalog {path.name} declares brand '{catalog.brand}', expected '{key}'")
    return catalog

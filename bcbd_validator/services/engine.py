from __future__ import annotations

import logging

from ..models.catalog import BrandCatalog
from ..models.check_result import CheckResult
from ..models.file_result import FileResult
from ..models.rules import CategoryRange, FixedCell, MarkerLookup, Rule, SpecialCaseRow
from .cells import Sheet
from .matchers import match_category, match_fixed_cell, match_marker, match_special_case

logger = logging.getLogger(__name__)

"""Rule engine.

One RuleEngine is constructed per brand catalog and is stateless between calls:
validating the same sheet twice yields equal results, and files never share
state. Rules are evaluated in catalog order, one CheckResult per rule.
"""

__all__ = [
    "RuleEngine",
]


class RuleEngine:
    def __init__(self, catalog: BrandCatalog) -> None:
        self.catalog = catalog

    @property
    def brand(self) -> str:
        return self.catalog.brand

    def check(self, sheet: Sheet, rule: Rule) -> CheckResult:
        if isinstance(rule, MarkerLookup):
            return match_marker(sheet, rule)
        if isinstance(rule, FixedCell):
            return match_fixed_cell(sheet, rule)
        if isinstance(rule, CategoryRange):
            return match_category(sheet, rule)
        if isinstance(rule, SpecialCaseRow):
            return match_special_case(sheet, rule)
        raise TypeError(f"unsupported rule type: {type(rule).__name__}")

    def validate(self, sheet: Sheet) -> tuple[CheckResult, ...]:
        """Run every catalog rule against the sheet."""
        results = tuple(self.check(sheet, rule) for rule in self.catalog.rules)
        logger.debug(
            "brand=%s rows=%d checks=%d valid=%d",
            self.brand,
            len(sheet),
            len(results),
            sum(1 for r in results if r.is_valid),
        )
        return results

    def validate_file(self, file_name: str, sheet_name: str | None, sheet: Sheet) -> FileResult:
        return FileResult(
            file_name=file_name,
            sheet_name=sheet_name,
            checks=self.validate(sheet),
            error=None,
        )

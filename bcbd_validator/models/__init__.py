"""Domain models for the BCBD validator.

This package contains the rule descriptors, check results, file results and
aggregate models used throughout the application.
"""

from .catalog import BrandCatalog
from .check_result import CategoryEntry, CategoryGroupResult, CellValidation, CheckResult
from .file_result import FileResult
from .processing_result import BatchSummary, FileSummary
from .rules import (
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

__all__ = [
    # Rule models
    "ComparisonMode",
    "Expectation",
    "Section",
    "CellCheck",
    "MarkerLookup",
    "FixedCell",
    "CategoryRange",
    "SpecialCaseRow",
    "Rule",
    "BrandCatalog",
    # Result models
    "CheckResult",
    "CellValidation",
    "CategoryEntry",
    "CategoryGroupResult",
    "FileResult",
    "FileSummary",
    "BatchSummary",
]

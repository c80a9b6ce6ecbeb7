from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ..models.check_result import EMPTY
from ..models.rules import ComparisonMode, Expectation
from .cells import as_trimmed_string

"""Value normalizer.

Interprets a raw cell as exact text, a numeric literal or a percentage and
compares it against an Expectation.

Percentages are read two ways because vendor sheets store the same wastage or
margin either as a decimal fraction (0.05) or as whole percentage points (5):

- value <= 1: decimal fraction, compared to the expected decimal with
  ``tolerance`` (default 0.0001)
- value > 1, or text ending in "%": whole points, compared to expected * 100
  with ``whole_tolerance`` (default 0.01)

Both forms of the same percentage must validate identically. Displayed figures
round half away from zero (0.125 shows as 13%), not half to even.
"""

__all__ = [
    "Reading",
    "as_number",
    "as_percentage",
    "percentage_in_range",
    "evaluate",
    "fixed",
]

_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_SYMBOLS = re.compile(r"[$,%\s]")


@dataclass(frozen=True)
class Reading:
    """Outcome of comparing one raw cell against an expectation.

    deviation is expressed on the expectation's decimal scale (None when the
    value is not numeric or the comparison is textual).
    """
    display: str
    is_valid: bool
    deviation: float | None = None


def as_number(value: Any, strip_symbols: bool = False) -> float | None:
    """Parse a raw cell into a float, None when it is not numeric.

    Strings must be a complete numeric literal; "5%" is None unless
    ``strip_symbols`` removes "$", ",", "%" and whitespace first.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) else number
    text = str(value).strip()
    if strip_symbols:
        text = _SYMBOLS.sub("", text)
    if not _NUMBER.match(text):
        return None
    return float(text)


def fixed(number: float, places: int) -> str:
    """Format with a fixed number of decimals, rounding ties away from zero."""
    step = Decimal(1).scaleb(-places)
    return str(Decimal(number).quantize(step, rounding=ROUND_HALF_UP))


def _text_or_empty(value: Any) -> str:
    return as_trimmed_string(value) or EMPTY


def _in_points(value: Any, number: float) -> bool:
    return number > 1 or (isinstance(value, str) and value.strip().endswith("%"))


def _distance(number: float, minimum: float, maximum: float) -> float:
    if number < minimum:
        return minimum - number
    if number > maximum:
        return number - maximum
    return 0.0


def as_percentage(
    value: Any,
    expected_decimal: float,
    tolerance: float = 0.0001,
    whole_tolerance: float = 0.01,
) -> Reading:
    """Validate a percentage cell stored either as 0.05 or as 5.

    Expectations below 1% (e.g. 0.012%) are displayed with three decimals.
    """
    number = as_number(value, strip_symbols=True)
    if number is None:
        return Reading(_text_or_empty(value), False)
    places = 3 if 0 < expected_decimal < 0.01 else 0
    if not _in_points(value, number):
        diff = abs(number - expected_decimal)
        return Reading(f"{fixed(number * 100, places)}%", diff < tolerance, diff)
    diff = abs(number - expected_decimal * 100)
    return Reading(f"{fixed(number, places)}%", diff < whole_tolerance, diff / 100)


def percentage_in_range(value: Any, minimum: float, maximum: float) -> Reading:
    """Validate a percentage cell against inclusive decimal bounds."""
    number = as_number(value, strip_symbols=True)
    if number is None:
        return Reading(_text_or_empty(value), False)
    if not _in_points(value, number):
        return Reading(
            f"{fixed(number * 100, 2)}%",
            minimum <= number <= maximum,
            _distance(number, minimum, maximum),
        )
    decimal = number / 100
    return Reading(
        f"{fixed(number, 2)}%",
        minimum * 100 <= number <= maximum * 100,
        _distance(decimal, minimum, maximum),
    )


def evaluate(value: Any, expectation: Expectation) -> Reading:
    """Compare a raw cell against any expectation mode."""
    mode = expectation.mode
    if mode is ComparisonMode.EXACT:
        text = as_trimmed_string(value)
        expected = expectation.text or ""
        if expectation.case_sensitive:
            ok = text == expected
        else:
            ok = text.lower() == expected.lower()
        return Reading(text or EMPTY, ok and text != "")
    if mode is ComparisonMode.CONTAINS:
        text = as_trimmed_string(value)
        lowered = text.lower()
        ok = any(option.lower() in lowered for option in expectation.options)
        return Reading(text or EMPTY, ok and text != "")
    if mode is ComparisonMode.PERCENTAGE:
        return as_percentage(
            value,
            expectation.value or 0.0,
            expectation.tolerance,
            expectation.whole_tolerance,
        )
    if mode is ComparisonMode.PERCENTAGE_RANGE:
        return percentage_in_range(value, expectation.minimum or 0.0, expectation.maximum or 0.0)

    number = as_number(value, strip_symbols=True)
    if number is None:
        return Reading(_text_or_empty(value), False)
    if mode is ComparisonMode.NUMERIC:
        diff = abs(number - (expectation.value or 0.0))
        return Reading(as_trimmed_string(value), diff < expectation.tolerance, diff)
    # RANGE
    minimum = expectation.minimum or 0.0
    maximum = expectation.maximum or 0.0
    return Reading(
        fixed(number, 2),
        minimum <= number <= maximum,
        _distance(number, minimum, maximum),
    )

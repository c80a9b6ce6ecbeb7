from __future__ import annotations

import pytest

from bcbd_validator.models.rules import ComparisonMode, Expectation
from bcbd_validator.services.normalize import (
    as_number,
    as_percentage,
    evaluate,
    fixed,
    percentage_in_range,
)

"""Value normalizer tests: numeric parsing, dual percentage reading, modes."""


@pytest.mark.parametrize(
    "raw,expected",
    [
        (5, 5.0),
        (0.05, 0.05),
        ("0.35", 0.35),
        (" 12 ", 12.0),
        ("1e-3", 0.001),
        ("abc", None),
        ("5%", None),
        ("", None),
        (None, None),
        (True, None),
        (float("nan"), None),
    ],
)
def test_as_number(raw, expected):
    assert as_number(raw) == expected


def test_as_number_strip_symbols():
    assert as_number("5%", strip_symbols=True) == 5.0
    assert as_number("$1,250.50", strip_symbols=True) == 1250.5
    assert as_number("n/a", strip_symbols=True) is None


# Both storage forms of the same percentage validate the same way
@pytest.mark.parametrize("raw", [0.05, 5, "0.05", "5", "5%"])
def test_percentage_dual_reading_valid(raw):
    reading = as_percentage(raw, 0.05)
    assert reading.is_valid
    assert reading.display == "5%"


@pytest.mark.parametrize("raw", [0.049, 4.9])
def test_percentage_dual_reading_invalid(raw):
    reading = as_percentage(raw, 0.05)
    assert not reading.is_valid
    assert reading.deviation == pytest.approx(0.001)


def test_percentage_one_is_read_as_decimal():
    # 1 is 100% (decimal reading), not 1%
    reading = as_percentage(1, 0.01)
    assert not reading.is_valid
    assert reading.display == "100%"


def test_percentage_non_numeric():
    assert as_percentage("n/a", 0.05).display == "n/a"
    blank = as_percentage(None, 0.05)
    assert blank.display == "Empty"
    assert not blank.is_valid
    assert blank.deviation is None


def test_percentage_in_range_formats_two_decimals():
    inside = percentage_in_range(0.07, 0.05, 0.10)
    assert inside.display == "7.00%"
    assert inside.is_valid
    assert inside.deviation == 0.0

    outside = percentage_in_range(0.12, 0.05, 0.10)
    assert outside.display == "12.00%"
    assert not outside.is_valid
    assert outside.deviation == pytest.approx(0.02)


def test_percentage_in_range_whole_points_and_bounds():
    assert percentage_in_range(8, 0.05, 0.10).display == "8.00%"
    assert percentage_in_range(10, 0.05, 0.10).is_valid
    assert percentage_in_range(0.05, 0.05, 0.10).is_valid
    assert not percentage_in_range(15, 0.05, 0.10).is_valid


def test_evaluate_exact_case_insensitive_by_default():
    exp = Expectation(ComparisonMode.EXACT, text="Madison 88")
    assert evaluate(" MADISON 88 ", exp).is_valid
    assert evaluate("Madison 88", exp).display == "Madison 88"
    assert not evaluate("Madison88", exp).is_valid


def test_evaluate_exact_case_sensitive():
    exp = Expectation(ComparisonMode.EXACT, text="p", case_sensitive=True)
    assert evaluate("p", exp).is_valid
    assert not evaluate("P", exp).is_valid


def test_evaluate_exact_blank_is_empty_and_invalid():
    exp = Expectation(ComparisonMode.EXACT, text="")
    reading = evaluate(None, exp)
    assert reading.display == "Empty"
    assert not reading.is_valid


def test_evaluate_exact_numeric_cell_matches_text():
    exp = Expectation(ComparisonMode.EXACT, text="0", case_sensitive=True)
    assert evaluate(0, exp).is_valid
    assert evaluate(0.0, exp).is_valid


def test_evaluate_numeric_tolerance():
    exp = Expectation(ComparisonMode.NUMERIC, value=0.35, tolerance=0.001)
    assert evaluate(0.3505, exp).is_valid
    assert evaluate("0.35", exp).display == "0.35"
    bad = evaluate(0.36, exp)
    assert not bad.is_valid
    assert bad.deviation == pytest.approx(0.01)


def test_evaluate_range_inclusive():
    exp = Expectation(ComparisonMode.RANGE, minimum=0.40, maximum=0.70)
    assert evaluate(0.40, exp).is_valid
    assert evaluate(0.70, exp).is_valid
    low = evaluate(0.3, exp)
    assert low.display == "0.30"
    assert not low.is_valid
    assert low.deviation == pytest.approx(0.1)


def test_evaluate_non_numeric_in_numeric_modes():
    for exp in (
        Expectation(ComparisonMode.NUMERIC, value=1),
        Expectation(ComparisonMode.RANGE, minimum=0, maximum=1),
    ):
        reading = evaluate("TBD", exp)
        assert reading.display == "TBD"
        assert not reading.is_valid
        assert reading.deviation is None


@pytest.mark.parametrize(
    "exp,display",
    [
        (Expectation(ComparisonMode.EXACT, text="USD"), "USD"),
        (Expectation(ComparisonMode.NUMERIC, value=0.35), "0.35"),
        (Expectation(ComparisonMode.NUMERIC, value=1.0), "1"),
        (Expectation(ComparisonMode.RANGE, minimum=0.4, maximum=0.7), "0.40 - 0.70"),
        (Expectation(ComparisonMode.PERCENTAGE, value=0.05), "5%"),
        (Expectation(ComparisonMode.PERCENTAGE_RANGE, minimum=0.05, maximum=0.10), "5% - 10%"),
    ],
)
def test_expectation_display(exp, display):
    assert exp.display == display


@pytest.mark.parametrize(
    "number,places,text",
    [(12.5, 0, "13"), (13.5, 0, "14"), (7.125, 2, "7.13"), (0.625, 2, "0.63"), (5, 2, "5.00"), (-2.5, 0, "-3")],
)
def test_fixed_rounds_ties_away_from_zero(number, places, text):
    assert fixed(number, places) == text


def test_percentage_display_rounds_half_up():
    assert as_percentage(0.125, 0.125).display == "13%"
    assert as_percentage(2.5, 0.025).display == "3%"
    assert percentage_in_range(7.125, 0.05, 0.10).display == "7.13%"
    assert evaluate(0.625, Expectation(ComparisonMode.RANGE, minimum=0.6, maximum=0.7)).display == "0.63"

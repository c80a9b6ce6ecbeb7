from __future__ import annotations

from bcbd_validator.models.check_result import CheckResult
from bcbd_validator.models.file_result import FileResult
from bcbd_validator.services.aggregator import summarize_batch, summarize_file


def _check(name: str, found: bool, valid: bool) -> CheckResult:
    return CheckResult(
        name=name,
        found=found,
        row_number=1 if found else -1,
        actual="x",
        expected="y",
        is_valid=valid,
        marker_column="A",
        check_column="B",
    )


def test_summarize_file_counts():
    fr = FileResult(
        "a.xlsx",
        "S",
        checks=(_check("a", True, True), _check("b", True, False), _check("c", False, False)),
    )
    s = summarize_file(fr)
    assert (s.total_checks, s.found_checks, s.valid_checks) == (3, 2, 1)
    assert s.error is None


def test_summarize_batch_keeps_order_and_excludes_errors():
    ok = FileResult("a.xlsx", "S", checks=(_check("a", True, True), _check("b", True, True)))
    bad = FileResult.failed("b.xlsx", "failed to read b.xlsx")
    partial = FileResult("c.xlsx", "S", checks=(_check("a", True, False),))

    batch = summarize_batch([ok, bad, partial])
    assert [f.file_name for f in batch.files] == ["a.xlsx", "b.xlsx", "c.xlsx"]
    assert batch.total_files == 3
    assert batch.failed_files == 1
    assert batch.total_checks == 3
    assert batch.found_checks == 3
    assert batch.valid_checks == 2
    assert batch.valid_ratio == 2 / 3
    assert batch.files[1].error == "failed to read b.xlsx"
    assert batch.files[1].total_checks == 0


def test_valid_ratio_none_without_checks():
    batch = summarize_batch([FileResult.failed("x.xlsx", "boom")])
    assert batch.valid_ratio is None
    assert summarize_batch([]).total_files == 0

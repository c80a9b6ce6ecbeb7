from __future__ import annotations

import json
from pathlib import Path

from bcbd_validator.logging.error_log import BatchErrorLog
from bcbd_validator.services.engine import RuleEngine
from bcbd_validator.services.orchestrator import FILE_LEVEL_SHEET, process_file, process_files


def test_process_file_valid(temp_workdir: Path, rossignol, rossignol_sheet, excel_writer):
    path = excel_writer(temp_workdir / "data" / "good.xlsx", rossignol_sheet)
    result = process_file(path, RuleEngine(rossignol))
    assert result.ok
    assert result.sheet_name == "BCBD"
    assert all(c.is_valid for c in result.checks)


def test_process_file_unreadable_records_error(temp_workdir: Path, rossignol):
    bad = temp_workdir / "data" / "broken.xlsx"
    bad.write_bytes(b"this is not a workbook")
    log = BatchErrorLog()
    result = process_file(bad, RuleEngine(rossignol), log)
    assert not result.ok
    assert result.checks == ()
    assert "broken.xlsx" in result.error
    (record,) = log.pending
    assert log.failed_files == ("broken.xlsx",)
    assert record.file == "broken.xlsx"
    assert record.sheet == FILE_LEVEL_SHEET
    assert record.row == -1
    assert record.error_type == "SHEET_READ_ERROR"


def test_batch_independence(temp_workdir: Path, rossignol, rossignol_sheet, excel_writer):
    data = temp_workdir / "data"
    first = excel_writer(data / "one.xlsx", rossignol_sheet)
    second = data / "two.xlsx"
    second.write_bytes(b"garbage")
    third = excel_writer(data / "three.xlsx", rossignol_sheet)
    engine = RuleEngine(rossignol)

    alone = [process_file(first, engine), process_file(third, engine)]
    batch = process_files([first, second, third], engine)

    assert [r.file_name for r in batch] == ["one.xlsx", "two.xlsx", "three.xlsx"]
    assert batch[0] == alone[0]
    assert batch[2] == alone[1]
    assert batch[1].error is not None


def test_error_log_flushed_once_per_batch(temp_workdir: Path, rossignol):
    data = temp_workdir / "data"
    for name in ("a.xlsx", "b.xlsx"):
        (data / name).write_bytes(b"nope")
    (data / "c.txt").write_text("wrong type", encoding="utf-8")

    results = process_files(sorted(data.iterdir()), RuleEngine(rossignol))
    assert [r.ok for r in results] == [False, False, False]

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    lines = logs[0].read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["file"] for line in lines] == ["a.xlsx", "b.xlsx", "c.txt"]


def test_no_error_log_when_all_files_read(temp_workdir: Path, rossignol, rossignol_sheet, excel_writer):
    path = excel_writer(temp_workdir / "data" / "ok.xlsx", rossignol_sheet)
    process_files([path], RuleEngine(rossignol))
    assert list((temp_workdir / "logs").glob("errors-*.log")) == []

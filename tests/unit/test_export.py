from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from bcbd_validator.models.file_result import FileResult
from bcbd_validator.services.engine import RuleEngine
from bcbd_validator.services.export import (
    NoResultsError,
    RendererUnavailableError,
    build_export_config,
    export_filename,
    export_pdf,
    load_renderer,
)
from bcbd_validator.services.projection import project


class RecordingRenderer:
    def __init__(self) -> None:
        self.calls = []

    def render(self, config, path: Path) -> None:
        self.calls.append((config, path))
        path.write_bytes(b"%PDF-1.4\n")


@pytest.fixture()
def model(rossignol, rossignol_sheet):
    fr = RuleEngine(rossignol).validate_file("a.xlsx", "BCBD", rossignol_sheet)
    return project(rossignol, [fr, FileResult.failed("b.xlsx", "failed to read b.xlsx")])


def test_export_filename():
    assert export_filename("RossignolValidation_V23", date(2024, 3, 9)) == "RossignolValidation_V23_2024-03-09.pdf"


def test_build_export_config(model):
    config = build_export_config(model)
    assert config.title == "Rossignol Validation Results - V23"
    assert config.headers == ("Check Name", "Value", "Expected")
    assert config.column_widths == (35, 90, 35)
    ok, failed = config.file_results
    assert ok.summary.startswith("Summary: 10 out of 10")
    assert failed.summary == "Error: failed to read b.xlsx"
    rows = config.extract_row_data(ok)
    statuses = config.get_cell_statuses(ok)
    assert len(rows) == len(statuses) == 10
    assert rows[0] == ["Vendor Name", "Madison 88", "Madison 88"]
    assert statuses[0] == ["normal", "valid", "normal"]
    assert config.extract_row_data(failed) == []


def test_export_without_renderer_writes_nothing(model, tmp_path):
    with pytest.raises(RendererUnavailableError):
        export_pdf(model, None, tmp_path / "out")
    assert not (tmp_path / "out").exists()


def test_export_without_files(rossignol, tmp_path):
    with pytest.raises(NoResultsError):
        export_pdf(project(rossignol, []), RecordingRenderer(), tmp_path)


def test_export_calls_renderer(model, tmp_path):
    renderer = RecordingRenderer()
    path = export_pdf(model, renderer, tmp_path / "out", today=date(2024, 1, 2))
    assert path == tmp_path / "out" / "RossignolValidation_V23_2024-01-02.pdf"
    assert path.exists()
    (config, called_path), = renderer.calls
    assert called_path == path
    assert len(config.file_results) == 2


class _EntryPoint:
    def __init__(self, name, factory) -> None:
        self.name = name
        self.value = f"pkg:{name}"
        self._factory = factory

    def load(self):
        return self._factory


def test_load_renderer_takes_first_registered(monkeypatch):
    seen = []
    monkeypatch.setattr(
        "bcbd_validator.services.export.entry_points",
        lambda group: seen.append(group) or [_EntryPoint("zeta", list), _EntryPoint("alpha", RecordingRenderer)],
    )
    assert isinstance(load_renderer(), RecordingRenderer)
    assert seen == ["bcbd_validator.renderers"]


def test_load_renderer_none_registered(monkeypatch):
    monkeypatch.setattr("bcbd_validator.services.export.entry_points", lambda group: [])
    assert load_renderer() is None

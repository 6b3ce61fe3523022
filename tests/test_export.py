"""Tests for CSV export of simulation results."""

import csv

import pytest

from optibench.core.simulation import OpticalSimulation
from optibench.core.templates import create_michelson_template
from optibench.export import CsvExporter
from optibench.models.simulation import (
    InterferencePattern,
    RayReport,
    SimulationResult,
)


# ── Helpers ──


def _read_rows(path) -> list[list[str]]:
    with open(path, newline="", encoding="utf-8-sig") as f:
        return list(csv.reader(f))


@pytest.fixture
def michelson_result():
    _, result = OpticalSimulation().run(create_michelson_template())
    return result


class TestRayReportCsv:

    def test_headers(self, tmp_path, michelson_result):
        path = tmp_path / "rays.csv"
        CsvExporter().export_ray_reports(michelson_result, str(path))
        rows = _read_rows(path)
        assert rows[0][:5] == [
            "Ray", "Wavelength (nm)", "Path Length (mm)", "Final Power", "Power Loss (%)",
        ]
        assert len(rows[0]) == 11

    def test_one_row_per_interaction(self, tmp_path, michelson_result):
        path = tmp_path / "rays.csv"
        CsvExporter().export_ray_reports(michelson_result, str(path))
        expected = sum(max(len(r.interactions), 1) for r in michelson_result.ray_reports)
        assert len(_read_rows(path)) == expected + 1

    def test_ray_without_interactions(self, tmp_path):
        result = SimulationResult(ray_reports=[RayReport(ray_id="ray-x", wavelength=632.8)])
        path = tmp_path / "rays.csv"
        CsvExporter().export_ray_reports(result, str(path))
        row = _read_rows(path)[1]
        assert row[0] == "ray-x"
        assert row[5:] == [""] * 6

    def test_bom_written(self, tmp_path, michelson_result):
        path = tmp_path / "rays.csv"
        CsvExporter().export_ray_reports(michelson_result, str(path))
        assert path.read_bytes().startswith(b"\xef\xbb\xbf")


class TestInterferenceCsv:

    def test_michelson_row(self, tmp_path, michelson_result):
        path = tmp_path / "interference.csv"
        CsvExporter().export_interference(michelson_result, str(path))
        rows = _read_rows(path)
        assert rows[0] == [
            "Detector", "Type", "Path Difference (mm)",
            "Order of Interference", "Visibility",
        ]
        assert rows[1][0] == "detector-1"
        assert float(rows[1][2]) == pytest.approx(420.0)

    def test_detector_without_pair(self, tmp_path):
        result = SimulationResult(interference_patterns=[InterferencePattern(detector_id="d")])
        path = tmp_path / "interference.csv"
        CsvExporter().export_interference(result, str(path))
        assert _read_rows(path)[1] == ["d", "none", "", "", "0.000"]

"""Tests for the command-line entry point."""

import json

import pytest

pytest.importorskip("PyQt6")

from main import main  # noqa: E402


class TestMain:

    def test_template_run_prints_result(self, capsys):
        assert main(["michelson"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["totalRays"] == 4
        assert data["interferencePatterns"][0]["detectorId"] == "detector-1"

    def test_csv_export(self, tmp_path, capsys):
        out_dir = tmp_path / "out"
        assert main(["periscope", "--csv-dir", str(out_dir)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["totalRays"] == 1
        assert (out_dir / "rays.csv").exists()
        assert (out_dir / "interference.csv").exists()

    def test_bounce_limit(self, capsys):
        assert main(["periscope", "--max-bounces", "1"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["interferencePatterns"][0]["interferencePattern"] == "none"

    def test_unknown_template_rejected(self):
        with pytest.raises(SystemExit):
            main(["sagnac"])

"""Tests for cli.py -- the healthdash command group."""

from __future__ import annotations

import json

from click.testing import CliRunner

from healthdash.cli import main

from tests.conftest import write_csv


def _invoke(*args: str):
    return CliRunner().invoke(main, list(args))


class TestAnalyze:
    def test_writes_json(self, export_dir, tmp_path):
        out_file = tmp_path / "summary.json"
        result = _invoke("analyze", str(export_dir), "--as-of", "2024-03-20", "-o", str(out_file))
        assert result.exit_code == 0, result.output
        assert f"Summary written to {out_file}" in result.output

        data = json.loads(out_file.read_text())
        assert data["activity"]["total_steps"] == 31000
        assert data["body"]["weight_change_per_week"] == -0.5
        assert data["long_term"]["interval"] == "1y"

    def test_echoes_json(self, export_dir):
        result = _invoke("analyze", str(export_dir), "--as-of", "2024-03-20")
        assert result.exit_code == 0, result.output
        assert '"total_steps": 31000' in result.output
        assert "Activity:  10,333 steps/day over 3 days" in result.output

    def test_options(self, export_dir, tmp_path):
        out_file = tmp_path / "summary.json"
        result = _invoke(
            "analyze", str(export_dir),
            "--step-goal", "8000",
            "--sleep-hours", "6",
            "--interval", "all",
            "--as-of", "2024-03-20",
            "--output", str(out_file),
        )
        assert result.exit_code == 0, result.output
        data = json.loads(out_file.read_text())
        assert data["activity"]["current_streak"] == 3
        assert data["sleep"]["recommended_sleep_h"] == 6.0
        assert data["long_term"]["interval"] == "all"

    def test_verbose(self, export_dir):
        result = _invoke("analyze", str(export_dir), "--as-of", "2024-03-20", "-v")
        assert "skipping" in result.output

    def test_non_finite_cells(self, tmp_path):
        write_csv(tmp_path / "ACTIVITY" / "a.csv", ["date", "steps", "distance", "calories"],
                  [["2024-03-08", "NaN", 0, 0], ["2024-03-09", 6000, 4000, 250]])
        write_csv(tmp_path / "BODY" / "b.csv", ["time", "weight", "bmi"],
                  [["2024-03-08", "nan", 24], ["2024-03-09", 80, 24]])
        result = _invoke("analyze", str(tmp_path), "--as-of", "2024-03-20")
        assert result.exit_code == 0, result.output
        assert "NaN" not in result.output
        assert "+nan" not in result.output
        assert '"total_measurements": 1' in result.output

    def test_unknown_interval(self, export_dir):
        result = _invoke("analyze", str(export_dir), "--interval", "2w")
        assert result.exit_code != 0

    def test_missing_directory(self, tmp_path):
        result = _invoke("analyze", str(tmp_path / "missing"))
        assert result.exit_code != 0


class TestTrends:
    def test_tables(self, export_dir):
        result = _invoke("trends", str(export_dir), "--as-of", "2024-03-20")
        assert result.exit_code == 0, result.output
        assert "Quarterly (1y):" in result.output
        assert "2024 Q1" in result.output
        assert "Yearly:" in result.output
        assert "Most active year: 2024 (10,333 steps/day over 3 days)" in result.output
        assert "Best sleep year:  2024" in result.output

    def test_empty_export(self, tmp_path):
        result = _invoke("trends", str(tmp_path), "--as-of", "2024-03-20")
        assert result.exit_code == 0, result.output
        assert "Most active year" not in result.output


class TestContext:
    def test_context_block(self, export_dir):
        result = _invoke("context", str(export_dir), "--as-of", "2024-03-20")
        assert result.exit_code == 0, result.output
        assert "- Average Steps: 10,333 per day over 3 days" in result.output
        assert "Heart Rate & Stress:" in result.output


def test_help():
    result = _invoke("--help")
    assert result.exit_code == 0
    for command in ("analyze", "trends", "context"):
        assert command in result.output

# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0", "pytest>=7.0"]
# ///
"""Tests for the scorebook command line.

Validates:
  1. Text, JSON and CSV output for a snapshot file
  2. --era-innings and SCOREBOOK_ERA_INNINGS change the ERA denominator
  3. --output writes to a file
  4. Missing, invalid and malformed snapshots exit with status 1
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from scorebook import main

SAMPLE = Path(__file__).resolve().parent.parent / "data" / "games" / "sample_game.json"


class TestOutputFormats:
    def test_text(self, capsys):
        assert main([str(SAMPLE)]) == 0
        out = capsys.readouterr().out
        assert "Fairview Falcons at Harbor Herons" in out
        assert "Totals" in out

    def test_json(self, capsys):
        assert main([str(SAMPLE), "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["line_score"]["away_total"]["r"] == 3

    def test_csv(self, capsys):
        assert main([str(SAMPLE), "--format", "csv"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert lines[0].startswith("team,batting_order,player_name")
        assert len(lines) == 20

    def test_output_file(self, tmp_path, capsys):
        target = tmp_path / "box.txt"
        assert main([str(SAMPLE), "--output", str(target)]) == 0
        assert "Harbor Herons Pitching:" in target.read_text()
        assert capsys.readouterr().out == ""


class TestEraInnings:
    def _a9_era(self, capsys, *extra):
        assert main([str(SAMPLE), "--format", "json", *extra]) == 0
        data = json.loads(capsys.readouterr().out)
        return next(p["era_display"] for p in data["away"]["pitching"]["pitchers"]
                    if p["lineup_id"] == "a9")

    def test_default(self, capsys, monkeypatch):
        monkeypatch.delenv("SCOREBOOK_ERA_INNINGS", raising=False)
        assert self._a9_era(capsys) == "18.00"

    def test_flag(self, capsys):
        assert self._a9_era(capsys, "--era-innings", "7") == "14.00"

    def test_environment(self, capsys, monkeypatch):
        monkeypatch.setenv("SCOREBOOK_ERA_INNINGS", "6")
        assert self._a9_era(capsys) == "12.00"

    def test_invalid_environment(self, capsys, monkeypatch):
        monkeypatch.setenv("SCOREBOOK_ERA_INNINGS", "nine")
        assert main([str(SAMPLE)]) == 1
        assert "SCOREBOOK_ERA_INNINGS" in capsys.readouterr().err


class TestErrors:
    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_snapshot(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        snapshot = json.loads(SAMPLE.read_text())
        snapshot["at_bats"][0]["inning"] = 0
        path.write_text(json.dumps(snapshot))
        assert main([str(path)]) == 1
        err = capsys.readouterr().err
        assert "Validation failed" in err
        assert "inning" in err

    def test_unknown_format_flag(self):
        with pytest.raises(SystemExit):
            main([str(SAMPLE), "--format", "pdf"])

from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "check_availability.py"


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location("check_availability", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_prints_schedule_and_month(script, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    data = tmp_path / "rules.json"
    data.write_text(json.dumps({
        "weekly_rules": [
            {"day_of_week": 1, "start_time": "10:00", "end_time": "18:00"},
            {"day_of_week": 2, "start_time": "10:00", "end_time": "18:00"},
        ],
        "blocked": [{"date": "2099-12-22", "reason": "Christmas break"}],
        "bookings": [{"start_time": "2099-12-28T10:00", "end_time": "2099-12-28T18:00"}],
    }))

    assert script.main([str(data), "2099", "12", "--duration", "60"]) == 0

    out = capsys.readouterr().out
    assert "Found 2 weekly rules:" in out
    assert "Monday: 10:00-18:00" in out
    assert "Sunday: closed" in out
    available_line = next(line for line in out.splitlines() if line.startswith("Available:"))
    blocked_line = next(line for line in out.splitlines() if line.startswith("Blocked:"))
    # 2099-12-21 is a Monday, 2099-12-22 a Tuesday.
    assert "2099-12-21" in available_line
    assert "2099-12-22" in blocked_line
    assert "2099-12-28" in blocked_line


def test_bad_rule_data_returns_error(script, tmp_path: Path) -> None:
    data = tmp_path / "rules.json"
    data.write_text(json.dumps({
        "weekly_rules": [{"day_of_week": 1, "start_time": "18:00", "end_time": "10:00"}],
    }))

    assert script.main([str(data), "2099", "12"]) == 1


def test_missing_file_returns_error(script, tmp_path: Path) -> None:
    assert script.main([str(tmp_path / "missing.json"), "2099", "12"]) == 1


@pytest.mark.parametrize("duration", ["0", "-30"])
def test_non_positive_duration_returns_error(script, tmp_path: Path, capsys: pytest.CaptureFixture[str], duration: str) -> None:
    data = tmp_path / "rules.json"
    data.write_text(json.dumps({
        "weekly_rules": [{"day_of_week": 1, "start_time": "10:00", "end_time": "18:00"}],
    }))

    assert script.main([str(data), "2099", "12", f"--duration={duration}"]) == 1
    assert "Available:" not in capsys.readouterr().out

"""Tests for the command line entry point."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from critpath.cli import main

SCENARIOS = Path(__file__).resolve().parent.parent / "scenarios"


@pytest.fixture(autouse=True)
def reset_logging():
    """main() points logging at the captured stderr; undo that afterwards."""
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


def test_standard_summary(capsys) -> None:
    assert main(["--today", "2026-01-05"]) == 0
    out = capsys.readouterr().out
    assert "=== After load ===" in out
    assert "- A: Design [effort 3d] | Earliest start 2026-01-05 | Earliest finish 2026-01-08 | Due 2026-01-15 | CRITICAL | depends on: None" in out
    assert "- C: Frontend [effort 4d] | Earliest start 2026-01-08 | Earliest finish 2026-01-12 | Due 2026-01-20 | depends on: A: Design" in out
    assert "After deletions" not in out


def test_json_with_deletions(capsys) -> None:
    assert main(["--data", str(SCENARIOS / "diamond.json"), "--today", "2026-01-05", "--json"]) == 0
    out = capsys.readouterr().out
    decoder = json.JSONDecoder()
    first, end = decoder.raw_decode(out)
    second, _ = decoder.raw_decode(out[end:].lstrip())
    assert first["header"] == "After load"
    assert first["project_horizon_days"] == 13
    assert second["header"] == "After deletions"
    assert second["project_horizon_days"] == 13
    assert len(second["critical_tasks"]) == 4


def test_delete_flag(capsys) -> None:
    assert main(["--today", "2026-01-05", "--delete", "A", "C"]) == 0
    out = capsys.readouterr().out
    assert "- B: Backend [effort 5d] | Earliest start 2026-01-05 |" in out.split("After deletions")[1]


def test_missing_file_fails(tmp_path, capsys) -> None:
    assert main(["--data", str(tmp_path / "nope.json")]) == 1


def test_invalid_json_fails(tmp_path, capsys) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    assert main(["--data", str(bad)]) == 1
    assert "critpath_failed" in capsys.readouterr().err


def test_unknown_delete_ref_warns(capsys) -> None:
    assert main(["--today", "2026-01-05", "--delete", "Q"]) == 0
    captured = capsys.readouterr()
    assert "unknown_ref" in captured.err
    assert "After deletions" not in captured.out

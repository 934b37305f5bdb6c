"""Tests for the command line entry point."""

from __future__ import annotations

import json
import sys

import pytest

import main
from textmerge.core.merge.conflict_resolver import ResolutionStrategy
from textmerge.core.models import MergeResult


@pytest.fixture
def versions(tmp_path):
    first = tmp_path / "v1.txt"
    second = tmp_path / "v2.txt"
    first.write_text("The meeting is on Monday.", encoding="utf-8")
    second.write_text("The meeting is on Friday.", encoding="utf-8")
    return [str(first), str(second)]


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    return ["-c", str(tmp_path / "settings.json")]


def test_parse_arguments() -> None:
    args = main.parse_arguments(["a.txt", "b.txt", "-s", "favor-shorter", "-v"])
    assert args.version_paths == ["a.txt", "b.txt"]
    assert args.strategy is ResolutionStrategy.FAVOR_SHORTER
    assert args.log_level == "DEBUG"


def test_strategy_resolves_and_writes_output(tmp_path, versions, config) -> None:
    output = tmp_path / "merged.txt"
    code = main.main(versions + config + ["-s", "favor-b", "-o", str(output)])

    assert code == main.EXIT_OK
    assert output.read_text(encoding="utf-8") == "The meeting is on Friday."


def test_json_output_with_unresolved_conflict(versions, config, capsys) -> None:
    code = main.main(versions + config + ["--json"])

    assert code == main.EXIT_UNRESOLVED
    data = json.loads(capsys.readouterr().out)
    assert data["conflicts"] == 1
    assert data["labelA"] == "Version 1"
    assert data["segments"][1] == {
        "type": "conflict",
        "optionA": "Monday",
        "optionB": "Friday",
        "reason": "Versions differ here",
    }


def test_quiet_prints_placeholder(versions, config, capsys) -> None:
    main.main(versions + config + ["-q"])
    assert capsys.readouterr().out == "The meeting is on [CONFLICT: Versions differ here].\n"


def test_single_version_is_a_usage_error(versions, config) -> None:
    assert main.main(versions[:1] + config) == main.EXIT_USAGE


def test_missing_file_is_a_usage_error(tmp_path, versions, config, capsys) -> None:
    assert main.main([versions[0], str(tmp_path / "gone.txt")] + config) == main.EXIT_USAGE
    assert "version 2" in capsys.readouterr().err


def test_format_segments(meeting_segments) -> None:
    text = main.format_segments(MergeResult(meeting_segments, version_count=2))
    assert "Conflict #1: Versions differ here" in text
    assert "Version 1: [-Monday-]" in text
    assert "Version 2: {+Friday+}" in text
    assert text.startswith("The meeting is on ")

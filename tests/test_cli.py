# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end tests for the ``code-guard`` command."""

from __future__ import annotations

import logging
import shlex
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from codeguard import cli
from codeguard.cli import app
from codeguard.errors import WatchStartupError

REPORT = (
    '{"diagnostics":[{"location":{"file":"lib/a.dart","range":{"start":{"line":5,"column":1}}},'
    '"severity":"ERROR","problemMessage":"bad thing","code":"undefined_identifier"}]}'
)


def _analyzer(code: str) -> str:
    return shlex.join([sys.executable, "-c", code])


def _invoke(*args: str):
    return CliRunner().invoke(app, [*args, "--no-emoji", "--no-color"])


def test_one_shot_reports_diagnostics_and_exits_zero(tmp_path: Path) -> None:
    code = f"import sys; sys.stderr.write({REPORT!r}); sys.exit(3)"

    result = _invoke("--root", str(tmp_path), "--analyzer", _analyzer(code))

    assert result.exit_code == 0
    assert "ERROR at lib/a.dart:5:1: bad thing [undefined_identifier]" in result.stdout


def test_one_shot_reports_no_issues(tmp_path: Path) -> None:
    result = _invoke("--root", str(tmp_path), "--analyzer", _analyzer("print('No issues found!')"))

    assert result.exit_code == 0
    assert "No issues found!" in result.stdout


def test_one_shot_reports_unparseable_failure(tmp_path: Path) -> None:
    code = "import sys; sys.stderr.write('Could not find a file named pubspec.yaml'); sys.exit(66)"

    result = _invoke("--root", str(tmp_path), "--analyzer", _analyzer(code))

    assert result.exit_code == 0
    assert "Analyzer failed: Could not find a file named pubspec.yaml" in result.stdout


def test_missing_analyzer_exits_non_zero(tmp_path: Path) -> None:
    result = _invoke("--root", str(tmp_path), "--analyzer", "no-such-analyzer --format=json")

    assert result.exit_code == 1
    assert "Could not launch 'no-such-analyzer'" in result.stdout
    assert "Traceback" not in result.stdout


def test_timeout_exits_non_zero(tmp_path: Path) -> None:
    result = _invoke(
        "--root",
        str(tmp_path),
        "--analyzer",
        _analyzer("import time; time.sleep(30)"),
        "--timeout",
        "0.2",
    )

    assert result.exit_code == 1
    assert "timed out" in result.stdout


def test_invalid_debounce_is_usage_error(tmp_path: Path) -> None:
    result = _invoke("--root", str(tmp_path), "--debounce", "-1")
    assert result.exit_code == 2


def test_version_flag() -> None:
    result = CliRunner().invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("code-guard ")


def test_watch_mode_runs_loop_until_interrupted(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}

    def fake_run(self: cli.FileWatchLoop) -> None:
        seen["root"] = self.root
        seen["extensions"] = self.extensions
        seen["debounce"] = self.debounce
        raise KeyboardInterrupt

    monkeypatch.setattr(cli.FileWatchLoop, "run", fake_run)

    result = _invoke("--watch", "--root", str(tmp_path), "--extension", "kt", "--debounce", "0.1")

    assert result.exit_code == 0
    assert seen == {"root": tmp_path.resolve(), "extensions": (".kt",), "debounce": 0.1}
    assert "Watching project files for changes..." in result.stdout
    assert "Stopped watching." in result.stdout


def test_watch_mode_startup_failure_exits_non_zero(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(self: cli.FileWatchLoop) -> None:
        raise WatchStartupError(f"Cannot watch '{self.root}': not a directory")

    monkeypatch.setattr(cli.FileWatchLoop, "run", fake_run)

    result = _invoke("--watch", "--root", str(tmp_path))

    assert result.exit_code == 1
    assert "Cannot watch" in result.stdout


def test_verbose_enables_debug_logging(tmp_path: Path) -> None:
    logger = logging.getLogger("codeguard")
    try:
        result = _invoke("--root", str(tmp_path), "--analyzer", _analyzer("pass"), "--verbose")

        assert result.exit_code == 0
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(logging.NOTSET)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)

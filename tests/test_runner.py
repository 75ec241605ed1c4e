# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the analyzer subprocess wrapper."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from codeguard.config import GuardConfig
from codeguard.errors import ProcessTimeout, SpawnFailure
from codeguard.runner import ProcessRunner


def _python(code: str) -> tuple[str, ...]:
    return (sys.executable, "-c", code)


def test_run_captures_streams_and_exit_code(tmp_path: Path) -> None:
    code = "import sys; sys.stdout.write('out'); sys.stderr.write('err'); sys.exit(3)"
    run = ProcessRunner(_python(code), cwd=tmp_path).run()

    assert run.exit_code == 3
    assert run.raw_stdout == b"out"
    assert run.raw_stderr == b"err"
    assert run.command[0] == sys.executable
    assert run.duration >= 0
    assert run.diagnostics == ()


def test_run_uses_configured_working_directory(tmp_path: Path) -> None:
    code = "import os, sys; sys.stdout.write(os.getcwd())"
    run = ProcessRunner(_python(code), cwd=tmp_path).run()

    assert Path(run.stdout_text).resolve() == tmp_path.resolve()


def test_missing_executable_raises_spawn_failure() -> None:
    runner = ProcessRunner(("definitely-not-an-analyzer-binary", "--format=json"))

    with pytest.raises(SpawnFailure) as excinfo:
        runner.run()

    assert "definitely-not-an-analyzer-binary" in str(excinfo.value)


def test_non_executable_file_raises_spawn_failure(tmp_path: Path) -> None:
    target = tmp_path / "analyzer"
    target.write_text("not a program", encoding="utf-8")
    target.chmod(0o644)

    with pytest.raises(SpawnFailure):
        ProcessRunner((str(target),)).run()


def test_timeout_kills_process_and_raises() -> None:
    runner = ProcessRunner(_python("import time; time.sleep(30)"), timeout=0.2)

    with pytest.raises(ProcessTimeout) as excinfo:
        runner.run()

    assert excinfo.value.timeout == pytest.approx(0.2)


def test_from_config_copies_settings(tmp_path: Path) -> None:
    config = GuardConfig(root=tmp_path, analyzer_command=("tool", "--json"), timeout_seconds=5.0)

    runner = ProcessRunner.from_config(config)

    assert runner.command == ("tool", "--json")
    assert runner.cwd == tmp_path
    assert runner.timeout == 5.0


@pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell script")
def test_relative_executable_resolves_against_working_directory(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    project = tmp_path / "project"
    elsewhere = tmp_path / "elsewhere"
    project.mkdir()
    elsewhere.mkdir()
    tool = project / "tool.sh"
    tool.write_text("#!/bin/sh\nprintf 'from project'\n", encoding="utf-8")
    tool.chmod(0o755)
    decoy = elsewhere / "tool.sh"
    decoy.write_text("#!/bin/sh\nprintf 'from elsewhere'\n", encoding="utf-8")
    decoy.chmod(0o755)
    monkeypatch.chdir(elsewhere)

    run = ProcessRunner(("./tool.sh",), cwd=project).run()

    assert run.stdout_text == "from project"
    assert run.command[0] == str(tool.resolve())


def test_relative_executable_missing_from_working_directory(tmp_path: Path) -> None:
    with pytest.raises(SpawnFailure, match="tool.sh"):
        ProcessRunner(("./tool.sh",), cwd=tmp_path).run()

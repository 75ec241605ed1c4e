# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Launch the external analyzer and capture its output verbatim."""

from __future__ import annotations

import logging
import os
import shutil

# Bandit: subprocess usage is intentional; commands are passed as argument
# lists without shell expansion.
import subprocess  # nosec B404
import time
from collections.abc import Sequence
from pathlib import Path

from .config import GuardConfig
from .errors import ProcessTimeout, SpawnFailure
from .models import AnalysisRun

LOGGER = logging.getLogger(__name__)


def _normalize_args(args: Sequence[str], cwd: Path | None = None) -> list[str]:
    """Resolve the executable of ``args`` the way the child process will see it.

    Bare names are looked up on ``PATH``. Names containing a path separator
    are taken relative to ``cwd``, the directory the analyzer runs in.

    Args:
        args: Analyzer argument vector.
        cwd: Working directory of the child process, or ``None`` for ours.

    Returns:
        list[str]: Argument vector whose first element is an absolute path.

    Raises:
        SpawnFailure: If the executable cannot be located.
    """

    if not args:
        raise SpawnFailure(args, "no command configured")

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    if os.sep in head or (os.altsep is not None and os.altsep in head):
        candidate = (cwd if cwd is not None else Path.cwd()) / head_path
        if not candidate.is_file():
            raise SpawnFailure(args, f"executable '{head}' was not found in '{candidate.parent}'")
        return [str(candidate.resolve()), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        raise SpawnFailure(args, f"executable '{head}' was not found on PATH")
    return [resolved, *rest]


def _ensure_bytes(value: str | bytes | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8", errors="replace")
    return value


class ProcessRunner:
    """Run the configured analyzer command once per :meth:`run` call."""

    def __init__(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> None:
        self.command = tuple(command)
        self.cwd = cwd
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: GuardConfig) -> ProcessRunner:
        """Build a runner from ``config``."""

        return cls(config.analyzer_command, cwd=config.root, timeout=config.timeout_seconds)

    def run(self) -> AnalysisRun:
        """Execute the analyzer and return its raw output.

        Returns:
            AnalysisRun: Exit code and captured streams; diagnostics are not parsed yet.

        Raises:
            SpawnFailure: If the executable is missing or cannot be started.
            ProcessTimeout: If the run exceeded :attr:`timeout` and was killed.
        """

        normalized = _normalize_args(self.command, self.cwd)
        LOGGER.debug("spawning analyzer command=%s cwd=%s", " ".join(normalized), self.cwd)
        started = time.monotonic()
        try:
            # Bandit: the argument vector comes from trusted configuration.
            completed = subprocess.run(  # nosec B603
                normalized,
                cwd=str(self.cwd) if self.cwd is not None else None,
                check=False,
                capture_output=True,
                stdin=subprocess.DEVNULL,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProcessTimeout(
                normalized,
                self.timeout or 0.0,
                stdout=_ensure_bytes(exc.stdout),
                stderr=_ensure_bytes(exc.stderr),
            ) from exc
        except OSError as exc:
            raise SpawnFailure(normalized, exc.strerror or str(exc)) from exc

        duration = time.monotonic() - started
        LOGGER.debug("analyzer exited returncode=%d duration=%.2fs", completed.returncode, duration)
        return AnalysisRun(
            exit_code=completed.returncode,
            raw_stdout=_ensure_bytes(completed.stdout),
            raw_stderr=_ensure_bytes(completed.stderr),
            command=tuple(normalized),
            duration=duration,
        )


__all__ = ["ProcessRunner"]

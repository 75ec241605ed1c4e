# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception types raised while running the analyzer or the watcher."""

from __future__ import annotations

from collections.abc import Sequence


class CodeGuardError(RuntimeError):
    """Base class for failures surfaced to the command-line user."""


class SpawnFailure(CodeGuardError):
    """Raised when the analyzer executable cannot be launched."""

    def __init__(self, command: Sequence[str], reason: str) -> None:
        """Record the command that failed to start.

        Args:
            command: Argument vector that was passed to the spawn call.
            reason: Human-readable explanation of the failure.
        """

        head = command[0] if command else "<empty>"
        super().__init__(f"Could not launch '{head}': {reason}")
        self.command = tuple(command)
        self.reason = reason


class ProcessTimeout(CodeGuardError):
    """Raised when the analyzer exceeds its time budget and is killed."""

    def __init__(
        self,
        command: Sequence[str],
        timeout: float,
        *,
        stdout: bytes = b"",
        stderr: bytes = b"",
    ) -> None:
        """Record the timed-out command and whatever output it produced.

        Args:
            command: Argument vector of the killed process.
            timeout: Budget in seconds that was exceeded.
            stdout: Partial stdout captured before the kill.
            stderr: Partial stderr captured before the kill.
        """

        head = command[0] if command else "<empty>"
        super().__init__(f"Command '{head}' timed out after {timeout:.1f}s")
        self.command = tuple(command)
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr


class WatchStartupError(CodeGuardError):
    """Raised when the file-system subscription cannot be established."""


__all__ = ["CodeGuardError", "ProcessTimeout", "SpawnFailure", "WatchStartupError"]

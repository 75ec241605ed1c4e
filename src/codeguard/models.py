# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the codeguard package."""

from __future__ import annotations

from enum import Enum
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from .severity import Severity

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = JsonScalar | list["JsonValue"] | dict[str, "JsonValue"]


class Diagnostic(BaseModel):
    """Single issue reported by the analyzer at a file location."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    line: int = Field(ge=1)
    column: int | None = Field(default=None, ge=0)
    severity: Severity
    message: str
    raw_severity: str = ""
    code: str | None = None
    correction: str | None = None
    documentation: str | None = None

    @property
    def location(self) -> str:
        """Return ``file:line[:column]`` for display."""

        location = f"{self.file_path}:{self.line}"
        if self.column is not None:
            location += f":{self.column}"
        return location


class AnalysisRun(BaseModel):
    """Captured result of one analyzer invocation.

    ``diagnostics`` and ``parse_failed`` stay at their defaults until the run
    has been passed through :class:`codeguard.parsers.DiagnosticParser`.
    """

    model_config = ConfigDict(frozen=True)

    exit_code: int
    raw_stdout: bytes = b""
    raw_stderr: bytes = b""
    diagnostics: tuple[Diagnostic, ...] = ()
    parse_failed: bool = False
    command: tuple[str, ...] = ()
    duration: float = 0.0

    @property
    def stdout_text(self) -> str:
        """Return stdout decoded as UTF-8 with invalid bytes replaced."""

        return self.raw_stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        """Return stderr decoded as UTF-8 with invalid bytes replaced."""

        return self.raw_stderr.decode("utf-8", errors="replace")


class AnalysisOutcome(str, Enum):
    """Enumerate the result categories of a single analysis cycle."""

    NO_ISSUES = "no_issues"
    DIAGNOSTICS_FOUND = "diagnostics_found"
    PARSE_FAILURE = "parse_failure"
    SPAWN_FAILURE = "spawn_failure"
    TIMEOUT = "timeout"

    @property
    def is_run_failure(self) -> bool:
        """Return ``True`` when the analyzer itself could not be run."""

        return self in {AnalysisOutcome.SPAWN_FAILURE, AnalysisOutcome.TIMEOUT}


__all__ = [
    "AnalysisOutcome",
    "AnalysisRun",
    "Diagnostic",
    "JsonScalar",
    "JsonValue",
]

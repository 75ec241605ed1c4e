# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render analysis results for the terminal."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from rich.text import Text

from .config import OutputConfig
from .console import ConsolePreferences, shared_console_pool
from .errors import CodeGuardError
from .logging import StatusKind, emit_status, status_prefix
from .models import AnalysisRun, Diagnostic
from .severity import SEVERITY_ORDER, severity_color


@runtime_checkable
class AnalysisReporter(Protocol):
    """Consumer of analysis cycle results."""

    def report(self, run: AnalysisRun, diagnostics: Sequence[Diagnostic], parse_failed: bool) -> None:
        """Report a completed analyzer invocation.

        Called exactly once per cycle in which the analyzer ran to completion.
        """

    def report_error(self, error: CodeGuardError) -> None:
        """Report a cycle in which the analyzer could not be run."""

    def announce(self, message: str) -> None:
        """Emit an informational status line."""


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Return the single-line plain-text form of ``diagnostic``."""

    label = diagnostic.raw_severity or diagnostic.severity.value.upper()
    line = f"{label} at {diagnostic.location}: {diagnostic.message}"
    if diagnostic.code:
        line += f" [{diagnostic.code}]"
    return line


def format_summary(diagnostics: Sequence[Diagnostic]) -> str:
    """Return a ``N issues found (x errors, y warnings)`` style summary.

    Args:
        diagnostics: Diagnostics that were rendered for the current cycle.

    Returns:
        str: Summary line counting ``diagnostics`` per severity.
    """

    counts = Counter(diag.severity for diag in diagnostics)
    total = len(diagnostics)
    parts = [
        f"{counts[severity]} {severity.value}{'' if counts[severity] == 1 else 's'}"
        for severity in SEVERITY_ORDER
        if counts[severity]
    ]
    noun = "issue" if total == 1 else "issues"
    return f"{total} {noun} found ({', '.join(parts)})"


class ConsoleReporter:
    """Write analysis results to stdout through the shared Rich console."""

    def __init__(self, output: OutputConfig | None = None) -> None:
        """Bind the reporter to the output preferences of this invocation.

        Args:
            output: Emoji, colour and verbosity flags; defaults apply when omitted.
        """

        self.output = output or OutputConfig()
        self._preferences = ConsolePreferences(color=self.output.color, emoji=self.output.emoji)

    def report(self, run: AnalysisRun, diagnostics: Sequence[Diagnostic], parse_failed: bool) -> None:
        """Print the outcome of a completed analyzer run.

        Args:
            run: Captured run; only its stderr and exit code are used, for failures.
            diagnostics: Diagnostics to list; the summary counts exactly these.
            parse_failed: ``True`` when neither stream decoded and the analyzer failed.
        """

        if parse_failed:
            stderr = run.stderr_text.strip() or f"exit code {run.exit_code}"
            self._status(StatusKind.FAIL, f"Analyzer failed: {stderr}")
            return
        if not diagnostics:
            self._status(StatusKind.OK, "No issues found!")
            return
        console = shared_console_pool().console_for(self._preferences)
        for diagnostic in diagnostics:
            console.print(self._render(diagnostic))
        self._status(StatusKind.INFO, format_summary(diagnostics))

    def report_error(self, error: CodeGuardError) -> None:
        """Print why the analyzer could not be run.

        Args:
            error: Spawn failure or timeout raised by the runner.
        """

        self._status(StatusKind.FAIL, str(error))

    def announce(self, message: str) -> None:
        """Print an informational line such as a changed file name.

        Args:
            message: Text to print.
        """

        self._status(StatusKind.INFO, message)

    def _status(self, kind: StatusKind, message: str) -> None:
        emit_status(kind, message, use_emoji=self.output.emoji, use_color=self.output.color)

    def _render(self, diagnostic: Diagnostic) -> Text:
        prefix = status_prefix(StatusKind.DIAGNOSTIC, use_emoji=self.output.emoji)
        text = Text(f"{prefix}{format_diagnostic(diagnostic)}")
        if self._preferences.styled():
            label_length = len(diagnostic.raw_severity or diagnostic.severity.value)
            text.stylize(severity_color(diagnostic.severity), len(prefix), len(prefix) + label_length)
        if self.output.verbose and diagnostic.correction:
            hint = Text(f"\n    {diagnostic.correction}")
            if self._preferences.styled():
                hint.stylize("italic")
            text.append_text(hint)
        return text


__all__ = ["AnalysisReporter", "ConsoleReporter", "format_diagnostic", "format_summary"]

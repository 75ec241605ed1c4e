# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run one analyzer pass and hand the result to a reporter."""

from __future__ import annotations

import logging
from typing import Protocol

from .errors import ProcessTimeout, SpawnFailure
from .models import AnalysisOutcome, AnalysisRun
from .parsers import DiagnosticParser
from .reporting import AnalysisReporter

LOGGER = logging.getLogger(__name__)


class Runner(Protocol):
    """Anything that can produce an :class:`AnalysisRun` on demand."""

    def run(self) -> AnalysisRun:
        """Execute the analyzer once."""


def run_analysis_cycle(
    runner: Runner,
    parser: DiagnosticParser,
    reporter: AnalysisReporter,
) -> AnalysisOutcome:
    """Execute ``runner``, parse its output and report exactly once.

    Spawn failures and timeouts are reported through
    :meth:`AnalysisReporter.report_error` rather than raised, so a watch loop
    survives a missing or hung analyzer.

    Returns:
        AnalysisOutcome: Category describing how the cycle ended.
    """

    try:
        raw_run = runner.run()
    except SpawnFailure as exc:
        LOGGER.debug("spawn failed: %s", exc)
        reporter.report_error(exc)
        return AnalysisOutcome.SPAWN_FAILURE
    except ProcessTimeout as exc:
        LOGGER.debug("analyzer timed out: %s", exc)
        reporter.report_error(exc)
        return AnalysisOutcome.TIMEOUT

    run = parser.parse_run(raw_run)
    reporter.report(run, run.diagnostics, run.parse_failed)
    if run.parse_failed:
        return AnalysisOutcome.PARSE_FAILURE
    if run.diagnostics:
        return AnalysisOutcome.DIAGNOSTICS_FOUND
    return AnalysisOutcome.NO_ISSUES


__all__ = ["Runner", "run_analysis_cycle"]

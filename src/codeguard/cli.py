# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line entry point for one-shot and watch mode analysis."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer

from . import __version__
from .analysis import run_analysis_cycle
from .config import (
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_EXTENSIONS,
    ConfigError,
    GuardConfig,
    OutputConfig,
    build_config,
    parse_analyzer_command,
)
from .errors import WatchStartupError
from .logging import configure_debug_logging
from .parsers import DiagnosticParser
from .reporting import ConsoleReporter
from .runner import ProcessRunner
from .watch import FileWatchLoop

DEFAULT_ANALYZER_TEXT = "dart analyze --format=json"

app = typer.Typer(
    help="Run a static analyzer and report its diagnostics, optionally on every change.",
    add_completion=False,
    no_args_is_help=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"code-guard {__version__}")
        raise typer.Exit()


def _build_cli_config(
    *,
    root: Path,
    analyzer: str,
    extensions: Sequence[str],
    debounce: float,
    timeout: float | None,
    no_emoji: bool,
    no_color: bool,
    verbose: bool,
) -> GuardConfig:
    """Translate CLI options into a validated :class:`GuardConfig`."""

    try:
        return build_config(
            root=root.resolve(),
            analyzer_command=parse_analyzer_command(analyzer),
            extensions=tuple(extensions) or DEFAULT_EXTENSIONS,
            debounce_seconds=debounce,
            timeout_seconds=timeout,
            output=OutputConfig(emoji=not no_emoji, color=not no_color, verbose=verbose),
        )
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


def run_once(config: GuardConfig, reporter: ConsoleReporter) -> int:
    """Run a single analysis cycle and return the process exit code."""

    reporter.announce("Running one-time analysis...")
    outcome = run_analysis_cycle(ProcessRunner.from_config(config), DiagnosticParser(), reporter)
    return 1 if outcome.is_run_failure else 0


def run_watch(config: GuardConfig, reporter: ConsoleReporter) -> int:
    """Analyze on startup and after every debounced change until interrupted."""

    runner = ProcessRunner.from_config(config)
    parser = DiagnosticParser()

    def _announce_changes(paths: Sequence[Path]) -> None:
        for path in paths:
            reporter.announce(f"File changed: {path}")

    loop = FileWatchLoop.from_config(
        config,
        lambda: run_analysis_cycle(runner, parser, reporter),
        on_flush=_announce_changes,
    )
    reporter.announce("Watching project files for changes...")
    try:
        loop.run()
    except KeyboardInterrupt:
        reporter.announce("Stopped watching.")
    except WatchStartupError as exc:
        reporter.report_error(exc)
        return 1
    return 0


@app.command()
def main_command(
    watch: Annotated[bool, typer.Option("--watch", help="Re-run the analyzer whenever source files change.")] = False,
    root: Annotated[
        Path,
        typer.Option("--root", help="Project directory to analyze and watch.", file_okay=False),
    ] = Path(),
    analyzer: Annotated[
        str,
        typer.Option("--analyzer", help="Analyzer command line producing JSON diagnostics."),
    ] = DEFAULT_ANALYZER_TEXT,
    extensions: Annotated[
        list[str] | None,
        typer.Option("--extension", "-e", help="Source extension that triggers re-analysis (repeatable)."),
    ] = None,
    debounce: Annotated[
        float,
        typer.Option("--debounce", help="Seconds of quiet required before re-running in watch mode."),
    ] = DEFAULT_DEBOUNCE_SECONDS,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", help="Kill the analyzer after this many seconds."),
    ] = None,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in output.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable ANSI colour output.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging and fix hints.")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Analyze the project once, or continuously with ``--watch``."""

    config = _build_cli_config(
        root=root,
        analyzer=analyzer,
        extensions=extensions or (),
        debounce=debounce,
        timeout=timeout,
        no_emoji=no_emoji,
        no_color=no_color,
        verbose=verbose,
    )
    configure_debug_logging(config.output.verbose)
    reporter = ConsoleReporter(config.output)
    exit_code = run_watch(config, reporter) if watch else run_once(config, reporter)
    raise typer.Exit(code=exit_code)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main", "run_once", "run_watch"]

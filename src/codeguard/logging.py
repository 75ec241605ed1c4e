# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Status lines for the terminal and debug log routing."""

from __future__ import annotations

import logging
from enum import Enum

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from .console import ConsolePreferences, shared_console_pool

PACKAGE_LOGGER_NAME = "codeguard"


class StatusKind(Enum):
    """Kinds of status line, each with its glyph and Rich style."""

    INFO = ("ℹ️ ", "cyan")
    OK = ("✅ ", "green")
    FAIL = ("❌ ", "red")
    DIAGNOSTIC = ("⚠️  ", "yellow")

    @property
    def glyph(self) -> str:
        """Emoji prefix for this kind of line."""

        return self.value[0]

    @property
    def style(self) -> str:
        """Rich style applied when colour is active."""

        return self.value[1]


def status_prefix(kind: StatusKind, *, use_emoji: bool) -> str:
    """Return the leading glyph for ``kind``.

    Args:
        kind: Category of the line being printed.
        use_emoji: Whether emoji output is enabled.

    Returns:
        str: The glyph followed by spacing, or an empty string.
    """

    return kind.glyph if use_emoji else ""


def emit_status(kind: StatusKind, message: str, *, use_emoji: bool, use_color: bool) -> None:
    """Print ``message`` as a single status line.

    Args:
        kind: Category deciding the glyph and style.
        message: Text to print.
        use_emoji: Whether to prefix the glyph.
        use_color: Whether colour was requested; it only applies on a terminal.
    """

    preferences = ConsolePreferences(color=use_color, emoji=use_emoji)
    line = Text(f"{status_prefix(kind, use_emoji=use_emoji)}{message}")
    if preferences.styled():
        line.stylize(kind.style)
    shared_console_pool().console_for(preferences).print(line)


def configure_debug_logging(enabled: bool) -> None:
    """Route package debug records to stderr through Rich when ``enabled``.

    Args:
        enabled: ``True`` for ``--verbose`` runs; otherwise only warnings pass.
    """

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not enabled:
        logger.setLevel(logging.WARNING)
        return
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


__all__ = [
    "StatusKind",
    "configure_debug_logging",
    "emit_status",
    "status_prefix",
]

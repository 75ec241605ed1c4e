# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared Rich consoles for status lines and diagnostic output."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import cache

from rich.console import Console


def stdout_is_terminal() -> bool:
    """Report whether stdout is attached to an interactive terminal.

    Returns:
        bool: ``False`` for pipes, files and test capture streams.
    """

    isatty = getattr(sys.stdout, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # Closed stream.
        return False


@dataclass(frozen=True, slots=True)
class ConsolePreferences:
    """Presentation flags that select a console."""

    color: bool
    emoji: bool

    def styled(self) -> bool:
        """Return ``True`` when ANSI styling should actually be emitted.

        Returns:
            bool: Colour was requested and stdout is a terminal.
        """

        return self.color and stdout_is_terminal()


class ConsolePool:
    """Hand out one Rich console per set of preferences.

    Consoles are built without a fixed ``file`` so that Rich writes to
    whatever ``sys.stdout`` is when printing; captured streams in tests
    therefore see the output.
    """

    def __init__(self) -> None:
        self._consoles: dict[tuple[ConsolePreferences, bool], Console] = {}

    def console_for(self, preferences: ConsolePreferences) -> Console:
        """Return the console matching ``preferences`` and the current terminal state.

        Args:
            preferences: Colour and emoji flags requested by the caller.

        Returns:
            Console: Console that is created on first use and reused afterwards.
        """

        terminal = stdout_is_terminal()
        key = (preferences, terminal)
        console = self._consoles.get(key)
        if console is None:
            styled = preferences.color and terminal
            console = Console(
                color_system="auto" if styled else None,
                force_terminal=terminal,
                no_color=not styled,
                emoji=preferences.emoji,
                soft_wrap=True,
            )
            self._consoles[key] = console
        return console


@cache
def shared_console_pool() -> ConsolePool:
    """Return the process-wide :class:`ConsolePool`.

    Returns:
        ConsolePool: Pool created on first call.
    """

    return ConsolePool()


__all__ = ["ConsolePool", "ConsolePreferences", "shared_console_pool", "stdout_is_terminal"]

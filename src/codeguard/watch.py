# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Re-run the analyzer whenever watched source files are modified.

File-system notifications arrive on the watchdog observer thread and are
pushed onto a queue. :class:`FileWatchLoop` drains that queue on its own
thread, debounces bursts and runs one analysis cycle per closed debounce
window, so at most one analyzer process exists at any time.
"""

from __future__ import annotations

import logging
import os
import queue
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final, Protocol

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .config import DEFAULT_DEBOUNCE_SECONDS, DEFAULT_EXTENSIONS, DEFAULT_IGNORED_DIRS, GuardConfig
from .errors import WatchStartupError

LOGGER = logging.getLogger(__name__)


class WatchPhase(str, Enum):
    """States of the watch loop."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    ANALYZING = "analyzing"


@dataclass(slots=True)
class WatchState:
    """Mutable state owned by a single :class:`FileWatchLoop`."""

    phase: WatchPhase = WatchPhase.IDLE
    pending: set[Path] = field(default_factory=set)
    deadline: float | None = None
    cycles: int = 0

    def add(self, path: Path, deadline: float) -> None:
        """Record ``path`` and restart the debounce window."""

        self.pending.add(path)
        self.deadline = deadline
        self.phase = WatchPhase.DEBOUNCING

    def drain(self) -> list[Path]:
        """Return the pending paths in sorted order and reset the window."""

        paths = sorted(self.pending)
        self.pending.clear()
        self.deadline = None
        return paths


class ObserverLike(Protocol):
    """Subset of the watchdog observer API used by the loop."""

    def schedule(self, event_handler: FileSystemEventHandler, path: str, *, recursive: bool = False) -> object:
        """Subscribe ``event_handler`` to events under ``path``."""

    def start(self) -> None:
        """Begin delivering events."""

    def stop(self) -> None:
        """Stop delivering events."""

    def join(self, timeout: float | None = None) -> None:
        """Wait for the observer thread to exit."""


class _Stop:
    """Sentinel closing the event channel."""


_STOP: Final = _Stop()


class SourceChangeHandler(FileSystemEventHandler):
    """Forward file modifications to a :class:`FileWatchLoop`.

    Only ``on_modified`` is overridden; creations, deletions and moves fall
    through to the no-op defaults of :class:`FileSystemEventHandler`.
    """

    def __init__(self, loop: FileWatchLoop) -> None:
        super().__init__()
        self._loop = loop

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._loop.notify(os.fsdecode(event.src_path))


class FileWatchLoop:
    """Debounced, single-flight re-analysis driven by file-system events."""

    def __init__(
        self,
        root: Path,
        cycle: Callable[[], object],
        *,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        ignored_dirs: Iterable[str] = DEFAULT_IGNORED_DIRS,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        on_flush: Callable[[Sequence[Path]], None] | None = None,
        observer_factory: Callable[[], ObserverLike] = Observer,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.root = root
        self.extensions = tuple(extensions)
        self.ignored_dirs = frozenset(ignored_dirs)
        self.debounce = debounce
        self.state = WatchState()
        self._cycle = cycle
        self._on_flush = on_flush
        self._observer_factory = observer_factory
        self._clock = clock
        self._events: queue.Queue[Path | _Stop] = queue.Queue()
        self._stopped = False

    @classmethod
    def from_config(
        cls,
        config: GuardConfig,
        cycle: Callable[[], object],
        *,
        on_flush: Callable[[Sequence[Path]], None] | None = None,
    ) -> FileWatchLoop:
        """Build a loop using the watch settings of ``config``."""

        return cls(
            config.root,
            cycle,
            extensions=config.extensions,
            ignored_dirs=config.ignored_dirs,
            debounce=config.debounce_seconds,
            on_flush=on_flush,
        )

    def matches(self, path: Path) -> bool:
        """Return ``True`` when ``path`` is a watched source file."""

        if not path.name.endswith(self.extensions):
            return False
        try:
            parts = path.relative_to(self.root).parts
        except ValueError:
            parts = path.parts
        return not any(part in self.ignored_dirs for part in parts[:-1])

    def notify(self, path: str | Path) -> None:
        """Queue a modified ``path``; safe to call from any thread."""

        candidate = Path(path)
        if not self.matches(candidate):
            return
        self._events.put(candidate)

    def stop(self) -> None:
        """Close the event channel; :meth:`run` returns after the current cycle."""

        self._events.put(_STOP)

    def run(self) -> None:
        """Analyze once, then watch :attr:`root` until :meth:`stop` is called.

        Raises:
            WatchStartupError: If the file-system subscription cannot be established.
        """

        self._run_cycle([])
        observer = self._start_observer()
        try:
            while not self._stopped:
                self.step()
        finally:
            observer.stop()
            observer.join()
            LOGGER.debug("observer stopped after %d cycles", self.state.cycles)

    def step(self) -> None:
        """Process queued events and flush the debounce window when it has closed."""

        item = self._next_event(self._wait_timeout())
        while item is not None:
            if isinstance(item, _Stop):
                self._stopped = True
                return
            self.state.add(item, self._clock() + self.debounce)
            item = self._next_event(None, block=False)

        deadline = self.state.deadline
        if self.state.phase is WatchPhase.DEBOUNCING and deadline is not None and self._clock() >= deadline:
            self._run_cycle(self.state.drain())

    def _wait_timeout(self) -> float | None:
        if self.state.phase is not WatchPhase.DEBOUNCING or self.state.deadline is None:
            return None
        return max(0.0, self.state.deadline - self._clock())

    def _next_event(self, timeout: float | None, *, block: bool = True) -> Path | _Stop | None:
        try:
            return self._events.get(block=block, timeout=timeout)
        except queue.Empty:
            return None

    def _run_cycle(self, paths: Sequence[Path]) -> None:
        if paths and self._on_flush is not None:
            self._on_flush(paths)
        self.state.phase = WatchPhase.ANALYZING
        try:
            self._cycle()
        finally:
            self.state.cycles += 1
            self.state.phase = WatchPhase.IDLE

    def _start_observer(self) -> ObserverLike:
        if not self.root.is_dir():
            raise WatchStartupError(f"Cannot watch '{self.root}': not a directory")
        observer = self._observer_factory()
        try:
            observer.schedule(SourceChangeHandler(self), str(self.root), recursive=True)
            observer.start()
        except OSError as exc:
            raise WatchStartupError(f"Cannot watch '{self.root}': {exc.strerror or exc}") from exc
        LOGGER.debug("watching root=%s extensions=%s", self.root, ",".join(self.extensions))
        return observer


__all__ = ["FileWatchLoop", "ObserverLike", "SourceChangeHandler", "WatchPhase", "WatchState"]

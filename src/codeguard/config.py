# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and helpers for the codeguard package."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_ANALYZER_COMMAND: Final[tuple[str, ...]] = ("dart", "analyze", "--format=json")
DEFAULT_EXTENSIONS: Final[tuple[str, ...]] = (".dart",)
DEFAULT_IGNORED_DIRS: Final[tuple[str, ...]] = (".git", ".dart_tool", "build")
DEFAULT_DEBOUNCE_SECONDS: Final[float] = 0.25


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class OutputConfig(BaseModel):
    """Configuration for controlling console output."""

    model_config = ConfigDict(frozen=True)

    emoji: bool = True
    color: bool = True
    verbose: bool = False


class GuardConfig(BaseModel):
    """Runtime settings for one-shot and watch mode."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(default_factory=Path)
    analyzer_command: tuple[str, ...] = DEFAULT_ANALYZER_COMMAND
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    ignored_dirs: tuple[str, ...] = DEFAULT_IGNORED_DIRS
    debounce_seconds: float = Field(default=DEFAULT_DEBOUNCE_SECONDS, ge=0.0)
    timeout_seconds: float | None = Field(default=None, gt=0.0)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("analyzer_command")
    @classmethod
    def _require_command(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Reject an empty analyzer command line."""

        if not value or not value[0].strip():
            raise ValueError("analyzer command must not be empty")
        return value

    @field_validator("extensions")
    @classmethod
    def _normalise_extensions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Ensure every extension is non-empty and starts with a dot."""

        normalised: list[str] = []
        for raw in value:
            ext = raw.strip()
            if not ext or ext == ".":
                raise ValueError("source extensions must not be empty")
            if not ext.startswith("."):
                ext = f".{ext}"
            if ext not in normalised:
                normalised.append(ext)
        if not normalised:
            raise ValueError("at least one source extension is required")
        return tuple(normalised)


def parse_analyzer_command(text: str) -> tuple[str, ...]:
    """Split an analyzer command line using shell quoting rules.

    Args:
        text: Command line such as ``"dart analyze --format=json"``.

    Returns:
        tuple[str, ...]: Argument vector suitable for :mod:`subprocess`.

    Raises:
        ConfigError: If the text cannot be tokenised or is empty.
    """

    try:
        parts = tuple(shlex.split(text))
    except ValueError as exc:
        raise ConfigError(f"invalid analyzer command {text!r}: {exc}") from exc
    if not parts:
        raise ConfigError("analyzer command must not be empty")
    return parts


def build_config(**values: object) -> GuardConfig:
    """Validate ``values`` into a :class:`GuardConfig`.

    Raises:
        ConfigError: If any value fails validation.
    """

    try:
        return GuardConfig.model_validate(values)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ConfigError(details) from exc


__all__ = [
    "DEFAULT_ANALYZER_COMMAND",
    "DEFAULT_DEBOUNCE_SECONDS",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_IGNORED_DIRS",
    "ConfigError",
    "GuardConfig",
    "OutputConfig",
    "build_config",
    "parse_analyzer_command",
]

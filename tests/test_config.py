# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for configuration validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from codeguard.config import (
    DEFAULT_ANALYZER_COMMAND,
    ConfigError,
    GuardConfig,
    build_config,
    parse_analyzer_command,
)


def test_defaults_target_dart_analyzer() -> None:
    config = GuardConfig()

    assert config.analyzer_command == DEFAULT_ANALYZER_COMMAND
    assert config.extensions == (".dart",)
    assert 0.1 <= config.debounce_seconds <= 0.5
    assert config.timeout_seconds is None


def test_extensions_are_normalised_and_deduplicated() -> None:
    config = GuardConfig(extensions=("dart", ".dart", " .kt "))
    assert config.extensions == (".dart", ".kt")


@pytest.mark.parametrize(
    "values",
    [
        {"debounce_seconds": -0.1},
        {"timeout_seconds": 0},
        {"analyzer_command": ()},
        {"extensions": ()},
        {"extensions": (".",)},
    ],
)
def test_build_config_rejects_invalid_values(values: dict[str, object]) -> None:
    with pytest.raises(ConfigError):
        build_config(**values)


def test_build_config_accepts_valid_values(tmp_path: Path) -> None:
    config = build_config(root=tmp_path, debounce_seconds=0, timeout_seconds=12.5)

    assert config.root == tmp_path
    assert config.debounce_seconds == 0
    assert config.timeout_seconds == 12.5


def test_parse_analyzer_command_honours_quoting() -> None:
    assert parse_analyzer_command('dart analyze --format=json "lib dir"') == (
        "dart",
        "analyze",
        "--format=json",
        "lib dir",
    )


@pytest.mark.parametrize("text", ["", "   ", 'dart "unterminated'])
def test_parse_analyzer_command_rejects_bad_input(text: str) -> None:
    with pytest.raises(ConfigError):
        parse_analyzer_command(text)

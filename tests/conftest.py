# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from helpers.doubles import RecordingReporter


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels normalising the analyzer vocabulary."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


ANALYZER_SEVERITY_LABELS: Final[dict[str, Severity]] = {
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
    "info": Severity.INFO,
    "hint": Severity.INFO,
    "lint": Severity.INFO,
}


def severity_from_label(
    label: str,
    *,
    mapping: Mapping[str, Severity] | None = None,
    default: Severity = Severity.WARNING,
) -> Severity:
    """Map an analyzer severity label onto :class:`Severity`.

    Args:
        label: Severity text emitted by the analyzer (any case).
        mapping: Optional override for the label lookup table.
        default: Severity used when the label is not recognised.

    Returns:
        Severity: Normalised severity for ``label``.
    """

    table = mapping if mapping is not None else ANALYZER_SEVERITY_LABELS
    return table.get(label.strip().lower(), default)


SEVERITY_ORDER: Final[tuple[Severity, ...]] = (Severity.ERROR, Severity.WARNING, Severity.INFO)


def severity_color(sev: Severity) -> str:
    """Return the rich colour name associated with a severity level."""

    return {
        Severity.ERROR: "red",
        Severity.WARNING: "yellow",
        Severity.INFO: "cyan",
    }.get(sev, "yellow")


__all__ = [
    "ANALYZER_SEVERITY_LABELS",
    "SEVERITY_ORDER",
    "Severity",
    "severity_color",
    "severity_from_label",
]

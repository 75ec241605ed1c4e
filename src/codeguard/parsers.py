# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decode the analyzer JSON payload into normalised diagnostics."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from collections.abc import Mapping as MappingABC
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, TypeAlias, cast

from pydantic import ValidationError

from .models import AnalysisRun, Diagnostic, JsonValue
from .severity import severity_from_label

LOGGER = logging.getLogger(__name__)

DIAGNOSTICS_KEY: Final[str] = "diagnostics"


@dataclass(frozen=True, slots=True)
class Decoded:
    """A stream that contained a diagnostics collection."""

    diagnostics: tuple[Diagnostic, ...]


@dataclass(frozen=True, slots=True)
class Malformed:
    """A stream that did not contain a usable diagnostics collection."""

    reason: str


DecodeResult: TypeAlias = Decoded | Malformed


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Diagnostics extracted from a run plus the parse-failure flag."""

    diagnostics: tuple[Diagnostic, ...]
    parse_failed: bool


def _load_json(payload: bytes) -> JsonValue | Malformed:
    text = payload.decode("utf-8", errors="replace").strip()
    if not text:
        return Malformed("empty stream")
    try:
        return cast(JsonValue, json.loads(text))
    except json.JSONDecodeError as exc:
        return Malformed(f"invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}")
    except (ValueError, RecursionError) as exc:
        # Integers beyond the int-conversion digit limit, or nesting deeper than the stack.
        return Malformed(f"undecodable JSON: {type(exc).__name__}")


def _get(mapping: JsonValue, *path: str) -> JsonValue:
    """Walk ``path`` through nested mappings, returning ``None`` when absent."""

    current = mapping
    for key in path:
        if not isinstance(current, MappingABC):
            return None
        current = current.get(key)
    return current


def _optional_str(value: JsonValue) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def iter_dicts(value: Sequence[JsonValue]) -> Iterator[tuple[int, MappingABC[str, JsonValue]]]:
    """Yield ``(index, entry)`` pairs for the mapping items of ``value``."""

    for index, item in enumerate(value):
        if isinstance(item, MappingABC):
            yield index, item
        else:
            LOGGER.debug("skipping diagnostic #%d: expected an object, got %s", index, type(item).__name__)


def diagnostic_from_entry(entry: MappingABC[str, JsonValue]) -> Diagnostic | None:
    """Convert a single analyzer entry into a :class:`Diagnostic`.

    Returns ``None`` when a required field is missing or has the wrong type.
    """

    file_path = _get(entry, "location", "file")
    line = _get(entry, "location", "range", "start", "line")
    column = _get(entry, "location", "range", "start", "column")
    severity = entry.get("severity")
    message = entry.get("problemMessage")

    if not isinstance(file_path, str) or not file_path:
        return None
    if not isinstance(line, int) or isinstance(line, bool):
        return None
    if not isinstance(severity, str) or not isinstance(message, str):
        return None
    if not isinstance(column, int) or isinstance(column, bool):
        column = None

    try:
        return Diagnostic(
            file_path=file_path,
            line=line,
            column=column,
            severity=severity_from_label(severity),
            message=message,
            raw_severity=severity,
            code=_optional_str(entry.get("code")),
            correction=_optional_str(entry.get("correctionMessage")),
            documentation=_optional_str(entry.get("documentation")),
        )
    except ValidationError:
        return None


def decode_stream(payload: bytes) -> DecodeResult:
    """Decode one output stream into a tagged result.

    A stream is :class:`Decoded` only when it is a JSON object holding a
    ``diagnostics`` list; everything else, including an object without that
    key, is :class:`Malformed`.
    """

    loaded = _load_json(payload)
    if isinstance(loaded, Malformed):
        return loaded
    if not isinstance(loaded, MappingABC):
        return Malformed(f"expected a JSON object, got {type(loaded).__name__}")
    entries = loaded.get(DIAGNOSTICS_KEY)
    if entries is None:
        return Malformed(f"no '{DIAGNOSTICS_KEY}' key")
    if not isinstance(entries, list):
        return Malformed(f"'{DIAGNOSTICS_KEY}' is not a list")

    diagnostics: list[Diagnostic] = []
    for index, entry in iter_dicts(entries):
        diagnostic = diagnostic_from_entry(entry)
        if diagnostic is None:
            LOGGER.debug("skipping diagnostic #%d: missing or invalid fields", index)
            continue
        diagnostics.append(diagnostic)
    return Decoded(tuple(diagnostics))


class DiagnosticParser:
    """Extract diagnostics from stderr first, then stdout."""

    def parse(self, run: AnalysisRun) -> ParseResult:
        """Return the diagnostics carried by ``run``.

        The analyzer writes its JSON report to stderr when issues exist, so
        stderr takes precedence. When neither stream decodes, the exit code
        decides between "no issues" and an unparseable failure.
        """

        for name, payload in (("stderr", run.raw_stderr), ("stdout", run.raw_stdout)):
            result = decode_stream(payload)
            match result:
                case Decoded(diagnostics=diagnostics):
                    LOGGER.debug("decoded %d diagnostics from %s", len(diagnostics), name)
                    return ParseResult(diagnostics, parse_failed=False)
                case Malformed(reason=reason):
                    LOGGER.debug("%s not decodable: %s", name, reason)
        return ParseResult((), parse_failed=run.exit_code != 0)

    def parse_run(self, run: AnalysisRun) -> AnalysisRun:
        """Return a copy of ``run`` with diagnostics and the failure flag filled in."""

        result = self.parse(run)
        return run.model_copy(
            update={"diagnostics": result.diagnostics, "parse_failed": result.parse_failed},
        )


__all__ = [
    "DIAGNOSTICS_KEY",
    "DecodeResult",
    "Decoded",
    "DiagnosticParser",
    "Malformed",
    "ParseResult",
    "decode_stream",
    "diagnostic_from_entry",
]

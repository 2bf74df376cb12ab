# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Convert grammar matches over compiler output into diagnostics.

Every vendor grammar exposes two named group sets. The primary set
(``file``, ``line``, ``column``, ``severity``, ``message`` and optionally
``end_line``, ``end_column``, ``caret``) describes a positioned message. The
alternate set (``alt_file``, ``alt_severity``, ``alt_message``) describes a
``binary: severity: message`` line emitted by the compiler driver itself.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..core.models import Diagnostic
from ..core.severity import SeverityTable

if TYPE_CHECKING:
    from .profiles import CompilerProfile

LineSource = Callable[[int], str | None]
DiagnosticBuilder = Callable[[re.Match[str], SeverityTable, LineSource | None], Diagnostic]


@dataclass(frozen=True, slots=True)
class MatchCaptures:
    """Vendor-neutral view over one grammar match."""

    primary: bool
    file: str | None
    line: int
    column: int
    severity: str | None
    message: str
    end_line: int | None = None
    end_column: int | None = None
    caret: str | None = None


def _as_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        return None


def select_captures(match: re.Match[str]) -> MatchCaptures:
    """Return the primary group set when present, otherwise the alternate one.

    Args:
        match: Match produced by a vendor grammar.

    Returns:
        MatchCaptures: Normalised captures; absent line and column default to ``1``.
    """

    groups = match.groupdict()
    if groups.get("message") is not None:
        return MatchCaptures(
            primary=True,
            file=groups.get("file"),
            line=_as_int(groups.get("line")) or 1,
            column=_as_int(groups.get("column")) or 1,
            severity=groups.get("severity"),
            message=groups["message"],
            end_line=_as_int(groups.get("end_line")),
            end_column=_as_int(groups.get("end_column")),
            caret=groups.get("caret"),
        )
    return MatchCaptures(
        primary=False,
        file=groups.get("alt_file"),
        line=1,
        column=1,
        severity=groups.get("alt_severity"),
        message=groups.get("alt_message") or "",
    )


def _diagnostic(captures: MatchCaptures, severities: SeverityTable, **position: int | None) -> Diagnostic:
    values: dict[str, int | None] = {"line": captures.line, "column": captures.column}
    values.update(position)
    return Diagnostic(
        file=captures.file.strip() if captures.file else None,
        severity=severities.map(captures.severity),
        message=captures.message,
        **values,
    )


def literal_column(
    match: re.Match[str],
    severities: SeverityTable,
    line_source: LineSource | None = None,
) -> Diagnostic:
    """Build a diagnostic whose column is printed literally by the compiler.

    An optional inclusive ``end_line:end_column`` range is converted to an
    exclusive end column.
    """

    del line_source
    captures = select_captures(match)
    end_column = captures.end_column + 1 if captures.end_column is not None else None
    return _diagnostic(captures, severities, end_line=captures.end_line, end_column=end_column)


def caret_column(
    match: re.Match[str],
    severities: SeverityTable,
    line_source: LineSource | None = None,
) -> Diagnostic:
    """Build a diagnostic whose column is the width of a ``----^`` caret marker.

    The caret sits below the offending token, so the marker's length is the
    1-based column of that token.
    """

    del line_source
    captures = select_captures(match)
    column = len(captures.caret.strip()) if captures.caret else captures.column
    return _diagnostic(captures, severities, column=column)


def whole_line(
    match: re.Match[str],
    severities: SeverityTable,
    line_source: LineSource | None = None,
) -> Diagnostic:
    """Build a diagnostic spanning the full source line reported by the compiler.

    The line text comes from ``line_source``; without it the diagnostic is
    anchored at column 1 with no end.
    """

    captures = select_captures(match)
    if not captures.primary or line_source is None:
        return _diagnostic(captures, severities, column=1)
    text = line_source(captures.line)
    if text is None:
        return _diagnostic(captures, severities, column=1)
    return _diagnostic(
        captures,
        severities,
        column=1,
        end_line=captures.line,
        end_column=len(text.rstrip("\r\n")) + 1,
    )


def parse_output(
    output: str,
    profile: CompilerProfile,
    *,
    line_source: LineSource | None = None,
) -> list[Diagnostic]:
    """Parse the merged stdout/stderr ``output`` using ``profile``.

    Unmatched output yields an empty list, which is indistinguishable from a
    clean compile.

    Args:
        output: Concatenated compiler output.
        profile: Vendor profile supplying the grammar and result parser.
        line_source: Optional callable returning the text of a 1-based source line.

    Returns:
        list[Diagnostic]: Diagnostics in match order, duplicates included.
    """

    text = output.replace("\r\n", "\n")
    return [
        profile.build_diagnostic(match, profile.severities, line_source) for match in profile.grammar.finditer(text)
    ]


__all__ = [
    "DiagnosticBuilder",
    "LineSource",
    "MatchCaptures",
    "caret_column",
    "literal_column",
    "parse_output",
    "select_captures",
    "whole_line",
]

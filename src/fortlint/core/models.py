# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the fortlint package."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .severity import Severity


class Diagnostic(BaseModel):
    """Normalised, positioned diagnostic derived from raw compiler text.

    Positions are 1-based. ``end_line``/``end_column`` are only populated when
    a vendor reports a span; ``end_column`` is exclusive.
    """

    model_config = ConfigDict(frozen=True)

    file: str | None = None
    line: int = Field(default=1, ge=1)
    column: int = Field(default=1, ge=1)
    severity: Severity
    message: str
    end_line: int | None = None
    end_column: int | None = None

    @field_validator("line", "column", mode="before")
    @classmethod
    def _default_position(cls, value: int | str | None) -> int:
        """Coerce missing or non-positive positions to ``1``.

        Args:
            value: Raw position captured from compiler output.

        Returns:
            int: Positive 1-based position.
        """

        if value is None or value == "":
            return 1
        coerced = int(value)
        return coerced if coerced >= 1 else 1

    @field_validator("message", mode="before")
    @classmethod
    def _strip_message(cls, value: str) -> str:
        return value.strip() if isinstance(value, str) else value

    def describe(self) -> str:
        """Return a single-line ``file:line:column: severity: message`` rendering."""

        location = self.file or "<unknown>"
        return f"{location}:{self.line}:{self.column}: {self.severity.value}: {self.message}"


def deduplicate(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Collapse structurally identical diagnostics keeping first-seen order.

    Args:
        diagnostics: Diagnostics in the order the parser produced them.

    Returns:
        list[Diagnostic]: Unique diagnostics in insertion order.
    """

    return list(dict.fromkeys(diagnostics))


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    """Return ``True`` when any diagnostic carries :attr:`Severity.ERROR`."""

    return any(diagnostic.severity is Severity.ERROR for diagnostic in diagnostics)


__all__ = ["Diagnostic", "deduplicate", "has_errors"]

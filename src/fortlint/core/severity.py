# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels normalising different compiler vocabularies."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s+")


def normalise_token(token: str | None) -> str:
    """Return ``token`` lower-cased with internal whitespace collapsed.

    Args:
        token: Literal severity token captured from compiler output.

    Returns:
        str: Canonical lookup key, empty when ``token`` is ``None``.
    """

    if not token:
        return ""
    return _WHITESPACE.sub(" ", token.strip()).lower()


@dataclass(frozen=True, slots=True)
class SeverityTable:
    """Map a vendor's literal severity tokens onto :class:`Severity`.

    Lookups are case-insensitive. Tokens missing from the table resolve to
    ``default`` so an unfamiliar label never drops a diagnostic.
    """

    error: tuple[str, ...] = ()
    warning: tuple[str, ...] = ()
    information: tuple[str, ...] = ()
    default: Severity = Severity.ERROR
    _lookup: Mapping[str, Severity] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lookup: dict[str, Severity] = {}
        for tokens, severity in (
            (self.error, Severity.ERROR),
            (self.warning, Severity.WARNING),
            (self.information, Severity.INFORMATION),
        ):
            for token in tokens:
                lookup.setdefault(normalise_token(token), severity)
        object.__setattr__(self, "_lookup", lookup)

    def map(self, token: str | None) -> Severity:
        """Return the normalised severity for ``token``.

        Args:
            token: Literal severity token, in any letter case.

        Returns:
            Severity: Mapped severity or :attr:`default` when unknown.
        """

        return self._lookup.get(normalise_token(token), self.default)

    @property
    def tokens(self) -> Iterable[str]:
        """Return every token known to the table."""

        return tuple(self._lookup)


__all__ = ["Severity", "SeverityTable", "normalise_token"]

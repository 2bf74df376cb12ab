# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Minimal document model describing files handed over by the host editor."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final

FREE_FORM_LANGUAGE: Final[str] = "FortranFreeForm"
FIXED_FORM_LANGUAGE: Final[str] = "FortranFixedForm"
GENERIC_LANGUAGE: Final[str] = "fortran"
SUPPORTED_LANGUAGES: Final[frozenset[str]] = frozenset({FREE_FORM_LANGUAGE, FIXED_FORM_LANGUAGE, GENERIC_LANGUAGE})
SUPPORTED_SCHEMES: Final[frozenset[str]] = frozenset({"file", "untitled"})

FIXED_FORM_SUFFIXES: Final[frozenset[str]] = frozenset({".f", ".for", ".fpp", ".ftn", ".f77"})
FREE_FORM_SUFFIXES: Final[frozenset[str]] = frozenset(
    {".f90", ".f95", ".f03", ".f08", ".f18", ".fypp", ".pf"},
)


class DocumentEvent(str, Enum):
    """Document lifecycle events emitted by the host."""

    OPENED = "opened"
    SAVED = "saved"
    CLOSED = "closed"


def language_for(path: Path) -> str | None:
    """Return the Fortran language identifier implied by ``path``'s suffix."""

    suffix = path.suffix.lower()
    if suffix in FREE_FORM_SUFFIXES:
        return FREE_FORM_LANGUAGE
    if suffix in FIXED_FORM_SUFFIXES:
        return FIXED_FORM_LANGUAGE
    return None


@dataclass(frozen=True, slots=True)
class TextDocument:
    """A source file as seen by the linter.

    Attributes:
        path: Absolute path of the file on disk.
        language_id: Host language identifier.
        scheme: URI scheme the host uses for the document.
        text: Current buffer contents, ``None`` to fall back to the file on disk.
    """

    path: Path
    language_id: str
    scheme: str = "file"
    text: str | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_path(cls, path: Path, *, language_id: str | None = None) -> TextDocument:
        """Create a document for ``path`` guessing the language from its suffix."""

        resolved = path.resolve()
        return cls(path=resolved, language_id=language_id or language_for(resolved) or "plaintext")

    @property
    def key(self) -> str:
        """Return the identity used for per-file bookkeeping."""

        return str(self.path)

    @property
    def is_fortran(self) -> bool:
        """Return ``True`` for supported Fortran documents in supported schemes."""

        return self.language_id in SUPPORTED_LANGUAGES and self.scheme in SUPPORTED_SCHEMES

    @property
    def is_free_form(self) -> bool:
        """Return ``True`` unless the document is fixed-form Fortran."""

        if self.language_id == FIXED_FORM_LANGUAGE:
            return False
        if self.language_id == FREE_FORM_LANGUAGE:
            return True
        return language_for(self.path) != FIXED_FORM_LANGUAGE

    def lines(self) -> list[str] | None:
        """Return the source lines, or ``None`` when the file cannot be read."""

        text = self.text
        if text is None:
            try:
                text = self.path.read_text(encoding="utf-8", errors="replace")
            except OSError:
                return None
        return text.splitlines()

    def line_at(self, number: int) -> str | None:
        """Return the text of 1-based line ``number`` or ``None`` when unavailable."""

        return _pick(self.lines(), number)

    def line_source(self) -> Callable[[int], str | None]:
        """Return a line lookup that reads the source at most once.

        Use one lookup per lint so every diagnostic of a run sees the same text.
        """

        snapshot: list[list[str] | None] = []

        def lookup(number: int) -> str | None:
            if not snapshot:
                snapshot.append(self.lines())
            return _pick(snapshot[0], number)

        return lookup


def _pick(lines: list[str] | None, number: int) -> str | None:
    if lines is not None and 1 <= number <= len(lines):
        return lines[number - 1]
    return None


__all__ = [
    "DocumentEvent",
    "FIXED_FORM_LANGUAGE",
    "FREE_FORM_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "TextDocument",
    "language_for",
]

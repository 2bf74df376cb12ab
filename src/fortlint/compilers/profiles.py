# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Static per-vendor compiler descriptors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..core.models import Diagnostic
from ..core.severity import SeverityTable
from .parsers import DiagnosticBuilder, LineSource, parse_output


class Vendor(str, Enum):
    """Compiler families with a dedicated diagnostic grammar."""

    GNU = "gnu"
    GNU_MODERN = "gnu-modern"
    INTEL = "intel"
    NAG = "nag"
    LFORTRAN = "lfortran"


@dataclass(frozen=True, slots=True)
class CompilerProfile:
    """Argument conventions and diagnostic grammar for one compiler toolchain.

    Attributes:
        name: Executable name the profile targets.
        vendor: Compiler family tag.
        mandatory_args: Arguments required for a check-only compilation.
        default_args: Warning flags used when the user supplies none.
        mod_flag: Flag preceding the module output directory, empty if unsupported.
        grammar: Pattern with named groups matched against the merged output.
        severities: Literal severity token table.
        build_diagnostic: Vendor result parser turning one match into a diagnostic.
        line_length_flags: ``str.format`` templates receiving the maximum line length.
        unbounded_line_length: Token substituted for a maximum length of ``-1``.
        stdin_args: Free-form and fixed-form argument tuples that make the
            compiler read source from stdin, ``None`` when unsupported.
        output_flag: Flag preceding the object file path.
    """

    name: str
    vendor: Vendor
    mandatory_args: tuple[str, ...]
    default_args: tuple[str, ...]
    mod_flag: str
    grammar: re.Pattern[str]
    severities: SeverityTable
    build_diagnostic: DiagnosticBuilder
    line_length_flags: tuple[str, ...] = ()
    unbounded_line_length: str = "none"
    stdin_args: tuple[tuple[str, ...], tuple[str, ...]] | None = None
    output_flag: str = "-o"

    @property
    def supports_stdin(self) -> bool:
        """Return ``True`` when a preprocessor stage can feed this compiler."""

        return self.stdin_args is not None

    def source_from_stdin(self, *, free_form: bool) -> tuple[str, ...]:
        """Return the arguments that make the compiler read ``free_form`` source from stdin.

        Raises:
            ValueError: If the vendor cannot read source from stdin.
        """

        if self.stdin_args is None:
            raise ValueError(f"{self.name} cannot read source from standard input")
        free, fixed = self.stdin_args
        return free if free_form else fixed

    def line_length_args(self, max_line_length: int | None) -> tuple[str, ...]:
        """Return line-length flags for ``max_line_length`` (``-1`` meaning unbounded).

        Args:
            max_line_length: Configured limit, ``None`` when not configured.

        Returns:
            tuple[str, ...]: Formatted flags, empty when unsupported or unset.
        """

        if max_line_length is None or not self.line_length_flags:
            return ()
        token = self.unbounded_line_length if max_line_length == -1 else str(max_line_length)
        return tuple(template.format(token) for template in self.line_length_flags)

    def parse(self, output: str, *, line_source: LineSource | None = None) -> list[Diagnostic]:
        """Parse merged compiler ``output`` with this profile's grammar."""

        return parse_output(output, self, line_source=line_source)


__all__ = ["CompilerProfile", "Vendor"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Registry of supported compiler profiles."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final

from ..core.severity import SeverityTable
from .parsers import caret_column, literal_column, whole_line
from .profiles import CompilerProfile, Vendor

_PATH_PREFIX: Final[str] = r"(?:[A-Za-z]:[\\/])?"


def _driver_line(severity: str) -> str:
    """Return the alternate ``binary: severity: message`` branch for ``severity`` tokens."""

    return (
        r"^(?P<alt_file>[\w.+-]+):[ \t]*"
        rf"(?P<alt_severity>(?i:{severity}))[ \t]*(?:#\d+)?:[ \t]*"
        r"(?P<alt_message>.*?)[ \t]*$"
    )


# gfortran < 11:
#   file.f90:5:12:
#   <blank>
#       5 |   integer :: x
#         |            1
#   Warning: Unused variable 'x' declared at (1)
_GNU_SEVERITY: Final[str] = r"fatal error|error|warning|note|info"
GNU_LEGACY_GRAMMAR: Final[re.Pattern[str]] = re.compile(
    rf"^(?P<file>{_PATH_PREFIX}[^:\n]+):(?P<line>\d+)(?::(?P<column>\d+))?:[ \t]*\n"
    r"(?:.*\n)*?"
    rf"[ \t]*(?P<severity>(?i:{_GNU_SEVERITY})):[ \t]*(?P<message>.*?)[ \t]*$"
    rf"|{_driver_line(_GNU_SEVERITY)}",
    re.MULTILINE,
)

# gfortran >= 11 with -fdiagnostics-plain-output:
#   file.f90:5:12: Warning: Unused variable 'x' declared at (1)
GNU_MODERN_GRAMMAR: Final[re.Pattern[str]] = re.compile(
    rf"^(?P<file>{_PATH_PREFIX}[^:\n]+):(?P<line>\d+)(?::(?P<column>\d+))?:[ \t]*"
    rf"(?P<severity>(?i:{_GNU_SEVERITY})):[ \t]*(?P<message>.*?)[ \t]*$"
    rf"|{_driver_line(_GNU_SEVERITY)}",
    re.MULTILINE,
)

# ifort / ifx:
#   file.f90(5): error #6404: This name does not have a type.   [X]
#       x = 1
#   ----^
_INTEL_SEVERITY: Final[str] = r"(?:catastrophic |fatal )?error|warning|remark|info|note"
_INTEL_DRIVER_SEVERITY: Final[str] = rf"command line (?:error|warning|remark)|{_INTEL_SEVERITY}"
INTEL_GRAMMAR: Final[re.Pattern[str]] = re.compile(
    rf"^(?P<file>{_PATH_PREFIX}[^(\n]+)\((?P<line>\d+)\):[ \t]*"
    rf"(?P<severity>(?i:{_INTEL_SEVERITY}))[ \t]*(?:#\d+)?:[ \t]*(?P<message>.*?)[ \t]*"
    r"(?:\n(?P<source>.*)\n[ \t]*(?P<caret>-*\^)[ \t]*)?$"
    rf"|{_driver_line(_INTEL_DRIVER_SEVERITY)}",
    re.MULTILINE,
)

# nagfor:
#   Warning: file.f90, line 5: Unused local variable X
_NAG_SEVERITY: Final[str] = (
    r"remark|info|note|warning|questionable|extension|obsolescent|deleted feature used"
    r"|(?:sequence |fatal )?error|fatal|panic"
)
NAG_GRAMMAR: Final[re.Pattern[str]] = re.compile(
    rf"^(?P<severity>(?i:{_NAG_SEVERITY}))(?:[ \t]*\(\w+\))?:[ \t]*"
    r"(?P<file>[^,\n]+),[ \t]*line[ \t]+(?P<line>\d+):[ \t]*(?P<message>.*?)[ \t]*$"
    rf"|{_driver_line(_NAG_SEVERITY)}",
    re.MULTILINE,
)

# lfortran --error-format=short:
#   file.f90:3:5-3:9: semantic error: Variable 'x' is not declared
_LFORTRAN_SEVERITY: Final[str] = (
    r"(?:semantic |syntax |tokenizer |parser )?error|warning|note|help|info|style suggestion"
)
LFORTRAN_GRAMMAR: Final[re.Pattern[str]] = re.compile(
    rf"^(?P<file>{_PATH_PREFIX}[^:\n]+):(?P<line>\d+):(?P<column>\d+)"
    r"(?:[ \t]*-[ \t]*(?P<end_line>\d+):(?P<end_column>\d+))?:?[ \t]+"
    rf"(?P<severity>(?i:{_LFORTRAN_SEVERITY})):[ \t]*(?P<message>.*?)[ \t]*$"
    rf"|{_driver_line(_LFORTRAN_SEVERITY)}",
    re.MULTILINE,
)

GNU_SEVERITIES: Final[SeverityTable] = SeverityTable(
    error=("error", "fatal error"),
    warning=("warning",),
    information=("note", "info"),
)
INTEL_SEVERITIES: Final[SeverityTable] = SeverityTable(
    error=("error", "fatal error", "catastrophic error", "command line error"),
    warning=("warning", "remark", "command line warning", "command line remark"),
    information=("info", "note"),
)
NAG_SEVERITIES: Final[SeverityTable] = SeverityTable(
    error=("panic", "fatal", "fatal error", "error", "sequence error"),
    warning=("warning", "questionable", "extension", "obsolescent", "deleted feature used"),
    information=("remark", "note", "info"),
)
LFORTRAN_SEVERITIES: Final[SeverityTable] = SeverityTable(
    error=("error", "semantic error", "syntax error", "tokenizer error", "parser error"),
    warning=("warning",),
    information=("note", "help", "info", "style suggestion"),
)

_GNU_STDIN: Final[tuple[tuple[str, ...], tuple[str, ...]]] = (
    ("-xf95", "-ffree-form", "-"),
    ("-xf95", "-ffixed-form", "-"),
)
_GNU_LINE_LENGTH: Final[tuple[str, ...]] = ("-ffree-line-length-{}", "-ffixed-line-length-{}")

GNU: Final[CompilerProfile] = CompilerProfile(
    name="gfortran",
    vendor=Vendor.GNU,
    mandatory_args=("-fsyntax-only", "-cpp", "-fdiagnostics-show-option"),
    default_args=("-Wall",),
    mod_flag="-J",
    grammar=GNU_LEGACY_GRAMMAR,
    severities=GNU_SEVERITIES,
    build_diagnostic=literal_column,
    line_length_flags=_GNU_LINE_LENGTH,
    stdin_args=_GNU_STDIN,
)
GNU_MODERN: Final[CompilerProfile] = CompilerProfile(
    name="gfortran",
    vendor=Vendor.GNU_MODERN,
    mandatory_args=("-fsyntax-only", "-cpp", "-fdiagnostics-plain-output"),
    default_args=("-Wall",),
    mod_flag="-J",
    grammar=GNU_MODERN_GRAMMAR,
    severities=GNU_SEVERITIES,
    build_diagnostic=literal_column,
    line_length_flags=_GNU_LINE_LENGTH,
    stdin_args=_GNU_STDIN,
)
INTEL: Final[CompilerProfile] = CompilerProfile(
    name="ifort",
    vendor=Vendor.INTEL,
    mandatory_args=("-syntax-only", "-fpp"),
    default_args=("-warn", "all"),
    mod_flag="-module",
    grammar=INTEL_GRAMMAR,
    severities=INTEL_SEVERITIES,
    build_diagnostic=caret_column,
)
NAG: Final[CompilerProfile] = CompilerProfile(
    name="nagfor",
    vendor=Vendor.NAG,
    mandatory_args=("-c",),
    default_args=("-u",),
    mod_flag="-mdir",
    grammar=NAG_GRAMMAR,
    severities=NAG_SEVERITIES,
    build_diagnostic=whole_line,
)
LFORTRAN: Final[CompilerProfile] = CompilerProfile(
    name="lfortran",
    vendor=Vendor.LFORTRAN,
    mandatory_args=("-c", "--error-format=short"),
    default_args=(),
    mod_flag="-J",
    grammar=LFORTRAN_GRAMMAR,
    severities=LFORTRAN_SEVERITIES,
    build_diagnostic=literal_column,
)

PROFILES: Final[Mapping[str, CompilerProfile]] = {
    "gfortran": GNU,
    "ifort": INTEL,
    "ifx": INTEL,
    "nagfor": NAG,
    "lfortran": LFORTRAN,
}
DEFAULT_PROFILE: Final[CompilerProfile] = GNU


def is_supported(compiler: str) -> bool:
    """Return ``True`` when ``compiler`` names a registered profile."""

    return compiler in PROFILES


def select_profile(compiler: str, *, modern_gnu: bool = False) -> CompilerProfile:
    """Return the profile for ``compiler``.

    Args:
        compiler: Configured compiler name, e.g. ``gfortran`` or ``ifx``.
        modern_gnu: Whether gfortran emits the plain-output format (version 11+).

    Returns:
        CompilerProfile: Matching profile, or :data:`DEFAULT_PROFILE` for unknown names.
    """

    if compiler == "gfortran" and modern_gnu:
        return GNU_MODERN
    return PROFILES.get(compiler, DEFAULT_PROFILE)


__all__ = [
    "DEFAULT_PROFILE",
    "GNU",
    "GNU_MODERN",
    "INTEL",
    "LFORTRAN",
    "NAG",
    "PROFILES",
    "is_supported",
    "select_profile",
]

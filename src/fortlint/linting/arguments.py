# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Assemble compiler and preprocessor argument vectors."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Final

from ..compilers.profiles import CompilerProfile
from ..config import FyppConfig

DEBUG_SYMBOLS_FLAG: Final[str] = "-g"


def clean_arguments(args: Iterable[str]) -> list[str]:
    """Strip every argument and drop the ones that end up empty.

    Placeholder substitution can legitimately produce an empty string, for
    example an unset ``${env:NAME}``, which must not become an argv entry.
    """

    return [stripped for stripped in (arg.strip() for arg in args) if stripped]


def include_flags(paths: Iterable[str]) -> list[str]:
    """Return ``-I<path>`` for every directory in ``paths``."""

    return [f"-I{path}" for path in paths]


def object_path(file: Path) -> str:
    """Return the object file path written next to ``file``."""

    return f"{file}.o"


def build_compiler_arguments(
    file: Path,
    profile: CompilerProfile,
    *,
    user_args: Sequence[str] = (),
    include_paths: Sequence[str] = (),
    mod_output_dir: str = "",
    preprocessor: bool = False,
    free_form: bool = True,
    max_line_length: int | None = None,
) -> list[str]:
    """Return the full compiler argument vector for a check-only compilation.

    Order: mandatory arguments; the user's arguments (or the profile defaults
    when none are given) followed by any line-length flags; the module output
    flag and directory; include flags; the object output flag and path; the
    source, which is either ``file`` or, with a preprocessor stage, the flags
    that make the compiler read stdin.

    Args:
        file: Source file being linted.
        profile: Vendor profile supplying the flag spellings.
        user_args: Extra arguments from configuration, already substituted.
        include_paths: Resolved include directories.
        mod_output_dir: Module output directory, empty when not configured.
        preprocessor: Whether a preprocessor stage feeds the compiler's stdin.
        free_form: Whether the source is free-form Fortran.
        max_line_length: Maximum source line length, ``-1`` for unbounded,
            ``None`` when not configured.

    Returns:
        list[str]: Stripped, non-empty arguments excluding the executable.
    """

    args: list[str] = list(profile.mandatory_args)
    args.extend(user_args if user_args else profile.default_args)
    args.extend(profile.line_length_args(max_line_length))
    if mod_output_dir.strip() and profile.mod_flag:
        args.extend((profile.mod_flag, mod_output_dir))
    args.extend(include_flags(include_paths))
    args.extend((profile.output_flag, object_path(file)))
    if preprocessor:
        args.extend(profile.source_from_stdin(free_form=free_form))
    else:
        args.append(str(file))
    return clean_arguments(args)


def build_compile_arguments(
    lint_args: Sequence[str],
    profile: CompilerProfile,
    *,
    debug_symbols: bool = False,
) -> list[str]:
    """Turn a lint argument vector into one that really builds the source.

    The profile's check-only arguments are removed and ``-g`` is appended
    when ``debug_symbols`` is requested.
    """

    mandatory = set(profile.mandatory_args)
    args = [arg for arg in lint_args if arg not in mandatory]
    if debug_symbols:
        args.append(DEBUG_SYMBOLS_FLAG)
    return args


def definition_flags(definitions: Mapping[str, str]) -> list[str]:
    """Return ``-DNAME=VALUE`` (or ``-DNAME`` for empty values) per definition."""

    return [f"-D{name}={value}" if value else f"-D{name}" for name, value in definitions.items()]


def build_preprocessor_arguments(
    file: Path,
    fypp: FyppConfig,
    *,
    include_paths: Sequence[str] = (),
    free_form: bool = True,
) -> list[str]:
    """Return the ``fypp`` argument vector for ``file``.

    Args:
        file: Source file to preprocess.
        fypp: Preprocessor settings.
        include_paths: Resolved preprocessor include directories.
        free_form: Whether the source is free-form Fortran.

    Returns:
        list[str]: Stripped, non-empty arguments excluding the executable.
    """

    args: list[str] = ["--line-numbering"]
    args.extend(include_flags(include_paths))
    if not free_form:
        args.append("--fixed-format")
    args.extend(definition_flags(fypp.definitions))
    args.append(f"--line-numbering-mode={fypp.line_numbering_mode}")
    args.append(f"--line-marker-format={fypp.line_marker_format}")
    args.extend(fypp.extra_args)
    args.append(str(file))
    return clean_arguments(args)


__all__ = [
    "build_compile_arguments",
    "build_compiler_arguments",
    "build_preprocessor_arguments",
    "clean_arguments",
    "definition_flags",
    "include_flags",
    "object_path",
]

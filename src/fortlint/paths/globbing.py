# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expand include path patterns into concrete directories.

Two strategies are available. The bulk strategy walks each distinct static
base directory once, matching every pattern rooted there in a single pass, and
refuses to skip unreadable directories. When it hits a permission error the
resolver falls back to globbing pattern by pattern, keeping whatever resolves.
"""

from __future__ import annotations

import glob
import logging
import os
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Final

from ..errors import PathResolutionError
from .variables import VariableContext, resolve_variables

LOGGER = logging.getLogger(__name__)

GlobStrategy = Callable[[Sequence[str]], list[str]]

_MAGIC: Final[re.Pattern[str]] = re.compile(r"[*?[]")
_RECURSIVE: Final[str] = "**"


def has_magic(segment: str) -> bool:
    """Return ``True`` when ``segment`` contains glob wildcards."""

    return _MAGIC.search(segment) is not None


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def split_pattern(pattern: str) -> tuple[Path, tuple[str, ...]]:
    """Split ``pattern`` into its static base and wildcard segments.

    Args:
        pattern: Absolute glob pattern.

    Returns:
        tuple[Path, tuple[str, ...]]: Longest wildcard-free prefix and the
        remaining segments (empty when the pattern has no wildcards).
    """

    parts = Path(pattern).parts
    for index, part in enumerate(parts):
        if has_magic(part):
            base = Path(*parts[:index]) if index else Path(".")
            return base, tuple(parts[index:])
    return Path(pattern), ()


def match_segments(pattern: Sequence[str], parts: Sequence[str]) -> bool:
    """Return ``True`` when ``parts`` satisfies the wildcard ``pattern`` segments.

    ``**`` matches zero or more directory levels; other segments follow
    :func:`fnmatch.fnmatchcase` semantics. Hidden entries only match a
    segment that itself starts with a dot, as in :func:`glob.glob`.

    Args:
        pattern: Wildcard segments produced by :func:`split_pattern`.
        parts: Relative path components below the static base.

    Returns:
        bool: Whether the relative path matches.
    """

    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == _RECURSIVE:
        for index in range(len(parts) + 1):
            if match_segments(rest, parts[index:]):
                return True
            if index < len(parts) and _is_hidden(parts[index]):
                return False
        return False
    if not parts:
        return False
    if _is_hidden(parts[0]) and not _is_hidden(head):
        return False
    return fnmatchcase(parts[0], head) and match_segments(rest, parts[1:])


def _reraise(error: OSError) -> None:
    raise error


def _max_depth(groups: Iterable[tuple[str, ...]]) -> int | None:
    """Return the deepest level any pattern can reach, ``None`` when unbounded."""

    depth = 0
    for segments in groups:
        if _RECURSIVE in segments:
            return None
        depth = max(depth, len(segments))
    return depth


def bulk_glob(patterns: Sequence[str]) -> list[str]:
    """Resolve every pattern with one strict walk per static base directory.

    Args:
        patterns: Absolute glob patterns.

    Returns:
        list[str]: Matching directories in pattern order.

    Raises:
        OSError: Propagated from the walk, notably :class:`PermissionError`
            for unreadable directories.
    """

    literal: dict[int, str] = {}
    grouped: dict[Path, list[tuple[int, tuple[str, ...]]]] = {}
    for index, pattern in enumerate(patterns):
        base, segments = split_pattern(pattern)
        if not segments:
            if base.is_dir():
                literal[index] = str(base)
            continue
        grouped.setdefault(base, []).append((index, segments))

    matches: dict[int, list[str]] = {index: [path] for index, path in literal.items()}
    for base, entries in grouped.items():
        if not base.is_dir():
            continue
        limit = _max_depth(segments for _, segments in entries)
        keep_hidden = any(_is_hidden(segment) for _, segments in entries for segment in segments)
        for dirpath, dirnames, _ in os.walk(base, onerror=_reraise):
            relative = Path(dirpath).relative_to(base).parts
            if limit is not None and len(relative) >= limit:
                dirnames[:] = []
            elif not keep_hidden:
                dirnames[:] = [name for name in dirnames if not _is_hidden(name)]
            for index, segments in entries:
                if match_segments(segments, relative):
                    matches.setdefault(index, []).append(os.path.normpath(dirpath))
    ordered: list[str] = []
    for index in range(len(patterns)):
        ordered.extend(sorted(matches.get(index, ())))
    return ordered


def iterative_glob(patterns: Sequence[str]) -> list[str]:
    """Resolve patterns one at a time, skipping patterns that raise ``OSError``.

    Args:
        patterns: Absolute glob patterns.

    Returns:
        list[str]: Matching directories in pattern order.
    """

    resolved: list[str] = []
    for pattern in patterns:
        try:
            found = glob.glob(pattern, recursive=True)
        except OSError as exc:
            LOGGER.debug("skipping include pattern %s: %s", pattern, exc)
            continue
        resolved.extend(sorted(os.path.normpath(path) for path in found if os.path.isdir(path)))
    return resolved


def _unique(paths: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(paths))


@dataclass(slots=True)
class PathResolver:
    """Expand placeholder and glob expressions into existing directories."""

    context: VariableContext
    fast: GlobStrategy = field(default=bulk_glob)
    fallback: GlobStrategy = field(default=iterative_glob)

    def resolve(self, pattern: str) -> str:
        """Substitute placeholders in ``pattern`` and anchor it at the workspace root.

        Substitution happens before any globbing so substituted text is never
        treated as escaped glob syntax.

        Args:
            pattern: Raw configuration value.

        Returns:
            str: Absolute pattern ready for globbing.
        """

        substituted = resolve_variables(pattern.strip(), self.context)
        path = Path(substituted)
        if not path.is_absolute():
            path = self.context.workspace_root / path
        return str(path)

    def expand(self, patterns: Sequence[str]) -> tuple[str, ...]:
        """Return the directories matched by ``patterns``.

        Args:
            patterns: Raw configuration values, possibly containing
                placeholders and wildcards.

        Returns:
            tuple[str, ...]: De-duplicated directories in pattern order.

        Raises:
            PathResolutionError: If the fallback strategy fails.
        """

        resolved = [self.resolve(pattern) for pattern in patterns if pattern.strip()]
        if not resolved:
            return ()
        try:
            return _unique(self.fast(resolved))
        except PermissionError as exc:
            LOGGER.debug("bulk glob failed (%s); retrying pattern by pattern", exc)
        except OSError as exc:
            raise PathResolutionError(f"Failed to expand include paths: {exc}") from exc
        try:
            return _unique(self.fallback(resolved))
        except Exception as exc:  # suppression_valid: any fallback failure is surfaced as a resolution error.
            raise PathResolutionError(f"Failed to expand include paths: {exc}") from exc


__all__ = [
    "GlobStrategy",
    "PathResolver",
    "bulk_glob",
    "has_magic",
    "iterative_glob",
    "match_segments",
    "split_pattern",
]

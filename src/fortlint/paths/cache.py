# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cache of resolved include directories keyed by configuration option."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from ..errors import PathResolutionError
from ..logging import LintLogger

Expander = Callable[[Sequence[str]], Sequence[str]]


class PathCacheKey(str, Enum):
    """Configuration options whose glob patterns are cached."""

    COMPILER_INCLUDES = "linter.include_paths"
    PREPROCESSOR_INCLUDES = "linter.fypp.includes"


@dataclass(frozen=True, slots=True)
class CachedPathSet:
    """Raw patterns together with the directories they resolved to.

    ``resolved_paths`` is only valid while ``raw_patterns`` equals the current
    configuration value for the key.
    """

    raw_patterns: tuple[str, ...]
    resolved_paths: tuple[str, ...]


class PathCache:
    """Resolve include patterns only when their configuration value changes.

    Entries are immutable :class:`CachedPathSet` instances replaced by a single
    dictionary assignment, so concurrent readers never observe raw patterns
    paired with stale resolved paths.
    """

    def __init__(self, expander: Expander, *, logger: LintLogger | None = None) -> None:
        """Initialise the cache.

        Args:
            expander: Callable expanding raw patterns into directories,
                typically :meth:`PathResolver.expand`.
            logger: Logger receiving resolution warnings and debug traces.
        """

        self._expander = expander
        self._logger = logger or LintLogger()
        self._entries: dict[PathCacheKey, CachedPathSet] = {}

    def get(self, key: PathCacheKey, raw_patterns: Sequence[str]) -> tuple[str, ...]:
        """Return the resolved directories for ``raw_patterns``.

        The comparison is order-sensitive. A resolution failure is logged and
        yields an empty tuple without storing anything, so the next call
        retries.

        Args:
            key: Configuration option the patterns belong to.
            raw_patterns: Current configuration value.

        Returns:
            tuple[str, ...]: Resolved directories.
        """

        patterns = tuple(raw_patterns)
        entry = self._entries.get(key)
        if entry is not None and entry.raw_patterns == patterns:
            return entry.resolved_paths
        if entry is None:
            self._logger.debug(f"[lint] Initialising cache for {key.value}")
        else:
            self._logger.debug(f"[lint] {key.value} changed, updating cache")
        try:
            resolved = tuple(self._expander(patterns))
        except PathResolutionError as exc:
            self._logger.warn(f"[lint] Error resolving {key.value}: {exc}. {exc.hint}")
            return ()
        self._entries[key] = CachedPathSet(raw_patterns=patterns, resolved_paths=resolved)
        return resolved

    def peek(self, key: PathCacheKey) -> CachedPathSet | None:
        """Return the stored entry for ``key`` without resolving anything."""

        return self._entries.get(key)

    def invalidate(self, key: PathCacheKey | None = None) -> None:
        """Forget ``key``, or every key when ``None``, forcing the next ``get`` to resolve.

        Args:
            key: Cache key to drop; ``None`` clears the whole cache.
        """

        if key is None:
            self._entries = {}
            return
        self._entries.pop(key, None)


__all__ = ["CachedPathSet", "PathCache", "PathCacheKey"]

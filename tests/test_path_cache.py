# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the resolved include path cache."""

from __future__ import annotations

import io
from collections.abc import Sequence

from fortlint.errors import PathResolutionError
from fortlint.logging import LintLogger
from fortlint.paths.cache import CachedPathSet, PathCache, PathCacheKey


class CountingExpander:
    def __init__(self, *, fail: bool = False) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.fail = fail

    def __call__(self, patterns: Sequence[str]) -> tuple[str, ...]:
        self.calls.append(tuple(patterns))
        if self.fail:
            raise PathResolutionError("too many directories")
        return tuple(f"/resolved/{pattern}" for pattern in patterns)


def test_unchanged_patterns_resolve_once(logger: LintLogger) -> None:
    expander = CountingExpander()
    cache = PathCache(expander, logger=logger)

    first = cache.get(PathCacheKey.COMPILER_INCLUDES, ["a", "b"])
    second = cache.get(PathCacheKey.COMPILER_INCLUDES, ("a", "b"))

    assert first == second == ("/resolved/a", "/resolved/b")
    assert len(expander.calls) == 1


def test_changed_patterns_resolve_again(logger: LintLogger) -> None:
    expander = CountingExpander()
    cache = PathCache(expander, logger=logger)

    cache.get(PathCacheKey.COMPILER_INCLUDES, ["a", "b"])
    cache.get(PathCacheKey.COMPILER_INCLUDES, ["b", "a"])

    assert len(expander.calls) == 2
    entry = cache.peek(PathCacheKey.COMPILER_INCLUDES)
    assert entry == CachedPathSet(raw_patterns=("b", "a"), resolved_paths=("/resolved/b", "/resolved/a"))


def test_keys_are_independent(logger: LintLogger) -> None:
    expander = CountingExpander()
    cache = PathCache(expander, logger=logger)

    cache.get(PathCacheKey.COMPILER_INCLUDES, ["a"])
    cache.get(PathCacheKey.PREPROCESSOR_INCLUDES, ["a"])
    cache.get(PathCacheKey.COMPILER_INCLUDES, ["a"])

    assert len(expander.calls) == 2


def test_invalidate_forces_resolution(logger: LintLogger) -> None:
    expander = CountingExpander()
    cache = PathCache(expander, logger=logger)

    cache.get(PathCacheKey.COMPILER_INCLUDES, ["a"])
    cache.get(PathCacheKey.PREPROCESSOR_INCLUDES, ["b"])
    cache.invalidate(PathCacheKey.COMPILER_INCLUDES)
    cache.get(PathCacheKey.COMPILER_INCLUDES, ["a"])
    cache.get(PathCacheKey.PREPROCESSOR_INCLUDES, ["b"])
    assert len(expander.calls) == 3

    cache.invalidate()
    assert cache.peek(PathCacheKey.PREPROCESSOR_INCLUDES) is None


def test_failure_warns_and_is_not_stored(logger: LintLogger, log_buffer: io.StringIO) -> None:
    expander = CountingExpander(fail=True)
    cache = PathCache(expander, logger=logger)

    assert cache.get(PathCacheKey.COMPILER_INCLUDES, ["**"]) == ()
    assert cache.peek(PathCacheKey.COMPILER_INCLUDES) is None
    assert cache.get(PathCacheKey.COMPILER_INCLUDES, ["**"]) == ()
    assert len(expander.calls) == 2
    output = log_buffer.getvalue()
    assert "Error resolving linter.include_paths" in output
    assert "Narrow the glob patterns" in output


def test_cache_logs_initialisation_and_changes(logger: LintLogger, log_buffer: io.StringIO) -> None:
    cache = PathCache(CountingExpander(), logger=logger)

    cache.get(PathCacheKey.PREPROCESSOR_INCLUDES, ["a"])
    cache.get(PathCacheKey.PREPROCESSOR_INCLUDES, ["b"])

    output = log_buffer.getvalue()
    assert "Initialising cache for linter.fypp.includes" in output
    assert "linter.fypp.includes changed, updating cache" in output

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for include path glob expansion."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

import pytest

from fortlint.errors import PathResolutionError
from fortlint.paths.globbing import PathResolver, bulk_glob, iterative_glob, match_segments, split_pattern
from fortlint.paths.variables import VariableContext


def _resolver(root: Path, **strategies: object) -> PathResolver:
    return PathResolver(VariableContext(workspace_root=root, environ={}), **strategies)  # type: ignore[arg-type]


def test_split_pattern() -> None:
    base, segments = split_pattern("/ws/lib/*/mods")

    assert base == Path("/ws/lib")
    assert segments == ("*", "mods")
    assert split_pattern("/ws/include") == (Path("/ws/include"), ())


@pytest.mark.parametrize(
    ("pattern", "parts", "expected"),
    [
        (("*", "mods"), ("a", "mods"), True),
        (("*", "mods"), ("a", "b", "mods"), False),
        (("**", "mods"), ("a", "b", "mods"), True),
        (("**",), (), True),
        (("**", "mods"), ("mods",), True),
        (("a?",), ("ab",), True),
        (("*",), (".git",), False),
        (("**", "mods"), (".cache", "mods"), False),
        ((".*",), (".git",), True),
        ((".cache", "*"), (".cache", "mods"), True),
    ],
)
def test_match_segments(pattern: tuple[str, ...], parts: tuple[str, ...], expected: bool) -> None:
    assert match_segments(pattern, parts) is expected


def test_expand_resolves_relative_patterns(workspace: Path) -> None:
    resolver = _resolver(workspace)

    assert resolver.expand(["include", "lib/*/mods"]) == (
        str(workspace / "include"),
        str(workspace / "lib" / "a" / "mods"),
        str(workspace / "lib" / "b" / "mods"),
    )


def test_expand_recursive_and_deduplicated(workspace: Path) -> None:
    resolver = _resolver(workspace)

    result = resolver.expand(["${workspaceFolder}/lib/**/mods", "lib/b/mods"])

    assert result == (str(workspace / "lib" / "a" / "mods"), str(workspace / "lib" / "b" / "mods"))


def test_expand_skips_files_and_missing_paths(workspace: Path) -> None:
    resolver = _resolver(workspace)

    assert resolver.expand(["src/*.f90", "missing", "missing/*", "  "]) == ()


def test_fast_and_fallback_strategies_agree(workspace: Path) -> None:
    (workspace / "lib" / ".cache" / "mods").mkdir(parents=True)
    (workspace / ".git" / "other").mkdir(parents=True)
    patterns = [
        str(workspace / "lib" / "*" / "mods"),
        str(workspace / "**" / "other"),
        str(workspace / "include"),
        str(workspace / "lib" / ".c*"),
    ]

    result = bulk_glob(patterns)

    assert result == iterative_glob(patterns)
    assert str(workspace / "lib" / ".cache" / "mods") not in result
    assert str(workspace / ".git" / "other") not in result
    assert str(workspace / "lib" / ".cache") in result


def test_permission_error_falls_back(workspace: Path) -> None:
    calls: list[Sequence[str]] = []

    def denied(patterns: Sequence[str]) -> list[str]:
        calls.append(patterns)
        raise PermissionError("denied")

    resolver = _resolver(workspace, fast=denied)

    assert resolver.expand(["lib/*/mods"]) == (
        str(workspace / "lib" / "a" / "mods"),
        str(workspace / "lib" / "b" / "mods"),
    )
    assert len(calls) == 1


def test_other_os_errors_are_resolution_errors(workspace: Path) -> None:
    def broken(patterns: Sequence[str]) -> list[str]:
        raise OSError("disk on fire")

    with pytest.raises(PathResolutionError):
        _resolver(workspace, fast=broken).expand(["include"])


def test_fallback_failure_is_a_resolution_error(workspace: Path) -> None:
    def denied(patterns: Sequence[str]) -> list[str]:
        raise PermissionError("denied")

    def explode(patterns: Sequence[str]) -> list[str]:
        raise RuntimeError("glob exploded")

    with pytest.raises(PathResolutionError) as excinfo:
        _resolver(workspace, fast=denied, fallback=explode).expand(["include"])
    assert excinfo.value.hint


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root ignores directory permissions")
def test_unreadable_directory_uses_fallback(workspace: Path) -> None:
    locked = workspace / "lib" / "locked"
    locked.mkdir()
    locked.chmod(0)
    try:
        with pytest.raises(PermissionError):
            bulk_glob([str(workspace / "lib" / "**" / "mods")])
        result = _resolver(workspace).expand(["lib/**/mods"])
    finally:
        locked.chmod(0o755)

    assert str(workspace / "lib" / "a" / "mods") in result
    assert str(workspace / "lib" / "b" / "mods") in result


def test_denied_directory_keeps_unaffected_matches(workspace: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    locked = workspace / "lib" / "locked"
    (locked / "mods").mkdir(parents=True)
    real_scandir = os.scandir

    def guarded(path: str | os.PathLike[str] = ".") -> object:
        if Path(os.fspath(path)) == locked:
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", guarded)

    with pytest.raises(PermissionError):
        bulk_glob([str(workspace / "lib" / "**" / "mods")])
    result = _resolver(workspace).expand(["lib/**/mods", "include"])

    assert result == (
        str(workspace / "lib" / "a" / "mods"),
        str(workspace / "lib" / "b" / "mods"),
        str(workspace / "include"),
    )

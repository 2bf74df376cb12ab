# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Any

import pytest
from rich.console import Console

from fortlint.logging import LintLogger


class RecordingRunner:
    """Command runner double returning queued results and recording every call."""

    def __init__(self, responder: Callable[[Sequence[str], Any], CompletedProcess[str]]) -> None:
        self._responder = responder
        self.calls: list[tuple[tuple[str, ...], Any]] = []

    def __call__(self, args: Sequence[str], *, options: Any = None) -> CompletedProcess[str]:
        self.calls.append((tuple(args), options))
        return self._responder(args, options)

    def commands(self, flag: str | None = None) -> list[tuple[str, ...]]:
        """Return recorded command lines, optionally only those containing ``flag``."""

        return [args for args, _ in self.calls if flag is None or flag in args]


def completed(args: Sequence[str], *, returncode: int = 0, stdout: str = "", stderr: str = "") -> CompletedProcess[str]:
    return CompletedProcess(list(args), returncode, stdout, stderr)


@pytest.fixture
def make_runner() -> type[RecordingRunner]:
    """Return the recording runner class for building command doubles."""

    return RecordingRunner


@pytest.fixture
def make_completed() -> Callable[..., CompletedProcess[str]]:
    return completed


@pytest.fixture
def log_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(log_buffer: io.StringIO) -> LintLogger:
    """Return a logger writing plain text into ``log_buffer``."""

    console = Console(file=log_buffer, no_color=True, highlight=False, width=200, soft_wrap=True)
    return LintLogger(console=console, use_emoji=False, debug_enabled=True)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Return a workspace with a small include tree and two Fortran sources."""

    root = tmp_path / "ws"
    for relative in ("include", "lib/a/mods", "lib/b/mods", "lib/b/other", "src"):
        (root / relative).mkdir(parents=True)
    (root / "src" / "main.f90").write_text("program main\n  integer :: x\nend program main\n", encoding="utf-8")
    (root / "src" / "legacy.f").write_text("      PROGRAM LEGACY\n      END\n", encoding="utf-8")
    return root

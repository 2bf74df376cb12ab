# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the subprocess wrapper."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from fortlint.core.process import CommandOptions, SubprocessExecutionError, run_command
from fortlint.errors import ExecutableNotFoundError

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX utilities")


def test_run_command_captures_output() -> None:
    completed = run_command(["sh", "-c", "echo out; echo err >&2; exit 4"])

    assert completed.returncode == 4
    assert completed.stdout == "out\n"
    assert completed.stderr == "err\n"


def test_input_is_written_to_stdin() -> None:
    completed = run_command(["cat"], options=CommandOptions().with_input("hello\n"))

    assert completed.stdout == "hello\n"


def test_stdin_is_discarded_by_default() -> None:
    completed = run_command(["cat"])

    assert completed.stdout == ""


def test_with_input_none_keeps_discarding() -> None:
    options = CommandOptions().with_input(None)

    assert options.discard_stdin
    assert options.input is None


def test_check_raises_on_failure() -> None:
    with pytest.raises(SubprocessExecutionError) as excinfo:
        run_command(["sh", "-c", "echo nope >&2; exit 2"], options=CommandOptions(check=True))

    assert excinfo.value.returncode == 2
    assert excinfo.value.stderr == "nope\n"


def test_missing_executables(tmp_path: Path) -> None:
    with pytest.raises(ExecutableNotFoundError):
        run_command(["definitely-not-a-real-fortran-compiler"])
    with pytest.raises(ExecutableNotFoundError):
        run_command([str(tmp_path / "missing")])
    with pytest.raises(ValueError):
        run_command([])


def test_cwd_and_env_are_applied(tmp_path: Path) -> None:
    completed = run_command(
        ["/bin/sh", "-c", 'printf "%s %s" "$(pwd)" "$FORTLINT_PROBE"'],
        options=CommandOptions(cwd=tmp_path, env={"FORTLINT_PROBE": "yes", "PATH": "/usr/bin:/bin"}),
    )

    assert completed.stdout == f"{tmp_path} yes"

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line tests driven through ``typer.testing.CliRunner``."""

from __future__ import annotations

import sys
from pathlib import Path
from textwrap import dedent

import pytest
from typer.testing import CliRunner

from fortlint.cli.app import app

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell scripts")

FAKE_GFORTRAN = dedent(
    """\
    #!/bin/sh
    if [ "$1" = "--version" ]; then
      echo "GNU Fortran (GCC) 13.2.0"
      exit 0
    fi
    last=""
    for arg in "$@"; do last="$arg"; done
    case "$last" in
      *slow*) exec sleep 5 ;;
    esac
    echo "$last:2:14: Warning: Unused variable 'x' declared at (1)" >&2
    case "$last" in
      *broken*) echo "$last:3:1: Error: Expecting END PROGRAM statement" >&2 ;;
    esac
    exit 1
    """,
)


@pytest.fixture
def project(workspace: Path, tmp_path: Path) -> Path:
    toolchain = tmp_path / "toolchain"
    toolchain.mkdir()
    script = toolchain / "gfortran"
    script.write_text(FAKE_GFORTRAN, encoding="utf-8")
    script.chmod(0o755)
    (workspace / "src" / "broken.f90").write_text("program broken\n", encoding="utf-8")
    (workspace / ".fortlint.toml").write_text(
        f'[linter]\ncompiler_path = "{toolchain}"\ninclude_paths = ["include", "lib/*/mods"]\n',
        encoding="utf-8",
    )
    return workspace


def _invoke(*args: str):
    return CliRunner().invoke(app, list(args))


def test_lint_reports_warnings(project: Path) -> None:
    source = project / "src" / "main.f90"

    result = _invoke("lint", str(source), "--root", str(project), "--no-emoji")

    assert result.exit_code == 0, result.output
    assert f"{source}:2:14: warning: Unused variable 'x' declared at (1)" in result.stdout


def test_lint_exits_non_zero_on_errors(project: Path) -> None:
    main = project / "src" / "main.f90"
    broken = project / "src" / "broken.f90"

    result = _invoke("lint", str(main), str(broken), "--root", str(project), "--jobs", "2", "--no-emoji")

    assert result.exit_code == 1
    assert f"{broken}:3:1: error: Expecting END PROGRAM statement" in result.stdout


def test_failed_run_outranks_error_diagnostics(project: Path) -> None:
    broken = project / "src" / "broken.f90"
    slow = project / "src" / "slow.f90"
    slow.write_text("program slow\nend program slow\n", encoding="utf-8")
    config = (project / ".fortlint.toml").read_text(encoding="utf-8")
    (project / ".fortlint.toml").write_text(config + "timeout = 0.5\n", encoding="utf-8")

    result = _invoke("lint", str(broken), str(slow), "--root", str(project), "--no-emoji")

    assert result.exit_code == 2
    assert f"{broken}:3:1: error: Expecting END PROGRAM statement" in result.stdout
    assert "1 of 2 file(s) could not be linted" in result.output


def test_repeated_files_are_linted_once(project: Path) -> None:
    source = project / "src" / "main.f90"

    result = _invoke("lint", str(source), str(source), "--root", str(project), "--jobs", "2", "--no-emoji")

    assert result.exit_code == 0, result.output
    assert result.stdout.count(f"{source}:2:14: warning:") == 1
    assert "1 file(s) checked" in result.output


def test_lint_with_disabled_compiler(project: Path) -> None:
    result = _invoke("lint", str(project / "src" / "main.f90"), "--root", str(project), "--compiler", "Disabled")

    assert result.exit_code == 0
    assert "Linting is disabled" in result.output


def test_lint_missing_compiler_fails(project: Path, tmp_path: Path) -> None:
    config = tmp_path / "other.toml"
    config.write_text(f'[linter]\ncompiler_path = "{tmp_path / "nowhere"}"\n', encoding="utf-8")

    result = _invoke("lint", str(project / "src" / "main.f90"), "--root", str(project), "--config", str(config))

    assert result.exit_code == 2
    assert "does not exist" in result.output


def test_invalid_configuration_exits_with_failure(project: Path) -> None:
    (project / ".fortlint.toml").write_text("[linter]\nmax_line_length = 0\n", encoding="utf-8")

    result = _invoke("lint", str(project / "src" / "main.f90"), "--root", str(project))

    assert result.exit_code == 2
    assert "Invalid linter configuration" in result.output


def test_rescan_prints_include_directories(project: Path) -> None:
    result = _invoke("rescan", "--root", str(project), "--no-emoji")

    assert result.exit_code == 0, result.output
    assert f"linter.include_paths: {project / 'include'}" in result.stdout
    assert f"linter.include_paths: {project / 'lib' / 'b' / 'mods'}" in result.stdout


def test_build_failure_exit_code(project: Path) -> None:
    result = _invoke("build", str(project / "src" / "main.f90"), "--root", str(project), "--no-emoji")

    assert result.exit_code == 2
    assert "[build]" in result.output

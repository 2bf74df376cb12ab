# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for gfortran version probing."""

from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from subprocess import CompletedProcess

import pytest
from packaging.version import Version

from fortlint.compilers.version import FormatProbe, is_modern_gnu, parse_gnu_version
from fortlint.errors import VersionProbeError
from fortlint.logging import LintLogger


@pytest.mark.parametrize(
    ("output", "expected"),
    [
        ("GNU Fortran (GCC) 13.2.0\nCopyright (C) 2023\n", Version("13.2.0")),
        ("GNU Fortran (Ubuntu 9.4.0-1ubuntu1~20.04.2) 9.4.0\n", Version("9.4.0")),
        ("GNU Fortran (Homebrew GCC 14.1.0) 14.1.0", Version("14.1.0")),
        ("flang-new version 17.0.0\n", None),
        ("GNU Fortran (GCC) not-a-version\n", None),
    ],
)
def test_parse_gnu_version(output: str, expected: Version | None) -> None:
    assert parse_gnu_version(output) == expected


def test_modern_threshold() -> None:
    assert is_modern_gnu(Version("11.0.0"))
    assert is_modern_gnu(Version("11.4.1"))
    assert not is_modern_gnu(Version("10.5.0"))


def test_probe_caches_per_executable(make_runner: type, make_completed: Callable, logger: LintLogger) -> None:
    runner = make_runner(lambda args, options: make_completed(args, stdout="GNU Fortran (GCC) 12.3.0\n"))
    probe = FormatProbe(runner=runner, logger=logger)

    assert probe.is_modern("gfortran", "/usr/bin/gfortran")
    assert probe.is_modern("gfortran", "/usr/bin/gfortran")
    assert len(runner.calls) == 1
    assert runner.calls[0][0] == ("/usr/bin/gfortran", "--version")
    assert probe.version("gfortran", "/usr/bin/gfortran") == Version("12.3.0")

    probe.is_modern("gfortran", "/opt/gcc/bin/gfortran")
    assert len(runner.calls) == 2


def test_reset_forces_reprobe(make_runner: type, make_completed: Callable, logger: LintLogger) -> None:
    runner = make_runner(lambda args, options: make_completed(args, stdout="GNU Fortran (GCC) 10.2.0\n"))
    probe = FormatProbe(runner=runner, logger=logger)

    assert not probe.is_modern("gfortran", "gfortran")
    probe.reset()
    assert not probe.is_modern("gfortran", "gfortran")
    assert len(runner.calls) == 2


def test_other_compilers_are_not_probed(make_runner: type, make_completed: Callable, logger: LintLogger) -> None:
    runner = make_runner(lambda args, options: make_completed(args))
    probe = FormatProbe(runner=runner, logger=logger)

    assert not probe.is_modern("ifx", "/opt/intel/ifx")
    assert runner.calls == []


def test_failed_probe_raises(make_runner: type, make_completed: Callable, logger: LintLogger) -> None:
    runner = make_runner(lambda args, options: make_completed(args, returncode=1, stderr="broken"))
    probe = FormatProbe(runner=runner, logger=logger)

    with pytest.raises(VersionProbeError):
        probe.is_modern("gfortran", "gfortran")


def test_invalid_version_uses_legacy_format(
    make_runner: type,
    make_completed: Callable,
    logger: LintLogger,
    log_buffer: io.StringIO,
) -> None:
    runner = make_runner(lambda args, options: make_completed(args, stdout="something else\n"))
    probe = FormatProbe(runner=runner, logger=logger)

    assert not probe.is_modern("gfortran", "gfortran")
    assert "Invalid compiler version" in log_buffer.getvalue()


def test_unstartable_compiler_raises_probe_error(make_runner: type, logger: LintLogger) -> None:
    def denied(args: Sequence[str], options: object) -> CompletedProcess[str]:
        raise PermissionError(13, "Permission denied", args[0])

    runner = make_runner(denied)
    probe = FormatProbe(runner=runner, logger=logger)

    with pytest.raises(VersionProbeError) as excinfo:
        probe.is_modern("gfortran", "/ws/gfortran")
    assert "Permission denied" in str(excinfo.value)
    assert "executable" in (excinfo.value.hint or "")

    with pytest.raises(VersionProbeError):
        probe.is_modern("gfortran", "/ws/gfortran")
    assert len(runner.calls) == 2

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compiler version probing used to pick the diagnostic format."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from subprocess import CompletedProcess
from threading import Lock
from typing import Final

from packaging.version import InvalidVersion, Version

from ..core.process import CommandOptions, run_command
from ..errors import VersionProbeError
from ..logging import LintLogger

GNU_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^GNU Fortran \([^)\n]*\) (?P<version>\S+)",
    re.MULTILINE,
)
MODERN_GNU_VERSION: Final[Version] = Version("11.0.0")

CommandRunner = Callable[..., CompletedProcess[str]]


def parse_gnu_version(output: str) -> Version | None:
    """Extract the gfortran version from ``gfortran --version`` output.

    Args:
        output: Text printed by ``gfortran --version``.

    Returns:
        Version | None: Parsed version, or ``None`` when absent or invalid.
    """

    match = GNU_VERSION_PATTERN.search(output)
    if match is None:
        return None
    try:
        return Version(match.group("version"))
    except InvalidVersion:
        return None


def is_modern_gnu(version: Version) -> bool:
    """Return ``True`` when ``version`` supports ``-fdiagnostics-plain-output``."""

    return version >= MODERN_GNU_VERSION


class FormatProbe:
    """Cache whether each configured compiler emits the modern diagnostic format.

    The flag is computed once per ``(compiler, executable)`` pair and kept until
    :meth:`reset` is called on configuration change.
    """

    def __init__(
        self,
        *,
        runner: CommandRunner = run_command,
        logger: LintLogger | None = None,
        timeout: float | None = None,
    ) -> None:
        self._runner = runner
        self._logger = logger or LintLogger()
        self._timeout = timeout
        self._flags: dict[tuple[str, str], bool] = {}
        self._versions: dict[tuple[str, str], Version] = {}
        self._lock = Lock()

    def is_modern(self, compiler: str, executable: str) -> bool:
        """Return the cached modern-format flag, probing ``executable`` on first use.

        Only ``gfortran`` is probed; every other compiler has a single format.

        Args:
            compiler: Configured compiler name.
            executable: Resolved executable path.

        Returns:
            bool: ``True`` when the modern format should be parsed.

        Raises:
            VersionProbeError: If ``--version`` exits with a non-zero status or
                cannot be started.
        """

        if compiler != "gfortran":
            return False
        key = (compiler, executable)
        cached = self._flags.get(key)
        if cached is not None:
            return cached
        with self._lock:
            if key not in self._flags:
                self._flags = {**self._flags, key: self._probe(key, executable)}
        return self._flags[key]

    def version(self, compiler: str, executable: str) -> Version | None:
        """Return the version recorded for the pair, if it has been probed."""

        return self._versions.get((compiler, executable))

    def reset(self) -> None:
        """Forget every cached flag so the next lint re-probes."""

        with self._lock:
            self._flags = {}
            self._versions = {}

    def _probe(self, key: tuple[str, str], executable: str) -> bool:
        command: Sequence[str] = (executable, "--version")
        try:
            completed = self._runner(command, options=CommandOptions(timeout=self._timeout))
        except OSError as exc:
            raise VersionProbeError(
                f"Could not run {executable} --version: {exc}",
                hint="Check that the configured compiler is an executable file.",
            ) from exc
        if completed.returncode != 0:
            raise VersionProbeError(f"Could not run {executable} --version (exit status {completed.returncode})")
        version = parse_gnu_version(completed.stdout or "")
        if version is None:
            self._logger.fail(f"[lint] Invalid compiler version reported by {executable}")
            return False
        self._versions = {**self._versions, key: version}
        modern = is_modern_gnu(version)
        self._logger.info(f"[lint] Found GNU Fortran version {version}")
        self._logger.debug(f"[lint] Using modern GNU Fortran diagnostics: {modern}")
        return modern


__all__ = [
    "FormatProbe",
    "GNU_VERSION_PATTERN",
    "MODERN_GNU_VERSION",
    "is_modern_gnu",
    "parse_gnu_version",
]

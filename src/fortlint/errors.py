# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the lint pipeline."""

from __future__ import annotations

from collections.abc import Sequence


class LintError(RuntimeError):
    """Base class for failures that abort a single lint run."""

    hint: str | None = None

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        """Initialise the error with an optional remediation hint.

        Args:
            message: Human-readable description of the failure.
            hint: Optional guidance shown alongside the message.
        """

        super().__init__(message)
        if hint is not None:
            self.hint = hint


class ConfigError(LintError):
    """Raised when configuration input is invalid or incomplete."""


class PathResolutionError(LintError):
    """Raised when include path patterns cannot be expanded."""

    hint = "Narrow the glob patterns in the include path settings."


class ExecutableNotFoundError(LintError):
    """Raised when a compiler or preprocessor binary cannot be located."""

    def __init__(self, executable: str, *, hint: str | None = None) -> None:
        """Record the missing executable name.

        Args:
            executable: Name or path that failed to resolve.
            hint: Optional guidance overriding the default PATH advice.
        """

        super().__init__(
            f"Executable '{executable}' was not found",
            hint=hint
            or "Add the compiler to PATH, set 'linter.compiler_path', or disable the linter with compiler = \"Disabled\".",
        )
        self.executable = executable


class VersionProbeError(LintError):
    """Raised when ``<compiler> --version`` fails."""

    hint = "Check that the configured compiler runs from a terminal, or disable the linter."


class StageError(LintError):
    """Raised when a pipeline stage cannot be executed."""

    stage = "stage"

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        """Capture subprocess metadata for the failing stage.

        Args:
            message: Description of the failure.
            command: Command line of the failing process.
            returncode: Exit status when the process ran, ``None`` for spawn errors.
            stderr: Captured standard error when available.
        """

        super().__init__(message)
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


class PreprocessorError(StageError):
    """Raised when the preprocessor exits abnormally; the compiler is not run."""

    stage = "fypp"


class CompilerError(StageError):
    """Raised when the compiler process cannot be spawned."""

    stage = "lint"


class LintTimeoutError(LintError):
    """Raised when a pipeline stage exceeds the configured timeout."""

    def __init__(self, command: Sequence[str], timeout: float) -> None:
        """Record the command and timeout that expired.

        Args:
            command: Command line of the process that timed out.
            timeout: Timeout in seconds.
        """

        super().__init__(f"Command '{command[0] if command else '?'}' timed out after {timeout:.1f}s")
        self.command = tuple(command)
        self.timeout = timeout


__all__ = [
    "CompilerError",
    "ConfigError",
    "ExecutableNotFoundError",
    "LintError",
    "LintTimeoutError",
    "PathResolutionError",
    "PreprocessorError",
    "StageError",
    "VersionProbeError",
]

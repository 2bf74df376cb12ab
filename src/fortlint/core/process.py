# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; we provide a controlled wrapper around
# compiler execution, normalising arguments and disabling ``shell=True``.
import subprocess  # nosec B404 suppression_valid: Shell-free subprocess wrapper enforces safe execution.
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from subprocess import CompletedProcess

from ..errors import ExecutableNotFoundError, LintTimeoutError


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = False
    capture_output: bool = True
    text: bool = True
    timeout: float | None = None
    discard_stdin: bool = True
    input: str | None = None

    def with_input(self, data: str | None) -> CommandOptions:
        """Return a copy that feeds ``data`` to the child's standard input.

        Args:
            data: Complete text written to stdin before it is closed.

        Returns:
            CommandOptions: Updated options instance.
        """

        return replace(self, input=data, discard_stdin=data is None and self.discard_stdin)


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        """Initialise the error with captured subprocess metadata.

        Args:
            command: Normalised command sequence that was executed.
            returncode: Exit status reported by the subprocess.
            stdout: Captured standard output stream.
            stderr: Captured standard error stream.
        """
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _ensure_text(value: str | bytes | None) -> str | None:
    """Return ``value`` decoded to text when supplied as ``bytes``."""

    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def which(executable: str, *, path: str | None = None) -> str | None:
    """Locate ``executable`` on ``PATH`` returning ``None`` when absent."""

    return shutil.which(executable, path=path)


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        ExecutableNotFoundError: If the executable cannot be resolved.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        if not head_path.exists():
            raise ExecutableNotFoundError(head)
        return [str(head_path), *rest]

    resolved = which(head)
    if resolved is None:
        raise ExecutableNotFoundError(head)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.

    Returns:
        CompletedProcess: Subprocess execution metadata.

    Raises:
        ExecutableNotFoundError: If the executable cannot be resolved on ``PATH``.
        LintTimeoutError: If the process exceeds ``options.timeout``.
        SubprocessExecutionError: When ``check`` is true and the process exits
            with a non-zero status.
    """

    normalized = _normalize_args(args)
    resolved_options = options or CommandOptions()

    try:
        # Bandit: commands are assembled from compiler profiles; we pass
        # argument lists directly without shell expansion.
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603 - controlled arguments, not user supplied
            normalized,
            cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
            env=dict(resolved_options.env) if resolved_options.env is not None else None,
            check=False,
            capture_output=resolved_options.capture_output,
            text=resolved_options.text,
            timeout=resolved_options.timeout,
            input=resolved_options.input,
            stdin=subprocess.DEVNULL if resolved_options.input is None and resolved_options.discard_stdin else None,
        )
    except subprocess.TimeoutExpired as exc:
        raise LintTimeoutError(normalized, resolved_options.timeout or 0.0) from exc

    if resolved_options.check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            _ensure_text(completed.stdout),
            _ensure_text(completed.stderr),
        )

    return completed


__all__ = [
    "CommandOptions",
    "SubprocessExecutionError",
    "run_command",
    "which",
]

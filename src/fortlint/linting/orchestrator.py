# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the optional preprocessor and the compiler as a two-stage pipeline."""

from __future__ import annotations

import ntpath
import os
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from ..core.process import CommandOptions, run_command, which
from ..errors import CompilerError, ConfigError, ExecutableNotFoundError, PreprocessorError

CommandRunner = Callable[..., CompletedProcess[str]]

FORCED_LOCALE: Final[str] = "C"
WINDOWS_PATH_KEYS: Final[tuple[str, ...]] = ("Path", "PATH")


@dataclass(frozen=True, slots=True)
class StageCommand:
    """Executable and arguments for one pipeline stage."""

    executable: str
    args: tuple[str, ...]
    cwd: Path

    @property
    def argv(self) -> tuple[str, ...]:
        """Return the full command line including the executable."""

        return (self.executable, *self.args)


@dataclass(frozen=True, slots=True)
class LintInvocation:
    """Everything needed to lint one file.

    Attributes:
        file: Source file being linted.
        cwd: Working directory for both stages, the file's parent directory.
        env: Environment passed to both stages.
        compiler: Compiler stage.
        preprocessor: Optional preprocessor stage whose stdout feeds the compiler.
    """

    file: Path
    cwd: Path
    env: Mapping[str, str]
    compiler: StageCommand
    preprocessor: StageCommand | None = None


def build_environment(
    executable: str,
    base: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> dict[str, str]:
    """Return the environment used for compiler processes.

    Diagnostics are parsed as English text, so ``LC_ALL`` is forced to ``C``.
    On Windows the compiler's directory is prepended to the search path when
    missing so that the compiler can find its own runtime libraries.

    Args:
        executable: Resolved compiler path.
        base: Environment to copy, defaults to :data:`os.environ`.
        platform: Platform tag, defaults to :data:`sys.platform`.

    Returns:
        dict[str, str]: New environment mapping.
    """

    env = dict(os.environ if base is None else base)
    env["LC_ALL"] = FORCED_LOCALE
    if (platform or sys.platform) != "win32":
        return env
    directory = ntpath.dirname(executable)
    if not directory:
        return env
    key = next((name for name in WINDOWS_PATH_KEYS if name in env), WINDOWS_PATH_KEYS[0])
    current = env.get(key, "")
    entries = [entry for entry in current.split(";") if entry]
    if directory not in entries:
        env[key] = f"{directory};{current}" if current else directory
    return env


def resolve_executable(name: str, explicit_path: str = "") -> str:
    """Return the absolute path of ``name``.

    Args:
        name: Executable name such as ``gfortran`` or ``fypp``.
        explicit_path: Directory or file configured by the user; searched
            instead of ``PATH`` when non-empty.

    Returns:
        str: Absolute path of the executable.

    Raises:
        ConfigError: If ``explicit_path`` does not exist or names a
            non-executable file.
        ExecutableNotFoundError: If the executable cannot be located.
    """

    if explicit_path.strip():
        candidate = Path(explicit_path).expanduser()
        if not candidate.exists():
            raise ConfigError(
                f"Configured compiler path {candidate} does not exist",
                hint="Fix 'linter.compiler_path' or leave it empty to search PATH.",
            )
        if candidate.is_file():
            if not os.access(candidate, os.X_OK):
                raise ConfigError(
                    f"Configured compiler path {candidate} is not executable",
                    hint="Point 'linter.compiler_path' at the compiler binary or its directory.",
                )
            return str(candidate.resolve())
        located = which(name, path=str(candidate))
    else:
        located = which(name)
    if located is None:
        raise ExecutableNotFoundError(name)
    return str(Path(located).resolve())


def _spawn(
    stage: StageCommand,
    options: CommandOptions,
    runner: CommandRunner,
    error: type[PreprocessorError] | type[CompilerError],
) -> CompletedProcess[str]:
    try:
        return runner(stage.argv, options=options)
    except OSError as exc:
        raise error(f"Failed to start {stage.executable}: {exc}", command=stage.argv) from exc


def run_pipeline(
    invocation: LintInvocation,
    *,
    timeout: float | None = None,
    runner: CommandRunner = run_command,
) -> str:
    """Run the pipeline described by ``invocation`` and return its merged output.

    When a preprocessor stage is present it runs to completion first and its
    complete stdout becomes the compiler's stdin. A non-zero compiler exit is
    the normal way of reporting diagnostics and is not treated as a failure.

    Args:
        invocation: Stages, environment and working directory.
        timeout: Per-stage timeout in seconds.
        runner: Command runner, replaceable in tests.

    Returns:
        str: Compiler stdout followed by stderr.

    Raises:
        PreprocessorError: If the preprocessor fails to start or exits non-zero.
        CompilerError: If the compiler fails to start.
        ExecutableNotFoundError: If a stage executable disappeared.
        LintTimeoutError: If a stage exceeds ``timeout``.
    """

    options = CommandOptions(cwd=invocation.cwd, env=invocation.env, timeout=timeout)
    source: str | None = None
    if invocation.preprocessor is not None:
        stage = invocation.preprocessor
        completed = _spawn(stage, options, runner, PreprocessorError)
        if completed.returncode != 0:
            raise PreprocessorError(
                f"{stage.executable} exited with status {completed.returncode}",
                command=stage.argv,
                returncode=completed.returncode,
                stderr=completed.stderr,
            )
        source = completed.stdout or ""

    compiled = _spawn(invocation.compiler, options.with_input(source), runner, CompilerError)
    return (compiled.stdout or "") + (compiled.stderr or "")


__all__ = [
    "LintInvocation",
    "StageCommand",
    "build_environment",
    "resolve_executable",
    "run_pipeline",
]

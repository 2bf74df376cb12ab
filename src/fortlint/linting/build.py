# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compile a single source file without the check-only flags."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..compilers.version import FormatProbe
from ..config import Config
from ..core.process import CommandOptions, SubprocessExecutionError, run_command
from ..errors import CompilerError
from ..logging import LintLogger
from ..paths.cache import PathCache
from ..paths.globbing import PathResolver
from ..paths.variables import VariableContext
from .arguments import build_compile_arguments, object_path
from .documents import TextDocument
from .orchestrator import CommandRunner
from .planner import LintPlanner


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of a successful build."""

    command: tuple[str, ...]
    output_path: Path
    output: str


def build_file(
    config: Config,
    file: Path,
    *,
    debug_symbols: bool = False,
    runner: CommandRunner = run_command,
    logger: LintLogger | None = None,
) -> BuildResult:
    """Compile ``file`` into ``<file>.o`` using the configured compiler.

    The argument vector is the lint vector minus the profile's check-only
    arguments. The preprocessor stage is never used.

    Args:
        config: Workspace configuration.
        file: Source file to compile.
        debug_symbols: Whether to add ``-g``.
        runner: Command runner, replaceable in tests.
        logger: Logger for progress messages.

    Returns:
        BuildResult: Command, produced file and compiler output.

    Raises:
        CompilerError: If the compiler exits with a non-zero status.
        LintError: If the compiler cannot be located or configured.
    """

    active_logger = logger or LintLogger()
    resolver = PathResolver(VariableContext(workspace_root=config.workspace_root))
    path_cache = PathCache(resolver.expand, logger=active_logger)
    planner = LintPlanner(
        config,
        path_cache=path_cache,
        probe=FormatProbe(runner=runner, logger=active_logger, timeout=config.linter.timeout),
        logger=active_logger,
    )
    document = TextDocument.from_path(file)
    plan = planner.plan(document, preprocess=False)
    stage = plan.invocation.compiler
    command = (stage.executable, *build_compile_arguments(stage.args, plan.profile, debug_symbols=debug_symbols))
    active_logger.debug(f"[build] Compiler command line: {' '.join(command)}")
    options = CommandOptions(
        cwd=plan.invocation.cwd,
        env=plan.invocation.env,
        check=True,
        timeout=config.linter.timeout,
    )
    try:
        completed = runner(command, options=options)
    except SubprocessExecutionError as exc:
        raise CompilerError(
            f"{stage.executable} exited with status {exc.returncode}",
            command=command,
            returncode=exc.returncode,
            stderr=exc.stderr,
        ) from exc
    output_path = Path(object_path(document.path))
    active_logger.ok(f"[build] Built {output_path}")
    output = (completed.stdout or "") + (completed.stderr or "")
    return BuildResult(command=command, output_path=output_path, output=output)


__all__ = ["BuildResult", "build_file"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Translate configuration and a document into a ready-to-run lint invocation."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ..compilers.profiles import CompilerProfile
from ..compilers.registry import is_supported, select_profile
from ..compilers.version import FormatProbe
from ..config import Config
from ..core.process import which
from ..errors import ExecutableNotFoundError
from ..logging import LintLogger
from ..paths.cache import PathCache, PathCacheKey
from ..paths.variables import VariableContext, resolve_variables
from .arguments import build_compiler_arguments, build_preprocessor_arguments
from .documents import TextDocument
from .orchestrator import LintInvocation, StageCommand, build_environment, resolve_executable

FYPP_HINT = "Install fypp (pip install fypp) or set 'linter.fypp.path'."


@dataclass(frozen=True, slots=True)
class LintPlan:
    """Invocation for one document together with the profile that parses its output."""

    invocation: LintInvocation
    profile: CompilerProfile


def fypp_executable(path: str, *, platform: str | None = None) -> str:
    """Locate the ``fypp`` executable configured as ``path``.

    Args:
        path: Configured name or path of the preprocessor.
        platform: Platform tag, defaults to :data:`sys.platform`.

    Returns:
        str: Resolved executable path.

    Raises:
        ExecutableNotFoundError: If the preprocessor cannot be found.
    """

    name = path.strip()
    if (platform or sys.platform) == "win32" and not name.lower().endswith(".exe"):
        name = f"{name}.exe"
    candidate = Path(name).expanduser()
    if candidate.is_absolute():
        if not candidate.is_file():
            raise ExecutableNotFoundError(name, hint=FYPP_HINT)
        return str(candidate)
    located = which(name)
    if located is None:
        raise ExecutableNotFoundError(name, hint=FYPP_HINT)
    return located


class LintPlanner:
    """Build :class:`LintPlan` instances from the current configuration."""

    def __init__(
        self,
        config: Config,
        *,
        path_cache: PathCache,
        probe: FormatProbe,
        logger: LintLogger | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._config = config
        self._path_cache = path_cache
        self._probe = probe
        self._logger = logger or LintLogger()
        self._environ = environ

    def plan(self, document: TextDocument, *, preprocess: bool = True) -> LintPlan:
        """Return the invocation that lints ``document``.

        Args:
            document: Document to lint.
            preprocess: Whether a configured ``fypp`` stage may be used.

        Returns:
            LintPlan: Invocation and parsing profile.

        Raises:
            ConfigError: If the configured compiler path does not exist.
            ExecutableNotFoundError: If the compiler or preprocessor is missing.
            VersionProbeError: If the compiler version cannot be queried.
        """

        linter = self._config.linter
        executable = resolve_executable(linter.compiler, linter.compiler_path)
        if not is_supported(linter.compiler):
            self._logger.warn(f"[lint] Unsupported compiler '{linter.compiler}', using gfortran conventions")
        profile = select_profile(linter.compiler, modern_gnu=self._probe.is_modern(linter.compiler, executable))

        context = self._context(document.path)
        user_args = [resolve_variables(arg, context) for arg in linter.extra_args]
        mod_output = resolve_variables(linter.mod_output, context) if linter.mod_output.strip() else ""
        include_paths = self._path_cache.get(PathCacheKey.COMPILER_INCLUDES, linter.include_paths)

        use_fypp = preprocess and linter.fypp.enabled
        if use_fypp and not profile.supports_stdin:
            self._logger.warn(f"[fypp] {profile.name} cannot read preprocessed source, compiling the file directly")
            use_fypp = False

        cwd = document.path.parent
        compiler = StageCommand(
            executable=executable,
            args=tuple(
                build_compiler_arguments(
                    document.path,
                    profile,
                    user_args=user_args,
                    include_paths=include_paths,
                    mod_output_dir=mod_output,
                    preprocessor=use_fypp,
                    free_form=document.is_free_form,
                    max_line_length=linter.max_line_length,
                ),
            ),
            cwd=cwd,
        )
        preprocessor = self._preprocessor(document, cwd) if use_fypp else None
        if preprocessor is not None:
            self._logger.debug(f"[fypp] Preprocessor command line: {' '.join(preprocessor.argv)}")
        self._logger.debug(f"[lint] Compiler query command line: {' '.join(compiler.argv)}")

        invocation = LintInvocation(
            file=document.path,
            cwd=cwd,
            env=build_environment(executable, base=self._environ),
            compiler=compiler,
            preprocessor=preprocessor,
        )
        return LintPlan(invocation=invocation, profile=profile)

    def _context(self, file: Path) -> VariableContext:
        if self._environ is None:
            return VariableContext(workspace_root=self._config.workspace_root, file=file)
        return VariableContext(workspace_root=self._config.workspace_root, file=file, environ=self._environ)

    def _preprocessor(self, document: TextDocument, cwd: Path) -> StageCommand:
        fypp = self._config.linter.fypp
        includes = self._path_cache.get(PathCacheKey.PREPROCESSOR_INCLUDES, fypp.includes)
        args = build_preprocessor_arguments(
            document.path,
            fypp,
            include_paths=includes,
            free_form=document.is_free_form,
        )
        return StageCommand(executable=fypp_executable(fypp.path), args=tuple(args), cwd=cwd)


__all__ = ["LintPlan", "LintPlanner", "fypp_executable"]

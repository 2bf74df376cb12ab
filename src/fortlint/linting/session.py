# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-workspace lint session reacting to document lifecycle events."""

from __future__ import annotations

import itertools
import os
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import Final

from ..compilers.version import FormatProbe
from ..config import Config
from ..core.models import Diagnostic, deduplicate
from ..core.process import run_command
from ..errors import LintError, LintTimeoutError, StageError
from ..logging import LintLogger
from ..paths.cache import PathCache, PathCacheKey
from ..paths.globbing import PathResolver
from ..paths.variables import VariableContext
from .documents import DocumentEvent, TextDocument
from .orchestrator import CommandRunner, run_pipeline
from .planner import LintPlanner

DEFAULT_MAX_WORKERS: Final[int] = 32


class DiagnosticCollection:
    """Thread-safe store of the diagnostics currently published per file."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Diagnostic, ...]] = {}
        self._lock = Lock()

    def set(self, key: str, diagnostics: Iterable[Diagnostic]) -> None:
        """Replace the diagnostics published for ``key``."""

        with self._lock:
            self._entries[key] = tuple(diagnostics)

    def get(self, key: str) -> tuple[Diagnostic, ...] | None:
        """Return the diagnostics published for ``key``, ``None`` when never published."""

        with self._lock:
            return self._entries.get(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def items(self) -> list[tuple[str, tuple[Diagnostic, ...]]]:
        """Return a snapshot of every published entry."""

        with self._lock:
            return list(self._entries.items())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


def default_workers() -> int:
    """Return the worker count used when ``jobs`` is not given."""

    return min(DEFAULT_MAX_WORKERS, (os.cpu_count() or 1) + 4)


class LintSession:
    """Lint documents on open and save and publish their diagnostics.

    Each lint run takes a per-file generation ticket. When runs for the same
    file overlap, only the most recently started one publishes; older runs
    finish silently.
    """

    def __init__(
        self,
        config: Config,
        *,
        collection: DiagnosticCollection | None = None,
        path_cache: PathCache | None = None,
        probe: FormatProbe | None = None,
        runner: CommandRunner = run_command,
        logger: LintLogger | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialise the session.

        Args:
            config: Workspace configuration.
            collection: Diagnostic store receiving published results.
            path_cache: Include path cache; built over the workspace root when omitted.
            probe: Compiler format probe; shared with ``runner`` when omitted.
            runner: Command runner used for every subprocess.
            logger: Logger for user-facing messages.
            environ: Environment used for placeholders and child processes.
        """

        self._config = config
        self._logger = logger or LintLogger()
        self._collection = collection if collection is not None else DiagnosticCollection()
        self._path_cache = path_cache if path_cache is not None else PathCache(self._expand, logger=self._logger)
        self._probe = (
            probe
            if probe is not None
            else FormatProbe(runner=runner, logger=self._logger, timeout=config.linter.timeout)
        )
        self._runner = runner
        self._environ = environ
        self._tickets: dict[str, int] = {}
        self._counter = itertools.count(1)
        self._lock = Lock()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def collection(self) -> DiagnosticCollection:
        return self._collection

    @property
    def path_cache(self) -> PathCache:
        return self._path_cache

    def planner(self) -> LintPlanner:
        """Return a planner bound to the current configuration."""

        return LintPlanner(
            self._config,
            path_cache=self._path_cache,
            probe=self._probe,
            logger=self._logger,
            environ=self._environ,
        )

    def handle(self, event: DocumentEvent, document: TextDocument) -> list[Diagnostic] | None:
        """Dispatch a document lifecycle ``event``."""

        if event is DocumentEvent.CLOSED:
            self.on_close(document)
            return None
        return self.lint(document)

    def on_open(self, document: TextDocument) -> list[Diagnostic] | None:
        return self.lint(document)

    def on_save(self, document: TextDocument) -> list[Diagnostic] | None:
        return self.lint(document)

    def on_close(self, document: TextDocument) -> None:
        """Drop the document's diagnostics and disown any lint still running for it."""

        with self._lock:
            self._tickets.pop(document.key, None)
            self._collection.delete(document.key)

    def lint(self, document: TextDocument) -> list[Diagnostic] | None:
        """Lint ``document`` and publish its diagnostics.

        Args:
            document: Document that was opened or saved.

        Returns:
            list[Diagnostic] | None: Published diagnostics, or ``None`` when
            nothing was published because linting is disabled, the document is
            not applicable, the run failed, or a newer run superseded it.
        """

        linter = self._config.linter
        if not linter.enabled or not document.is_fortran:
            return None
        ticket = self._take_ticket(document.key)
        try:
            plan = self.planner().plan(document)
            output = run_pipeline(plan.invocation, timeout=linter.timeout, runner=self._runner)
        except LintTimeoutError as exc:
            self._logger.warn(f"[lint] {exc}; keeping previous diagnostics for {document.path.name}")
            return None
        except StageError as exc:
            stderr = (exc.stderr or "").strip()
            self._logger.fail(f"[{exc.stage}] {exc}", hint=stderr or exc.hint)
            return None
        except LintError as exc:
            self._logger.fail(f"[lint] {exc}", hint=exc.hint)
            return None

        diagnostics = deduplicate(plan.profile.parse(output, line_source=document.line_source()))
        with self._lock:
            if self._tickets.get(document.key) != ticket:
                self._logger.debug(f"[lint] Discarding superseded run for {document.path.name}")
                return None
            self._collection.set(document.key, diagnostics)
        self._logger.debug(f"[lint] Published file={document.path.name} count={len(diagnostics)}")
        return diagnostics

    def lint_many(
        self,
        documents: Sequence[TextDocument],
        *,
        jobs: int | None = None,
    ) -> dict[str, list[Diagnostic] | None]:
        """Lint independent ``documents`` concurrently.

        Args:
            documents: Documents to lint.
            jobs: Maximum number of concurrent lint runs.

        Returns:
            dict[str, list[Diagnostic] | None]: Result of :meth:`lint` per
            document key, in input order. Repeated keys are linted once.
        """

        unique: dict[str, TextDocument] = {}
        for document in documents:
            unique.setdefault(document.key, document)
        if not unique:
            return {}
        workers = max(1, jobs if jobs is not None else default_workers())
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [(document, executor.submit(self.lint, document)) for document in unique.values()]
            return {document.key: future.result() for document, future in futures}

    def rescan(self) -> dict[PathCacheKey, tuple[str, ...]]:
        """Forget cached include directories and resolve them again.

        Returns:
            dict[PathCacheKey, tuple[str, ...]]: Freshly resolved directories per key.
        """

        self._path_cache.invalidate()
        linter = self._config.linter
        results: dict[PathCacheKey, tuple[str, ...]] = {}
        for key, patterns in (
            (PathCacheKey.COMPILER_INCLUDES, linter.include_paths),
            (PathCacheKey.PREPROCESSOR_INCLUDES, linter.fypp.includes),
        ):
            resolved = self._path_cache.get(key, patterns)
            self._logger.info(f"[lint] Glob patterns for {key.value}: {', '.join(patterns) or '<none>'}")
            self._logger.info(f"[lint] Resolved {key.value}: {', '.join(resolved) or '<none>'}")
            results[key] = resolved
        return results

    def update_config(self, config: Config) -> None:
        """Swap in ``config``, re-probing the compiler when linter settings changed."""

        previous = self._config
        self._config = config
        if config.workspace_root != previous.workspace_root:
            self._path_cache.invalidate()
        if config.linter != previous.linter:
            self._probe.reset()

    def _take_ticket(self, key: str) -> int:
        with self._lock:
            ticket = next(self._counter)
            self._tickets[key] = ticket
            return ticket

    def _expand(self, patterns: Sequence[str]) -> tuple[str, ...]:
        if self._environ is None:
            context = VariableContext(workspace_root=self._config.workspace_root)
        else:
            context = VariableContext(workspace_root=self._config.workspace_root, environ=self._environ)
        return PathResolver(context).expand(patterns)


__all__ = ["DiagnosticCollection", "LintSession", "default_workers"]

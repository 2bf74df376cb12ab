# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer application exposing the lint, build and rescan commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Final

import typer
from rich.console import Console
from rich.text import Text

from ..config import Config, load_config
from ..core.models import Diagnostic, has_errors
from ..core.severity import Severity
from ..errors import ConfigError, LintError
from ..linting.build import build_file
from ..linting.documents import TextDocument
from ..linting.session import LintSession
from ..logging import LintLogger, build_lint_logger

EXIT_OK: Final[int] = 0
EXIT_DIAGNOSTICS: Final[int] = 1
EXIT_FAILURE: Final[int] = 2

_SEVERITY_STYLES: Final[dict[Severity, str]] = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "cyan",
}

app = typer.Typer(help="Lint Fortran sources with the compilers you already have.", no_args_is_help=True)

RootOption = Annotated[Path, typer.Option("--root", "-r", help="Workspace root directory.")]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Configuration file overriding discovery."),
]
CompilerOption = Annotated[str | None, typer.Option("--compiler", help="Compiler name, or 'Disabled'.")]
EmojiOption = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji output.")]
DebugOption = Annotated[bool, typer.Option("--debug", help="Show debug output such as command lines.")]


def _load(root: Path, config_file: Path | None, compiler: str | None, logger: LintLogger) -> Config:
    try:
        return load_config(root, config_file=config_file, compiler=compiler)
    except ConfigError as exc:
        logger.fail(str(exc), hint=exc.hint)
        raise typer.Exit(code=EXIT_FAILURE) from exc


def render_diagnostic(document: TextDocument, diagnostic: Diagnostic) -> Text:
    """Return the console line for ``diagnostic`` reported against ``document``."""

    text = Text(f"{document.path}:{diagnostic.line}:{diagnostic.column}: ")
    text.append(diagnostic.severity.value, style=_SEVERITY_STYLES[diagnostic.severity])
    text.append(f": {diagnostic.message}")
    return text


@app.command("lint")
def lint_command(
    files: Annotated[list[Path], typer.Argument(help="Fortran source files to lint.")],
    root: RootOption = Path("."),
    config_file: ConfigOption = None,
    compiler: CompilerOption = None,
    jobs: Annotated[int | None, typer.Option("--jobs", "-j", min=1, help="Concurrent lint runs.")] = None,
    emoji: EmojiOption = True,
    debug: DebugOption = False,
) -> None:
    """Lint FILES and print their diagnostics.

    Exits with status 2 when any lint run failed, otherwise 1 when any error
    is reported.
    """

    logger = build_lint_logger(emoji=emoji, debug=debug)
    config = _load(root, config_file, compiler, logger)
    if not config.linter.enabled:
        logger.warn('[lint] Linting is disabled (compiler = "Disabled")')
        raise typer.Exit(code=EXIT_OK)

    unique: dict[str, TextDocument] = {}
    for path in files:
        document = TextDocument.from_path(path)
        if not document.is_fortran:
            logger.warn(f"[lint] Skipping {path}: not a Fortran source")
            continue
        unique.setdefault(document.key, document)
    documents = list(unique.values())

    session = LintSession(config, logger=logger)
    results = session.lint_many(documents, jobs=jobs)

    console = Console(highlight=False, soft_wrap=True)
    published: list[Diagnostic] = []
    for document in documents:
        diagnostics = results.get(document.key)
        if diagnostics is None:
            continue
        published.extend(diagnostics)
        for diagnostic in diagnostics:
            console.print(render_diagnostic(document, diagnostic))

    failed = sum(1 for document in documents if results.get(document.key) is None)
    if failed:
        logger.fail(f"[lint] {failed} of {len(documents)} file(s) could not be linted")
        raise typer.Exit(code=EXIT_FAILURE)
    if has_errors(published):
        raise typer.Exit(code=EXIT_DIAGNOSTICS)
    logger.ok(f"[lint] {len(documents)} file(s) checked, {len(published)} diagnostic(s)")


@app.command("build")
def build_command(
    file: Annotated[Path, typer.Argument(help="Fortran source file to compile.")],
    root: RootOption = Path("."),
    config_file: ConfigOption = None,
    compiler: CompilerOption = None,
    debug_symbols: Annotated[bool, typer.Option("--debug-symbols", "-g", help="Compile with -g.")] = False,
    emoji: EmojiOption = True,
    debug: DebugOption = False,
) -> None:
    """Compile FILE into FILE.o without the check-only flags."""

    logger = build_lint_logger(emoji=emoji, debug=debug)
    config = _load(root, config_file, compiler, logger)
    try:
        result = build_file(config, file, debug_symbols=debug_symbols, logger=logger)
    except LintError as exc:
        logger.fail(f"[build] {exc}", hint=getattr(exc, "stderr", None) or exc.hint)
        raise typer.Exit(code=EXIT_FAILURE) from exc
    if result.output.strip():
        Console(highlight=False, soft_wrap=True).print(Text(result.output.rstrip()))


@app.command("rescan")
def rescan_command(
    root: RootOption = Path("."),
    config_file: ConfigOption = None,
    emoji: EmojiOption = True,
    debug: DebugOption = False,
) -> None:
    """Resolve the configured include path patterns and print the directories."""

    logger = build_lint_logger(emoji=emoji, debug=debug)
    config = _load(root, config_file, None, logger)
    session = LintSession(config, logger=logger)
    console = Console(highlight=False, soft_wrap=True)
    for key, directories in session.rescan().items():
        for directory in directories:
            console.print(Text(f"{key.value}: {directory}"))


__all__ = ["app", "render_diagnostic"]

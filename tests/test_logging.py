# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the console logging helpers."""

from __future__ import annotations

import io

from rich.console import Console

from fortlint.logging import LintLogger, build_lint_logger, emoji, fail, warn


def _console(buffer: io.StringIO) -> Console:
    return Console(file=buffer, no_color=True, width=200, soft_wrap=True)


def test_emoji_toggle() -> None:
    assert emoji("✅", True) == "✅"
    assert emoji("✅", False) == ""


def test_helpers_render_plain_text() -> None:
    buffer = io.StringIO()
    console = _console(buffer)

    warn("[lint] careful", use_emoji=False, console=console)
    fail("[lint] broken", use_emoji=True, console=console)

    lines = buffer.getvalue().splitlines()
    assert lines[0] == "[lint] careful"
    assert lines[1].endswith("[lint] broken")
    assert lines[1].startswith("❌")


def test_fail_prints_hint() -> None:
    buffer = io.StringIO()
    logger = LintLogger(console=_console(buffer), use_emoji=False)

    logger.fail("[lint] missing compiler", hint="Install gfortran.")

    assert buffer.getvalue().splitlines() == ["[lint] missing compiler", "  Install gfortran."]


def test_debug_is_silent_unless_enabled() -> None:
    buffer = io.StringIO()
    quiet = LintLogger(console=_console(buffer), use_emoji=False)
    loud = LintLogger(console=_console(buffer), use_emoji=False, debug_enabled=True)

    quiet.debug("hidden")
    loud.debug("[lint] Published file=main.f90 count=2")

    assert buffer.getvalue() == "[debug] [lint] Published file=main.f90 count=2\n"


def test_build_lint_logger() -> None:
    logger = build_lint_logger(emoji=False, debug=True, no_color=True)

    assert logger.debug_enabled
    assert not logger.use_emoji
    assert logger.console.stderr

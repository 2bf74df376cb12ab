# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Final, Literal

from rich.console import Console
from rich.text import Text

_CONSOLES: dict[tuple[bool, bool, bool], Console] = {}


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal.

    Returns:
        bool: ``True`` when ``sys.stdout`` reports TTY support, ``False`` otherwise.
    """

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a cached Rich console configured for ``color`` and ``emoji``.

    Args:
        color: ``True`` when ANSI colour output should be enabled.
        emoji: ``True`` when Rich should render emoji glyphs.

    Returns:
        Console: Cached or newly constructed console matching the preferences.
    """

    tty = detect_tty()
    key = (color, emoji, tty)
    if key not in _CONSOLES:
        color_system: Literal["auto", "standard", "256", "truecolor", "windows"] | None = (
            "auto" if color and tty else None
        )
        _CONSOLES[key] = Console(
            color_system=color_system,
            force_terminal=tty,
            no_color=not (color and tty),
            emoji=emoji,
            soft_wrap=True,
            stderr=True,
        )
    return _CONSOLES[key]


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(console: Console, msg: str, *, style: str | None) -> None:
    """Render ``msg`` to ``console`` applying ``style`` when colour is active."""

    text = Text(msg)
    if style and not console.no_color:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, console: Console | None = None) -> None:
    """Emit an informational message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        console: Optional console overriding the shared stderr console.
    """

    target = console or get_console(color=True, emoji=use_emoji)
    _print_line(target, f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan")


def ok(msg: str, *, use_emoji: bool, console: Console | None = None) -> None:
    """Emit a success message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        console: Optional console overriding the shared stderr console.
    """

    target = console or get_console(color=True, emoji=use_emoji)
    _print_line(target, f"{emoji('✅ ', use_emoji)}{msg}", style="green")


def warn(msg: str, *, use_emoji: bool, console: Console | None = None) -> None:
    """Emit a warning message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        console: Optional console overriding the shared stderr console.
    """

    target = console or get_console(color=True, emoji=use_emoji)
    _print_line(target, f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow")


def fail(msg: str, *, use_emoji: bool, console: Console | None = None) -> None:
    """Emit an error message.

    Args:
        msg: Message text to display.
        use_emoji: Flag indicating whether emoji output is desired.
        console: Optional console overriding the shared stderr console.
    """

    target = console or get_console(color=True, emoji=use_emoji)
    _print_line(target, f"{emoji('❌ ', use_emoji)}{msg}", style="red")


_KEY_VALUE_RE: Final[re.Pattern[str]] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")


@dataclass(slots=True)
class LintLogger:
    """Adapter around the logging helpers bound to one console and emoji preference."""

    console: Console = field(default_factory=lambda: get_console(color=True, emoji=True))
    use_emoji: bool = True
    debug_enabled: bool = False

    def info(self, message: str) -> None:
        """Log an informational message."""

        info(message, use_emoji=self.use_emoji, console=self.console)

    def ok(self, message: str) -> None:
        """Log a success message."""

        ok(message, use_emoji=self.use_emoji, console=self.console)

    def warn(self, message: str) -> None:
        """Log a warning message."""

        warn(message, use_emoji=self.use_emoji, console=self.console)

    def fail(self, message: str, *, hint: str | None = None) -> None:
        """Log a failure message, followed by ``hint`` when supplied.

        Args:
            message: Text describing the failure state.
            hint: Optional remediation guidance rendered on its own line.
        """

        fail(message, use_emoji=self.use_emoji, console=self.console)
        if hint:
            _print_line(self.console, f"  {hint}", style="dim")

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled.

        Args:
            message: Debug payload rendered with simple ``key=value`` highlighting.
        """

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in _KEY_VALUE_RE.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            key, raw_value = match.group(1), match.group(2)
            text.append(key, style="bold magenta")
            text.append("=", style="dim")
            text.append(raw_value, style="bold blue" if key in {"command", "cmd"} else "bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_lint_logger(*, emoji: bool = True, debug: bool = False, no_color: bool = False) -> LintLogger:
    """Return a :class:`LintLogger` bound to a dedicated stderr console.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        LintLogger: Logger instance bound to a dedicated Rich console.
    """

    console = Console(no_color=no_color, highlight=False, stderr=True, soft_wrap=True)
    return LintLogger(console=console, use_emoji=emoji, debug_enabled=debug)


__all__ = [
    "LintLogger",
    "build_lint_logger",
    "detect_tty",
    "emoji",
    "fail",
    "get_console",
    "info",
    "ok",
    "warn",
]

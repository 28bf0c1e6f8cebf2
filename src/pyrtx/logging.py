# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import sys
from functools import cache
from typing import Literal

from rich.console import Console
from rich.text import Text


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


class ConsoleManager:
    """Provision Rich :class:`Console` instances keyed by stream and presentation flags."""

    def __init__(self) -> None:
        self._cache: dict[tuple[bool, bool, bool, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool, stderr: bool = False) -> Console:
        """Return a console configured for ``color`` and ``emoji`` preferences.

        Args:
            color: ``True`` when ANSI colour output should be enabled.
            emoji: ``True`` when Rich should render emoji glyphs.
            stderr: ``True`` to write to standard error instead of standard output.

        Returns:
            Console: Cached or newly constructed console matching the preferences.
        """

        tty = detect_tty()
        key = (color, emoji, stderr, tty)
        if key not in self._cache:
            color_system: Literal["auto"] | None = "auto" if color and tty else None
            self._cache[key] = Console(
                color_system=color_system,
                force_terminal=tty,
                no_color=not (color and tty),
                emoji=emoji,
                soft_wrap=True,
                stderr=stderr,
            )
        return self._cache[key]


@cache
def get_console_manager() -> ConsoleManager:
    """Return the process-wide :class:`ConsoleManager`."""

    return ConsoleManager()


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
    stderr: bool = False,
) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji, stderr=stderr)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit a warning message on standard error."""

    _print_line(
        f"{emoji('⚠️ ', use_emoji)}rtx: {msg}",
        style="yellow",
        use_emoji=use_emoji,
        use_color=use_color,
        stderr=True,
    )


def fail(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit an error message on standard error."""

    _print_line(
        f"{emoji('❌ ', use_emoji)}rtx: {msg}",
        style="red",
        use_emoji=use_emoji,
        use_color=use_color,
        stderr=True,
    )


def debug(msg: str, *, enabled: bool) -> None:
    """Emit a dim diagnostic line on standard error when *enabled* is set."""

    if not enabled:
        return
    _print_line(f"rtx: {msg}", style="dim", use_emoji=False, stderr=True)


__all__ = [
    "ConsoleManager",
    "debug",
    "detect_tty",
    "emoji",
    "fail",
    "get_console_manager",
    "info",
    "ok",
    "warn",
]

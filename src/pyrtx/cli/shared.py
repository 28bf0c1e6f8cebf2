# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared state, config loading, and error reporting for CLI commands."""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import typer

from ..config import Config
from ..errors import RtxError
from ..logging import fail
from ..runtime_arg import RuntimeArg


@dataclass(slots=True)
class CLIState:
    """Options collected by the top-level callback."""

    use_emoji: bool = True
    verbose: bool = False


def get_state(ctx: typer.Context) -> CLIState:
    if not isinstance(ctx.obj, CLIState):
        ctx.obj = CLIState()
    return ctx.obj


def load_cli_config(state: CLIState, runtime_args: Sequence[RuntimeArg] = ()) -> Config:
    """Load the configuration for the current directory honouring CLI flags."""

    env = dict(os.environ)
    if state.verbose:
        env["RTX_VERBOSE"] = "true"
    return Config.load(env=env, runtime_args=runtime_args)


def display_path(path: Path, home: Path) -> str:
    """Return *path* with the home directory abbreviated to ``~``."""

    try:
        return f"~/{path.relative_to(home)}"
    except ValueError:
        return str(path)


@contextmanager
def cli_errors(state: CLIState) -> Iterator[None]:
    """Render :class:`RtxError` as a failure line and exit with status 1."""

    try:
        yield
    except RtxError as exc:
        fail(str(exc), use_emoji=state.use_emoji)
        raise typer.Exit(code=1) from exc


__all__ = ["CLIState", "cli_errors", "display_path", "get_state", "load_cli_config"]

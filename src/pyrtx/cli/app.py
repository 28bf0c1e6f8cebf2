# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared options."""

from __future__ import annotations

import typer

from .plugins import plugins_app
from .runtimes import current_command, global_command, install_command, latest_command, where_command
from .shared import CLIState

app = typer.Typer(
    help="Polyglot runtime version manager compatible with asdf plugins.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def _root(
    ctx: typer.Context,
    use_emoji: bool = typer.Option(True, "--emoji/--no-emoji", help="Toggle emoji prefixes in messages."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print diagnostic output."),
) -> None:
    ctx.obj = CLIState(use_emoji=use_emoji, verbose=verbose)


def register_commands(target: typer.Typer) -> None:
    """Attach the runtime commands and the ``plugins`` group to *target*."""

    target.command("install")(install_command)
    target.command("latest")(latest_command)
    target.command("where")(where_command)
    target.command("current")(current_command)
    target.command("global")(global_command)
    target.add_typer(plugins_app, name="plugins")


register_commands(app)


def main() -> None:
    app()


__all__ = ["app", "main", "register_commands"]

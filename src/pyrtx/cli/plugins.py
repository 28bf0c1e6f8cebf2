# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``plugins`` sub-commands: install, list, and uninstall plugins."""

from __future__ import annotations

from typing import Optional

import typer

from ..errors import RtxError
from ..logging import fail, ok, warn
from ..plugins.lifecycle import PluginInstallOutcome, get_name_and_url
from .shared import CLIState, cli_errors, get_state, load_cli_config

plugins_app = typer.Typer(help="Add, list, and remove plugins.", no_args_is_help=True)


@plugins_app.command("install")
def install_command(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Plugin name (e.g. nodejs) or git url."),
    git_url: Optional[str] = typer.Argument(None, help="Git url of the plugin."),
    force: bool = typer.Option(False, "--force", "-f", help="Reinstall even if the plugin exists."),
    all_missing: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Install every plugin referenced by config files that is not installed yet.",
    ),
) -> None:
    """Install a plugin by shorthand name or git url."""

    state = get_state(ctx)
    with cli_errors(state):
        if all_missing:
            if name is not None or force:
                raise RtxError("--all cannot be combined with a plugin name or --force")
            _install_all_missing(state)
            return
        if name is None:
            raise RtxError("a plugin name or url is required unless --all is given")
        plugin_name, url = get_name_and_url(name, git_url)
        config = load_cli_config(state)
        plugin = config.get_plugin(plugin_name)
        outcome = config.lifecycle.install(plugin, url, force=force)
        if outcome is PluginInstallOutcome.ALREADY_INSTALLED:
            warn(f"plugin {plugin_name} already installed", use_emoji=state.use_emoji)
        else:
            ok(f"plugin {plugin_name} {outcome.value}", use_emoji=state.use_emoji)


def _install_all_missing(state: CLIState) -> None:
    config = load_cli_config(state)
    report = config.lifecycle.install_all_missing(config.plugins.values())
    if report.nothing_to_do:
        warn("all plugins already installed", use_emoji=state.use_emoji)
        return
    for name in report.installed:
        ok(f"plugin {name} installed", use_emoji=state.use_emoji)
    for failure in report.failures:
        fail(f"failed to install plugin {failure}", use_emoji=state.use_emoji)
    if report.failures:
        raise typer.Exit(code=1)


@plugins_app.command("ls")
def list_command(
    ctx: typer.Context,
    urls: bool = typer.Option(False, "--urls", "-u", help="Show the git url of each plugin."),
) -> None:
    """List installed plugins."""

    state = get_state(ctx)
    with cli_errors(state):
        config = load_cli_config(state)
        for plugin in config.list_installed_plugins():
            if urls:
                typer.echo(f"{plugin.name:<30}{plugin.repository_url() or ''}".rstrip())
            else:
                typer.echo(plugin.name)


@plugins_app.command("uninstall")
def uninstall_command(
    ctx: typer.Context,
    names: list[str] = typer.Argument(..., help="Plugins to remove."),
) -> None:
    """Remove plugin clones."""

    state = get_state(ctx)
    with cli_errors(state):
        config = load_cli_config(state)
        for name in names:
            plugin = config.get_plugin(name)
            if not plugin.is_installed():
                warn(f"plugin {name} is not installed", use_emoji=state.use_emoji)
                continue
            plugin.uninstall()
            ok(f"plugin {name} uninstalled", use_emoji=state.use_emoji)


__all__ = ["plugins_app"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime commands: ``latest``, ``where``, ``current``, ``global``, and ``install``."""

from __future__ import annotations

import sys
from typing import Optional

import typer

from ..config import Config
from ..errors import InvalidRuntimeInputError, RtxError, VersionNotFoundError, VersionNotInstalledError
from ..logging import ok, warn
from ..plugins.lifecycle import get_name_and_url
from ..resolver import ResolutionKind
from ..runtime_arg import RuntimeArg, RuntimeArgKind, RuntimeArgVersion, double_runtime_condition
from ..settings import MissingRuntimeBehavior
from ..toolset.tool_version import ToolVersion
from ..toolset.tool_versions_file import ToolVersionsFile
from .shared import CLIState, cli_errors, display_path, get_state, load_cli_config


def _runtime_with_asdf_version(runtime: str, asdf_version: str | None) -> RuntimeArg:
    """Accept both ``plugin@version`` and the asdf ``plugin version`` form."""

    parsed = RuntimeArg.parse(runtime).validated()
    if asdf_version is None:
        return parsed
    if not parsed.version.is_unspecified:
        raise InvalidRuntimeInputError()
    return RuntimeArg(parsed.plugin, RuntimeArgVersion.named(asdf_version))


def latest_command(
    ctx: typer.Context,
    runtime: str = typer.Argument(..., help="Runtime with an optional prefix, e.g. nodejs@18."),
    asdf_version: Optional[str] = typer.Argument(None, hidden=True),
) -> None:
    """Print the newest available version matching a prefix."""

    state = get_state(ctx)
    with cli_errors(state):
        parsed = _runtime_with_asdf_version(runtime, asdf_version)
        if parsed.version.kind is RuntimeArgKind.SYSTEM:
            raise RtxError("invalid version: system")
        prefix = parsed.version.value or ""
        config = load_cli_config(state)
        plugin = config.get_plugin(parsed.plugin)
        latest = config.resolver.latest_version(plugin, prefix)
        if latest is None:
            raise RtxError(f"[{parsed.plugin}] no version found matching {prefix or 'latest'}")
        typer.echo(latest)


def where_command(
    ctx: typer.Context,
    runtime: str = typer.Argument(..., help="Runtime, e.g. nodejs@20 or nodejs."),
    asdf_version: Optional[str] = typer.Argument(None, hidden=True),
) -> None:
    """Print the install directory of a runtime."""

    state = get_state(ctx)
    with cli_errors(state):
        parsed = _runtime_with_asdf_version(runtime, asdf_version)
        config = load_cli_config(state)
        try:
            resolved = config.resolve_runtime_arg(parsed, prefer_installed=True)
        except VersionNotFoundError as exc:
            if parsed.version.kind is not RuntimeArgKind.NAMED:
                raise
            raise VersionNotInstalledError(parsed.plugin, str(parsed.version)) from exc
        if resolved is None:
            raise RtxError(f"no version set for {parsed.plugin}")
        if resolved.kind is ResolutionKind.SYSTEM:
            raise RtxError(f"[{parsed.plugin}] system version is not managed by rtx")
        typer.echo(str(resolved.require_installed()))


def current_command(
    ctx: typer.Context,
    plugin: Optional[str] = typer.Argument(None, help="Only show this plugin's version."),
) -> None:
    """Show the versions active in the current directory."""

    state = get_state(ctx)
    with cli_errors(state):
        config = load_cli_config(state)
        config.ensure_installed(confirm=typer.confirm if sys.stdin.isatty() else None)
        if plugin is not None:
            resolved = config.current_version(plugin)
            if resolved is None:
                warn(f"no version set for {plugin}", use_emoji=state.use_emoji)
                return
            typer.echo(_display_version(resolved.version, resolved.kind))
            return
        for resolution in config.resolve_toolset():
            if resolution.error is not None:
                warn(str(resolution.error), use_emoji=state.use_emoji)
                continue
            versions = " ".join(_display_version(entry.version, entry.kind) for entry in resolution.resolved)
            typer.echo(f"{resolution.plugin} {versions}")


def _display_version(version: str | None, kind: ResolutionKind) -> str:
    if kind is ResolutionKind.SYSTEM:
        return "system"
    return version or ""


def global_command(
    ctx: typer.Context,
    runtimes: Optional[list[str]] = typer.Argument(None, help="Runtimes to pin, e.g. nodejs@20 python@3.11."),
    fuzzy: bool = typer.Option(False, "--fuzzy", help="Save the version as typed instead of the exact match."),
    remove: Optional[list[str]] = typer.Option(None, "--remove", help="Remove a plugin from the global file."),
) -> None:
    """Show or pin versions in the home tool-versions file.

    With a single runtime and no version, the pinned version is printed.
    ``rtx global nodejs 20`` is understood as ``rtx global nodejs@20``.
    """

    state = get_state(ctx)
    with cli_errors(state):
        config = load_cli_config(state)
        document = ToolVersionsFile.parse(config.dirs.global_tool_versions)
        for plugin in remove or ():
            document.remove_plugin(plugin)

        parsed = double_runtime_condition([RuntimeArg.parse(token).validated() for token in runtimes or ()])
        if len(parsed) == 1 and parsed[0].version.is_unspecified:
            _print_pinned(config, document, parsed[0].plugin)
            return
        if any(runtime.version.is_unspecified for runtime in parsed):
            raise InvalidRuntimeInputError()
        for runtime in parsed:
            document.set_versions(runtime.plugin, [_pinned_version(config, runtime, fuzzy=fuzzy)])

        if parsed or remove:
            document.save()
        typer.echo(document.dump(), nl=False)


def _print_pinned(config: Config, document: ToolVersionsFile, plugin: str) -> None:
    versions = document.get(plugin)
    if not versions:
        location = display_path(config.dirs.global_tool_versions, config.dirs.home)
        raise RtxError(f"no version set for {plugin} in {location}")
    typer.echo(" ".join(str(version) for version in versions))


def _pinned_version(config: Config, runtime: RuntimeArg, *, fuzzy: bool) -> ToolVersion:
    if runtime.version.kind is RuntimeArgKind.SYSTEM:
        return ToolVersion.system()
    if fuzzy:
        return ToolVersion.parse(str(runtime.version))
    resolved = config.resolve_runtime_arg(runtime)
    if resolved is None:
        raise RtxError(f"no version set for {runtime.plugin}")
    if resolved.kind in (ResolutionKind.SYSTEM, ResolutionKind.PATH) or resolved.version is None:
        return resolved.request
    return resolved.install_request


def install_command(
    ctx: typer.Context,
    runtimes: Optional[list[str]] = typer.Argument(None, help="Runtimes to install; defaults to the toolset."),
    force: bool = typer.Option(False, "--force", "-f", help="Reinstall even if already installed."),
) -> None:
    """Install runtime versions, missing plugins included."""

    state = get_state(ctx)
    with cli_errors(state):
        parsed = double_runtime_condition([RuntimeArg.parse(token).validated() for token in runtimes or ()])
        if not parsed:
            config = load_cli_config(state)
            config.settings = config.settings.with_overrides(
                missing_runtime_behavior=MissingRuntimeBehavior.AUTOINSTALL,
            )
            installed = config.ensure_installed()
            if not installed:
                warn("all runtimes already installed", use_emoji=state.use_emoji)
            for resolved in installed:
                ok(f"{resolved} installed", use_emoji=state.use_emoji)
            return
        config = load_cli_config(state, parsed)
        for runtime in parsed:
            _install_runtime(state, config, runtime, force=force)


def _install_runtime(state: CLIState, config: Config, runtime: RuntimeArg, *, force: bool) -> None:
    plugin = config.get_plugin(runtime.plugin)
    if not plugin.is_installed() and runtime.version.kind is not RuntimeArgKind.SYSTEM:
        _, git_url = get_name_and_url(runtime.plugin)
        config.lifecycle.install(plugin, git_url)
    resolved = config.resolve_runtime_arg(runtime)
    if resolved is None:
        raise RtxError(f"no version set for {runtime.plugin}")
    if resolved.kind in (ResolutionKind.SYSTEM, ResolutionKind.PATH):
        warn(f"{runtime} is not managed by rtx", use_emoji=state.use_emoji)
        return
    if resolved.installed and not force:
        warn(f"{resolved} already installed", use_emoji=state.use_emoji)
        return
    if resolved.install_path is not None and resolved.install_path.exists():
        plugin.uninstall_version(resolved.install_path)
    plugin.install_version(resolved.install_request, keep_download=config.settings.always_keep_download)
    ok(f"{resolved.plugin}@{resolved.version} installed", use_emoji=state.use_emoji)


__all__ = [
    "current_command",
    "global_command",
    "install_command",
    "latest_command",
    "where_command",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discover config files and merge them into the effective toolset."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path

from ..dirs import RtxDirs
from ..errors import RtxError
from ..logging import debug, warn
from ..plugins.lifecycle import PluginLifecycle
from ..plugins.plugin import Plugin
from ..settings import Settings
from .tool_source import ToolSource
from .tool_version import ToolVersion
from .tool_versions_file import ToolVersionsFile
from .toolset import Toolset


def load_legacy_filenames(plugins: Sequence[Plugin], settings: Settings) -> dict[str, str]:
    """Return ``{legacy filename: plugin name}`` for the installed *plugins*.

    Returns an empty mapping without querying any plugin when legacy version
    files are disabled.
    """

    if not settings.legacy_version_file:
        return {}
    installed = [plugin for plugin in plugins if plugin.is_installed()]
    return PluginLifecycle(settings).legacy_filename_map(installed)


def _find_up(start: Path, filenames: Sequence[str]) -> Iterator[Path]:
    current = start
    while True:
        for filename in filenames:
            candidate = current / filename
            if candidate.is_file():
                yield candidate
        if current.parent == current:
            return
        current = current.parent


def find_all_config_files(dirs: RtxDirs, legacy_filenames: Iterable[str]) -> list[Path]:
    """Return config files most specific first, ending with the home file.

    Within one directory legacy files come first, ordered by name, and the
    canonical tool-versions file comes last.  Paths are de-duplicated by their
    resolved location keeping the first occurrence.
    """

    filenames = sorted(set(legacy_filenames) - {dirs.tool_versions_filename})
    filenames.append(dirs.tool_versions_filename)
    found = list(_find_up(dirs.cwd, filenames))
    if dirs.global_tool_versions.is_file():
        found.append(dirs.global_tool_versions)

    seen: set[Path] = set()
    unique: list[Path] = []
    for path in found:
        resolved = path.resolve()
        if resolved in seen:
            continue
        seen.add(resolved)
        unique.append(path)
    return unique


def parse_config_file(
    path: Path,
    dirs: RtxDirs,
    legacy_filenames: Mapping[str, str],
    plugins: Mapping[str, Plugin],
) -> Toolset:
    """Parse one discovered file into a toolset fragment tagged with its source."""

    if path.name == dirs.tool_versions_filename:
        document = ToolVersionsFile.parse(path)
        if path.resolve() == dirs.global_tool_versions.resolve():
            return document.to_toolset(ToolSource.global_file(path))
        return document.to_toolset()

    plugin_name = legacy_filenames[path.name]
    toolset = Toolset(ToolSource.legacy_version_file(path))
    for token in plugins[plugin_name].parse_legacy_file(path):
        toolset.add_version(plugin_name, ToolVersion.parse(token))
    return toolset


def load_toolset(
    dirs: RtxDirs,
    settings: Settings,
    plugins: Sequence[Plugin],
) -> tuple[Toolset, list[Path]]:
    """Build the effective toolset for ``dirs.cwd``.

    Files are merged lowest precedence first so closer files replace the
    entries of farther ones plugin by plugin.  A legacy file whose plugin fails
    to parse it is skipped with a warning.

    Returns:
        tuple[Toolset, list[Path]]: The merged toolset and the files it came from,
        most specific first.
    """

    legacy_filenames = load_legacy_filenames(plugins, settings)
    config_files = find_all_config_files(dirs, legacy_filenames)
    by_name = {plugin.name: plugin for plugin in plugins}

    toolset = Toolset()
    for path in reversed(config_files):
        debug(f"loading {path}", enabled=settings.verbose)
        try:
            fragment = parse_config_file(path, dirs, legacy_filenames, by_name)
        except (RtxError, ValueError) as exc:
            if path.name == dirs.tool_versions_filename:
                raise
            warn(f"failed to parse legacy file {path}: {exc}")
            continue
        toolset.merge(fragment)
    return toolset, config_files


__all__ = [
    "find_all_config_files",
    "load_legacy_filenames",
    "load_toolset",
    "parse_config_file",
]

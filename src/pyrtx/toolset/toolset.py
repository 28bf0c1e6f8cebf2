# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Collections of per-plugin version requests merged across config sources.

A toolset starts empty and absorbs fragments from every config file, lowest
precedence first.  Merging replaces a plugin's whole list; it never unions.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import RtxError
from ..runtime_arg import RuntimeArg, RuntimeArgKind
from .tool_source import ToolSource
from .tool_version import ToolVersion
from .tool_version_list import ToolVersionList

if TYPE_CHECKING:
    from ..resolver import ResolvedVersion, Resolver, VersionCatalog


@dataclass(frozen=True, slots=True)
class PluginResolution:
    """Resolved entries for one plugin, or the error that stopped resolution."""

    plugin: str
    source: ToolSource
    resolved: tuple[ResolvedVersion, ...] = ()
    error: RtxError | None = None

    @property
    def current(self) -> ResolvedVersion | None:
        """First usable entry, falling back to the first entry awaiting install."""

        for entry in self.resolved:
            if entry.installed:
                return entry
        return self.resolved[0] if self.resolved else None

    @property
    def missing(self) -> tuple[ResolvedVersion, ...]:
        return tuple(entry for entry in self.resolved if not entry.installed)


class Toolset:
    """Mapping of plugin name to :class:`ToolVersionList` with last-writer-wins merges."""

    def __init__(self, source: ToolSource | None = None) -> None:
        self.source = source or ToolSource.default()
        self.versions: dict[str, ToolVersionList] = {}

    @classmethod
    def from_runtime_args(cls, runtimes: Iterable[RuntimeArg]) -> Toolset:
        """Build a toolset from command-line runtimes that carry a version."""

        toolset = cls(ToolSource.argument())
        for runtime in runtimes:
            if runtime.version.kind is RuntimeArgKind.SYSTEM:
                toolset.add_version(runtime.plugin, ToolVersion.system())
            elif runtime.version.kind is RuntimeArgKind.NAMED:
                version = ToolVersion.parse_for(runtime.plugin, runtime.version.value or "")
                toolset.add_version(runtime.plugin, version)
        return toolset

    def add_version(self, plugin: str, version: ToolVersion) -> None:
        if plugin not in self.versions:
            self.versions[plugin] = ToolVersionList(source=self.source)
        self.versions[plugin].add_version(version)

    def merge(self, other: Toolset) -> Toolset:
        """Replace each plugin present in *other* with *other*'s list; keep the rest."""

        for plugin, versions in other.versions.items():
            self.versions[plugin] = versions.copy()
        return self

    def get(self, plugin: str) -> ToolVersionList | None:
        return self.versions.get(plugin)

    def list_plugins(self) -> list[str]:
        return list(self.versions)

    def resolve(self, catalogs: Mapping[str, VersionCatalog], resolver: Resolver) -> list[PluginResolution]:
        """Resolve every entry of every plugin, isolating errors per plugin.

        Plugins without a catalog are skipped.  An error in one entry of a list
        is tolerated when another entry of the same list resolves.
        """

        results: list[PluginResolution] = []
        for plugin, version_list in self.versions.items():
            catalog = catalogs.get(plugin)
            if catalog is None:
                continue
            resolved: list[ResolvedVersion] = []
            first_error: RtxError | None = None
            for request in version_list.versions:
                try:
                    resolved.append(resolver.resolve(catalog, request))
                except RtxError as exc:
                    first_error = first_error or exc
            results.append(
                PluginResolution(
                    plugin=plugin,
                    source=version_list.source,
                    resolved=tuple(resolved),
                    error=None if resolved else first_error,
                )
            )
        return results

    def __contains__(self, plugin: object) -> bool:
        return plugin in self.versions

    def __iter__(self) -> Iterator[str]:
        return iter(self.versions)

    def __len__(self) -> int:
        return len(self.versions)

    def __str__(self) -> str:
        plugins = ", ".join(f"{plugin} {versions}" for plugin, versions in self.versions.items())
        return f"Toolset: {plugins}"


__all__ = ["PluginResolution", "Toolset"]

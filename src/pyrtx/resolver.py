# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn requested tool versions into installed paths or install directives.

Resolution order for a :class:`~pyrtx.toolset.ToolVersion`:

* ``system`` short-circuits to the binary already on ``PATH``.
* ``path:<dir>`` short-circuits to that directory; the caller checks it exists.
* ``ref:<r>`` is installed only when ``ref-<r>`` exists in the installs tree.
* exact versions consult the alias table once, then the installs tree; the
  remote list is only used to tell "not installed" from "does not exist".
* prefixes (``latest`` means the empty prefix) pick the highest remote version
  with a version-aware ordering.

The remote list is fetched lazily and at most once per resolution.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .errors import InvalidVersionError, PluginNotInstalledError, VersionNotFoundError, VersionNotInstalledError
from .runtime_arg import RuntimeArgKind, RuntimeArgVersion
from .toolset.tool_version import PATH_MARKER, PREFIX_MARKER, REF_MARKER, ToolVersion, ToolVersionKind
from .versions import latest_matching

LATEST_KEYWORD: Final[str] = "latest"
REF_DIR_PREFIX: Final[str] = "ref-"


@runtime_checkable
class VersionCatalog(Protocol):
    """What the resolver needs to know about one plugin."""

    name: str

    def is_installed(self) -> bool: ...

    def list_installed_versions(self) -> list[str]: ...

    def list_remote_versions(self) -> list[str]: ...

    def install_path(self, dirname: str) -> Path: ...


class ResolutionKind(str, Enum):
    SYSTEM = "system"
    PATH = "path"
    INSTALLED = "installed"
    NOT_INSTALLED = "not_installed"


@dataclass(frozen=True, slots=True)
class ResolvedVersion:
    """Result of resolving one request for one plugin.

    Attributes:
        plugin: Plugin name.
        request: The request as interpreted by the resolver.
        kind: Whether the result is the system binary, an unmanaged path, an
            installed version, or a version that still has to be installed.
        version: Concrete version (or ref) for managed results.
        install_path: Directory holding the runtime, when one applies.
    """

    plugin: str
    request: ToolVersion
    kind: ResolutionKind
    version: str | None = None
    install_path: Path | None = None

    @property
    def installed(self) -> bool:
        return self.kind is not ResolutionKind.NOT_INSTALLED

    @property
    def install_request(self) -> ToolVersion:
        """Concrete version to hand to the plugin's installer; never a prefix."""

        if self.request.kind is ToolVersionKind.REF:
            return self.request
        if self.version is None:
            return self.request
        return ToolVersion.version(self.version)

    def require_installed(self) -> Path | None:
        """Return the install path, raising when the version still needs installing.

        ``None`` is returned for ``system``, which has no managed directory.
        """

        if not self.installed:
            raise VersionNotInstalledError(self.plugin, self.version or str(self.request))
        return self.install_path

    def __str__(self) -> str:
        if self.kind is ResolutionKind.SYSTEM:
            return "system"
        if self.kind is ResolutionKind.PATH:
            return str(self.install_path)
        return f"{self.plugin}@{self.version}"


def install_dirname(version: ToolVersion) -> str:
    """Return the installs-tree directory name for a concrete request."""

    if version.kind is ToolVersionKind.REF:
        return f"{REF_DIR_PREFIX}{version.value}"
    return version.value


class _LazyRemote:
    """Fetch the remote version list on first use only."""

    def __init__(self, fetch: Callable[[], list[str]]) -> None:
        self._fetch = fetch
        self._versions: list[str] | None = None

    def __call__(self) -> list[str]:
        if self._versions is None:
            self._versions = list(self._fetch())
        return self._versions


class Resolver:
    """Resolve requests against a plugin catalog and an alias table."""

    def __init__(self, aliases: Mapping[str, Mapping[str, str]] | None = None) -> None:
        self._aliases = {plugin: dict(table) for plugin, table in (aliases or {}).items()}

    def resolve_alias(self, plugin: str, name: str) -> str | None:
        """Return the version *name* is an alias for, or ``None``."""

        return self._aliases.get(plugin, {}).get(name)

    def resolve(self, catalog: VersionCatalog, request: ToolVersion) -> ResolvedVersion:
        """Resolve a tool-versions request for the plugin behind *catalog*.

        Raises:
            PluginNotInstalledError: For managed requests when the plugin is missing.
            VersionNotFoundError: When no version exists for the request.
        """

        return self._resolve(catalog, request, _LazyRemote(catalog.list_remote_versions), allow_alias=True)

    def resolve_runtime_arg(
        self,
        catalog: VersionCatalog,
        version: RuntimeArgVersion,
        *,
        prefer_installed: bool = False,
    ) -> ResolvedVersion:
        """Resolve a command-line version expression that may be a version, prefix, or alias.

        Args:
            catalog: Plugin catalog.
            version: Named or system expression; unspecified expressions are the
                caller's responsibility because they depend on the toolset.
            prefer_installed: Match the prefix against installed versions before
                consulting the remote list.

        Returns:
            ResolvedVersion: Resolution for the interpreted request.
        """

        if version.kind is RuntimeArgKind.SYSTEM:
            return self.resolve(catalog, ToolVersion.system())
        if version.kind is RuntimeArgKind.UNSPECIFIED:
            raise ValueError("unspecified versions must be resolved through the toolset")
        if not version.value:
            raise InvalidVersionError(catalog.name, "")
        name = version.value
        remote = _LazyRemote(catalog.list_remote_versions)
        aliased = self.resolve_alias(catalog.name, name)
        if aliased is not None:
            return self._resolve(catalog, ToolVersion.parse_for(catalog.name, aliased), remote, allow_alias=False)
        if name == LATEST_KEYWORD or name.startswith((PREFIX_MARKER, REF_MARKER, PATH_MARKER)):
            return self._resolve(catalog, _parse_named(catalog.name, name), remote, allow_alias=False)

        self._ensure_plugin(catalog)
        installed = catalog.list_installed_versions()
        if name in installed:
            return self._installed(catalog, ToolVersion.version(name), name)
        if prefer_installed and (match := latest_matching(installed, name)) is not None:
            return self._installed(catalog, ToolVersion.prefix(name), match)
        if name in remote():
            return self._not_installed(catalog, ToolVersion.version(name), name)
        return self._resolve(catalog, ToolVersion.prefix(name), remote, allow_alias=False)

    def latest_version(self, catalog: VersionCatalog, prefix: str) -> str | None:
        """Return the newest remote version matching *prefix* after alias expansion."""

        self._ensure_plugin(catalog)
        prefix = self.resolve_alias(catalog.name, prefix) or prefix
        if prefix == LATEST_KEYWORD:
            prefix = ""
        return latest_matching(catalog.list_remote_versions(), prefix)

    def _resolve(
        self,
        catalog: VersionCatalog,
        request: ToolVersion,
        remote: _LazyRemote,
        *,
        allow_alias: bool,
    ) -> ResolvedVersion:
        if request.kind is ToolVersionKind.SYSTEM:
            return ResolvedVersion(catalog.name, request, ResolutionKind.SYSTEM)
        if request.kind is ToolVersionKind.PATH:
            return ResolvedVersion(catalog.name, request, ResolutionKind.PATH, install_path=Path(request.value))

        self._ensure_plugin(catalog)
        if request.kind is ToolVersionKind.REF:
            path = catalog.install_path(install_dirname(request))
            kind = ResolutionKind.INSTALLED if path.is_dir() else ResolutionKind.NOT_INSTALLED
            return ResolvedVersion(catalog.name, request, kind, request.value, path)

        if request.kind is ToolVersionKind.VERSION:
            if allow_alias and (aliased := self.resolve_alias(catalog.name, request.value)) is not None:
                return self._resolve(catalog, ToolVersion.parse_for(catalog.name, aliased), remote, allow_alias=False)
            if request.value == LATEST_KEYWORD:
                return self._resolve_prefix(catalog, request, "", remote)
            if request.value in catalog.list_installed_versions():
                return self._installed(catalog, request, request.value)
            if request.value in remote():
                return self._not_installed(catalog, request, request.value)
            raise VersionNotFoundError(catalog.name, request.value)

        prefix = "" if request.value == LATEST_KEYWORD else request.value
        return self._resolve_prefix(catalog, request, prefix, remote)

    def _resolve_prefix(
        self,
        catalog: VersionCatalog,
        request: ToolVersion,
        prefix: str,
        remote: _LazyRemote,
    ) -> ResolvedVersion:
        selected = latest_matching(remote(), prefix)
        if selected is None:
            raise VersionNotFoundError(catalog.name, str(request))
        if selected in catalog.list_installed_versions():
            return self._installed(catalog, request, selected)
        return self._not_installed(catalog, request, selected)

    @staticmethod
    def _ensure_plugin(catalog: VersionCatalog) -> None:
        if not catalog.is_installed():
            raise PluginNotInstalledError(catalog.name)

    @staticmethod
    def _installed(catalog: VersionCatalog, request: ToolVersion, version: str) -> ResolvedVersion:
        return ResolvedVersion(
            catalog.name,
            request,
            ResolutionKind.INSTALLED,
            version,
            catalog.install_path(version),
        )

    @staticmethod
    def _not_installed(catalog: VersionCatalog, request: ToolVersion, version: str) -> ResolvedVersion:
        return ResolvedVersion(
            catalog.name,
            request,
            ResolutionKind.NOT_INSTALLED,
            version,
            catalog.install_path(version),
        )


def _parse_named(plugin: str, name: str) -> ToolVersion:
    if name == LATEST_KEYWORD:
        return ToolVersion.prefix("")
    return ToolVersion.parse_for(plugin, name)


__all__ = [
    "LATEST_KEYWORD",
    "ResolutionKind",
    "ResolvedVersion",
    "Resolver",
    "VersionCatalog",
    "install_dirname",
]

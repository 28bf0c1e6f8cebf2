# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install, reinstall, and enumerate plugins with per-plugin failure isolation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlsplit

from ..errors import InvalidPluginUrlError, PluginNotFoundError, RtxError
from ..logging import debug, warn
from ..parallel import scatter_gather
from ..settings import Settings
from .locking import plugin_lock
from .plugin import Plugin
from .shorthand import shorthand_to_repository

ASDF_PREFIX = "asdf-"
GIT_SUFFIX = ".git"


class PluginInstallOutcome(str, Enum):
    INSTALLED = "installed"
    REINSTALLED = "reinstalled"
    ALREADY_INSTALLED = "already_installed"


@dataclass(frozen=True, slots=True)
class PluginInstallFailure:
    plugin: str
    error: Exception

    def __str__(self) -> str:
        return f"{self.plugin}: {self.error}"


@dataclass(slots=True)
class BulkInstallReport:
    """Outcome of installing every missing plugin.

    ``nothing_to_do`` distinguishes "everything was already installed" from a
    run that installed nothing because it had no targets.
    """

    installed: list[str] = field(default_factory=list)
    failures: list[PluginInstallFailure] = field(default_factory=list)
    nothing_to_do: bool = False

    @property
    def ok(self) -> bool:
        return not self.failures


def get_name_from_url(url: str) -> str:
    """Infer a plugin name from the last path segment of *url*.

    ``https://github.com/asdf-vm/asdf-nodejs.git`` yields ``nodejs``; scp-style
    ``git@host:org/asdf-ruby`` is understood as well.

    Raises:
        InvalidPluginUrlError: If no usable segment can be found.
    """

    parts = urlsplit(url)
    path = parts.path if parts.scheme else url.rsplit(":", 1)[-1]
    last = path.rstrip("/").rsplit("/", 1)[-1]
    if last.endswith(GIT_SUFFIX):
        last = last[: -len(GIT_SUFFIX)]
    name = last.removeprefix(ASDF_PREFIX)
    if not name or "@" in name:
        raise InvalidPluginUrlError(url)
    return name


def get_name_and_url(name: str, git_url: str | None = None) -> tuple[str, str]:
    """Return ``(plugin name, repository url)`` for user input.

    A bare name is looked up in the shorthand table; input containing ``:`` is
    treated as a URL and the name is inferred from it.

    Raises:
        PluginNotFoundError: For a bare name with no shorthand entry.
        InvalidPluginUrlError: For a URL whose name cannot be inferred.
    """

    if git_url is not None:
        return name, git_url
    if ":" in name:
        return get_name_from_url(name), name
    repository = shorthand_to_repository(name)
    if repository is None:
        raise PluginNotFoundError(name)
    return name, repository


class PluginLifecycle:
    """Coordinate plugin installs using the configured worker pool."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def install(self, plugin: Plugin, git_url: str, *, force: bool = False) -> PluginInstallOutcome:
        """Clone *plugin* from *git_url*, replacing an existing clone when *force* is set.

        The installed check is repeated while holding the plugin's lock so two
        concurrent installs of the same plugin clone it only once.

        Raises:
            PluginInstallError: When the clone fails.
        """

        with plugin_lock(plugin.plugin_path.parent, plugin.name):
            existed = plugin.is_installed()
            if existed and not force:
                return PluginInstallOutcome.ALREADY_INSTALLED
            if existed:
                plugin.uninstall()
            debug(f"cloning {plugin.name} from {git_url}", enabled=self._settings.verbose)
            plugin.install(git_url)
        return PluginInstallOutcome.REINSTALLED if existed else PluginInstallOutcome.INSTALLED

    def install_all_missing(self, plugins: Iterable[Plugin]) -> BulkInstallReport:
        """Install every plugin without a clone, each independently of the others.

        Failures are collected per plugin; the remaining installs always run.
        """

        registered = {plugin.name: plugin for plugin in plugins}
        missing = [name for name, plugin in registered.items() if not plugin.is_installed()]
        if not missing:
            return BulkInstallReport(nothing_to_do=True)

        def install_one(name: str) -> PluginInstallOutcome:
            _, git_url = get_name_and_url(name)
            return self.install(registered[name], git_url)

        report = BulkInstallReport()
        for result in scatter_gather(missing, install_one, jobs=self._settings.jobs):
            if result.error is not None:
                report.failures.append(PluginInstallFailure(result.name, result.error))
            elif result.value is not PluginInstallOutcome.ALREADY_INSTALLED:
                report.installed.append(result.name)
        return report

    def legacy_filenames(self, plugin: Plugin) -> set[str]:
        """Return the plugin's legacy filenames, or an empty set after logging an error."""

        try:
            return set(plugin.legacy_filenames())
        except RtxError as exc:
            warn(f"failed to list legacy filenames for {plugin.name}: {exc}")
            return set()

    def legacy_filename_map(self, plugins: Sequence[Plugin]) -> dict[str, str]:
        """Map each legacy filename to the plugin that parses it.

        Plugins are queried concurrently.  When two plugins claim the same
        filename the lexically smallest plugin name wins.
        """

        by_name = {plugin.name: plugin for plugin in plugins}
        results = scatter_gather(by_name, lambda name: self.legacy_filenames(by_name[name]), jobs=self._settings.jobs)
        mapping: dict[str, str] = {}
        for result in results:
            if result.error is not None:
                warn(f"failed to list legacy filenames for {result.name}: {result.error}")
                continue
            for filename in sorted(result.value or ()):
                owner = mapping.setdefault(filename, result.name)
                if owner != result.name:
                    warn(f"{filename} is claimed by {owner} and {result.name}; using {owner}")
        return mapping


__all__ = [
    "BulkInstallReport",
    "PluginInstallFailure",
    "PluginInstallOutcome",
    "PluginLifecycle",
    "get_name_and_url",
    "get_name_from_url",
]

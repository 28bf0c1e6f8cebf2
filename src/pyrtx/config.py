# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Effective configuration: settings, aliases, plugins, and the merged toolset."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .dirs import RtxDirs
from .errors import PluginNotInstalledError, RtxError
from .logging import info, warn
from .plugins.lifecycle import PluginLifecycle
from .plugins.plugin import Plugin
from .resolver import ResolvedVersion, Resolver
from .runtime_arg import RuntimeArg, RuntimeArgKind
from .settings import AliasMap, MissingRuntimeBehavior, Settings, load_settings
from .toolset.load import load_toolset
from .toolset.tool_version import ToolVersionKind
from .toolset.toolset import PluginResolution, Toolset

Confirm = Callable[[str], bool]


def list_installed_plugins(dirs: RtxDirs) -> list[Plugin]:
    """Return plugins with a clone under the plugins directory, sorted by name."""

    if not dirs.plugins_dir.is_dir():
        return []
    return [
        Plugin(entry.name, dirs)
        for entry in sorted(dirs.plugins_dir.iterdir(), key=lambda item: item.name)
        if entry.is_dir() and not entry.name.startswith(".")
    ]


@dataclass(slots=True)
class Config:
    """Everything a command needs, loaded once and passed explicitly."""

    dirs: RtxDirs
    settings: Settings
    aliases: AliasMap = field(default_factory=dict)
    toolset: Toolset = field(default_factory=Toolset)
    config_files: list[Path] = field(default_factory=list)
    plugins: dict[str, Plugin] = field(default_factory=dict)

    @classmethod
    def load(
        cls,
        *,
        dirs: RtxDirs | None = None,
        env: Mapping[str, str] | None = None,
        settings: Settings | None = None,
        runtime_args: Sequence[RuntimeArg] = (),
    ) -> Config:
        """Load settings, discover config files, and merge the toolset.

        Runtimes given on the command line with a version take precedence over
        every file.

        Args:
            dirs: Directory layout; derived from *env* when omitted.
            env: Environment mapping used for directories and settings overrides.
            settings: Pre-built settings that bypass the settings file.
            runtime_args: Command-line runtimes merged last.

        Returns:
            Config: Loaded configuration.
        """

        layout = dirs or RtxDirs.from_env(env=env)
        aliases: AliasMap = {}
        if settings is None:
            settings, aliases = load_settings(layout.config_file, env=env)
        plugins = {plugin.name: plugin for plugin in list_installed_plugins(layout)}
        toolset, config_files = load_toolset(layout, settings, list(plugins.values()))
        if runtime_args:
            toolset.merge(Toolset.from_runtime_args(runtime_args))
        config = cls(
            dirs=layout,
            settings=settings,
            aliases=aliases,
            toolset=toolset,
            config_files=config_files,
            plugins=plugins,
        )
        for name in toolset:
            config.get_plugin(name)
        return config

    @property
    def resolver(self) -> Resolver:
        return Resolver(self.aliases)

    @property
    def lifecycle(self) -> PluginLifecycle:
        return PluginLifecycle(self.settings)

    def get_plugin(self, name: str) -> Plugin:
        """Return the registered plugin called *name*, registering it on first use."""

        if name not in self.plugins:
            self.plugins[name] = Plugin(name, self.dirs)
        return self.plugins[name]

    def list_installed_plugins(self) -> list[Plugin]:
        return [self.plugins[name] for name in sorted(self.plugins) if self.plugins[name].is_installed()]

    def resolve_toolset(self) -> list[PluginResolution]:
        catalogs = {name: self.get_plugin(name) for name in self.toolset}
        return self.toolset.resolve(catalogs, self.resolver)

    def current_version(self, plugin: str) -> ResolvedVersion | None:
        """Return the active resolution for *plugin*, or ``None`` when it is not configured.

        Raises:
            RtxError: When none of the plugin's configured entries resolve.
        """

        version_list = self.toolset.get(plugin)
        if version_list is None:
            return None
        single = Toolset(version_list.source)
        single.versions[plugin] = version_list
        (resolution,) = single.resolve({plugin: self.get_plugin(plugin)}, self.resolver)
        if resolution.error is not None:
            raise resolution.error
        return resolution.current

    def resolve_runtime_arg(self, runtime: RuntimeArg, *, prefer_installed: bool = False) -> ResolvedVersion | None:
        """Resolve a command-line runtime; unspecified versions use the toolset."""

        if runtime.version.kind is RuntimeArgKind.UNSPECIFIED:
            return self.current_version(runtime.plugin)
        return self.resolver.resolve_runtime_arg(
            self.get_plugin(runtime.plugin),
            runtime.version,
            prefer_installed=prefer_installed,
        )

    def ensure_installed(self, *, confirm: Confirm | None = None) -> list[ResolvedVersion]:
        """Apply the missing-runtime policy to every plugin and version in the toolset.

        Args:
            confirm: Callback asked before installing under the ``prompt`` policy.
                Without one, ``prompt`` behaves like ``warn``.

        Returns:
            list[ResolvedVersion]: Versions installed by this call.
        """

        behavior = self.settings.missing_runtime_behavior
        if behavior is MissingRuntimeBehavior.IGNORE:
            return []
        if behavior is MissingRuntimeBehavior.PROMPT and confirm is None:
            behavior = MissingRuntimeBehavior.WARN

        wanted: list[Plugin] = []
        for name in self.toolset:
            plugin = self.get_plugin(name)
            if plugin.is_installed() or not self._needs_plugin(name):
                continue
            if self._should_install(behavior, f"plugin {name}", confirm):
                wanted.append(plugin)
        if wanted:
            report = self.lifecycle.install_all_missing(wanted)
            for failure in report.failures:
                warn(f"failed to install plugin {failure}")

        installed: list[ResolvedVersion] = []
        for resolution in self.resolve_toolset():
            if resolution.error is not None:
                if not isinstance(resolution.error, PluginNotInstalledError):
                    raise resolution.error
                continue
            for missing in resolution.missing:
                if not self._should_install(behavior, f"{missing}", confirm):
                    continue
                info(f"installing {missing}")
                try:
                    self.get_plugin(missing.plugin).install_version(
                        missing.install_request,
                        keep_download=self.settings.always_keep_download,
                    )
                except RtxError as exc:
                    warn(f"failed to install {missing}: {exc}")
                    continue
                installed.append(missing)
        return installed

    def _needs_plugin(self, name: str) -> bool:
        version_list = self.toolset.get(name)
        unmanaged = (ToolVersionKind.SYSTEM, ToolVersionKind.PATH)
        return version_list is not None and any(v.kind not in unmanaged for v in version_list.versions)

    @staticmethod
    def _should_install(behavior: MissingRuntimeBehavior, subject: str, confirm: Confirm | None) -> bool:
        if behavior is MissingRuntimeBehavior.AUTOINSTALL:
            return True
        if behavior is MissingRuntimeBehavior.PROMPT and confirm is not None:
            return confirm(f"rtx: {subject} is not installed, install it?")
        warn(f"{subject} is not installed")
        return False


__all__ = ["Config", "list_installed_plugins"]

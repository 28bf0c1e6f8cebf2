# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by parsing, resolution, and plugin management.

Every fatal error names the plugin (and the offending version token where one
applies) so that the rendered message is actionable on its own.  Conditions
that are merely informational, such as a plugin that is already installed, are
reported through return values instead of exceptions.
"""

from __future__ import annotations


class RtxError(RuntimeError):
    """Base class for all errors surfaced to the user."""


class SettingsError(RtxError):
    """Raised when a settings value or file is invalid."""


class InvalidRuntimeInputError(RtxError):
    """Raised when several runtimes are given and at least one lacks a version."""

    def __init__(self) -> None:
        super().__init__(
            "invalid input, specify a version for each runtime. "
            "Or just specify one runtime to print the current version"
        )


class InvalidPluginNameError(RtxError):
    """Raised when a plugin name is empty or contains ``@``."""

    def __init__(self, name: str) -> None:
        super().__init__(f"invalid plugin name: {name!r}")
        self.plugin = name


class PluginError(RtxError):
    """Base class for errors tied to a single plugin."""

    def __init__(self, plugin: str, message: str) -> None:
        super().__init__(f"[{plugin}] {message}")
        self.plugin = plugin


class PluginNotInstalledError(PluginError):
    """Raised when an operation needs a plugin whose clone is missing."""

    def __init__(self, plugin: str) -> None:
        super().__init__(plugin, "plugin not installed")


class VersionNotInstalledError(PluginError):
    """Raised when a resolvable version has no installation directory."""

    def __init__(self, plugin: str, version: str) -> None:
        super().__init__(plugin, f"version {version} not installed")
        self.version = version


class VersionNotFoundError(PluginError):
    """Raised when no version, prefix match, or alias satisfies a request."""

    def __init__(self, plugin: str, version: str) -> None:
        super().__init__(plugin, f"no version found matching {version}")
        self.version = version


class InvalidVersionError(PluginError):
    """Raised when a version token cannot be parsed, e.g. ``ref:`` without a ref."""

    def __init__(self, plugin: str, version: str) -> None:
        super().__init__(plugin, f"invalid version: {version!r}")
        self.version = version


class PluginScriptError(PluginError):
    """Raised when a plugin script fails while answering a query."""

    def __init__(self, plugin: str, script: str, detail: str) -> None:
        super().__init__(plugin, f"{script} failed: {detail}")
        self.script = script


class PluginInstallError(PluginError):
    """Raised when cloning or installing through a plugin fails."""


class PluginNotFoundError(RtxError):
    """Raised when a bare plugin name has no shorthand repository."""

    def __init__(self, plugin: str) -> None:
        super().__init__(f"could not find plugin {plugin}")
        self.plugin = plugin


class InvalidPluginUrlError(RtxError):
    """Raised when a plugin name cannot be inferred from a repository URL."""

    def __init__(self, url: str) -> None:
        super().__init__(f"could not infer plugin name from url: {url}")
        self.url = url


__all__ = [
    "InvalidPluginNameError",
    "InvalidPluginUrlError",
    "InvalidRuntimeInputError",
    "InvalidVersionError",
    "PluginError",
    "PluginInstallError",
    "PluginNotFoundError",
    "PluginNotInstalledError",
    "PluginScriptError",
    "RtxError",
    "SettingsError",
    "VersionNotFoundError",
    "VersionNotInstalledError",
]

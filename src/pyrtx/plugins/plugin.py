# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Wrapper around one cloned asdf-compatible plugin repository."""

from __future__ import annotations

import shutil
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from threading import Lock
from typing import Final

from ..dirs import RtxDirs
from ..errors import PluginInstallError, PluginNotInstalledError, PluginScriptError
from ..process_utils import SubprocessExecutionError, run_command
from ..resolver import install_dirname
from ..runtime_arg import validate_plugin_name
from ..toolset.tool_version import ToolVersion, ToolVersionKind
from ..versions import latest_matching, sort_versions

LIST_ALL_SCRIPT: Final[str] = "list-all"
LIST_LEGACY_FILENAMES_SCRIPT: Final[str] = "list-legacy-filenames"
PARSE_LEGACY_FILE_SCRIPT: Final[str] = "parse-legacy-file"
INSTALL_SCRIPT: Final[str] = "install"

CommandRunner = Callable[..., CompletedProcess[str]]


class Plugin:
    """A version-provider plugin: enumerates versions and materialises installs.

    Scripts live under ``<plugins_dir>/<name>/bin`` and follow the asdf contract:
    ``list-all`` prints space separated versions, ``list-legacy-filenames``
    prints space separated filenames, ``parse-legacy-file <path>`` prints the
    version found in a legacy file, and ``install`` installs the version named by
    ``ASDF_INSTALL_VERSION`` into ``ASDF_INSTALL_PATH``.
    """

    def __init__(self, name: str, dirs: RtxDirs, *, runner: CommandRunner | None = None) -> None:
        self.name = validate_plugin_name(name)
        self.plugin_path = dirs.plugins_dir / name
        self.installs_path = dirs.installs_dir / name
        self.downloads_path = dirs.downloads_dir / name
        self._runner = runner or run_command
        self._remote_versions: list[str] | None = None
        self._remote_lock = Lock()

    def __repr__(self) -> str:
        return f"Plugin({self.name!r})"

    def is_installed(self) -> bool:
        return self.plugin_path.is_dir()

    def install(self, git_url: str) -> None:
        """Clone *git_url* into the plugin directory.

        Raises:
            PluginInstallError: When git fails; the partial clone is removed.
        """

        self.plugin_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._runner(["git", "clone", "-q", git_url, str(self.plugin_path)])
        except (OSError, SubprocessExecutionError) as exc:
            shutil.rmtree(self.plugin_path, ignore_errors=True)
            raise PluginInstallError(self.name, f"failed to clone {git_url}: {exc}") from exc
        self._remote_versions = None

    def uninstall(self) -> None:
        if self.plugin_path.exists():
            shutil.rmtree(self.plugin_path)
        self._remote_versions = None

    def repository_url(self) -> str | None:
        """Return the clone's ``origin`` URL, or ``None`` when unknown."""

        if not self.is_installed():
            return None
        try:
            completed = self._runner(
                ["git", "-C", str(self.plugin_path), "config", "--get", "remote.origin.url"],
                check=False,
            )
        except OSError:
            return None
        url = completed.stdout.strip()
        return url or None

    def legacy_filenames(self) -> list[str]:
        """Return filenames the plugin can parse; plugins without the script have none."""

        if not self._has_script(LIST_LEGACY_FILENAMES_SCRIPT):
            return []
        return self._run_script(LIST_LEGACY_FILENAMES_SCRIPT).split()

    def parse_legacy_file(self, path: Path) -> list[str]:
        """Return the version tokens declared by the legacy file at *path*."""

        if self._has_script(PARSE_LEGACY_FILE_SCRIPT):
            output = self._run_script(PARSE_LEGACY_FILE_SCRIPT, str(path))
        else:
            output = path.read_text(encoding="utf-8")
        return output.split()

    def list_remote_versions(self) -> list[str]:
        """Return every version the plugin can install, cached for this instance."""

        with self._remote_lock:
            if self._remote_versions is None:
                self._remote_versions = self._run_script(LIST_ALL_SCRIPT).split()
            return list(self._remote_versions)

    def list_installed_versions(self) -> list[str]:
        if not self.installs_path.is_dir():
            return []
        return sort_versions(entry.name for entry in self.installs_path.iterdir() if entry.is_dir())

    def install_path(self, dirname: str) -> Path:
        return self.installs_path / dirname

    def latest_version(self, prefix: str) -> str | None:
        return latest_matching(self.list_remote_versions(), prefix)

    def install_version(self, version: ToolVersion, *, keep_download: bool = False) -> Path:
        """Install a concrete version or ref through the plugin's ``install`` script.

        The download directory handed to the script is removed afterwards unless
        *keep_download* is set.

        Raises:
            PluginNotInstalledError: When the plugin clone is missing.
            PluginInstallError: When the script fails; the partial install is removed.
        """

        if not self.is_installed():
            raise PluginNotInstalledError(self.name)
        if version.kind not in (ToolVersionKind.VERSION, ToolVersionKind.REF):
            raise PluginInstallError(self.name, f"cannot install {version}")
        target = self.install_path(install_dirname(version))
        download = self.downloads_path / install_dirname(version)
        target.mkdir(parents=True, exist_ok=True)
        env = {
            "ASDF_INSTALL_TYPE": "ref" if version.kind is ToolVersionKind.REF else "version",
            "ASDF_INSTALL_VERSION": version.value,
            "ASDF_INSTALL_PATH": str(target),
            "ASDF_DOWNLOAD_PATH": str(download),
        }
        try:
            self._run_script(INSTALL_SCRIPT, env=env)
        except PluginScriptError as exc:
            shutil.rmtree(target, ignore_errors=True)
            raise PluginInstallError(self.name, f"failed to install {version}: {exc}") from exc
        if not keep_download:
            shutil.rmtree(download, ignore_errors=True)
        return target

    def uninstall_version(self, target: Path) -> None:
        """Remove an install directory belonging to this plugin."""

        if target.parent != self.installs_path:
            raise PluginInstallError(self.name, f"{target} is not an install of this plugin")
        shutil.rmtree(target, ignore_errors=True)

    def _script(self, script: str) -> Path:
        return self.plugin_path / "bin" / script

    def _has_script(self, script: str) -> bool:
        return self._script(script).is_file()

    def _run_script(self, script: str, *args: str, env: Mapping[str, str] | None = None) -> str:
        if not self.is_installed():
            raise PluginNotInstalledError(self.name)
        command: Sequence[str] = [str(self._script(script)), *args]
        try:
            completed = self._runner(command, cwd=self.plugin_path, env=env)
        except SubprocessExecutionError as exc:
            raise PluginScriptError(self.name, script, (exc.stderr or "").strip() or str(exc)) from exc
        except OSError as exc:
            raise PluginScriptError(self.name, script, str(exc)) from exc
        return completed.stdout


__all__ = ["Plugin"]

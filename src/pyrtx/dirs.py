# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem layout for plugins, installs, and configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DEFAULT_TOOL_VERSIONS_FILENAME: Final[str] = ".tool-versions"
DATA_DIR_ENV: Final[str] = "RTX_DATA_DIR"
CONFIG_DIR_ENV: Final[str] = "RTX_CONFIG_DIR"
TOOL_VERSIONS_FILENAME_ENV: Final[str] = "RTX_DEFAULT_TOOL_VERSIONS_FILENAME"
PLUGINS_SUBDIR: Final[str] = "plugins"
INSTALLS_SUBDIR: Final[str] = "installs"
DOWNLOADS_SUBDIR: Final[str] = "downloads"
CONFIG_FILENAME: Final[str] = "config.toml"


@dataclass(frozen=True, slots=True)
class RtxDirs:
    """Directories consulted during discovery, resolution, and installation."""

    cwd: Path
    home: Path
    data_dir: Path
    config_dir: Path
    tool_versions_filename: str = DEFAULT_TOOL_VERSIONS_FILENAME

    @classmethod
    def from_env(
        cls,
        *,
        cwd: Path | None = None,
        home: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> RtxDirs:
        """Build the layout from environment overrides with XDG-style defaults.

        Args:
            cwd: Directory discovery starts from. Defaults to the process cwd.
            home: Home directory holding the global tool-versions file.
            env: Environment mapping. Defaults to :data:`os.environ`.

        Returns:
            RtxDirs: Layout with absolute paths.
        """

        environ = os.environ if env is None else env
        home_dir = (home or Path.home()).resolve()
        data_dir = environ.get(DATA_DIR_ENV) or str(home_dir / ".local" / "share" / "rtx")
        config_dir = environ.get(CONFIG_DIR_ENV) or str(home_dir / ".config" / "rtx")
        return cls(
            cwd=(cwd or Path.cwd()).resolve(),
            home=home_dir,
            data_dir=Path(data_dir).expanduser(),
            config_dir=Path(config_dir).expanduser(),
            tool_versions_filename=environ.get(TOOL_VERSIONS_FILENAME_ENV) or DEFAULT_TOOL_VERSIONS_FILENAME,
        )

    @property
    def plugins_dir(self) -> Path:
        return self.data_dir / PLUGINS_SUBDIR

    @property
    def installs_dir(self) -> Path:
        return self.data_dir / INSTALLS_SUBDIR

    @property
    def downloads_dir(self) -> Path:
        return self.data_dir / DOWNLOADS_SUBDIR

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    @property
    def global_tool_versions(self) -> Path:
        """Return the home-directory tool-versions file (lowest precedence)."""

        return self.home / self.tool_versions_filename


__all__ = ["DEFAULT_TOOL_VERSIONS_FILENAME", "RtxDirs"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ordered fallback candidates requested for one plugin."""

from __future__ import annotations

from dataclasses import dataclass, field

from .tool_source import ToolSource
from .tool_version import ToolVersion


@dataclass(slots=True)
class ToolVersionList:
    """Versions requested for a plugin, in the order they should be tried."""

    source: ToolSource
    versions: list[ToolVersion] = field(default_factory=list)

    def add_version(self, version: ToolVersion) -> None:
        self.versions.append(version)

    def copy(self) -> ToolVersionList:
        return ToolVersionList(source=self.source, versions=list(self.versions))

    def __str__(self) -> str:
        return " ".join(str(version) for version in self.versions)


__all__ = ["ToolVersionList"]

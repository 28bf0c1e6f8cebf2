# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Provenance tags describing where a toolset entry came from."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ToolSourceKind(str, Enum):
    DEFAULT = "default"
    GLOBAL = "global"
    TOOL_VERSIONS = "tool_versions"
    LEGACY_VERSION_FILE = "legacy_version_file"
    ARGUMENT = "argument"


@dataclass(frozen=True, slots=True)
class ToolSource:
    """Origin of a toolset or version list, optionally tied to a file."""

    kind: ToolSourceKind
    path: Path | None = None

    @classmethod
    def default(cls) -> ToolSource:
        return cls(ToolSourceKind.DEFAULT)

    @classmethod
    def argument(cls) -> ToolSource:
        return cls(ToolSourceKind.ARGUMENT)

    @classmethod
    def tool_versions(cls, path: Path) -> ToolSource:
        return cls(ToolSourceKind.TOOL_VERSIONS, path)

    @classmethod
    def legacy_version_file(cls, path: Path) -> ToolSource:
        return cls(ToolSourceKind.LEGACY_VERSION_FILE, path)

    @classmethod
    def global_file(cls, path: Path) -> ToolSource:
        return cls(ToolSourceKind.GLOBAL, path)

    def __str__(self) -> str:
        if self.kind is ToolSourceKind.ARGUMENT:
            return "--runtime"
        if self.path is not None:
            return str(self.path)
        return self.kind.value


__all__ = ["ToolSource", "ToolSourceKind"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Toolset models: requested versions, their provenance, and merged collections."""

from __future__ import annotations

from .tool_source import ToolSource, ToolSourceKind
from .tool_version import ToolVersion, ToolVersionKind
from .tool_version_list import ToolVersionList
from .tool_versions_file import ToolVersionsFile, ToolVersionsParseError
from .toolset import PluginResolution, Toolset

__all__ = [
    "PluginResolution",
    "ToolSource",
    "ToolSourceKind",
    "ToolVersion",
    "ToolVersionKind",
    "ToolVersionList",
    "ToolVersionsFile",
    "ToolVersionsParseError",
    "Toolset",
]

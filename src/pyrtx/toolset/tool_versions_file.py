# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reading and writing ``.tool-versions`` files.

Each non-blank line is ``<plugin> <token> [<token> ...]``; ``#`` starts a
comment.  Several tokens on one line are fallback candidates tried in order.
A plugin repeated on a later line appends to its earlier candidates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..errors import RtxError
from ..runtime_arg import validate_plugin_name
from .tool_source import ToolSource
from .tool_version import ToolVersion
from .toolset import Toolset


class ToolVersionsParseError(RtxError):
    """Raised when a tool-versions line cannot be parsed."""

    def __init__(self, path: Path, line_number: int, detail: str) -> None:
        super().__init__(f"{path}:{line_number}: {detail}")
        self.path = path
        self.line_number = line_number


@dataclass(slots=True)
class ToolVersionsFile:
    """In-memory view of one tool-versions file."""

    path: Path
    plugins: dict[str, list[ToolVersion]] = field(default_factory=dict)

    @classmethod
    def parse(cls, path: Path) -> ToolVersionsFile:
        """Parse *path*; a missing file yields an empty document."""

        document = cls(path)
        if not path.is_file():
            return document
        for line_number, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
            content = line.split("#", 1)[0].strip()
            if not content:
                continue
            plugin, *tokens = content.split()
            try:
                validate_plugin_name(plugin)
                versions = [ToolVersion.parse(token) for token in tokens]
            except (RtxError, ValueError) as exc:
                raise ToolVersionsParseError(path, line_number, str(exc)) from exc
            document.plugins.setdefault(plugin, []).extend(versions)
        return document

    def to_toolset(self, source: ToolSource | None = None) -> Toolset:
        """Return the file's entries as a toolset tagged with *source*."""

        toolset = Toolset(source or ToolSource.tool_versions(self.path))
        for plugin, versions in self.plugins.items():
            for version in versions:
                toolset.add_version(plugin, version)
        return toolset

    def get(self, plugin: str) -> list[ToolVersion]:
        return list(self.plugins.get(plugin, ()))

    def set_versions(self, plugin: str, versions: list[ToolVersion]) -> None:
        self.plugins[validate_plugin_name(plugin)] = list(versions)

    def remove_plugin(self, plugin: str) -> None:
        self.plugins.pop(plugin, None)

    def dump(self) -> str:
        lines = [
            " ".join([plugin, *(str(version) for version in versions)])
            for plugin, versions in self.plugins.items()
            if versions
        ]
        return "".join(f"{line}\n" for line in lines)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.dump(), encoding="utf-8")


__all__ = ["ToolVersionsFile", "ToolVersionsParseError"]

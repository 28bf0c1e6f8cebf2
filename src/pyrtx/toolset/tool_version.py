# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""A single requested version of a tool for one plugin."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from ..errors import InvalidVersionError

PREFIX_MARKER: Final[str] = "prefix:"
REF_MARKER: Final[str] = "ref:"
PATH_MARKER: Final[str] = "path:"
SYSTEM_TOKEN: Final[str] = "system"


class ToolVersionKind(str, Enum):
    """Closed set of request variants a tool-versions token can express."""

    VERSION = "version"
    PREFIX = "prefix"
    REF = "ref"
    PATH = "path"
    SYSTEM = "system"


@dataclass(frozen=True, slots=True)
class ToolVersion:
    """Exact version, version prefix, VCS ref, unmanaged path, or ``system``.

    ``str(tool_version)`` yields the canonical on-disk token and
    :meth:`parse` reads it back, so the two round-trip for every kind.
    """

    kind: ToolVersionKind
    value: str = ""

    def __post_init__(self) -> None:
        if self.kind is ToolVersionKind.SYSTEM and self.value:
            raise ValueError("system tool versions carry no value")
        if self.kind in (ToolVersionKind.VERSION, ToolVersionKind.REF, ToolVersionKind.PATH) and not self.value:
            raise ValueError(f"{self.kind.value} tool versions require a value")

    @classmethod
    def version(cls, value: str) -> ToolVersion:
        return cls(ToolVersionKind.VERSION, value)

    @classmethod
    def prefix(cls, value: str) -> ToolVersion:
        return cls(ToolVersionKind.PREFIX, value)

    @classmethod
    def ref(cls, value: str) -> ToolVersion:
        return cls(ToolVersionKind.REF, value)

    @classmethod
    def path(cls, value: str) -> ToolVersion:
        return cls(ToolVersionKind.PATH, value)

    @classmethod
    def system(cls) -> ToolVersion:
        return cls(ToolVersionKind.SYSTEM)

    @classmethod
    def parse(cls, token: str) -> ToolVersion:
        """Interpret a tool-versions token, honouring the ``prefix:``/``ref:``/``path:`` markers."""

        token = token.strip()
        if not token:
            raise ValueError("empty version token")
        if token == SYSTEM_TOKEN:
            return cls.system()
        if token.startswith(PREFIX_MARKER):
            return cls.prefix(token[len(PREFIX_MARKER) :])
        if token.startswith(REF_MARKER):
            return cls.ref(token[len(REF_MARKER) :])
        if token.startswith(PATH_MARKER):
            return cls.path(token[len(PATH_MARKER) :])
        return cls.version(token)

    @classmethod
    def parse_for(cls, plugin: str, token: str) -> ToolVersion:
        """Parse *token* requested for *plugin*.

        Raises:
            InvalidVersionError: If the token is empty or a marker lacks its value.
        """

        try:
            return cls.parse(token)
        except ValueError as exc:
            raise InvalidVersionError(plugin, token) from exc

    def __str__(self) -> str:
        if self.kind is ToolVersionKind.VERSION:
            return self.value
        if self.kind is ToolVersionKind.PREFIX:
            return f"{PREFIX_MARKER}{self.value}"
        if self.kind is ToolVersionKind.REF:
            return f"{REF_MARKER}{self.value}"
        if self.kind is ToolVersionKind.PATH:
            return f"{PATH_MARKER}{self.value}"
        return SYSTEM_TOKEN


__all__ = ["ToolVersion", "ToolVersionKind"]

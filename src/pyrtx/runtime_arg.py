# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsing of ``plugin[@version]`` runtime arguments supplied on the command line."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Final

from .errors import InvalidPluginNameError

SYSTEM_KEYWORD: Final[str] = "system"
_NUMERIC_VERSION: Final[re.Pattern[str]] = re.compile(r"^\d+(\.\d+)?(\.\d+)?$")


def validate_plugin_name(name: str) -> str:
    """Return *name* unchanged when it is a usable plugin identifier.

    Raises:
        InvalidPluginNameError: If *name* is empty or contains ``@``.
    """

    if not name or "@" in name:
        raise InvalidPluginNameError(name)
    return name


class RuntimeArgKind(str, Enum):
    """Shape of the version part of a runtime argument."""

    UNSPECIFIED = "unspecified"
    NAMED = "named"
    SYSTEM = "system"


@dataclass(frozen=True, slots=True)
class RuntimeArgVersion:
    """Requested version expression: nothing, a named version/prefix/alias, or ``system``."""

    kind: RuntimeArgKind
    value: str | None = None

    @classmethod
    def unspecified(cls) -> RuntimeArgVersion:
        return cls(RuntimeArgKind.UNSPECIFIED)

    @classmethod
    def named(cls, value: str) -> RuntimeArgVersion:
        return cls(RuntimeArgKind.NAMED, value)

    @classmethod
    def system(cls) -> RuntimeArgVersion:
        return cls(RuntimeArgKind.SYSTEM)

    @property
    def is_unspecified(self) -> bool:
        return self.kind is RuntimeArgKind.UNSPECIFIED

    def __str__(self) -> str:
        if self.kind is RuntimeArgKind.SYSTEM:
            return SYSTEM_KEYWORD
        if self.kind is RuntimeArgKind.NAMED:
            return str(self.value)
        return "current"


@dataclass(frozen=True, slots=True)
class RuntimeArg:
    """A parsed ``plugin[@expression]`` token."""

    plugin: str
    version: RuntimeArgVersion

    @classmethod
    def parse(cls, token: str) -> RuntimeArg:
        """Split *token* on the first ``@`` without interpreting the version text.

        Examples:
            ``nodejs`` is unspecified, ``nodejs@system`` is the system sentinel, and
            ``nodejs@20`` / ``nodejs@lts`` / ``nodejs@ref:abc`` are named versions.
        """

        plugin, sep, expression = token.partition("@")
        if not sep:
            return cls(plugin, RuntimeArgVersion.unspecified())
        if expression == SYSTEM_KEYWORD:
            return cls(plugin, RuntimeArgVersion.system())
        return cls(plugin, RuntimeArgVersion.named(expression))

    @classmethod
    def parse_all(cls, tokens: Sequence[str]) -> list[RuntimeArg]:
        return [cls.parse(token) for token in tokens]

    def validated(self) -> RuntimeArg:
        """Return ``self`` after checking the plugin name."""

        validate_plugin_name(self.plugin)
        return self

    def __str__(self) -> str:
        if self.version.is_unspecified:
            return self.plugin
        return f"{self.plugin}@{self.version}"


def double_runtime_condition(runtimes: Sequence[RuntimeArg]) -> list[RuntimeArg]:
    """Reinterpret ``plugin version`` typed as two words as ``plugin@version``.

    Only fires for exactly two arguments, both without ``@``, where the second one
    looks like a one to three part numeric version.  Everything else is returned
    unchanged for the caller to validate.
    """

    result = list(runtimes)
    if len(result) != 2:
        return result
    first, second = result
    if (
        first.version.is_unspecified
        and second.version.is_unspecified
        and _NUMERIC_VERSION.match(second.plugin)
    ):
        return [replace(first, version=RuntimeArgVersion.named(second.plugin))]
    return result


__all__ = [
    "RuntimeArg",
    "RuntimeArgKind",
    "RuntimeArgVersion",
    "SYSTEM_KEYWORD",
    "double_runtime_condition",
    "validate_plugin_name",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Settings model and layered loading from defaults, TOML, and environment."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import SettingsError

ALIAS_KEY: Final[str] = "alias"
ENV_PREFIX: Final[str] = "RTX_"
_TRUE_VALUES: Final[frozenset[str]] = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"false", "0", "no", "off"})

AliasMap = dict[str, dict[str, str]]


class MissingRuntimeBehavior(str, Enum):
    """Policy applied by callers when a resolved version is not installed."""

    PROMPT = "prompt"
    WARN = "warn"
    AUTOINSTALL = "autoinstall"
    IGNORE = "ignore"


class Settings(BaseModel):
    """Process-wide settings threaded explicitly through discovery and install calls."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    legacy_version_file: bool = True
    missing_runtime_behavior: MissingRuntimeBehavior = MissingRuntimeBehavior.WARN
    always_keep_download: bool = False
    verbose: bool = False
    jobs: int = Field(default=4, ge=1)

    def with_overrides(self, **updates: Any) -> Settings:
        """Return a validated copy with ``updates`` applied."""

        try:
            return Settings.model_validate({**self.model_dump(), **updates})
        except ValidationError as exc:
            raise SettingsError(_format_validation_error(exc)) from exc


def parse_bool(value: str) -> bool:
    """Interpret a textual boolean setting.

    Raises:
        SettingsError: If *value* is not a recognised boolean token.
    """

    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise SettingsError(f"{value} must be true or false")


def parse_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise SettingsError(f"{value} must be a number") from exc


_ENV_PARSERS: Final[dict[str, Any]] = {
    "legacy_version_file": parse_bool,
    "missing_runtime_behavior": str,
    "always_keep_download": parse_bool,
    "verbose": parse_bool,
    "jobs": parse_int,
}


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "settings"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def read_config_file(path: Path) -> dict[str, Any]:
    """Return the parsed TOML document at *path*, or an empty mapping when absent."""

    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise SettingsError(f"invalid settings file {path}: {exc}") from exc


def settings_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``RTX_*`` overrides for known settings from *env*."""

    overrides: dict[str, Any] = {}
    for key, parser in _ENV_PARSERS.items():
        raw = env.get(f"{ENV_PREFIX}{key.upper()}")
        if raw is not None and raw != "":
            overrides[key] = parser(raw)
    return overrides


def aliases_from_document(document: Mapping[str, Any]) -> AliasMap:
    """Extract the ``[alias.<plugin>]`` tables from a settings document."""

    raw = document.get(ALIAS_KEY) or {}
    if not isinstance(raw, Mapping):
        raise SettingsError("alias must be a table of plugin tables")
    aliases: AliasMap = {}
    for plugin, table in raw.items():
        if not isinstance(table, Mapping):
            raise SettingsError(f"alias.{plugin} must be a table")
        aliases[str(plugin)] = {str(name): str(version) for name, version in table.items()}
    return aliases


def load_settings(
    config_file: Path,
    *,
    env: Mapping[str, str] | None = None,
) -> tuple[Settings, AliasMap]:
    """Load settings and aliases with precedence defaults < file < environment.

    Args:
        config_file: Path to the user's ``config.toml``.
        env: Environment mapping. Defaults to :data:`os.environ`.

    Returns:
        tuple[Settings, AliasMap]: Validated settings and the alias table.

    Raises:
        SettingsError: If the file or any override is invalid.
    """

    document = dict(read_config_file(config_file))
    aliases = aliases_from_document(document)
    document.pop(ALIAS_KEY, None)
    document.update(settings_from_env(os.environ if env is None else env))
    try:
        settings = Settings.model_validate(document)
    except ValidationError as exc:
        raise SettingsError(_format_validation_error(exc)) from exc
    return settings, aliases


__all__ = [
    "AliasMap",
    "MissingRuntimeBehavior",
    "Settings",
    "aliases_from_document",
    "load_settings",
    "parse_bool",
    "parse_int",
    "read_config_file",
    "settings_from_env",
]

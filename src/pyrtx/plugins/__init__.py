# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Plugin adapters and their install lifecycle."""

from __future__ import annotations

from .lifecycle import (
    BulkInstallReport,
    PluginInstallFailure,
    PluginInstallOutcome,
    PluginLifecycle,
    get_name_and_url,
    get_name_from_url,
)
from .plugin import Plugin
from .shorthand import SHORTHANDS, shorthand_to_repository

__all__ = [
    "BulkInstallReport",
    "Plugin",
    "PluginInstallFailure",
    "PluginInstallOutcome",
    "PluginLifecycle",
    "SHORTHANDS",
    "get_name_and_url",
    "get_name_from_url",
    "shorthand_to_repository",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Polyglot runtime version manager driven by asdf-compatible plugins."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Version-aware ordering and prefix matching for plugin version strings."""

from __future__ import annotations

import re
from collections.abc import Iterable

from packaging.version import InvalidVersion, Version

_CHUNK_PATTERN = re.compile(r"\d+|[A-Za-z]+")

VersionKey = tuple[int, Version | tuple[tuple[int, int, str], ...]]


def version_sort_key(raw: str) -> VersionKey:
    """Return a key ordering *raw* numerically segment by segment.

    PEP 440-compatible strings compare through :class:`packaging.version.Version`
    so ``9.0.0 < 10.0.0``.  Anything else (``jdk-11.0.2``, ``3.2-dev``) falls back
    to a chunked comparison where numeric chunks compare as integers and rank
    above alphabetic ones, and sorts below every valid version.
    """

    try:
        return (1, Version(raw))
    except InvalidVersion:
        chunks = tuple(
            (1, int(chunk), "") if chunk.isdigit() else (0, 0, chunk.lower())
            for chunk in _CHUNK_PATTERN.findall(raw)
        )
        return (0, chunks)


def sort_versions(versions: Iterable[str]) -> list[str]:
    """Return *versions* sorted ascending with :func:`version_sort_key`."""

    return sorted(versions, key=version_sort_key)


def matching_versions(versions: Iterable[str], prefix: str) -> list[str]:
    """Return versions whose text starts with *prefix*; an empty prefix matches all."""

    return [version for version in versions if version.startswith(prefix)]


def latest_matching(versions: Iterable[str], prefix: str) -> str | None:
    """Return the highest version starting with *prefix*, or ``None``."""

    candidates = matching_versions(versions, prefix)
    if not candidates:
        return None
    return max(candidates, key=version_sort_key)


__all__ = ["latest_matching", "matching_versions", "sort_versions", "version_sort_key"]

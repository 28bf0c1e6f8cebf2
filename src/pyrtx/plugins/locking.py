# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exclusive per-plugin locks serialising installs of the same plugin."""

from __future__ import annotations

import fcntl
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path


def lock_path(plugins_dir: Path, name: str) -> Path:
    return plugins_dir / f".{name}.lock"


@contextmanager
def plugin_lock(plugins_dir: Path, name: str) -> Iterator[Path]:
    """Hold an exclusive ``flock`` on the plugin's lock file for the block.

    The lock is advisory and shared by threads and processes alike because each
    acquisition opens its own file description.  Installs of different plugins
    use different lock files and never wait on each other.
    """

    plugins_dir.mkdir(parents=True, exist_ok=True)
    path = lock_path(plugins_dir, name)
    with path.open("a+") as handle:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        try:
            yield path
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


__all__ = ["lock_path", "plugin_lock"]

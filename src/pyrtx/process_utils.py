# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution for git and plugin scripts."""

from __future__ import annotations

import os
import shutil

# Bandit: subprocess usage is intentional; arguments are passed as lists and
# ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"command '{Path(command[0]).name}' exited with status {returncode}. "
            f"stderr: {(stderr or '').strip() or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _resolve_executable(args: Sequence[str]) -> list[str]:
    if not args:
        raise ValueError("subprocess command requires at least one argument")

    head, *rest = args
    if Path(head).is_absolute():
        return [head, *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute *args* capturing text output.

    Args:
        args: Executable and arguments. Relative executables are looked up on ``PATH``.
        cwd: Optional working directory.
        env: Extra environment variables layered over :data:`os.environ`.
        check: Raise :class:`SubprocessExecutionError` on a non-zero exit status.
        timeout: Optional timeout in seconds, enforced by :mod:`subprocess`.

    Returns:
        subprocess.CompletedProcess[str]: The completed process with captured output.
    """

    command = _resolve_executable(args)
    merged_env = os.environ.copy()
    if env:
        merged_env.update(env)
    completed = subprocess.run(  # nosec B603
        command,
        cwd=str(cwd) if cwd is not None else None,
        env=merged_env,
        check=False,
        capture_output=True,
        text=True,
        timeout=timeout,
        stdin=subprocess.DEVNULL,
    )
    if check and completed.returncode != 0:
        raise SubprocessExecutionError(command, completed.returncode, completed.stdout, completed.stderr)
    return completed


__all__ = ["SubprocessExecutionError", "run_command"]

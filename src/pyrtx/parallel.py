# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bounded scatter-gather over independent per-plugin tasks."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Generic, TypeVar

ResultT = TypeVar("ResultT")


@dataclass(frozen=True, slots=True)
class TaskResult(Generic[ResultT]):
    """Outcome of one task: either ``value`` or ``error`` is set."""

    name: str
    value: ResultT | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def scatter_gather(
    names: Iterable[str],
    task: Callable[[str], ResultT],
    *,
    jobs: int,
) -> list[TaskResult[ResultT]]:
    """Run ``task(name)`` for every name on at most *jobs* worker threads.

    A task raising an :class:`Exception` only affects its own entry.  Results
    are returned sorted by name, never in completion order.

    Args:
        names: Distinct task identifiers, typically plugin names.
        task: Callable invoked once per name.
        jobs: Maximum number of concurrent workers.

    Returns:
        list[TaskResult[ResultT]]: One result per name, ordered by name.
    """

    unique = sorted(set(names))
    if not unique:
        return []
    results: list[TaskResult[ResultT]] = []
    with ThreadPoolExecutor(max_workers=max(1, min(jobs, len(unique)))) as executor:
        future_map = {executor.submit(task, name): name for name in unique}
        for future in as_completed(future_map):
            name = future_map[future]
            try:
                results.append(TaskResult(name=name, value=future.result()))
            except Exception as exc:  # noqa: BLE001 - isolated per task and reported by the caller
                results.append(TaskResult(name=name, error=exc))
    results.sort(key=lambda result: result.name)
    return results


__all__ = ["TaskResult", "scatter_gather"]

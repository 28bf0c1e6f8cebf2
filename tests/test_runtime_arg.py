# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for command-line runtime argument parsing."""

from __future__ import annotations

import pytest

from pyrtx.errors import InvalidPluginNameError
from pyrtx.runtime_arg import (
    RuntimeArg,
    RuntimeArgKind,
    RuntimeArgVersion,
    double_runtime_condition,
)


@pytest.mark.parametrize(
    ("token", "plugin", "kind", "value"),
    [
        ("nodejs", "nodejs", RuntimeArgKind.UNSPECIFIED, None),
        ("nodejs@20", "nodejs", RuntimeArgKind.NAMED, "20"),
        ("nodejs@lts", "nodejs", RuntimeArgKind.NAMED, "lts"),
        ("nodejs@system", "nodejs", RuntimeArgKind.SYSTEM, None),
        ("nodejs@ref:abc@def", "nodejs", RuntimeArgKind.NAMED, "ref:abc@def"),
    ],
)
def test_parse_splits_on_first_at(token: str, plugin: str, kind: RuntimeArgKind, value: str | None) -> None:
    parsed = RuntimeArg.parse(token)

    assert parsed.plugin == plugin
    assert parsed.version.kind is kind
    assert parsed.version.value == value


def test_str_renders_user_syntax() -> None:
    assert str(RuntimeArg.parse("nodejs")) == "nodejs"
    assert str(RuntimeArg.parse("nodejs@20.1")) == "nodejs@20.1"
    assert str(RuntimeArg.parse("python@system")) == "python@system"
    assert str(RuntimeArgVersion.unspecified()) == "current"


def test_validated_rejects_empty_plugin() -> None:
    with pytest.raises(InvalidPluginNameError):
        RuntimeArg.parse("@20").validated()


def test_double_runtime_condition_joins_numeric_second_word() -> None:
    result = double_runtime_condition(RuntimeArg.parse_all(["nodejs", "20.1.0"]))

    assert result == [RuntimeArg("nodejs", RuntimeArgVersion.named("20.1.0"))]


@pytest.mark.parametrize(
    "tokens",
    [
        ["nodejs", "python"],
        ["nodejs", "lts"],
        ["nodejs@18", "20"],
        ["nodejs", "1.2.3.4"],
        ["nodejs", "20", "python"],
        ["nodejs"],
    ],
)
def test_double_runtime_condition_leaves_other_shapes_alone(tokens: list[str]) -> None:
    parsed = RuntimeArg.parse_all(tokens)

    assert double_runtime_condition(parsed) == parsed

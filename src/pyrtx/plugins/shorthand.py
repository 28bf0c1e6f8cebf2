# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Static mapping of plugin short names to their canonical repositories."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

SHORTHANDS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "deno": "https://github.com/asdf-community/asdf-deno.git",
        "dummy": "https://github.com/jdxcode/rtx-dummy.git",
        "elixir": "https://github.com/asdf-vm/asdf-elixir.git",
        "erlang": "https://github.com/asdf-vm/asdf-erlang.git",
        "golang": "https://github.com/kennyp/asdf-golang.git",
        "java": "https://github.com/halcyon/asdf-java.git",
        "jq": "https://github.com/lsanwick/asdf-jq.git",
        "kubectl": "https://github.com/asdf-community/asdf-kubectl.git",
        "nodejs": "https://github.com/asdf-vm/asdf-nodejs.git",
        "poetry": "https://github.com/asdf-community/asdf-poetry.git",
        "python": "https://github.com/danhper/asdf-python.git",
        "ruby": "https://github.com/asdf-vm/asdf-ruby.git",
        "rust": "https://github.com/code-lever/asdf-rust.git",
        "shellcheck": "https://github.com/luizm/asdf-shellcheck.git",
        "shfmt": "https://github.com/luizm/asdf-shfmt.git",
        "terraform": "https://github.com/asdf-community/asdf-hashicorp.git",
        "tiny": "https://github.com/jdxcode/rtx-tiny.git",
        "yarn": "https://github.com/twuni/asdf-yarn.git",
        "zig": "https://github.com/cheetah/asdf-zig.git",
    }
)


def shorthand_to_repository(name: str) -> str | None:
    """Return the repository URL registered for *name*, if any."""

    return SHORTHANDS.get(name)


__all__ = ["SHORTHANDS", "shorthand_to_repository"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import stat
from collections.abc import Callable, Sequence
from pathlib import Path
from subprocess import CompletedProcess

import pytest

from pyrtx.dirs import RtxDirs
from pyrtx.process_utils import SubprocessExecutionError


@pytest.fixture
def dirs(tmp_path: Path) -> RtxDirs:
    """Return an isolated layout with ``cwd`` two levels below ``home``."""

    home = tmp_path / "home"
    cwd = home / "work" / "project"
    cwd.mkdir(parents=True)
    return RtxDirs(
        cwd=cwd.resolve(),
        home=home.resolve(),
        data_dir=tmp_path / "data",
        config_dir=tmp_path / "config",
    )


def _write_script(path: Path, body: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


MakePlugin = Callable[..., Path]


@pytest.fixture
def make_plugin(dirs: RtxDirs) -> MakePlugin:
    """Create an asdf-style plugin made of shell scripts under the plugins dir."""

    def factory(
        name: str,
        *,
        versions: Sequence[str] = ("1.0.0",),
        legacy_filenames: Sequence[str] | None = None,
        legacy_script: str | None = None,
        parse_legacy: str | None = None,
        install_script: str | None = None,
    ) -> Path:
        root = dirs.plugins_dir / name
        bin_dir = root / "bin"
        _write_script(bin_dir / "list-all", f"echo '{' '.join(versions)}'")
        if legacy_script is not None:
            _write_script(bin_dir / "list-legacy-filenames", legacy_script)
        elif legacy_filenames is not None:
            _write_script(bin_dir / "list-legacy-filenames", f"echo '{' '.join(legacy_filenames)}'")
        if parse_legacy is not None:
            _write_script(bin_dir / "parse-legacy-file", parse_legacy)
        _write_script(
            bin_dir / "install",
            install_script
            or 'mkdir -p "$ASDF_INSTALL_PATH/bin"\n'
            'echo "$ASDF_INSTALL_TYPE $ASDF_INSTALL_VERSION" > "$ASDF_INSTALL_PATH/VERSION"',
        )
        return root

    return factory


@pytest.fixture
def install_version(dirs: RtxDirs) -> Callable[[str, str], Path]:
    """Create an installed version directory without running any script."""

    def factory(plugin: str, dirname: str) -> Path:
        target = dirs.installs_dir / plugin / dirname
        target.mkdir(parents=True)
        return target

    return factory


class FakeGit:
    """Stand-in for ``git clone`` that creates the target directory.

    URLs listed in ``failing`` raise like a failed clone would.
    """

    def __init__(self, failing: Sequence[str] = ()) -> None:
        self.failing = set(failing)
        self.clones: list[str] = []

    def __call__(self, args: Sequence[str], **kwargs: object) -> CompletedProcess[str]:
        if list(args[:2]) == ["git", "clone"]:
            url, target = args[-2], args[-1]
            self.clones.append(url)
            if url in self.failing:
                raise SubprocessExecutionError(list(args), 128, "", f"fatal: repository '{url}' not found")
            Path(target, "bin").mkdir(parents=True)
            return CompletedProcess(list(args), 0, "", "")
        return CompletedProcess(list(args), 0, "https://example.invalid/origin.git\n", "")


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()

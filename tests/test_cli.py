# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests for the plugin and runtime commands."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from pyrtx.cli.app import app
from pyrtx.dirs import RtxDirs
from pyrtx.plugins import SHORTHANDS
from pyrtx.process_utils import run_command


@pytest.fixture
def cli_env(dirs: RtxDirs, monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    monkeypatch.chdir(dirs.cwd)
    return {
        "HOME": str(dirs.home),
        "RTX_DATA_DIR": str(dirs.data_dir),
        "RTX_CONFIG_DIR": str(dirs.config_dir),
        "RTX_MISSING_RUNTIME_BEHAVIOR": "warn",
    }


@pytest.fixture
def git(fake_git, monkeypatch: pytest.MonkeyPatch):
    def runner(args, **kwargs):
        if args[0] == "git":
            return fake_git(args, **kwargs)
        return run_command(args, **kwargs)

    monkeypatch.setattr("pyrtx.plugins.plugin.run_command", runner)
    return fake_git


def _invoke(env: dict[str, str], *args: str):
    return CliRunner().invoke(app, ["--no-emoji", *args], env=env)


def test_plugins_install_by_shorthand(cli_env, git) -> None:
    first = _invoke(cli_env, "plugins", "install", "nodejs")
    second = _invoke(cli_env, "plugins", "install", "nodejs")

    assert first.exit_code == 0, first.output
    assert "plugin nodejs installed" in first.output
    assert second.exit_code == 0
    assert "plugin nodejs already installed" in second.output
    assert git.clones == [SHORTHANDS["nodejs"]]
    assert "✅" not in first.output


def test_plugins_install_force_and_url(cli_env, git) -> None:
    url = "https://github.com/asdf-vm/asdf-ruby.git"

    _invoke(cli_env, "plugins", "install", url)
    result = _invoke(cli_env, "plugins", "install", "--force", url)

    assert result.exit_code == 0, result.output
    assert "plugin ruby reinstalled" in result.output
    assert git.clones == [url, url]


def test_plugins_install_unknown_shorthand(cli_env, git) -> None:
    result = _invoke(cli_env, "plugins", "install", "not-a-plugin")

    assert result.exit_code == 1
    assert "could not find plugin not-a-plugin" in result.output


def test_plugins_install_all_reports_each_failure(cli_env, git, dirs: RtxDirs) -> None:
    git.failing.add(SHORTHANDS["ruby"])
    (dirs.cwd / ".tool-versions").write_text("tiny 1.0.0\nruby 3.2.0\nnodejs 20\n", encoding="utf-8")

    result = _invoke(cli_env, "plugins", "install", "--all")

    assert result.exit_code == 1
    assert "plugin nodejs installed" in result.output
    assert "plugin tiny installed" in result.output
    assert "failed to install plugin ruby" in result.output
    assert (dirs.plugins_dir / "tiny").is_dir()


def test_plugins_install_all_with_nothing_missing(cli_env, git, make_plugin, dirs: RtxDirs) -> None:
    make_plugin("tiny")
    (dirs.cwd / ".tool-versions").write_text("tiny 1.0.0\n", encoding="utf-8")

    result = _invoke(cli_env, "plugins", "install", "--all")

    assert result.exit_code == 0
    assert "all plugins already installed" in result.output
    assert git.clones == []


def test_plugins_ls_and_uninstall(cli_env, git, make_plugin) -> None:
    make_plugin("tiny")
    make_plugin("dummy")

    listed = _invoke(cli_env, "plugins", "ls")
    with_urls = _invoke(cli_env, "plugins", "ls", "--urls")
    removed = _invoke(cli_env, "plugins", "uninstall", "tiny")
    after = _invoke(cli_env, "plugins", "ls")

    assert listed.output.splitlines() == ["dummy", "tiny"]
    assert "https://example.invalid/origin.git" in with_urls.output
    assert removed.exit_code == 0
    assert after.output.splitlines() == ["dummy"]


def test_latest(cli_env, make_plugin) -> None:
    make_plugin("tiny", versions=["1.0.0", "1.10.0", "1.9.0", "2.0.0"])

    assert _invoke(cli_env, "latest", "tiny").output.strip() == "2.0.0"
    assert _invoke(cli_env, "latest", "tiny@1").output.strip() == "1.10.0"
    assert _invoke(cli_env, "latest", "tiny", "1").output.strip() == "1.10.0"

    system = _invoke(cli_env, "latest", "tiny@system")
    assert system.exit_code == 1
    assert "invalid version: system" in system.output

    missing = _invoke(cli_env, "latest", "tiny@7")
    assert missing.exit_code == 1


def test_where(cli_env, make_plugin, install_version, dirs: RtxDirs) -> None:
    make_plugin("tiny", versions=["1.0.0", "2.0.0"])
    target = install_version("tiny", "1.0.0")

    found = _invoke(cli_env, "where", "tiny@1")
    missing = _invoke(cli_env, "where", "tiny", "2.0.0")
    unknown = _invoke(cli_env, "where", "tiny@1111")

    assert found.exit_code == 0, found.output
    assert found.output.strip() == str(target)
    assert missing.exit_code == 1
    assert "[tiny] version 2.0.0 not installed" in missing.output
    assert unknown.exit_code == 1
    assert "[tiny] version 1111 not installed" in unknown.output


@pytest.mark.parametrize(
    ("args", "token"),
    [
        (("where", "tiny@"), "''"),
        (("where", "tiny@ref:"), "'ref:'"),
        (("where", "tiny@path:"), "'path:'"),
        (("install", "tiny@ref:"), "'ref:'"),
    ],
)
def test_malformed_version_is_reported(cli_env, make_plugin, args: tuple[str, ...], token: str) -> None:
    make_plugin("tiny", versions=["1.0.0"])

    result = _invoke(cli_env, *args)

    assert result.exit_code == 1
    assert not isinstance(result.exception, ValueError)
    assert f"[tiny] invalid version: {token}" in result.output


def test_where_uses_the_toolset(cli_env, make_plugin, install_version, dirs: RtxDirs) -> None:
    make_plugin("tiny", versions=["1.0.0"])
    target = install_version("tiny", "1.0.0")
    (dirs.cwd / ".tool-versions").write_text("tiny 1.0.0\n", encoding="utf-8")

    result = _invoke(cli_env, "where", "tiny")

    assert result.output.strip() == str(target)


def test_global_pins_and_displays(cli_env, make_plugin, dirs: RtxDirs) -> None:
    make_plugin("tiny", versions=["1.0.0", "2.0.0", "2.1.0"])
    global_file = dirs.home / ".tool-versions"

    pinned = _invoke(cli_env, "global", "tiny", "2")
    assert pinned.exit_code == 0, pinned.output
    assert pinned.output == "tiny 2.1.0\n"
    assert global_file.read_text(encoding="utf-8") == "tiny 2.1.0\n"

    shown = _invoke(cli_env, "global", "tiny")
    assert shown.output.strip() == "2.1.0"

    fuzzy = _invoke(cli_env, "global", "--fuzzy", "tiny@2", "python@system")
    assert fuzzy.exit_code == 0
    assert global_file.read_text(encoding="utf-8") == "tiny 2\npython system\n"

    removed = _invoke(cli_env, "global", "--remove", "python")
    assert removed.output == "tiny 2\n"


def test_global_errors(cli_env, make_plugin) -> None:
    make_plugin("tiny")

    unset = _invoke(cli_env, "global", "python")
    ambiguous = _invoke(cli_env, "global", "tiny", "dummy")

    assert unset.exit_code == 1
    assert "no version set for python in ~/.tool-versions" in unset.output
    assert ambiguous.exit_code == 1
    assert "invalid input, specify a version for each runtime" in ambiguous.output


def test_current_lists_toolset(cli_env, make_plugin, install_version, dirs: RtxDirs) -> None:
    make_plugin("tiny", versions=["1.0.0", "2.0.0"])
    install_version("tiny", "1.0.0")
    (dirs.cwd / ".tool-versions").write_text("tiny prefix:1\npython system\n", encoding="utf-8")

    everything = _invoke(cli_env, "current")
    single = _invoke(cli_env, "current", "tiny")

    assert everything.output.splitlines() == ["tiny 1.0.0", "python system"]
    assert single.output.strip() == "1.0.0"


def test_install_runtime(cli_env, make_plugin, dirs: RtxDirs) -> None:
    make_plugin("tiny", versions=["1.0.0", "2.0.0"])

    first = _invoke(cli_env, "install", "tiny@2")
    again = _invoke(cli_env, "install", "tiny@2.0.0")

    assert first.exit_code == 0, first.output
    assert "tiny@2.0.0 installed" in first.output
    assert (dirs.installs_dir / "tiny" / "2.0.0" / "VERSION").is_file()
    assert "already installed" in again.output


def test_install_from_toolset(cli_env, make_plugin, dirs: RtxDirs) -> None:
    make_plugin("tiny", versions=["1.0.0"])
    (dirs.cwd / ".tool-versions").write_text("tiny 1.0.0\n", encoding="utf-8")

    first = _invoke(cli_env, "install")
    second = _invoke(cli_env, "install")

    assert "tiny@1.0.0 installed" in first.output
    assert "all runtimes already installed" in second.output

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for plugin name inference, installs, and bulk installs."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from pyrtx.dirs import RtxDirs
from pyrtx.errors import InvalidPluginUrlError, PluginInstallError, PluginNotFoundError
from pyrtx.parallel import scatter_gather
from pyrtx.plugins import (
    SHORTHANDS,
    Plugin,
    PluginInstallOutcome,
    PluginLifecycle,
    get_name_and_url,
    get_name_from_url,
)
from pyrtx.plugins.locking import lock_path, plugin_lock
from pyrtx.settings import Settings


@pytest.mark.parametrize(
    ("url", "name"),
    [
        ("https://github.com/asdf-vm/asdf-nodejs.git", "nodejs"),
        ("https://github.com/jdxcode/rtx-tiny", "rtx-tiny"),
        ("https://github.com/asdf-vm/asdf-ruby/", "ruby"),
        ("git@github.com:asdf-vm/asdf-python.git", "python"),
    ],
)
def test_name_inferred_from_url(url: str, name: str) -> None:
    assert get_name_from_url(url) == name


@pytest.mark.parametrize("url", ["ruby:", "https://github.com/", "https://github.com/asdf-"])
def test_uninferable_url(url: str) -> None:
    with pytest.raises(InvalidPluginUrlError, match="could not infer plugin name from url"):
        get_name_from_url(url)


def test_name_and_url_forms() -> None:
    assert get_name_and_url("nodejs") == ("nodejs", SHORTHANDS["nodejs"])
    assert get_name_and_url("https://github.com/asdf-vm/asdf-ruby.git") == (
        "ruby",
        "https://github.com/asdf-vm/asdf-ruby.git",
    )
    assert get_name_and_url("node", "https://example.invalid/node") == ("node", "https://example.invalid/node")
    with pytest.raises(PluginNotFoundError, match="could not find plugin not-a-plugin"):
        get_name_and_url("not-a-plugin")


def test_install_is_idempotent_unless_forced(dirs: RtxDirs, fake_git) -> None:
    lifecycle = PluginLifecycle(Settings())
    plugin = Plugin("tiny", dirs, runner=fake_git)
    url = SHORTHANDS["tiny"]

    assert lifecycle.install(plugin, url) is PluginInstallOutcome.INSTALLED
    assert lifecycle.install(plugin, url) is PluginInstallOutcome.ALREADY_INSTALLED
    assert lifecycle.install(plugin, url, force=True) is PluginInstallOutcome.REINSTALLED
    assert fake_git.clones == [url, url]


def test_failed_clone_propagates(dirs: RtxDirs, fake_git) -> None:
    fake_git.failing.add("https://example.invalid/broken")

    with pytest.raises(PluginInstallError):
        PluginLifecycle(Settings()).install(Plugin("broken", dirs, runner=fake_git), "https://example.invalid/broken")


def test_install_all_missing_isolates_failures(dirs: RtxDirs, fake_git) -> None:
    fake_git.failing.add(SHORTHANDS["ruby"])
    plugins = [Plugin(name, dirs, runner=fake_git) for name in ("ruby", "nodejs", "python", "not-a-plugin")]

    report = PluginLifecycle(Settings(jobs=2)).install_all_missing(plugins)

    assert report.installed == ["nodejs", "python"]
    assert [failure.plugin for failure in report.failures] == ["not-a-plugin", "ruby"]
    assert isinstance(report.failures[0].error, PluginNotFoundError)
    assert isinstance(report.failures[1].error, PluginInstallError)
    assert not report.ok
    assert not report.nothing_to_do
    assert (dirs.plugins_dir / "nodejs").is_dir()
    assert not (dirs.plugins_dir / "ruby").exists()


def test_install_all_missing_with_nothing_to_do(dirs: RtxDirs, fake_git) -> None:
    plugin = Plugin("tiny", dirs, runner=fake_git)
    plugin.install(SHORTHANDS["tiny"])

    report = PluginLifecycle(Settings()).install_all_missing([plugin])

    assert report.nothing_to_do
    assert report.ok
    assert report.installed == []
    assert PluginLifecycle(Settings()).install_all_missing([]).nothing_to_do


def test_install_all_missing_skips_plugin_installed_by_another_caller(
    dirs: RtxDirs,
    fake_git,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    plugin = Plugin("tiny", dirs, runner=fake_git)
    plugin.install(SHORTHANDS["tiny"])
    checks = iter([False])
    monkeypatch.setattr(plugin, "is_installed", lambda: next(checks, True))

    report = PluginLifecycle(Settings()).install_all_missing([plugin])

    assert report.installed == []
    assert report.ok
    assert not report.nothing_to_do
    assert fake_git.clones == [SHORTHANDS["tiny"]]


def test_concurrent_installs_of_one_plugin_clone_once(dirs: RtxDirs, fake_git) -> None:
    lifecycle = PluginLifecycle(Settings(jobs=4))
    url = SHORTHANDS["tiny"]

    results = scatter_gather(
        [f"worker-{index}" for index in range(4)],
        lambda _: lifecycle.install(Plugin("tiny", dirs, runner=fake_git), url),
        jobs=4,
    )

    outcomes = sorted(result.value for result in results if result.value is not None)
    assert all(result.ok for result in results)
    assert outcomes.count(PluginInstallOutcome.INSTALLED) == 1
    assert fake_git.clones == [url]


def test_plugin_lock_is_exclusive(tmp_path: Path) -> None:
    entered = threading.Event()
    released = threading.Event()
    order: list[str] = []

    def holder() -> None:
        with plugin_lock(tmp_path, "tiny"):
            order.append("first")
            entered.set()
            released.wait(timeout=5)

    thread = threading.Thread(target=holder)
    thread.start()
    entered.wait(timeout=5)
    released.set()
    with plugin_lock(tmp_path, "tiny"):
        order.append("second")
    thread.join(timeout=5)

    assert order == ["first", "second"]
    assert lock_path(tmp_path, "tiny").exists()


def test_legacy_filenames_swallow_errors(dirs: RtxDirs, make_plugin, capsys: pytest.CaptureFixture[str]) -> None:
    make_plugin("bad", legacy_script="exit 1")

    assert PluginLifecycle(Settings()).legacy_filenames(Plugin("bad", dirs)) == set()
    assert "failed to list legacy filenames for bad" in capsys.readouterr().err

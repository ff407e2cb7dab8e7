# tests/test_init_script.py
from __future__ import annotations

from pathlib import Path

from relocheck.runner import render_init_script
from relocheck.scenario import prepare


def test_init_script_pins_plugin_and_cache(tmp_path: Path) -> None:
    cache = tmp_path / "cache"

    script = render_init_script(cache, "1.3.30")

    assert "classpath ('org.jetbrains.kotlin:kotlin-gradle-plugin:1.3.30') { force = true }" in script
    assert f'directory = "{cache.resolve().as_uri()}"' in script
    assert "local(DirectoryBuildCache)" in script
    assert "gradlePluginPortal()" in script
    assert "buildScan" not in script
    assert "$" not in script


def test_init_script_with_scan_url(tmp_path: Path) -> None:
    script = render_init_script(tmp_path, "1.3.30", "https://scans.example.com")

    assert 'server = "https://scans.example.com"' in script
    assert "com.gradle.scan.plugin.BuildScanPlugin" in script


def test_prepare_writes_script_and_returns_default_args(tmp_path: Path) -> None:
    init = tmp_path / "init.gradle"

    args = prepare(init, tmp_path / "cache", "1.3.30")

    assert init.read_text(encoding="utf-8") == render_init_script(tmp_path / "cache", "1.3.30")
    assert args == [
        "--build-cache",
        "--scan",
        "--init-script",
        str(init.resolve()),
        "--stacktrace",
    ]


def test_prepare_adds_mirror_options(tmp_path: Path) -> None:
    mirror_script = tmp_path / "mirror.gradle"

    args = prepare(
        tmp_path / "init.gradle",
        tmp_path / "cache",
        "1.3.30",
        plugin_mirror_url="https://mirror.example.com",
        mirror_init_script=mirror_script,
    )

    assert args[-3:] == [
        "--init-script",
        str(mirror_script),
        "-Dorg.gradle.internal.plugins.portal.url.override=https://mirror.example.com",
    ]

from __future__ import annotations

import json
import os
import stat
import sys
from pathlib import Path

import pytest

# Stand-in for `gradle`: prints plain-console task lines described by
# `fake-gradle.json` in the project dir and keeps a tiny build cache in the
# directory named by the init script.
FAKE_GRADLE = r'''
import json
import os
import re
import sys
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

args = sys.argv[1:]
cwd = Path.cwd()

log = os.environ.get("FAKE_GRADLE_LOG")
if log:
    with open(log, "a", encoding="utf-8") as f:
        f.write(cwd.name + " " + " ".join(args) + "\n")

plan = json.loads((cwd / "fake-gradle.json").read_text(encoding="utf-8"))
(cwd / ".gradle").mkdir(exist_ok=True)
(cwd / ".gradle" / "state.bin").write_text("state", encoding="utf-8")

if "clean" in args:
    print("> Task :clean")
    code = plan.get("clean_exit", 0)
else:
    cache_dir = None
    if "--build-cache" in args and "--no-build-cache" not in args:
        for i, arg in enumerate(args):
            if arg == "--init-script":
                text = Path(args[i + 1]).read_text(encoding="utf-8")
                found = re.search(r'directory = "(file:[^"]+)"', text)
                if found:
                    cache_dir = Path(url2pathname(urlparse(found.group(1)).path))

    for path, label in plan["tasks"].items():
        if label == "cacheable":
            entry = None if cache_dir is None else cache_dir / path.replace(":", "_")
            if entry is not None and entry.exists():
                label = "FROM-CACHE"
            else:
                label = ""
                if entry is not None:
                    entry.write_text("out", encoding="utf-8")
        print(f"> Task {path} {label}".rstrip())
    code = plan.get("exit", 0)

if code:
    print("FAILURE: Build failed with an exception.", file=sys.stderr)
sys.exit(code)
'''


@pytest.fixture
def fake_gradle(tmp_path: Path) -> Path:
    """A Gradle installation whose bin/gradle runs FAKE_GRADLE."""
    if os.name == "nt":
        pytest.skip("fake gradle is a POSIX shell script")

    installation = tmp_path / "gradle-home"
    bin_dir = installation / "bin"
    bin_dir.mkdir(parents=True)

    script = installation / "fake_gradle.py"
    script.write_text(FAKE_GRADLE, encoding="utf-8")

    gradle = bin_dir / "gradle"
    gradle.write_text(
        f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n', encoding="utf-8"
    )
    gradle.chmod(gradle.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return installation


@pytest.fixture
def gradle_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    log = tmp_path / "gradle.log"
    monkeypatch.setenv("FAKE_GRADLE_LOG", str(log))
    return log


def make_checkout(
    path: Path, tasks: dict[str, str], *, exit: int = 0, clean_exit: int = 0
) -> Path:
    """
    tasks: task path -> console label, "" for SUCCESS or "cacheable" for a
    task that is stored in and later loaded from the build cache.
    """
    path.mkdir(parents=True, exist_ok=True)
    (path / "fake-gradle.json").write_text(
        json.dumps({"tasks": tasks, "exit": exit, "clean_exit": clean_exit}),
        encoding="utf-8",
    )
    return path

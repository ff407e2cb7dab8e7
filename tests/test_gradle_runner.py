# tests/test_gradle_runner.py
from __future__ import annotations

import os
from pathlib import Path

import pytest

from conftest import make_checkout
from relocheck.outcome import TaskOutcome, TaskResult
from relocheck.runner import BuildError, BuildFailedError, GradleNotFoundError, GradleRunner


def test_run_collects_task_outcomes(tmp_path: Path, fake_gradle: Path) -> None:
    project = make_checkout(
        tmp_path / "project",
        {":a:compileJava": "NO-SOURCE", ":a:jar": "", ":a:assemble": "UP-TO-DATE"},
    )
    runner = GradleRunner(project, installation=fake_gradle, forward_output=False)

    result = runner.build(["assemble"])

    assert result.success
    assert result.args == ("assemble",)
    assert result.tasks == (
        TaskResult(":a:compileJava", TaskOutcome.NO_SOURCE),
        TaskResult(":a:jar", TaskOutcome.SUCCESS),
        TaskResult(":a:assemble", TaskOutcome.UP_TO_DATE),
    )
    assert result.task(":a:jar") == TaskResult(":a:jar", TaskOutcome.SUCCESS)
    assert result.task(":nope") is None


def test_plain_console_is_requested(tmp_path: Path, fake_gradle: Path, gradle_log: Path) -> None:
    project = make_checkout(tmp_path / "project", {":a": ""})

    GradleRunner(project, installation=fake_gradle, forward_output=False).run(["assemble"])

    assert gradle_log.read_text(encoding="utf-8").splitlines() == [
        "project assemble --console=plain"
    ]


def test_env_is_passed(tmp_path: Path, fake_gradle: Path) -> None:
    log = tmp_path / "from-env.log"
    project = make_checkout(tmp_path / "project", {":a": ""})

    GradleRunner(
        project, installation=fake_gradle, env={"FAKE_GRADLE_LOG": str(log)}, forward_output=False
    ).run(["assemble"])

    assert log.exists()


def test_build_raises_on_failure(tmp_path: Path, fake_gradle: Path) -> None:
    project = make_checkout(tmp_path / "project", {":a": "FAILED"}, exit=1)
    runner = GradleRunner(project, installation=fake_gradle, forward_output=False)

    assert runner.run(["assemble"]).returncode == 1

    with pytest.raises(BuildFailedError) as excinfo:
        runner.build(["assemble"])

    assert excinfo.value.result.task(":a").outcome is TaskOutcome.FAILED
    assert "FAILURE: Build failed" in str(excinfo.value)


def test_forward_output_echoes_gradle(
    tmp_path: Path, fake_gradle: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project = make_checkout(tmp_path / "project", {":a": "FROM-CACHE"})

    GradleRunner(project, installation=fake_gradle).run(["assemble"])

    assert "> Task :a FROM-CACHE" in capsys.readouterr().out


def test_installation_without_gradle_raises(tmp_path: Path) -> None:
    runner = GradleRunner(tmp_path, installation=tmp_path / "empty")

    with pytest.raises(GradleNotFoundError):
        runner.executable()


@pytest.mark.skipif(os.name == "nt", reason="POSIX wrapper name")
def test_wrapper_is_preferred_over_path(tmp_path: Path) -> None:
    wrapper = tmp_path / "gradlew"
    wrapper.write_text("#!/bin/sh\n", encoding="utf-8")

    assert GradleRunner(tmp_path).executable() == str(wrapper)


def test_no_gradle_anywhere_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PATH", str(tmp_path / "empty-bin"))

    with pytest.raises(GradleNotFoundError):
        GradleRunner(tmp_path).executable()


def test_stderr_is_forwarded_with_stdout(
    tmp_path: Path, fake_gradle: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    project = make_checkout(tmp_path / "project", {":a": "FAILED"}, exit=1)

    result = GradleRunner(project, installation=fake_gradle).run(["assemble"])
    out = capsys.readouterr().out

    assert "> Task :a FAILED" in out
    assert "FAILURE: Build failed with an exception." in out
    assert "FAILURE: Build failed with an exception." in result.output


def test_unknown_outcome_label_raises_build_error(tmp_path: Path, fake_gradle: Path) -> None:
    project = make_checkout(tmp_path / "project", {":a:jar": "EXECUTED"})
    runner = GradleRunner(project, installation=fake_gradle, forward_output=False)

    with pytest.raises(BuildError, match="EXECUTED"):
        runner.run(["assemble"])

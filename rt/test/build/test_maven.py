"""Tests for rt.build.maven module."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

from rt.build.command_line import CLEAN, INSTALL, CommandLine, arg
from rt.build.errors import InvocationFailed, PreconditionViolation
from rt.build.maven import MavenRuntime
from rt.core.config import MavenConfig
from rt.core.result import Err, Ok, Result
from rt.core.workspace import Workspace
from rt.output.console import MockConsole, Style
from rt.platform.process import ProcessError
from rt.test._fakes import COMMONS

COMMAND = CommandLine.of(CLEAN, INSTALL, arg("gpg.passphrase").with_masked_value("pw"))


class FakeRun:
    def __init__(self, result: Result[str, ProcessError]) -> None:
        self.result = result
        self.calls: list[dict[str, Any]] = []

    def __call__(self, cmd: list[str], **kwargs: Any) -> Result[str, ProcessError]:
        self.calls.append({"cmd": cmd, **kwargs})
        return self.result


def _runtime(tmp_path: Path, console: MockConsole | None = None, **config: Any) -> MavenRuntime:
    return MavenRuntime(
        workspace=Workspace(root=tmp_path),
        config=MavenConfig(**config),
        console=console or MockConsole(),
    )


def _failure(returncode: int) -> Err[ProcessError]:
    return Err(
        ProcessError(
            command=("mvn",),
            returncode=returncode,
            stdout="[INFO] Scanning\n[ERROR] BUILD FAILURE",
            stderr="",
        )
    )


class TestExecute:
    def test_runs_in_batch_mode_in_project_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeRun(Ok("[INFO] BUILD SUCCESS\n"))
        monkeypatch.setattr("rt.build.maven.run_process", fake)
        console = MockConsole()

        result = _runtime(tmp_path, console, executable="./mvnw", timeout_seconds=60.0).execute(
            COMMONS, COMMAND
        )

        assert isinstance(result, Ok)
        assert result.value.succeeded
        assert result.value.lines == ("[INFO] BUILD SUCCESS",)
        call = fake.calls[0]
        assert call["cmd"] == ["./mvnw", "-B", "clean", "install", "-Dgpg.passphrase=pw"]
        assert call["cwd"] == tmp_path / "commons"
        assert call["timeout"] == 60.0
        assert call["merge_stderr"] is True
        assert call["env"] is None

    def test_echoes_masked_command(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("rt.build.maven.run_process", FakeRun(Ok("")))
        console = MockConsole()

        _runtime(tmp_path, console).execute(COMMONS, COMMAND)

        assert console.outputs[0].style == Style.DIM
        assert console.messages[0].startswith("mvn -B clean install -Dgpg.passphrase=")
        assert "pw" not in console.messages[0]

    def test_failure(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("rt.build.maven.run_process", FakeRun(_failure(1)))

        result = _runtime(tmp_path).execute(COMMONS, COMMAND)

        assert isinstance(result, Err)
        assert isinstance(result.error, InvocationFailed)
        assert result.error.project == "Commons"
        assert result.error.returncode == 1
        assert result.error.lines[-1] == "[ERROR] BUILD FAILURE"
        assert "pw" not in " ".join(result.error.command)

    def test_tolerated_failure(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("rt.build.maven.run_process", FakeRun(_failure(1)))

        result = _runtime(tmp_path).execute(COMMONS, COMMAND, tolerate_failure=True)

        assert isinstance(result, Ok)
        assert result.value.exit_status == 1
        assert not result.value.succeeded

    def test_process_that_did_not_run_is_never_tolerated(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("rt.build.maven.run_process", FakeRun(_failure(-1)))

        result = _runtime(tmp_path).execute(COMMONS, COMMAND, tolerate_failure=True)

        assert isinstance(result, Err)


class TestJavaVersion:
    def test_unknown_version(self, tmp_path: Path) -> None:
        result = _runtime(tmp_path, java_homes={"17": "/jdk/17"}).with_java_version("21")

        assert isinstance(result, Err)
        assert isinstance(result.error, PreconditionViolation)
        assert result.error.hint is not None
        assert "17" in result.error.hint

    def test_sets_java_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = FakeRun(Ok(""))
        monkeypatch.setattr("rt.build.maven.run_process", fake)
        monkeypatch.setenv("PATH", "/usr/bin")

        runtime = _runtime(tmp_path, java_homes={"17": "/jdk/17"}).with_java_version("17")
        assert isinstance(runtime, Ok)
        runtime.value.execute(COMMONS, COMMAND)

        env = fake.calls[0]["env"]
        assert env["JAVA_HOME"] == str(Path("/jdk/17"))
        assert env["PATH"].startswith(str(Path("/jdk/17") / "bin"))


@pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell script as mvn")
class TestRealProcess:
    def test_undecodable_output_still_yields_lines(self, tmp_path: Path) -> None:
        mvn = tmp_path / "mvn"
        mvn.write_text("#!/bin/sh\nprintf 'caf\\351 <repository>X-1</repository>\\n'\n", encoding="utf-8")
        mvn.chmod(0o755)
        (tmp_path / "commons").mkdir()

        result = _runtime(tmp_path, executable=str(mvn)).execute(COMMONS, COMMAND)

        assert isinstance(result, Ok)
        assert result.value.lines == ("caf\ufffd <repository>X-1</repository>",)

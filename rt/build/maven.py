"""Maven invocation.

MavenRuntime turns a CommandLine into a process run inside a project's
checkout and captures its output lines. A non-zero exit is returned as
InvocationFailed unless the caller tolerates it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from rt.core.config import MavenConfig
from rt.core.result import Err, Ok, Result
from rt.core.workspace import Workspace
from rt.model import Project
from rt.output.console import ConsoleProtocol, Style
from rt.platform.process import ProcessError
from rt.platform.process import run as run_process

from .command_line import BATCH_MODE, CommandLine
from .errors import InvocationFailed, PreconditionViolation

__all__ = ["InvocationResult", "MavenInvoker", "MavenRuntime"]


@dataclass(frozen=True, slots=True)
class InvocationResult:
    exit_status: int
    lines: tuple[str, ...]

    @property
    def succeeded(self) -> bool:
        return self.exit_status == 0


class MavenInvoker(Protocol):
    """What the build system needs from a build-tool runtime."""

    def execute(
        self,
        project: Project,
        command_line: CommandLine,
        *,
        tolerate_failure: bool = False,
    ) -> Result[InvocationResult, InvocationFailed]: ...

    def with_java_version(
        self, name: str
    ) -> Result[MavenInvoker, PreconditionViolation]: ...


class MavenRuntime:
    """Runs Maven in the workspace checkout of a project."""

    def __init__(
        self,
        *,
        workspace: Workspace,
        config: MavenConfig,
        console: ConsoleProtocol,
        java_home: Path | None = None,
    ) -> None:
        self._workspace = workspace
        self._config = config
        self._console = console
        self._java_home = java_home

    def with_java_version(self, name: str) -> Result[MavenInvoker, PreconditionViolation]:
        """Runtime that runs Maven on the JDK configured under ``[maven.java_homes]``."""
        home = self._config.java_homes.get(name)
        if home is None:
            known = ", ".join(sorted(self._config.java_homes)) or "none"
            return Err(
                PreconditionViolation(
                    message=f"no JDK configured for Java {name}",
                    hint=f"add it to [maven.java_homes] (configured: {known})",
                )
            )
        return Ok(
            MavenRuntime(
                workspace=self._workspace,
                config=self._config,
                console=self._console,
                java_home=Path(home),
            )
        )

    def execute(
        self,
        project: Project,
        command_line: CommandLine,
        *,
        tolerate_failure: bool = False,
    ) -> Result[InvocationResult, InvocationFailed]:
        cwd = self._workspace.project_dir(project)
        full = CommandLine.of(BATCH_MODE).and_(command_line)
        cmd = [self._config.executable, *full.to_args()]
        shown = f"{self._config.executable} {full.render()}"

        self._console.print(shown, Style.DIM)
        result = run_process(
            cmd,
            cwd=cwd,
            env=self._env(),
            timeout=self._config.timeout_seconds,
            merge_stderr=True,
        )

        if isinstance(result, Ok):
            return Ok(InvocationResult(exit_status=0, lines=_lines(result.value)))

        error: ProcessError = result.error
        lines = _lines(error.stdout) + _lines(error.stderr)
        if tolerate_failure and error.returncode > 0:
            return Ok(InvocationResult(exit_status=error.returncode, lines=lines))

        return Err(
            InvocationFailed(
                project=project.name,
                command=(self._config.executable, *(p.render() for p in full.parts)),
                returncode=error.returncode,
                lines=lines,
            )
        )

    def _env(self) -> dict[str, str] | None:
        if self._java_home is None:
            return None
        env = os.environ.copy()
        env["JAVA_HOME"] = str(self._java_home)
        env["PATH"] = os.pathsep.join([str(self._java_home / "bin"), env.get("PATH", "")])
        return env


def _lines(text: str) -> tuple[str, ...]:
    return tuple(text.splitlines())

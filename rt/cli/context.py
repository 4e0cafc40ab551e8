from __future__ import annotations

import os
from dataclasses import dataclass
from typing import NoReturn

import typer

from rt.build.errors import BuildError
from rt.build.maven import MavenRuntime
from rt.build.system import BuildSystem, BuildSystems, MavenBuildSystem
from rt.core.config import ReleaseConfig, load_config
from rt.core.errors import ErrorCode
from rt.core.result import Err, Result
from rt.core.workspace import Workspace, detect_workspace
from rt.model import Iteration, ModuleIteration, Train, TrainIteration
from rt.output.console import ConsoleProtocol, RichConsole
from rt.output.errors import build_error_exit_code, print_build_error


@dataclass(frozen=True, slots=True)
class CLIContext:
    workspace: Workspace
    config: ReleaseConfig
    console: ConsoleProtocol
    train: Train
    iteration: TrainIteration
    build_system: MavenBuildSystem
    build_systems: BuildSystems

    def modules(self, keys: list[str] | None) -> list[ModuleIteration]:
        """Modules named by keys, or every module of the train in order."""
        if not keys:
            return [m for m in self.iteration.modules if not m.project.is_smoke_tests]

        selected: list[ModuleIteration] = []
        for key in keys:
            project = self.train.project(key)
            if project is None:
                known = ", ".join(m.project.key for m in self.train.modules)
                typer.echo(f"error: unknown project '{key}' (known: {known})", err=True)
                raise typer.Exit(code=int(ErrorCode.USER_ERROR))
            selected.append(self.iteration.module(project))
        return selected

    def system_for(self, module: ModuleIteration) -> BuildSystem:
        return self.unwrap(self.build_systems.for_project(module.project))

    def unwrap[T](self, result: Result[T, BuildError]) -> T:
        if isinstance(result, Err):
            self.fail(result.error)
        return result.value

    def fail(self, error: BuildError) -> NoReturn:
        print_build_error(error, self.console)
        raise typer.Exit(code=build_error_exit_code(error))


def build_context(*, iteration: str | None = None, java: str | None = None) -> CLIContext:
    iteration = iteration or os.environ.get("RT_ITERATION")
    java = java or os.environ.get("RT_JAVA")

    workspace_result = detect_workspace()
    if isinstance(workspace_result, Err):
        typer.echo(f"error: {workspace_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    workspace = workspace_result.value
    config_result = load_config(workspace.config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config = config_result.value
    if config.train is None:
        typer.echo(f"error: no [train] table in {workspace.config_path}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    selected = config.iteration
    if iteration is not None:
        try:
            selected = Iteration.parse(iteration)
        except ValueError as e:
            typer.echo(f"error: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    if selected is None:
        typer.echo("error: no iteration given (use --iteration or [train] iteration)", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    console = RichConsole()
    build_system = MavenBuildSystem(
        mvn=MavenRuntime(workspace=workspace, config=config.maven, console=console),
        workspace=workspace,
        properties=config.deployment,
        console=console,
        repositories=config.repositories,
    )
    if java is not None:
        switched = build_system.with_java_version(java)
        if isinstance(switched, Err):
            print_build_error(switched.error, console)
            raise typer.Exit(code=build_error_exit_code(switched.error))
        build_system = switched.value

    return CLIContext(
        workspace=workspace,
        config=config,
        console=console,
        train=config.train,
        iteration=config.train.iteration(selected),
        build_system=build_system,
        build_systems=BuildSystems([build_system]),
    )

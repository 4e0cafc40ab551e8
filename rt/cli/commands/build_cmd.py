from __future__ import annotations

import typer

from rt.cli.commands._options import PROJECTS_HELP
from rt.cli.context import build_context


def pre_release_check(
    project: list[str] | None = typer.Option(None, "--project", "-p", help=PROJECTS_HELP),
) -> None:
    """Validate projects with the pre-release profile."""
    ctx = build_context()
    for module in ctx.modules(project):
        ctx.unwrap(ctx.system_for(module).trigger_pre_release_check(module))
        ctx.console.success(f"{module.project.name}: pre-release check passed")


def build(
    project: list[str] | None = typer.Option(None, "--project", "-p", help=PROJECTS_HELP),
) -> None:
    """Build and install projects with the release profile."""
    ctx = build_context()
    for module in ctx.modules(project):
        ctx.unwrap(ctx.system_for(module).trigger_build(module))
        ctx.console.success(f"{module.project.name}: built")


def docs(
    project: list[str] | None = typer.Option(None, "--project", "-p", help=PROJECTS_HELP),
) -> None:
    """Build documentation."""
    ctx = build_context()
    for module in ctx.modules(project):
        ctx.unwrap(ctx.system_for(module).trigger_documentation_build(module))

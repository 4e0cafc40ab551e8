from __future__ import annotations

import typer

from rt.cli.commands._options import PROJECTS_HELP, parse_phase
from rt.cli.context import build_context


def prepare_version(
    project: list[str] | None = typer.Option(None, "--project", "-p", help=PROJECTS_HELP),
    phase: str = typer.Option("prepare", "--phase", help="prepare|cleanup"),
) -> None:
    """Set project versions for the release (prepare) or the next snapshot (cleanup)."""
    target = parse_phase(phase)
    ctx = build_context()

    for module in ctx.modules(project):
        system = ctx.system_for(module)
        ctx.unwrap(system.prepare_version(module, target))
        ctx.console.success(f"{module.project.name}: version set for {target}")


def update_descriptors(
    project: list[str] | None = typer.Option(None, "--project", "-p", help=PROJECTS_HELP),
    phase: str = typer.Option("prepare", "--phase", help="prepare|cleanup"),
) -> None:
    """Propagate train versions into bom, parent and module descriptors."""
    target = parse_phase(phase)
    ctx = build_context()

    for module in ctx.modules(project):
        system = ctx.system_for(module)
        ctx.unwrap(system.update_project_descriptors(module, target))
        ctx.console.success(f"{module.project.name}: descriptors updated for {target}")

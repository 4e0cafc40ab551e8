from __future__ import annotations

import typer

from rt.cli.commands._options import PROJECTS_HELP
from rt.cli.context import build_context
from rt.deployment.staging import StagingRepository
from rt.output.console import Style


def _staging(repository_id: str | None) -> StagingRepository | None:
    return StagingRepository.of(repository_id) if repository_id else None


def deploy(
    project: list[str] | None = typer.Option(None, "--project", "-p", help=PROJECTS_HELP),
    staging_repository: str | None = typer.Option(
        None, "--staging-repository", help="Id of an open staging repository"
    ),
) -> None:
    """Deploy artifacts to the internal and/or public repository."""
    ctx = build_context()
    staging = _staging(staging_repository)

    for module in ctx.modules(project):
        information = ctx.unwrap(ctx.build_system.deploy(module, staging))
        ctx.console.print(
            f"{information.build_name} #{information.build_number}", Style.DIM
        )


def distribute(
    project: list[str] | None = typer.Option(None, "--project", "-p", help=PROJECTS_HELP),
) -> None:
    """Push documentation and schema distributions."""
    ctx = build_context()
    for module in ctx.modules(project):
        ctx.unwrap(ctx.build_system.trigger_distribution_build(module))


def smoke_tests(
    staging_repository: str | None = typer.Option(
        None, "--staging-repository", help="Id of the staging repository to test against"
    ),
) -> None:
    """Run the smoke tests against the deployed train."""
    ctx = build_context()
    staging = _staging(staging_repository) or StagingRepository.empty()
    ctx.unwrap(ctx.build_system.smoke_tests(ctx.iteration, staging))
    ctx.console.success("smoke tests passed")

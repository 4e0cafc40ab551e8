from __future__ import annotations

import typer

from rt.cli.context import build_context
from rt.core.errors import ErrorCode
from rt.deployment.staging import StagingRepository

staging_app = typer.Typer(add_completion=False, no_args_is_help=True)


@staging_app.command("open")
def open_cmd() -> None:
    """Open a staging repository and print its id."""
    ctx = build_context()
    repository = ctx.unwrap(ctx.build_system.open(ctx.train))
    if not repository.has_id:
        ctx.console.warning("no staging repository id reported; close and release need one")
        raise typer.Exit(code=int(ErrorCode.BUILD_ERROR))
    typer.echo(repository.id)


@staging_app.command("close")
def close_cmd(
    repository_id: str = typer.Argument(..., help="Staging repository id"),
) -> None:
    """Close a staging repository."""
    ctx = build_context()
    repository = ctx.unwrap(ctx.build_system.close(ctx.train, StagingRepository.of(repository_id)))
    ctx.console.success(str(repository))


@staging_app.command("release")
def release_cmd(
    repository_id: str = typer.Argument(..., help="Staging repository id"),
) -> None:
    """Release a closed staging repository."""
    ctx = build_context()
    repository = ctx.unwrap(
        ctx.build_system.release(ctx.train, StagingRepository.of(repository_id))
    )
    ctx.console.success(str(repository))

from __future__ import annotations

import os
from pathlib import Path

import typer

from rt import __version__
from rt.cli.commands.build_cmd import build, docs, pre_release_check
from rt.cli.commands.deploy_cmd import deploy, distribute, smoke_tests
from rt.cli.commands.staging import staging_app
from rt.cli.commands.verify import verify, verify_staging_auth
from rt.cli.commands.versions import prepare_version, update_descriptors
from rt.core.errors import ErrorCode
from rt.core.workspace import CONFIG_FILE_NAME


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(verify)
app.command("verify-staging-auth")(verify_staging_auth)
app.command("pre-release-check")(pre_release_check)
app.command("prepare-version")(prepare_version)
app.command("update-descriptors")(update_descriptors)
app.command()(build)
app.command()(deploy)
app.command()(docs)
app.command()(distribute)
app.command("smoke-tests")(smoke_tests)

# Sub-apps
app.add_typer(staging_app, name="staging")


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
    workspace: Path | None = typer.Option(
        None,
        "--workspace",
        help="Workspace root (overrides auto detection)",
    ),
    iteration: str | None = typer.Option(
        None, "--iteration", "-i", help="Train iteration (M1, RC1, GA, SR1); overrides the config"
    ),
    java: str | None = typer.Option(
        None, "--java", help="Run Maven on a JDK from [maven.java_homes]"
    ),
) -> None:
    if workspace is not None:
        try:
            root = workspace.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --workspace: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not (root / CONFIG_FILE_NAME).is_file():
            typer.echo(
                f"error: --workspace '{root}' is not a valid workspace (missing {CONFIG_FILE_NAME})",
                err=True,
            )
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

        os.environ["RT_WORKSPACE"] = str(root)

    if iteration is not None:
        os.environ["RT_ITERATION"] = iteration
    if java is not None:
        os.environ["RT_JAVA"] = java


def main() -> None:
    app()

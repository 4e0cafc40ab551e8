from __future__ import annotations

from rt.cli.context import build_context


def verify() -> None:
    """Check that the build project builds and signs with the public profile."""
    ctx = build_context()
    ctx.unwrap(ctx.build_system.verify(ctx.train))
    ctx.console.success("build system verified")


def verify_staging_auth() -> None:
    """Check the staging credentials against the repository manager."""
    ctx = build_context()
    ctx.unwrap(ctx.build_system.verify_staging_authentication(ctx.train))
    ctx.console.success("staging authentication verified")

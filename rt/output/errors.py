"""Error presentation utilities.

Centralized error formatting and exit code mapping for the CLI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rt.build.errors import (
    BuildError,
    ConsistencyViolation,
    DescriptorError,
    InvocationFailed,
    PreconditionViolation,
)
from rt.core.errors import ErrorCode
from rt.output.console import Style

if TYPE_CHECKING:
    from rt.output.console import ConsoleProtocol

__all__ = ["describe_error", "print_build_error", "build_error_exit_code"]


def describe_error(error: BuildError) -> str:
    """One-line summary of a build error."""
    match error:
        case PreconditionViolation(message=message):
            return message
        case InvocationFailed(project=project, returncode=rc):
            return f"{project}: build tool failed (exit {rc})"
        case ConsistencyViolation(message=message):
            return message
        case DescriptorError(path=path, reason=reason):
            return f"{path}: {reason}"


def print_build_error(error: BuildError, console: ConsoleProtocol) -> None:
    """Print build error to console with appropriate formatting."""
    console.error(describe_error(error))
    match error:
        case PreconditionViolation(hint=hint) if hint:
            console.print(f"hint: {hint}", Style.DIM)
        case InvocationFailed(command=command):
            console.print(" ".join(command), Style.DIM)
            for line in error.tail():
                console.print(line, Style.DIM)
        case ConsistencyViolation(artifacts=artifacts) if artifacts:
            for artifact in artifacts:
                console.print(f"  {artifact}", Style.DIM)
        case _:
            pass


def build_error_exit_code(error: BuildError) -> int:
    """Get exit code for a build error."""
    match error:
        case PreconditionViolation():
            return int(ErrorCode.USER_ERROR)
        case InvocationFailed() | ConsistencyViolation():
            return int(ErrorCode.BUILD_ERROR)
        case DescriptorError():
            return int(ErrorCode.IO_ERROR)

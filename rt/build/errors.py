from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class PreconditionViolation:
    """Required configuration or state is missing; nothing was executed."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class InvocationFailed:
    """The build tool exited non-zero.

    ``command`` is the masked rendering, safe to print.
    """

    project: str
    command: tuple[str, ...]
    returncode: int
    lines: tuple[str, ...] = ()

    def tail(self, count: int = 20) -> tuple[str, ...]:
        return self.lines[-count:]


@dataclass(frozen=True, slots=True)
class ConsistencyViolation:
    """A descriptor would be released in an inconsistent state."""

    message: str
    artifacts: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DescriptorError:
    path: Path
    reason: str


BuildError = PreconditionViolation | InvocationFailed | ConsistencyViolation | DescriptorError

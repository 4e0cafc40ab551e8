"""Result type for explicit error propagation.

Every operation that drives the build tool or edits a descriptor returns a
Result instead of raising, so a release driver can decide whether a failed
step halts the train or is reported and skipped.

Usage:
    def open_repository(train: Train) -> Result[StagingRepository, BuildError]:
        if not profile_id:
            return Err(PreconditionViolation("staging profile id is not set"))
        return Ok(StagingRepository.of(repository_id))

    match open_repository(train):
        case Ok(repository):
            console.print(repository.id)
        case Err(error):
            console.error(describe_error(error))

Callers narrow with ``isinstance(result, Err)`` and return the Err unchanged
to propagate it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome carrying a value."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed outcome carrying an error value."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]

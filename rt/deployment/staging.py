"""Staging repositories at the public repository manager.

The repository manager assigns an id when a staging repository is opened. The
build tool reports it only in its log output, formatted through a message
template we pass in; ``parse_staging_repository_id`` recovers it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum

__all__ = [
    "REPOSITORY_CLOSING_TAG",
    "REPOSITORY_MESSAGE_FORMAT",
    "REPOSITORY_OPENING_TAG",
    "StagingRepository",
    "StagingState",
    "parse_staging_repository_id",
]

REPOSITORY_OPENING_TAG = "<repository>"
REPOSITORY_CLOSING_TAG = "</repository>"
PLACEHOLDER = "%s"
REPOSITORY_MESSAGE_FORMAT = f"{REPOSITORY_OPENING_TAG}{PLACEHOLDER}{REPOSITORY_CLOSING_TAG}"


class StagingState(Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"
    RELEASED = "released"


@dataclass(frozen=True, slots=True)
class StagingRepository:
    """A staging repository, absent until opened.

    An opened repository can still carry an empty id when the build tool's
    output did not contain one; check ``has_id`` before using it.
    """

    id: str | None = None
    state: StagingState = StagingState.UNOPENED

    @classmethod
    def empty(cls) -> StagingRepository:
        return cls()

    @classmethod
    def of(cls, repository_id: str) -> StagingRepository:
        return cls(id=repository_id, state=StagingState.OPEN)

    @property
    def is_present(self) -> bool:
        return self.id is not None

    @property
    def has_id(self) -> bool:
        return bool(self.id)

    def closed(self) -> StagingRepository:
        return replace(self, state=StagingState.CLOSED)

    def released(self) -> StagingRepository:
        return replace(self, state=StagingState.RELEASED)

    def __str__(self) -> str:
        if not self.is_present:
            return "(no staging repository)"
        return f"{self.id or '(empty id)'} [{self.state.value}]"


def parse_staging_repository_id(lines: Iterable[str]) -> str:
    """Extract the repository id from build tool output.

    Only lines with the opening tag that are not the unsubstituted template
    qualify; the last of them wins since progress lines may precede the final
    status. Returns "" when no line qualifies or the last one is not closed.
    """
    last: str | None = None
    for line in lines:
        if REPOSITORY_OPENING_TAG in line and PLACEHOLDER not in line:
            last = line

    if last is None:
        return ""

    start = last.index(REPOSITORY_OPENING_TAG) + len(REPOSITORY_OPENING_TAG)
    end = last.find(REPOSITORY_CLOSING_TAG, start)
    if end < 0:
        return ""
    return last[start:end]

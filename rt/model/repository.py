from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Repository:
    """A ``<repository>`` entry in a project descriptor."""

    id: str
    url: str


def _default_snapshot() -> Repository:
    return Repository(id="snapshots", url="https://repo.example.org/snapshot")


def _default_milestone() -> Repository:
    return Repository(id="milestones", url="https://repo.example.org/milestone")


@dataclass(frozen=True, slots=True)
class RepositoryLayout:
    """Repositories descriptors reference while a train is in development or in preview."""

    snapshot: Repository = field(default_factory=_default_snapshot)
    milestone: Repository = field(default_factory=_default_milestone)

"""Version values for modules, trains and artifacts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_VERSION_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)(?:\.(0|[1-9]\d*))?$")
_ITERATION_RE = re.compile(r"^(M|RC|SR)([1-9]\d*)$")

SNAPSHOT = "SNAPSHOT"


@dataclass(frozen=True, slots=True, order=True)
class Version:
    major: int
    minor: int
    bugfix: int = 0

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse ``MAJOR.MINOR[.BUGFIX]``.

        Raises:
            ValueError: If text is not a plain numeric version.
        """
        m = _VERSION_RE.match(text.strip())
        if m is None:
            raise ValueError(f"invalid version: {text!r}")
        return cls(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0))

    def with_bugfix(self, bugfix: int) -> Version:
        return Version(self.major, self.minor, bugfix)

    def next_bugfix(self) -> Version:
        return self.with_bugfix(self.bugfix + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.bugfix}"


class Phase(Enum):
    """Stage of the release workflow a descriptor update belongs to."""

    PREPARE = "prepare"  # descriptors carry the versions being released
    CLEANUP = "cleanup"  # descriptors move on to the next development snapshot

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Iteration:
    """Point in a train's timeline: ``M<n>``, ``RC<n>``, ``GA`` or ``SR<n>``."""

    name: str

    @classmethod
    def parse(cls, text: str) -> Iteration:
        name = text.strip().upper()
        if name != "GA" and _ITERATION_RE.match(name) is None:
            raise ValueError(f"invalid iteration: {text!r} (expected M1, RC1, GA or SR1)")
        return cls(name)

    @property
    def is_milestone(self) -> bool:
        return self.name.startswith("M")

    @property
    def is_release_candidate(self) -> bool:
        return self.name.startswith("RC")

    @property
    def is_ga(self) -> bool:
        return self.name == "GA"

    @property
    def is_service_release(self) -> bool:
        return self.name.startswith("SR")

    @property
    def is_preview(self) -> bool:
        return self.is_milestone or self.is_release_candidate

    @property
    def is_public(self) -> bool:
        return self.is_ga or self.is_service_release

    @property
    def bugfix_offset(self) -> int:
        if self.is_service_release:
            return int(self.name[2:])
        return 0

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class ArtifactVersion:
    """A version as written into a descriptor, e.g. ``2.7.0-M1``."""

    version: Version
    suffix: str = ""

    @classmethod
    def release_of(cls, version: Version, iteration: Iteration) -> ArtifactVersion:
        base = version.with_bugfix(version.bugfix + iteration.bugfix_offset)
        return cls(base, iteration.name if iteration.is_preview else "")

    @classmethod
    def snapshot_of(cls, version: Version, iteration: Iteration) -> ArtifactVersion:
        if iteration.is_preview:
            return cls(version, SNAPSHOT)
        released = cls.release_of(version, iteration).version
        return cls(released.next_bugfix(), SNAPSHOT)

    @property
    def is_snapshot(self) -> bool:
        return self.suffix == SNAPSHOT

    @property
    def is_release(self) -> bool:
        return not self.suffix

    def __str__(self) -> str:
        if self.suffix:
            return f"{self.version}-{self.suffix}"
        return str(self.version)


def is_snapshot_version(text: str) -> bool:
    """True for any snapshot-qualified version string (``-SNAPSHOT``, ``-BUILD-SNAPSHOT``)."""
    return text.strip().endswith(f"-{SNAPSHOT}")

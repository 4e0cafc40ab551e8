"""Releasable projects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ProjectRole = Literal["build", "bom", "smoke-tests", "module"]

PROJECT_ROLES: tuple[ProjectRole, ...] = ("build", "bom", "smoke-tests", "module")


@dataclass(frozen=True, slots=True)
class Project:
    """A releasable unit, checked out under the workspace in a directory named by its key.

    Attributes:
        key: Short identifier (``commons``), also the checkout directory name.
        name: Human-readable name (``Commons``).
        role: ``build`` for the umbrella project holding the parent and (optionally)
            the bom, ``bom`` for a standalone bill-of-materials project,
            ``smoke-tests`` for the post-deployment verification project, ``module``
            for everything else.
        artifact_id: Explicit artifact id; derived from the train prefix when None.
        additional_artifacts: Auxiliary artifact ids versioned with this project.
        skip_tests: Build without running the test suite.
    """

    key: str
    name: str
    role: ProjectRole = "module"
    artifact_id: str | None = None
    additional_artifacts: tuple[str, ...] = ()
    skip_tests: bool = False

    @property
    def is_build_project(self) -> bool:
        return self.role == "build"

    @property
    def is_bom_project(self) -> bool:
        return self.role == "bom"

    @property
    def is_smoke_tests(self) -> bool:
        return self.role == "smoke-tests"

    @property
    def directory(self) -> str:
        return self.key

    def __str__(self) -> str:
        return self.name


SMOKE_TESTS = Project(key="smoke-tests", name="Smoke Tests", role="smoke-tests")

"""Release trains and their iterations."""

from __future__ import annotations

from dataclasses import dataclass

from .project import SMOKE_TESTS, Project
from .version import ArtifactVersion, Iteration, Phase, Version


@dataclass(frozen=True, slots=True)
class Module:
    """A project at the version line it ships with in a train."""

    project: Project
    version: Version


@dataclass(frozen=True, slots=True)
class Train:
    """A set of modules released together.

    Raises ValueError on construction when the modules do not contain exactly
    one build project, contain more than one bom project, or repeat a key.
    """

    name: str
    modules: tuple[Module, ...]
    group_id: str
    artifact_prefix: str
    calver: Version | None = None
    commercial: bool = False

    def __post_init__(self) -> None:
        keys = [m.project.key for m in self.modules]
        if len(set(keys)) != len(keys):
            raise ValueError(f"train {self.name}: duplicate module keys in {keys}")
        builds = [m for m in self.modules if m.project.is_build_project]
        if len(builds) != 1:
            raise ValueError(
                f"train {self.name}: expected exactly one build project, found {len(builds)}"
            )
        if sum(1 for m in self.modules if m.project.is_bom_project) > 1:
            raise ValueError(f"train {self.name}: at most one bom project is allowed")

    @property
    def uses_calver(self) -> bool:
        return self.calver is not None

    @property
    def is_open_source(self) -> bool:
        return not self.commercial

    @property
    def build_project(self) -> Project:
        return next(m.project for m in self.modules if m.project.is_build_project)

    @property
    def bom_project(self) -> Project | None:
        return next((m.project for m in self.modules if m.project.is_bom_project), None)

    @property
    def smoke_tests_project(self) -> Project:
        return next((m.project for m in self.modules if m.project.is_smoke_tests), SMOKE_TESTS)

    @property
    def is_bom_in_build_project(self) -> bool:
        return self.bom_project is None

    def project(self, key: str) -> Project | None:
        return next((m.project for m in self.modules if m.project.key == key), None)

    def contains(self, project: Project) -> bool:
        return any(m.project == project for m in self.modules)

    def module(self, project: Project) -> Module:
        for m in self.modules:
            if m.project == project:
                return m
        raise KeyError(f"{project.key} is not part of train {self.name}")

    def artifact_id(self, project: Project) -> str:
        return project.artifact_id or f"{self.artifact_prefix}-{project.key}"

    def dependency_property(self, project: Project) -> str:
        """Name of the version property modules use to reference project (``exampledata.commons``)."""
        return f"{self.artifact_prefix.replace('-', '')}.{project.key}"

    @property
    def releasetrain_artifact_id(self) -> str:
        return f"{self.artifact_prefix}-releasetrain"

    @property
    def bom_artifact_id(self) -> str:
        return f"{self.artifact_prefix}-bom"

    @property
    def shared_resources_artifact_id(self) -> str:
        return f"{self.artifact_prefix}-build-resources"

    def iteration(self, iteration: Iteration) -> TrainIteration:
        return TrainIteration(self, iteration)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class ModuleIteration:
    """A module bound to one iteration of its train."""

    module: Module
    iteration: Iteration
    train: Train

    @property
    def project(self) -> Project:
        return self.module.project

    @property
    def version(self) -> Version:
        return self.module.version

    @property
    def release_version(self) -> ArtifactVersion:
        return ArtifactVersion.release_of(self.module.version, self.iteration)

    @property
    def snapshot_version(self) -> ArtifactVersion:
        return ArtifactVersion.snapshot_of(self.module.version, self.iteration)

    def version_for(self, phase: Phase) -> ArtifactVersion:
        if phase is Phase.PREPARE:
            return self.release_version
        return self.snapshot_version

    @property
    def is_preview(self) -> bool:
        return self.iteration.is_preview

    @property
    def is_public(self) -> bool:
        return self.train.is_open_source and self.iteration.is_public

    @property
    def is_commercial(self) -> bool:
        return self.train.commercial

    @property
    def artifact_id(self) -> str:
        return self.train.artifact_id(self.project)

    @property
    def train_iteration(self) -> TrainIteration:
        return TrainIteration(self.train, self.iteration)

    def __str__(self) -> str:
        return f"{self.project.name} {self.release_version}"


@dataclass(frozen=True, slots=True)
class TrainIteration:
    train: Train
    iteration: Iteration

    @property
    def modules(self) -> tuple[ModuleIteration, ...]:
        return tuple(ModuleIteration(m, self.iteration, self.train) for m in self.train.modules)

    def module(self, project: Project) -> ModuleIteration:
        return ModuleIteration(self.train.module(project), self.iteration, self.train)

    def modules_except(self, *excluded: Project) -> tuple[ModuleIteration, ...]:
        return tuple(m for m in self.modules if m.project not in excluded)

    @property
    def build_module(self) -> ModuleIteration:
        return self.module(self.train.build_project)

    @property
    def is_public(self) -> bool:
        return self.train.is_open_source and self.iteration.is_public

    @property
    def is_commercial(self) -> bool:
        return self.train.commercial

    def release_train_version(self, phase: Phase) -> str:
        """Version of the train-wide descriptor (releasetrain artifact, bom)."""
        if self.train.calver is not None:
            if phase is Phase.PREPARE:
                return str(ArtifactVersion.release_of(self.train.calver, self.iteration))
            return str(ArtifactVersion.snapshot_of(self.train.calver, self.iteration))

        if phase is Phase.CLEANUP:
            return f"{self.train.name}-BUILD-SNAPSHOT"
        if self.iteration.is_ga:
            return f"{self.train.name}-RELEASE"
        return f"{self.train.name}-{self.iteration}"

    @property
    def name_and_version(self) -> str:
        return self.release_train_version(Phase.PREPARE)

    def __str__(self) -> str:
        return f"{self.train.name} {self.iteration}"

"""Per-descriptor version updates for one phase of a train iteration."""

from __future__ import annotations

from dataclasses import dataclass

from rt.model import ArtifactVersion, Phase, Project, RepositoryLayout, TrainIteration
from rt.output.console import ConsoleProtocol

from .pom import Pom


@dataclass(frozen=True, slots=True)
class UpdateInformation:
    """Which versions descriptors must carry for a train iteration in a phase."""

    train: TrainIteration
    phase: Phase

    @property
    def release_train_version(self) -> str:
        return self.train.release_train_version(self.phase)

    def project_version_to_set(self, project: Project) -> ArtifactVersion:
        return self.train.module(project).version_for(self.phase)

    @property
    def parent_version_to_set(self) -> ArtifactVersion:
        return self.project_version_to_set(self.train.train.build_project)

    @property
    def is_bom_in_build_project(self) -> bool:
        return self.train.train.is_bom_in_build_project


class PomUpdater:
    """Applies UpdateInformation to the descriptors of one project."""

    def __init__(
        self,
        *,
        console: ConsoleProtocol,
        information: UpdateInformation,
        project: Project,
        repositories: RepositoryLayout,
    ) -> None:
        self._console = console
        self._information = information
        self._project = project
        self._repositories = repositories

    @property
    def project(self) -> Project:
        return self._project

    @property
    def is_build_project(self) -> bool:
        return self._project.is_build_project

    @property
    def is_bom_project(self) -> bool:
        return self._project.is_bom_project

    def update_dependency_properties(self, pom: Pom) -> None:
        """Point version properties of sibling modules at their target versions.

        Only properties the descriptor already declares are touched.
        """
        iteration = self._information.train
        train = iteration.train
        for module in iteration.modules_except(self._project, train.build_project):
            if module.project.is_bom_project or module.project.is_smoke_tests:
                continue
            name = train.dependency_property(module.project)
            version = str(module.version_for(self._information.phase))
            if pom.set_property(name, version):
                self._console.log(
                    self._project.name, f"Updated {name} dependency property to {version}."
                )

    def update_parent_version(self, pom: Pom) -> None:
        version = str(self._information.parent_version_to_set)
        if pom.set_parent_version(version):
            self._console.log(self._project.name, f"Updated parent version to {version}.")

    def update_repository(self, pom: Pom) -> None:
        """Switch repository declarations between snapshot and milestone repositories.

        PREPARE of a preview swaps snapshots for milestones, PREPARE of a public
        release drops the snapshot repository, CLEANUP goes back to snapshots.
        Descriptors without a repositories block and commercial trains are left alone.
        """
        iteration = self._information.train
        if iteration.is_commercial:
            return

        snapshot = self._repositories.snapshot
        milestone = self._repositories.milestone
        name = self._project.name

        if not pom.has_repositories:
            return

        if self._information.phase is Phase.PREPARE:
            if pom.remove_repository(snapshot.id):
                self._console.log(name, f"Removed repository {snapshot.id}.")
            if iteration.iteration.is_preview and pom.add_repository(milestone.id, milestone.url):
                self._console.log(name, f"Added repository {milestone.id}.")
            return

        if pom.remove_repository(milestone.id):
            self._console.log(name, f"Removed repository {milestone.id}.")
        if pom.add_repository(snapshot.id, snapshot.url):
            self._console.log(name, f"Added repository {snapshot.id}.")

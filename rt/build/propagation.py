"""Version propagation across the projects of a train.

prepare_version moves a project's own version with the versions plugin.
update_project_descriptors rewrites the descriptors that reference other
projects: the bom's managed dependency versions, the parent's shared
resources and releasetrain property, and module dependency properties.
"""

from __future__ import annotations

from rt.core.result import Err, Ok, Result
from rt.core.workspace import Workspace
from rt.model import ModuleIteration, Phase, Project, RepositoryLayout
from rt.output.console import ConsoleProtocol

from .command_line import INSTALL, Argument, CommandLine, arg, goal
from .descriptors import edit_descriptor
from .errors import BuildError, ConsistencyViolation
from .maven import MavenInvoker
from .pom import BomPom, ParentPom, Pom
from .updater import PomUpdater, UpdateInformation

__all__ = ["BOM_POM", "PARENT_POM", "POM_XML", "VersionPropagation"]

POM_XML = "pom.xml"
BOM_POM = "bom/pom.xml"
PARENT_POM = "parent/pom.xml"


class VersionPropagation:
    def __init__(
        self,
        *,
        mvn: MavenInvoker,
        workspace: Workspace,
        console: ConsoleProtocol,
        repositories: RepositoryLayout,
    ) -> None:
        self._mvn = mvn
        self._workspace = workspace
        self._console = console
        self._repositories = repositories

    def prepare_version(self, module: ModuleIteration, phase: Phase) -> Result[ModuleIteration, BuildError]:
        """Set the module's own version for phase.

        The bom is set twice: once standalone and once with all modules
        processed for its ``bom`` aggregator entry. The build project also
        retargets the shared releasetrain descriptor unless the train uses
        calendar versions, then installs itself for the modules that follow.
        """
        project = module.project
        train = module.train
        information = UpdateInformation(module.train_iteration, phase)
        goals = CommandLine.of(goal("versions:set"), goal("versions:commit"))

        if project.is_bom_project:
            standalone = goals.and_(
                arg("newVersion").with_value(information.release_train_version),
                arg("generateBackupPoms").with_value("false"),
            )
            commands = [
                standalone,
                standalone.and_(
                    arg("processAllModules").with_value("true"),
                    Argument.of("-pl").with_value("bom"),
                ),
            ]
        else:
            commands = [
                goals.and_(
                    arg("newVersion").with_value(information.project_version_to_set(project)),
                    arg("generateBackupPoms").with_value("false"),
                )
            ]

        if project.is_build_project:
            if not train.uses_calver:
                commands.append(
                    goals.and_(
                        arg("newVersion").with_value(information.release_train_version),
                        arg("generateBackupPoms").with_value("false"),
                        arg("groupId").with_value(train.group_id),
                        arg("artifactId").with_value(train.releasetrain_artifact_id),
                    )
                )
            commands.append(CommandLine.of(INSTALL))

        for command in commands:
            result = self._mvn.execute(project, command)
            if isinstance(result, Err):
                return result

        return Ok(module)

    def update_project_descriptors(
        self, module: ModuleIteration, phase: Phase
    ) -> Result[ModuleIteration, BuildError]:
        information = UpdateInformation(module.train_iteration, phase)
        updater = PomUpdater(
            console=self._console,
            information=information,
            project=module.project,
            repositories=self._repositories,
        )
        train = module.train

        if updater.is_build_project:
            if information.is_bom_in_build_project:
                bom = self.update_bom(updater, information, train.build_project)
                if isinstance(bom, Err):
                    return bom
            parent = self._update_parent_pom(updater, information)
            if isinstance(parent, Err):
                return parent
            return Ok(module)

        if updater.is_bom_project:
            bom = self.update_bom(updater, information, module.project)
            if isinstance(bom, Err):
                return bom
            return Ok(module)

        def edit(pom: Pom) -> Result[None, BuildError]:
            updater.update_dependency_properties(pom)
            updater.update_parent_version(pom)
            updater.update_repository(pom)
            return Ok(None)

        result = edit_descriptor(self._workspace.get_file(POM_XML, module.project), Pom, edit)
        if isinstance(result, Err):
            return result
        return Ok(module)

    def update_bom(
        self, updater: PomUpdater, information: UpdateInformation, project: Project
    ) -> Result[tuple[str, ...], BuildError]:
        """Pin every train module's version in the bom located in project.

        Additional artifacts are only updated when the bom already manages
        them. Returns the additional artifact ids that were skipped. In
        PREPARE no snapshot version may remain; the file is left untouched
        if one does.
        """
        iteration = information.train
        train = iteration.train
        excluded = [train.build_project]
        if train.bom_project is not None:
            excluded.append(train.bom_project)
        skipped: list[str] = []

        self._console.log(project.name, "Updating BOM pom.xml...")

        def edit(pom: BomPom) -> Result[None, BuildError]:
            for module in iteration.modules_except(*excluded):
                if module.project.is_smoke_tests:
                    continue
                version = str(information.project_version_to_set(module.project))
                artifact_id = module.artifact_id

                pom.set_managed_version(artifact_id, version, group_id=train.group_id)
                self._console.log(
                    project.name, f"Updated managed dependency version for {artifact_id} to {version}!"
                )

                for additional in module.project.additional_artifacts:
                    if pom.managed_dependency(additional) is None:
                        skipped.append(additional)
                        self._console.log(
                            project.name, f"Artifact {additional} not found, skipping update!"
                        )
                        continue
                    pom.set_managed_version(additional, version)
                    self._console.log(
                        project.name, f"Updated managed dependency version for {additional} to {version}!"
                    )

            if information.phase is Phase.PREPARE:
                leftovers = pom.snapshot_dependencies()
                if leftovers:
                    return Err(
                        ConsistencyViolation(
                            message=f"found snapshot dependencies in {project.name} bom",
                            artifacts=tuple(str(a) for a in leftovers),
                        )
                    )

            updater.update_repository(pom)
            return Ok(None)

        result = edit_descriptor(self._workspace.get_file(BOM_POM, project), BomPom, edit)
        if isinstance(result, Err):
            return result
        return Ok(tuple(skipped))

    def _update_parent_pom(
        self, updater: PomUpdater, information: UpdateInformation
    ) -> Result[None, BuildError]:
        train = information.train.train
        build = train.build_project
        parent_version = str(information.parent_version_to_set)
        release_train = information.release_train_version

        def edit(pom: ParentPom) -> Result[None, BuildError]:
            self._console.log(build.name, f"Setting shared resources version to {parent_version}.")
            pom.set_shared_resources_version(train.shared_resources_artifact_id, parent_version)

            self._console.log(build.name, f"Setting releasetrain property to {release_train}.")
            pom.set_release_train(release_train)

            updater.update_repository(pom)
            return Ok(None)

        return edit_descriptor(self._workspace.get_file(PARENT_POM, build), ParentPom, edit)

"""Build systems and the registry that picks one per project.

MavenBuildSystem composes version propagation, the staging lifecycle and
deployment routing behind the operations the release workflow calls.
BuildSystems returns the first registered system that supports a project.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from rt.core.result import Err, Ok, Result
from rt.core.workspace import Workspace
from rt.deployment.information import DeploymentInformation
from rt.deployment.properties import DeploymentProperties
from rt.deployment.router import DeploymentRouter
from rt.deployment.staging import StagingRepository
from rt.model import ModuleIteration, Phase, Project, RepositoryLayout, Train, TrainIteration, Version
from rt.output.console import ConsoleProtocol

from .arguments import gpg_arguments, secret_keyring, settings
from .command_line import (
    CLEAN,
    INSTALL,
    SKIP_TESTS,
    VALIDATE,
    VERIFY,
    CommandLine,
    arg,
    goal,
    profile,
    settings_xml,
)
from .descriptors import edit_descriptor
from .errors import BuildError, PreconditionViolation
from .maven import MavenInvoker
from .pom import Pom
from .propagation import POM_XML, VersionPropagation
from .staging import StagingLifecycle

__all__ = [
    "BuildSystem",
    "BuildSystems",
    "MavenBuildSystem",
    "smoke_test_parent_version",
]

SMOKE_TESTS_SETTINGS = "settings.xml"


def smoke_test_parent_version(version: Version) -> str:
    """Downstream parent the smoke tests build against for a train's major version."""
    return "2.7.8" if version.major == 2 else "3.0.2"


class BuildSystem(Protocol):
    def supports(self, project: Project) -> bool: ...

    def prepare_version(self, module: ModuleIteration, phase: Phase) -> Result[ModuleIteration, BuildError]: ...

    def update_project_descriptors(
        self, module: ModuleIteration, phase: Phase
    ) -> Result[ModuleIteration, BuildError]: ...

    def trigger_pre_release_check(self, module: ModuleIteration) -> Result[ModuleIteration, BuildError]: ...

    def trigger_build(self, module: ModuleIteration) -> Result[ModuleIteration, BuildError]: ...

    def deploy(
        self, module: ModuleIteration, staging_repository: StagingRepository | None = None
    ) -> Result[DeploymentInformation, BuildError]: ...

    def smoke_tests(
        self, iteration: TrainIteration, staging_repository: StagingRepository
    ) -> Result[None, BuildError]: ...

    def open(self, train: Train) -> Result[StagingRepository, BuildError]: ...

    def close(
        self, train: Train, staging_repository: StagingRepository | None
    ) -> Result[StagingRepository, BuildError]: ...

    def release(
        self, train: Train, staging_repository: StagingRepository | None
    ) -> Result[StagingRepository, BuildError]: ...

    def trigger_documentation_build(self, module: ModuleIteration) -> Result[ModuleIteration, BuildError]: ...

    def trigger_distribution_build(self, module: ModuleIteration) -> Result[ModuleIteration, BuildError]: ...

    def verify(self, train: Train) -> Result[None, BuildError]: ...

    def verify_staging_authentication(self, train: Train) -> Result[None, BuildError]: ...


class MavenBuildSystem:
    """Maven-backed BuildSystem for projects with a ``pom.xml``."""

    def __init__(
        self,
        *,
        mvn: MavenInvoker,
        workspace: Workspace,
        properties: DeploymentProperties,
        console: ConsoleProtocol,
        repositories: RepositoryLayout | None = None,
    ) -> None:
        self._mvn = mvn
        self._workspace = workspace
        self._properties = properties
        self._console = console
        self._repositories = repositories or RepositoryLayout()

        self._propagation = VersionPropagation(
            mvn=mvn, workspace=workspace, console=console, repositories=self._repositories
        )
        self._staging = StagingLifecycle(mvn=mvn, properties=properties, console=console)
        self._router = DeploymentRouter(
            mvn=mvn, properties=properties, workspace=workspace, console=console
        )

    def supports(self, project: Project) -> bool:
        return self._workspace.get_file(POM_XML, project).exists()

    def with_java_version(self, name: str) -> Result[MavenBuildSystem, BuildError]:
        """Same build system, running Maven on the named JDK."""
        mvn = self._mvn.with_java_version(name)
        if isinstance(mvn, Err):
            return mvn
        return Ok(
            MavenBuildSystem(
                mvn=mvn.value,
                workspace=self._workspace,
                properties=self._properties,
                console=self._console,
                repositories=self._repositories,
            )
        )

    # -- versions -----------------------------------------------------------

    def prepare_version(self, module: ModuleIteration, phase: Phase) -> Result[ModuleIteration, BuildError]:
        return self._propagation.prepare_version(module, phase)

    def update_project_descriptors(
        self, module: ModuleIteration, phase: Phase
    ) -> Result[ModuleIteration, BuildError]:
        return self._propagation.update_project_descriptors(module, phase)

    # -- builds -------------------------------------------------------------

    def trigger_pre_release_check(self, module: ModuleIteration) -> Result[ModuleIteration, BuildError]:
        command = CommandLine.of(CLEAN, VALIDATE, profile("pre-release"))
        return self._run(module, command)

    def trigger_build(self, module: ModuleIteration) -> Result[ModuleIteration, BuildError]:
        command = (
            CommandLine.of(CLEAN, INSTALL, profile("ci", "release"))
            .and_(gpg_arguments(self._properties.gpg))
            .and_if(module.project.skip_tests, SKIP_TESTS)
            .and_(settings(self._properties))
        )
        return self._run(module, command)

    def trigger_documentation_build(self, module: ModuleIteration) -> Result[ModuleIteration, BuildError]:
        result = self._run(module, CommandLine.of(CLEAN, INSTALL, SKIP_TESTS, profile("distribute")))
        if isinstance(result, Ok):
            self._console.log(module.project.name, "Successfully finished documentation build.")
        return result

    def trigger_distribution_build(self, module: ModuleIteration) -> Result[ModuleIteration, BuildError]:
        result = self._router.distribute(module)
        if isinstance(result, Err):
            return result
        return Ok(module)

    def _run(self, module: ModuleIteration, command: CommandLine) -> Result[ModuleIteration, BuildError]:
        result = self._mvn.execute(module.project, command)
        if isinstance(result, Err):
            return result
        return Ok(module)

    # -- deployment ---------------------------------------------------------

    def deploy(
        self, module: ModuleIteration, staging_repository: StagingRepository | None = None
    ) -> Result[DeploymentInformation, BuildError]:
        """Deploy module, staging public artifacts into staging_repository if given."""
        information = DeploymentInformation(module, self._properties, staging_repository)
        return self._router.deploy(information)

    def smoke_tests(
        self, iteration: TrainIteration, staging_repository: StagingRepository
    ) -> Result[None, BuildError]:
        """Build the smoke tests against the train's bom as just deployed."""
        train = iteration.train
        scope = str(iteration)
        public = iteration.is_public

        if public and not staging_repository.has_id:
            return Err(
                PreconditionViolation(
                    message="smoke tests of a public release need a staging repository id",
                    hint="open a staging repository first",
                )
            )

        self._console.log(scope, "Running smoke tests...")

        if iteration.is_commercial:
            name = "commercial"
        elif public:
            name = "maven-central"
        else:
            name = "artifactory"

        smoke_tests = train.smoke_tests_project
        parent_version = smoke_test_parent_version(iteration.build_module.version)

        def edit(pom: Pom) -> Result[None, BuildError]:
            pom.set_parent_version(parent_version)
            return Ok(None)

        edited = edit_descriptor(self._workspace.get_file(POM_XML, smoke_tests), Pom, edit)
        if isinstance(edited, Err):
            return edited

        command = CommandLine.of(
            CLEAN,
            VERIFY,
            profile(name),
            settings_xml(SMOKE_TESTS_SETTINGS),
            arg(f"{train.bom_artifact_id}.version").with_value(iteration.name_and_version),
        ).and_if(public, lambda: arg("stagingRepository").with_value(staging_repository.id))

        result = self._mvn.execute(smoke_tests, command)
        if isinstance(result, Err):
            return result

        self._console.log(scope, "Smoke tests passed.")
        return Ok(None)

    # -- staging ------------------------------------------------------------

    def open(self, train: Train) -> Result[StagingRepository, BuildError]:
        return self._staging.open(train)

    def close(
        self, train: Train, staging_repository: StagingRepository | None
    ) -> Result[StagingRepository, BuildError]:
        return self._staging.close(train, staging_repository)

    def release(
        self, train: Train, staging_repository: StagingRepository | None
    ) -> Result[StagingRepository, BuildError]:
        return self._staging.release(train, staging_repository)

    # -- verification -------------------------------------------------------

    def verify(self, train: Train) -> Result[None, BuildError]:
        """Check that the build project resolves and signs with the public profile."""
        self._console.log(train.name, "Verifying Maven build system...")
        gpg = self._properties.signing
        command = (
            CommandLine.of(CLEAN, VERIFY, profile("central"), SKIP_TESTS)
            .and_(gpg_arguments(gpg))
            .and_(secret_keyring(gpg))
        )
        result = self._mvn.execute(train.build_project, command)
        if isinstance(result, Err):
            return result
        return Ok(None)

    def verify_staging_authentication(self, train: Train) -> Result[None, BuildError]:
        if not train.is_open_source:
            self._console.log(train.name, "Commercial train, no staging authentication to verify.")
            return Ok(None)

        if not self._properties.maven_central.staging_profile_id:
            return Err(
                PreconditionViolation(
                    message="staging profile id is not set",
                    hint="set staging_profile_id under [deployment.maven_central]",
                )
            )

        self._console.log(train.name, "Verifying Maven staging authentication...")
        command = CommandLine.of(goal("nexus-staging:rc-list-profiles"), profile("central")).and_(
            settings(self._properties)
        )
        result = self._mvn.execute(train.build_project, command)
        if isinstance(result, Err):
            return result
        return Ok(None)


class BuildSystems:
    """Ordered registry of build systems."""

    def __init__(self, systems: Sequence[BuildSystem]) -> None:
        self._systems = tuple(systems)

    def for_project(self, project: Project) -> Result[BuildSystem, PreconditionViolation]:
        for system in self._systems:
            if system.supports(project):
                return Ok(system)
        return Err(
            PreconditionViolation(
                message=f"no build system supports {project.name}",
                hint=f"expected a {POM_XML} in the {project.directory}/ checkout",
            )
        )

    def __len__(self) -> int:
        return len(self._systems)

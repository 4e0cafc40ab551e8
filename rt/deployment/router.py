"""Deployment routing.

Each module is checked against two independent targets. The internal
repository receives previews and commercial releases. The public repository
receives public releases, staged into the open staging repository when there
is one. A target that does not apply is skipped with a log line, never an
error.
"""

from __future__ import annotations

from rt.build.arguments import gpg_arguments, secret_keyring, settings
from rt.build.command_line import (
    BATCH_MODE,
    CLEAN,
    DEPLOY,
    SKIP_TESTS,
    CommandLine,
    Profile,
    arg,
    profile,
)
from rt.build.errors import BuildError, PreconditionViolation
from rt.build.maven import MavenInvoker
from rt.core.result import Err, Ok, Result
from rt.core.workspace import Workspace
from rt.model import ModuleIteration
from rt.output.console import ConsoleProtocol

from .information import DeploymentInformation
from .properties import Authentication, DeploymentProperties

__all__ = ["DeploymentRouter", "POM_XML"]

POM_XML = "pom.xml"

DISTRIBUTION_PROFILES = ("distribute", "distribute-schema")


class DeploymentRouter:
    def __init__(
        self,
        *,
        mvn: MavenInvoker,
        properties: DeploymentProperties,
        workspace: Workspace,
        console: ConsoleProtocol,
    ) -> None:
        self._mvn = mvn
        self._properties = properties
        self._workspace = workspace
        self._console = console

    def deploy(self, information: DeploymentInformation) -> Result[DeploymentInformation, BuildError]:
        """Deploy to the internal repository, then to the public one.

        A checkout without a pom.xml is skipped with a log line.
        """
        project = information.module.project
        if not self._workspace.get_file(POM_XML, project).exists():
            self._console.log(project.name, "No pom.xml file found, skipping project.")
            return Ok(information)

        internal = self.deploy_to_internal(information)
        if isinstance(internal, Err):
            return internal

        public = self.deploy_to_public(information)
        if isinstance(public, Err):
            return public

        return Ok(information)

    def deploy_to_internal(self, information: DeploymentInformation) -> Result[bool, BuildError]:
        """Returns Ok(False) when the module does not go to the internal repository."""
        module = information.module
        scope = module.project.name
        commercial = module.is_commercial

        if not module.is_preview and not commercial:
            self._console.log(
                scope,
                "Not a preview version (milestone or release candidate) or commercial release. "
                "Skipping internal repository deployment.",
            )
            return Ok(False)

        authentication = information.authentication
        missing = _require_server(authentication, "commercial" if commercial else "opensource")
        if isinstance(missing, Err):
            return missing

        kind = "commercial " if commercial else ""
        self._console.log(scope, f"Deploying artifacts to the {kind}internal repository...")

        command = (
            CommandLine.of(CLEAN, DEPLOY, _internal_profile(commercial))
            .and_if(module.project.skip_tests, SKIP_TESTS)
            .and_(
                arg("artifactory.server").with_value(authentication.server_uri),
                arg("artifactory.staging-repository").with_value(authentication.staging_repository or ""),
                arg("artifactory.username").with_value(authentication.username),
                arg("artifactory.password").with_masked_value(authentication.password or ""),
                arg("artifactory.build-name").with_quoted_value(information.build_name),
                arg("artifactory.build-number").with_value(information.build_number),
            )
            .and_(gpg_arguments(self._properties.signing))
            .and_(settings(self._properties))
            .and_if(bool(information.project), lambda: arg("artifactory.project").with_value(information.project))
        )

        result = self._mvn.execute(module.project, command)
        if isinstance(result, Err):
            return result
        return Ok(True)

    def deploy_to_public(self, information: DeploymentInformation) -> Result[bool, BuildError]:
        """Returns Ok(False) when the module is not publicly released."""
        module = information.module
        scope = module.project.name

        if not module.is_public:
            self._console.log(
                scope, "Skipping public repository deployment as it's not a public version."
            )
            return Ok(False)

        self._console.log(scope, "Deploying artifacts to the public repository...")

        gpg = self._properties.signing
        staging_id = information.staging_repository_id
        command = (
            CommandLine.of(CLEAN, DEPLOY, profile("ci", "release", "central"))
            .and_if(module.project.skip_tests, SKIP_TESTS)
            .and_(gpg_arguments(gpg))
            .and_(settings(self._properties))
            .and_if(staging_id is not None, lambda: arg("stagingRepositoryId").with_value(staging_id))
            .and_(secret_keyring(gpg))
        )

        result = self._mvn.execute(module.project, command)
        if isinstance(result, Err):
            return result
        return Ok(True)

    def distribute(self, module: ModuleIteration) -> Result[bool, BuildError]:
        """Push documentation and schema distributions to the distribution repository.

        The schema build only runs after the primary distribution build
        succeeded. Build and bom projects and checkouts without a pom.xml are
        skipped and reported as Ok(False).
        """
        project = module.project
        if project.is_build_project or project.is_bom_project:
            self._console.log(project.name, "Nothing to distribute for build and bom projects.")
            return Ok(False)

        if not self._workspace.get_file(POM_XML, project).exists():
            self._console.log(
                project.name, "Skipping project as no pom.xml could be found in the working directory!"
            )
            return Ok(False)

        information = DeploymentInformation(module, self._properties)
        authentication = information.authentication
        missing = _require_server(
            authentication, "commercial" if module.is_commercial else "opensource"
        )
        if isinstance(missing, Err):
            return missing

        self._console.log(project.name, "Triggering distribution build...")

        for name in DISTRIBUTION_PROFILES:
            command = CommandLine.of(
                CLEAN,
                DEPLOY,
                SKIP_TESTS,
                profile(name),
                BATCH_MODE,
                arg("artifactory.server").with_value(authentication.server_uri),
                arg("artifactory.distribution-repository").with_value(
                    authentication.distribution_repository or ""
                ),
                arg("artifactory.username").with_value(authentication.username),
                arg("artifactory.password").with_masked_value(authentication.password or ""),
                arg("artifactory.build-number").with_value(information.build_number),
            ).and_(settings(self._properties))

            result = self._mvn.execute(project, command)
            if isinstance(result, Err):
                return result

        self._console.log(project.name, "Successfully finished distribution build!")
        return Ok(True)


def _internal_profile(commercial: bool) -> Profile:
    if commercial:
        return profile("ci", "release", "commercial")
    return profile("ci", "release", "artifactory")


def _require_server(
    authentication: Authentication, table: str
) -> Result[None, PreconditionViolation]:
    if not authentication.is_configured:
        return Err(
            PreconditionViolation(
                message="internal repository server and credentials are not configured",
                hint=f"set server_uri and username under [deployment.{table}]",
            )
        )
    return Ok(None)

"""Staging repository lifecycle: open, close, release.

Drives the repository manager through the build tool's staging goals. The
repository id assigned on open is scraped from the build output; close and
release refuse to run without one.
"""

from __future__ import annotations

from rt.core.result import Err, Ok, Result
from rt.deployment.properties import DeploymentProperties
from rt.deployment.staging import (
    REPOSITORY_MESSAGE_FORMAT,
    StagingRepository,
    StagingState,
    parse_staging_repository_id,
)
from rt.model import Train
from rt.output.console import ConsoleProtocol

from .arguments import settings
from .command_line import CommandLine, arg, goal, profile
from .errors import BuildError, PreconditionViolation
from .maven import MavenInvoker

__all__ = ["StagingLifecycle"]

_STAGING_PROFILE_HINT = "set staging_profile_id under [deployment.maven_central]"


class StagingLifecycle:
    def __init__(
        self,
        *,
        mvn: MavenInvoker,
        properties: DeploymentProperties,
        console: ConsoleProtocol,
    ) -> None:
        self._mvn = mvn
        self._properties = properties
        self._console = console

    def open(self, train: Train) -> Result[StagingRepository, BuildError]:
        """Open a staging repository for the train.

        The returned repository may carry an empty id if the build output did
        not report one.
        """
        profile_id = self._properties.maven_central.staging_profile_id
        if not profile_id:
            return Err(
                PreconditionViolation(
                    message="staging profile id must not be empty",
                    hint=_STAGING_PROFILE_HINT,
                )
            )

        command = CommandLine.of(
            goal("nexus-staging:rc-open"),
            profile("central"),
            arg("stagingProfileId").with_value(profile_id),
            arg("openedRepositoryMessageFormat").with_quoted_value(REPOSITORY_MESSAGE_FORMAT),
        ).and_(settings(self._properties))

        result = self._mvn.execute(train.build_project, command)
        if isinstance(result, Err):
            return result

        repository_id = parse_staging_repository_id(result.value.lines)
        if repository_id:
            self._console.log(train.name, f"Opened staging repository with id: {repository_id}")
        else:
            self._console.warning(
                f"{train.name}: staging repository opened but no repository id was reported"
            )
        return Ok(StagingRepository.of(repository_id))

    def close(
        self, train: Train, repository: StagingRepository | None
    ) -> Result[StagingRepository, BuildError]:
        usable = _require_usable(repository, "close")
        if isinstance(usable, Err):
            return usable

        result = self._mvn.execute(train.build_project, self._command("rc-close", usable.value))
        if isinstance(result, Err):
            return result

        self._console.log(train.name, f"Closed staging repository {usable.value.id}.")
        return Ok(usable.value.closed())

    def release(
        self, train: Train, repository: StagingRepository | None
    ) -> Result[StagingRepository, BuildError]:
        usable = _require_usable(repository, "release")
        if isinstance(usable, Err):
            return usable

        result = self._mvn.execute(train.build_project, self._command("rc-release", usable.value))
        if isinstance(result, Err):
            return result

        self._console.log(train.name, f"Released staging repository {usable.value.id}.")
        return Ok(usable.value.released())

    def _command(self, action: str, repository: StagingRepository) -> CommandLine:
        return CommandLine.of(
            goal(f"nexus-staging:{action}"),
            profile("central"),
            arg("stagingRepositoryId").with_value(repository.id),
        ).and_(settings(self._properties))


def _require_usable(
    repository: StagingRepository | None, action: str
) -> Result[StagingRepository, PreconditionViolation]:
    if repository is None or not repository.is_present:
        return Err(PreconditionViolation(message=f"cannot {action}: staging repository must be present"))
    if not repository.has_id:
        return Err(
            PreconditionViolation(
                message=f"cannot {action}: staging repository has no id",
                hint="the open step did not report a repository id; check its output",
            )
        )
    if repository.state is StagingState.RELEASED:
        return Err(
            PreconditionViolation(
                message=f"cannot {action}: staging repository {repository.id} is already released"
            )
        )
    return Ok(repository)

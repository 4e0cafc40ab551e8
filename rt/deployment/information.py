from __future__ import annotations

from dataclasses import dataclass

from rt.model import ModuleIteration

from .properties import Authentication, DeploymentProperties
from .staging import StagingRepository


@dataclass(frozen=True, slots=True)
class DeploymentInformation:
    """What a deployment of one module is recorded as.

    Build name and number identify the upload in the internal repository's
    build info so a deployed artifact can be traced back to its release.
    """

    module: ModuleIteration
    properties: DeploymentProperties
    staging_repository: StagingRepository | None = None

    @property
    def authentication(self) -> Authentication:
        return self.properties.authentication(self.module)

    @property
    def build_name(self) -> str:
        return f"{self.module.train.name} {self.module.project.name}"

    @property
    def build_number(self) -> str:
        return str(self.module.release_version)

    @property
    def target_repository(self) -> str | None:
        return self.authentication.staging_repository

    @property
    def project(self) -> str | None:
        return self.authentication.project

    @property
    def staging_repository_id(self) -> str | None:
        """The staging id to deploy into, or None when no usable id exists."""
        repository = self.staging_repository
        if repository is None or not repository.has_id:
            return None
        return repository.id

"""Release-train domain model."""

from .project import PROJECT_ROLES, SMOKE_TESTS, Project, ProjectRole
from .repository import Repository, RepositoryLayout
from .train import Module, ModuleIteration, Train, TrainIteration
from .version import ArtifactVersion, Iteration, Phase, Version, is_snapshot_version

__all__ = [
    # project
    "PROJECT_ROLES",
    "SMOKE_TESTS",
    "Project",
    "ProjectRole",
    # repository
    "Repository",
    "RepositoryLayout",
    # train
    "Module",
    "ModuleIteration",
    "Train",
    "TrainIteration",
    # version
    "ArtifactVersion",
    "Iteration",
    "Phase",
    "Version",
    "is_snapshot_version",
]

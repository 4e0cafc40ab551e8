"""Workspace detection and paths.

The workspace is the directory holding ``release-train.toml`` and one checkout
per project of the train, each in a directory named by the project key.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from rt.model import Project

from .result import Err, Ok, Result

__all__ = [
    "CONFIG_FILE_NAME",
    "Workspace",
    "WorkspaceError",
    "detect_workspace",
    "find_workspace_upward",
]

CONFIG_FILE_NAME = "release-train.toml"


@dataclass(frozen=True)
class WorkspaceError:
    """Error when workspace cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Workspace:
    root: Path

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILE_NAME

    def project_dir(self, project: Project) -> Path:
        return self.root / project.directory

    def get_file(self, name: str, project: Project) -> Path:
        """Path of a file relative to a project's checkout (e.g. ``bom/pom.xml``)."""
        return self.project_dir(project) / name

    def __str__(self) -> str:
        return str(self.root)


def find_workspace_upward(start: Path) -> Path | None:
    """Search upward from start directory for a workspace root."""
    for parent in (start, *start.parents):
        if (parent / CONFIG_FILE_NAME).is_file():
            return parent
    return None


def detect_workspace(
    *,
    start_dir: Path | None = None,
    env_var: str = "RT_WORKSPACE",
) -> Result[Workspace, WorkspaceError]:
    """Detect the workspace root directory.

    Detection order:
    1. RT_WORKSPACE environment variable (if set and valid)
    2. Search upward from start_dir (or cwd) for release-train.toml
    """
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if (env_path / CONFIG_FILE_NAME).is_file():
            return Ok(Workspace(root=env_path))
        return Err(
            WorkspaceError(
                message=f"{env_var}={env_value} has no {CONFIG_FILE_NAME}",
                searched_from=env_path,
            )
        )

    start = (start_dir or Path.cwd()).resolve()
    root = find_workspace_upward(start)
    if root is None:
        return Err(
            WorkspaceError(
                message=f"no {CONFIG_FILE_NAME} found in {start} or its parents",
                searched_from=start,
            )
        )
    return Ok(Workspace(root=root))

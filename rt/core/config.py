"""Typed configuration loading.

``release-train.toml`` describes the train being released and where its
artifacts go. It is parsed into frozen dataclasses; anything malformed becomes
a ConfigError instead of an exception.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from rt.deployment.properties import Authentication, DeploymentProperties, Gpg, MavenCentral
from rt.model import (
    PROJECT_ROLES,
    Iteration,
    Module,
    Project,
    ProjectRole,
    Repository,
    RepositoryLayout,
    Train,
    Version,
)

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_str,
    get_str_list,
    get_table,
)

__all__ = [
    "ConfigError",
    "MavenConfig",
    "ReleaseConfig",
    "load_config",
]


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class MavenConfig:
    executable: str = "mvn"
    timeout_seconds: float | None = None
    java_homes: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Main configuration container."""

    maven: MavenConfig = field(default_factory=MavenConfig)
    deployment: DeploymentProperties = field(default_factory=DeploymentProperties)
    repositories: RepositoryLayout = field(default_factory=RepositoryLayout)
    train: Train | None = None
    iteration: Iteration | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create ReleaseConfig from parsed TOML.

        Raises:
            ValueError: On invalid versions, iterations or train structure.
        """
        maven: StrDict = get_table(data, "maven") or {}
        deployment: StrDict = get_table(data, "deployment") or {}
        central: StrDict = get_table(deployment, "maven_central") or {}
        repositories: StrDict = get_table(data, "repositories") or {}
        train_table = get_table(data, "train")

        timeout = get_int(maven, "timeout_seconds")
        java_homes = get_table(maven, "java_homes") or {}
        central_gpg = get_table(central, "gpg")

        iteration: Iteration | None = None
        if train_table is not None:
            iteration_name = get_str(train_table, "iteration")
            if iteration_name:
                iteration = Iteration.parse(iteration_name)

        defaults = RepositoryLayout()
        return cls(
            maven=MavenConfig(
                executable=get_str(maven, "executable") or "mvn",
                timeout_seconds=float(timeout) if timeout else None,
                java_homes={
                    name: home
                    for name in java_homes
                    if (home := get_str(java_homes, name)) is not None
                },
            ),
            deployment=DeploymentProperties(
                settings_xml=get_str(maven, "settings_xml"),
                gpg=_gpg(get_table(data, "gpg") or {}),
                maven_central=MavenCentral(
                    staging_profile_id=get_str(central, "staging_profile_id"),
                    gpg=_gpg(central_gpg) if central_gpg is not None else None,
                ),
                opensource=_authentication(get_table(deployment, "opensource") or {}),
                commercial=_authentication(get_table(deployment, "commercial") or {}),
            ),
            repositories=RepositoryLayout(
                snapshot=_repository(get_table(repositories, "snapshot"), defaults.snapshot),
                milestone=_repository(get_table(repositories, "milestone"), defaults.milestone),
            ),
            train=_train(train_table) if train_table is not None else None,
            iteration=iteration,
        )


def _gpg(table: StrDict) -> Gpg:
    return Gpg(
        executable=get_str(table, "executable") or "gpg",
        keyname=get_str(table, "keyname"),
        passphrase=get_str(table, "passphrase"),
        secret_keyring=get_str(table, "secret_keyring"),
    )


def _authentication(table: StrDict) -> Authentication:
    return Authentication(
        server_uri=get_str(table, "server_uri"),
        staging_repository=get_str(table, "staging_repository"),
        distribution_repository=get_str(table, "distribution_repository"),
        username=get_str(table, "username"),
        password=get_str(table, "password"),
        project=get_str(table, "project"),
    )


def _repository(table: StrDict | None, default: Repository) -> Repository:
    if table is None:
        return default
    return Repository(
        id=get_str(table, "id") or default.id,
        url=get_str(table, "url") or default.url,
    )


def _train(table: StrDict) -> Train:
    name = get_str(table, "name")
    if name is None:
        raise ValueError("[train] name is required")

    modules: list[Module] = []
    for index, entry in enumerate(get_list(table, "modules") or []):
        module_table = as_str_dict(entry)
        if module_table is None:
            raise ValueError(f"[[train.modules]] entry {index} must be a table")
        modules.append(_module(module_table, index))

    calver = get_str(table, "calver")
    artifact_prefix = get_str(table, "artifact_prefix") or name.lower()
    return Train(
        name=name,
        modules=tuple(modules),
        group_id=get_str(table, "group_id") or f"org.{artifact_prefix.replace('-', '.')}",
        artifact_prefix=artifact_prefix,
        calver=Version.parse(calver) if calver else None,
        commercial=get_bool(table, "commercial"),
    )


def _module(table: StrDict, index: int) -> Module:
    key = get_str(table, "key")
    version = get_str(table, "version")
    if key is None or version is None:
        raise ValueError(f"[[train.modules]] entry {index} needs key and version")

    role = get_str(table, "role") or "module"
    if role not in PROJECT_ROLES:
        raise ValueError(f"module {key}: unknown role {role!r}")
    project_role: ProjectRole = role  # type: ignore[assignment]

    return Module(
        project=Project(
            key=key,
            name=get_str(table, "name") or key.capitalize(),
            role=project_role,
            artifact_id=get_str(table, "artifact_id"),
            additional_artifacts=get_str_list(table, "additional_artifacts"),
            skip_tests=get_bool(table, "skip_tests"),
        ),
        version=Version.parse(version),
    )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to release-train.toml

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))

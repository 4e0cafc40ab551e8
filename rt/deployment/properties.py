"""Credentials and signing settings for deployments."""

from __future__ import annotations

from dataclasses import dataclass, field

from rt.model import ModuleIteration, Train


@dataclass(frozen=True, slots=True)
class Gpg:
    """Signing configuration handed to the build tool's gpg plugin."""

    executable: str = "gpg"
    keyname: str | None = None
    passphrase: str | None = None
    secret_keyring: str | None = None

    @property
    def is_configured(self) -> bool:
        return self.keyname is not None

    @property
    def has_secret_keyring(self) -> bool:
        return bool(self.secret_keyring)


@dataclass(frozen=True, slots=True)
class Authentication:
    """Internal (Artifactory) repository endpoint and credentials."""

    server_uri: str | None = None
    staging_repository: str | None = None
    distribution_repository: str | None = None
    username: str | None = None
    password: str | None = None
    project: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.server_uri and self.username)


@dataclass(frozen=True, slots=True)
class MavenCentral:
    """Public repository staging settings."""

    staging_profile_id: str | None = None
    gpg: Gpg | None = None

    @property
    def has_gpg_configuration(self) -> bool:
        return self.gpg is not None and self.gpg.is_configured


@dataclass(frozen=True, slots=True)
class DeploymentProperties:
    settings_xml: str | None = None
    gpg: Gpg = field(default_factory=Gpg)
    maven_central: MavenCentral = field(default_factory=MavenCentral)
    opensource: Authentication = field(default_factory=Authentication)
    commercial: Authentication = field(default_factory=Authentication)

    @property
    def has_settings_xml(self) -> bool:
        return bool(self.settings_xml)

    @property
    def signing(self) -> Gpg:
        """Gpg used for public deployments: the Maven Central override if set."""
        central_gpg = self.maven_central.gpg
        if central_gpg is not None and central_gpg.is_configured:
            return central_gpg
        return self.gpg

    def authentication(self, subject: ModuleIteration | Train) -> Authentication:
        commercial = (
            subject.is_commercial if isinstance(subject, ModuleIteration) else subject.commercial
        )
        return self.commercial if commercial else self.opensource

"""Argument groups shared by several invocations."""

from __future__ import annotations

from rt.deployment.properties import DeploymentProperties, Gpg

from .command_line import CommandLine, arg, settings_xml


def settings(properties: DeploymentProperties) -> CommandLine:
    """``-s <file>`` when an alternate settings file is configured, else nothing."""
    return CommandLine().and_if(
        properties.has_settings_xml,
        lambda: settings_xml(properties.settings_xml or ""),
    )


def gpg_arguments(gpg: Gpg) -> CommandLine:
    return (
        CommandLine.of(arg("gpg.executable").with_value(gpg.executable))
        .and_if(gpg.keyname is not None, lambda: arg("gpg.keyname").with_value(gpg.keyname))
        .and_if(
            gpg.passphrase is not None,
            lambda: arg("gpg.passphrase").with_masked_value(gpg.passphrase),
        )
    )


def secret_keyring(gpg: Gpg) -> CommandLine:
    return CommandLine().and_if(
        gpg.has_secret_keyring,
        lambda: arg("gpg.secretKeyring").with_value(gpg.secret_keyring),
    )

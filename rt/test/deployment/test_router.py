"""Tests for rt.deployment.router module."""

from __future__ import annotations

from pathlib import Path

from rt.build.errors import InvocationFailed, PreconditionViolation
from rt.core.result import Err, Ok
from rt.core.workspace import Workspace
from rt.deployment.information import DeploymentInformation
from rt.deployment.properties import Authentication, DeploymentProperties, Gpg, MavenCentral
from rt.deployment.router import DeploymentRouter
from rt.deployment.staging import StagingRepository
from rt.model import ModuleIteration
from rt.output.console import MockConsole
from rt.test._fakes import BOM, BUILD, COMMONS, JPA, MODULE_POM, RecordingInvoker, make_iteration, write

PROPERTIES = DeploymentProperties(
    gpg=Gpg(keyname="builds@example.org", passphrase="gpg-secret"),
    maven_central=MavenCentral(staging_profile_id="abc123"),
    opensource=Authentication(
        server_uri="https://repo.example.org",
        staging_repository="libs-staging-local",
        distribution_repository="temp-private-local",
        username="deployer",
        password="secret",
    ),
    commercial=Authentication(
        server_uri="https://commercial.example.org",
        staging_repository="commercial-staging-local",
        distribution_repository="commercial-dist-local",
        username="commercial-deployer",
        password="commercial-secret",
        project="data",
    ),
)


def _router(
    mvn: RecordingInvoker,
    tmp_path: Path,
    *,
    properties: DeploymentProperties = PROPERTIES,
    console: MockConsole | None = None,
    with_poms: bool = True,
) -> DeploymentRouter:
    if with_poms:
        for project in (COMMONS, JPA):
            write(tmp_path / project.directory / "pom.xml", MODULE_POM)
    return DeploymentRouter(
        mvn=mvn,
        properties=properties,
        workspace=Workspace(root=tmp_path),
        console=console or MockConsole(),
    )


def _deploy(
    router: DeploymentRouter,
    module: ModuleIteration,
    staging: StagingRepository | None = None,
) -> DeploymentInformation:
    result = router.deploy(DeploymentInformation(module, PROPERTIES, staging))
    assert isinstance(result, Ok)
    return result.value


class TestDeploy:
    def test_preview_goes_to_internal_repository_only(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()
        console = MockConsole()

        _deploy(_router(mvn, tmp_path, console=console), make_iteration("M1").module(COMMONS))

        assert len(mvn.calls) == 1
        args = mvn.args[0]
        assert args[:3] == ["clean", "deploy", "-Pci,release,artifactory"]
        assert "-Dartifactory.server=https://repo.example.org" in args
        assert "-Dartifactory.staging-repository=libs-staging-local" in args
        assert "-Dartifactory.password=secret" in args
        assert "-Dartifactory.build-name=Ullman Commons" in args
        assert "-Dartifactory.build-number=3.1.0-M1" in args
        assert "-Dgpg.keyname=builds@example.org" in args
        assert console.find("Skipping public repository deployment")

    def test_public_without_staging_omits_staging_id(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()
        console = MockConsole()

        _deploy(_router(mvn, tmp_path, console=console), make_iteration("GA").module(COMMONS))

        assert len(mvn.calls) == 1
        args = mvn.args[0]
        assert args[:3] == ["clean", "deploy", "-Pci,release,central"]
        assert not any(a.startswith("-DstagingRepositoryId") for a in args)
        assert console.find("Skipping internal repository deployment")

    def test_public_with_staging_repository(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()

        _deploy(
            _router(mvn, tmp_path),
            make_iteration("SR1").module(COMMONS),
            StagingRepository.of("orgexample-1042"),
        )

        assert "-DstagingRepositoryId=orgexample-1042" in mvn.args[0]

    def test_public_with_empty_staging_id_omits_argument(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()

        _deploy(_router(mvn, tmp_path), make_iteration("GA").module(COMMONS), StagingRepository.of(""))

        assert not any(a.startswith("-DstagingRepositoryId") for a in mvn.args[0])

    def test_commercial_uses_commercial_profile_and_credentials(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()

        _deploy(_router(mvn, tmp_path), make_iteration("GA", commercial=True).module(COMMONS))

        assert len(mvn.calls) == 1
        args = mvn.args[0]
        assert "-Pci,release,commercial" in args
        assert "-Dartifactory.server=https://commercial.example.org" in args
        assert "-Dartifactory.username=commercial-deployer" in args
        assert "-Dartifactory.project=data" in args

    def test_tests_skipped_only_when_project_declares_it(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()
        router = _router(mvn, tmp_path)
        iteration = make_iteration("M1")

        _deploy(router, iteration.module(COMMONS))
        _deploy(router, iteration.module(JPA))

        assert "-DskipTests" not in mvn.args[0]
        assert "-DskipTests" in mvn.args[1]

    def test_secret_keyring_for_public_deployment(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()
        properties = DeploymentProperties(
            gpg=Gpg(keyname="k", passphrase="p", secret_keyring="/keys/secring.gpg"),
        )
        router = _router(mvn, tmp_path, properties=properties)

        router.deploy(DeploymentInformation(make_iteration("GA").module(COMMONS), properties))

        assert mvn.args[0][-1] == "-Dgpg.secretKeyring=/keys/secring.gpg"

    def test_settings_xml_appended(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()
        properties = DeploymentProperties(settings_xml="ci/settings.xml")
        router = _router(mvn, tmp_path, properties=properties)

        router.deploy(DeploymentInformation(make_iteration("GA").module(COMMONS), properties))

        args = mvn.args[0]
        index = args.index("-s")
        assert args[index + 1] == "ci/settings.xml"

    def test_masked_secrets_not_rendered(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()

        _deploy(_router(mvn, tmp_path), make_iteration("M1").module(COMMONS))

        rendered = mvn.calls[0].command_line.render()
        assert "-Dartifactory.password=secret" not in rendered
        assert "gpg-secret" not in rendered

    def test_unconfigured_internal_repository_rejected(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()
        properties = DeploymentProperties()
        router = _router(mvn, tmp_path, properties=properties)

        result = router.deploy(DeploymentInformation(make_iteration("M1").module(COMMONS), properties))

        assert isinstance(result, Err)
        assert isinstance(result.error, PreconditionViolation)
        assert mvn.calls == []

    def test_project_without_pom_is_not_deployed(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()
        console = MockConsole()
        router = _router(mvn, tmp_path, console=console, with_poms=False)
        information = DeploymentInformation(make_iteration("M1").module(COMMONS), PROPERTIES)

        result = router.deploy(information)

        assert result == Ok(information)
        assert mvn.calls == []
        assert console.find("No pom.xml file found")


class TestDistribute:
    def test_build_and_bom_are_skipped(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()
        router = _router(mvn, tmp_path)
        iteration = make_iteration("GA")

        assert router.distribute(iteration.module(BUILD)) == Ok(False)
        assert router.distribute(iteration.module(BOM)) == Ok(False)
        assert mvn.calls == []

    def test_project_without_pom_is_skipped(self, tmp_path: Path) -> None:
        mvn = RecordingInvoker()
        console = MockConsole()
        router = _router(mvn, tmp_path, console=console, with_poms=False)

        result = router.distribute(make_iteration("GA").module(COMMONS))

        assert result == Ok(False)
        assert mvn.calls == []
        assert console.find("no pom.xml")

    def test_primary_then_schema(self, tmp_path: Path) -> None:
        write(tmp_path / "commons" / "pom.xml", MODULE_POM)
        mvn = RecordingInvoker()

        result = _router(mvn, tmp_path).distribute(make_iteration("GA").module(COMMONS))

        assert result == Ok(True)
        assert [a[3] for a in mvn.args] == ["-Pdistribute", "-Pdistribute-schema"]
        for args in mvn.args:
            assert args[:3] == ["clean", "deploy", "-DskipTests"]
            assert "-Dartifactory.distribution-repository=temp-private-local" in args
            assert "-Dartifactory.build-number=3.1.0" in args

    def test_schema_not_attempted_when_primary_fails(self, tmp_path: Path) -> None:
        write(tmp_path / "commons" / "pom.xml", MODULE_POM)
        mvn = RecordingInvoker(fail_at={0})

        result = _router(mvn, tmp_path).distribute(make_iteration("GA").module(COMMONS))

        assert isinstance(result, Err)
        assert isinstance(result.error, InvocationFailed)
        assert len(mvn.calls) == 1

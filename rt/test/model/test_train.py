"""Tests for rt.model.train module."""

from __future__ import annotations

import pytest

from rt.model import SMOKE_TESTS, Iteration, Module, Phase, Project, Train, Version
from rt.test._fakes import BOM, BUILD, COMMONS, JPA, make_iteration, make_train


class TestTrain:
    def test_requires_exactly_one_build_project(self) -> None:
        with pytest.raises(ValueError, match="build project"):
            Train(
                name="Ullman",
                modules=(Module(COMMONS, Version(3, 1)),),
                group_id="org.example.data",
                artifact_prefix="example-data",
            )

    def test_rejects_two_boms(self) -> None:
        other = Project(key="bom2", name="BOM 2", role="bom")
        with pytest.raises(ValueError, match="bom"):
            Train(
                name="Ullman",
                modules=(
                    Module(BUILD, Version(3, 1)),
                    Module(BOM, Version(3, 1)),
                    Module(other, Version(3, 1)),
                ),
                group_id="org.example.data",
                artifact_prefix="example-data",
            )

    def test_rejects_duplicate_keys(self) -> None:
        with pytest.raises(ValueError, match="duplicate"):
            Train(
                name="Ullman",
                modules=(Module(BUILD, Version(3, 1)), Module(BUILD, Version(3, 2))),
                group_id="org.example.data",
                artifact_prefix="example-data",
            )

    def test_projects(self) -> None:
        train = make_train()
        assert train.build_project == BUILD
        assert train.bom_project == BOM
        assert not train.is_bom_in_build_project
        assert make_train(with_bom=False).is_bom_in_build_project
        assert train.smoke_tests_project == SMOKE_TESTS
        assert train.project("jpa") == JPA
        assert train.project("unknown") is None

    def test_artifact_names(self) -> None:
        train = make_train()
        assert train.artifact_id(COMMONS) == "example-data-commons"
        assert train.dependency_property(COMMONS) == "exampledata.commons"
        assert train.releasetrain_artifact_id == "example-data-releasetrain"
        assert train.bom_artifact_id == "example-data-bom"

    def test_module_of_unknown_project(self) -> None:
        with pytest.raises(KeyError):
            make_train().module(SMOKE_TESTS)


class TestTrainIteration:
    def test_modules_keep_order(self) -> None:
        iteration = make_iteration("M1")
        assert [m.project for m in iteration.modules] == [BUILD, BOM, COMMONS, JPA]
        assert [m.project for m in iteration.modules_except(BUILD, BOM)] == [COMMONS, JPA]

    @pytest.mark.parametrize(
        ("name", "prepare"),
        [("M1", "Ullman-M1"), ("RC2", "Ullman-RC2"), ("GA", "Ullman-RELEASE"), ("SR1", "Ullman-SR1")],
    )
    def test_named_release_train_version(self, name: str, prepare: str) -> None:
        iteration = make_iteration(name)
        assert iteration.release_train_version(Phase.PREPARE) == prepare
        assert iteration.release_train_version(Phase.CLEANUP) == "Ullman-BUILD-SNAPSHOT"

    def test_calver_release_train_version(self) -> None:
        iteration = make_train(calver=Version(2023, 1)).iteration(Iteration.parse("GA"))
        assert iteration.release_train_version(Phase.PREPARE) == "2023.1.0"
        assert iteration.release_train_version(Phase.CLEANUP) == "2023.1.1-SNAPSHOT"

    def test_public_and_commercial(self) -> None:
        assert make_iteration("GA").is_public
        assert not make_iteration("M1").is_public
        assert not make_iteration("GA", commercial=True).is_public
        assert make_iteration("GA", commercial=True).is_commercial


class TestModuleIteration:
    def test_versions_by_phase(self) -> None:
        module = make_iteration("RC1").module(COMMONS)
        assert str(module.version_for(Phase.PREPARE)) == "3.1.0-RC1"
        assert str(module.version_for(Phase.CLEANUP)) == "3.1.0-SNAPSHOT"

    def test_flags(self) -> None:
        module = make_iteration("M1").module(COMMONS)
        assert module.is_preview
        assert not module.is_public
        assert not module.is_commercial

    def test_immutable(self) -> None:
        module = make_iteration("M1").module(COMMONS)
        with pytest.raises(AttributeError):
            module.iteration = Iteration.parse("GA")  # type: ignore[misc]

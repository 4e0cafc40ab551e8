"""Shared test doubles and sample trains."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rt.build.command_line import CommandLine
from rt.build.errors import InvocationFailed, PreconditionViolation
from rt.build.maven import InvocationResult, MavenInvoker
from rt.core.result import Err, Ok, Result
from rt.model import Iteration, Module, Project, Train, TrainIteration, Version

BUILD = Project(key="build", name="Build", role="build")
BOM = Project(key="bom", name="BOM", role="bom")
COMMONS = Project(key="commons", name="Commons")
JPA = Project(key="jpa", name="JPA", additional_artifacts=("example-data-envers",), skip_tests=True)


def make_train(
    *,
    with_bom: bool = True,
    calver: Version | None = None,
    commercial: bool = False,
) -> Train:
    modules = [Module(BUILD, Version(3, 1))]
    if with_bom:
        modules.append(Module(BOM, Version(2023, 1)))
    modules += [Module(COMMONS, Version(3, 1)), Module(JPA, Version(3, 1))]
    return Train(
        name="Ullman",
        modules=tuple(modules),
        group_id="org.example.data",
        artifact_prefix="example-data",
        calver=calver,
        commercial=commercial,
    )


def make_iteration(name: str = "M1", **kwargs: object) -> TrainIteration:
    return make_train(**kwargs).iteration(Iteration.parse(name))  # type: ignore[arg-type]


@dataclass
class Call:
    project: Project
    command_line: CommandLine
    tolerate_failure: bool

    @property
    def args(self) -> list[str]:
        return self.command_line.to_args()


@dataclass
class RecordingInvoker:
    """MavenInvoker that records command lines instead of running Maven.

    ``outputs`` are handed out in order as the captured lines of successive
    calls; calls whose index is in ``fail_at`` return InvocationFailed.
    """

    outputs: list[tuple[str, ...]] = field(default_factory=list)
    fail_at: set[int] = field(default_factory=set)
    calls: list[Call] = field(default_factory=list)
    java: str | None = None

    def execute(
        self,
        project: Project,
        command_line: CommandLine,
        *,
        tolerate_failure: bool = False,
    ) -> Result[InvocationResult, InvocationFailed]:
        index = len(self.calls)
        self.calls.append(Call(project, command_line, tolerate_failure))
        if index in self.fail_at:
            return Err(
                InvocationFailed(
                    project=project.name,
                    command=("mvn", *(p.render() for p in command_line.parts)),
                    returncode=1,
                    lines=("[ERROR] BUILD FAILURE",),
                )
            )
        lines = self.outputs.pop(0) if self.outputs else ()
        return Ok(InvocationResult(exit_status=0, lines=lines))

    def with_java_version(self, name: str) -> Result[MavenInvoker, PreconditionViolation]:
        return Ok(RecordingInvoker(outputs=self.outputs, fail_at=self.fail_at, calls=self.calls, java=name))

    @property
    def args(self) -> list[list[str]]:
        return [c.args for c in self.calls]


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


POM_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<project xmlns="http://maven.apache.org/POM/4.0.0" '
    'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">\n'
)

MODULE_POM = (
    POM_HEADER
    + """\t<modelVersion>4.0.0</modelVersion>
\t<parent>
\t\t<groupId>org.example.data.build</groupId>
\t\t<artifactId>example-data-parent</artifactId>
\t\t<version>3.1.0-SNAPSHOT</version>
\t</parent>
\t<artifactId>example-data-jpa</artifactId>
\t<version>3.1.0-SNAPSHOT</version>
\t<properties>
\t\t<!-- sibling versions -->
\t\t<exampledata.commons>3.1.0-SNAPSHOT</exampledata.commons>
\t\t<hibernate>6.2.0.Final</hibernate>
\t</properties>
\t<repositories>
\t\t<repository>
\t\t\t<id>snapshots</id>
\t\t\t<url>https://repo.example.org/snapshot</url>
\t\t</repository>
\t</repositories>
</project>
"""
)

BOM_POM = (
    POM_HEADER
    + """\t<modelVersion>4.0.0</modelVersion>
\t<groupId>org.example.data</groupId>
\t<artifactId>example-data-bom</artifactId>
\t<version>2023.1.0-SNAPSHOT</version>
\t<packaging>pom</packaging>
\t<dependencyManagement>
\t\t<dependencies>
\t\t\t<dependency>
\t\t\t\t<groupId>org.example.data</groupId>
\t\t\t\t<artifactId>example-data-commons</artifactId>
\t\t\t\t<version>3.1.0-SNAPSHOT</version>
\t\t\t</dependency>
\t\t\t<dependency>
\t\t\t\t<groupId>org.example.data</groupId>
\t\t\t\t<artifactId>example-data-jpa</artifactId>
\t\t\t\t<version>3.1.0-SNAPSHOT</version>
\t\t\t</dependency>
\t\t</dependencies>
\t</dependencyManagement>
</project>
"""
)

PARENT_POM = (
    POM_HEADER
    + """\t<modelVersion>4.0.0</modelVersion>
\t<groupId>org.example.data.build</groupId>
\t<artifactId>example-data-parent</artifactId>
\t<version>3.1.0-SNAPSHOT</version>
\t<properties>
\t\t<releasetrain>Ullman-BUILD-SNAPSHOT</releasetrain>
\t</properties>
\t<profiles>
\t\t<profile>
\t\t\t<id>distribute</id>
\t\t\t<dependencies>
\t\t\t\t<dependency>
\t\t\t\t\t<groupId>org.example.data.build</groupId>
\t\t\t\t\t<artifactId>example-data-build-resources</artifactId>
\t\t\t\t\t<version>3.1.0-SNAPSHOT</version>
\t\t\t\t</dependency>
\t\t\t</dependencies>
\t\t</profile>
\t</profiles>
</project>
"""
)

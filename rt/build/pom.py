"""Typed projections over Maven project descriptors.

A projection wraps a parsed ``pom.xml`` tree and exposes the handful of
values the release workflow reads and writes. Parsing keeps comments, and
elements added by a projection are indented like their siblings so an edited
descriptor still diffs cleanly.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Self

from rt.model import is_snapshot_version

__all__ = ["Artifact", "BomPom", "ParentPom", "Pom", "POM_NAMESPACE"]

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"

# Serialize the POM namespace as the default namespace instead of ns0:.
ET.register_namespace("", POM_NAMESPACE)


@dataclass(frozen=True, slots=True)
class Artifact:
    group_id: str | None
    artifact_id: str
    version: str | None

    def __str__(self) -> str:
        return f"{self.group_id or '?'}:{self.artifact_id}:{self.version or '?'}"


class Pom:
    """Project descriptor: version, parent, properties and repositories."""

    def __init__(self, root: ET.Element) -> None:
        self._root = root
        self._ns = _namespace_of(root.tag)
        self._indent = _indent_unit(root)

    @classmethod
    def parse(cls, content: bytes) -> Self:
        """Parse descriptor bytes.

        Raises:
            xml.etree.ElementTree.ParseError: If content is not well-formed XML.
        """
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        parser.feed(content)
        return cls(parser.close())

    def to_bytes(self) -> bytes:
        text = ET.tostring(self._root, encoding="unicode")
        if not text.endswith("\n"):
            text += "\n"
        return ('<?xml version="1.0" encoding="UTF-8"?>\n' + text).encode("utf-8")

    # -- element helpers ----------------------------------------------------

    def _tag(self, name: str) -> str:
        return f"{{{self._ns}}}{name}" if self._ns else name

    def _path(self, *names: str) -> str:
        return "/".join(self._tag(n) for n in names)

    def _text(self, element: ET.Element | None, name: str) -> str | None:
        if element is None:
            return None
        child = element.find(self._tag(name))
        if child is None or child.text is None:
            return None
        return child.text.strip()

    def _child(self, parent: ET.Element, name: str, level: int) -> ET.Element:
        """Existing child element, or a new one appended at the given depth."""
        child = parent.find(self._tag(name))
        if child is None:
            child = ET.Element(self._tag(name))
            _append(parent, child, level, self._indent)
        return child

    def _set_text(self, parent: ET.Element, name: str, value: str, level: int) -> None:
        self._child(parent, name, level).text = value

    # -- version and parent -------------------------------------------------

    @property
    def version(self) -> str | None:
        return self._text(self._root, "version")

    def set_version(self, version: str) -> None:
        self._set_text(self._root, "version", version, 1)

    @property
    def parent_version(self) -> str | None:
        return self._text(self._root.find(self._tag("parent")), "version")

    def set_parent_version(self, version: str) -> bool:
        """Set the parent's version; False when the descriptor has no parent."""
        parent = self._root.find(self._tag("parent"))
        if parent is None:
            return False
        self._set_text(parent, "version", version, 2)
        return True

    # -- properties ---------------------------------------------------------

    def get_property(self, name: str) -> str | None:
        return self._text(self._root.find(self._tag("properties")), name)

    def set_property(self, name: str, value: str) -> bool:
        """Update an existing property; returns False if it is not declared."""
        properties = self._root.find(self._tag("properties"))
        if properties is None:
            return False
        element = properties.find(self._tag(name))
        if element is None:
            return False
        element.text = value
        return True

    def define_property(self, name: str, value: str) -> None:
        """Set a property, declaring it (and ``<properties>``) when missing."""
        properties = self._child(self._root, "properties", 1)
        self._set_text(properties, name, value, 2)

    # -- repositories -------------------------------------------------------

    @property
    def has_repositories(self) -> bool:
        return self._root.find(self._tag("repositories")) is not None

    def repository_ids(self) -> tuple[str, ...]:
        repositories = self._root.find(self._tag("repositories"))
        if repositories is None:
            return ()
        ids = (self._text(r, "id") for r in repositories.findall(self._tag("repository")))
        return tuple(i for i in ids if i)

    def remove_repository(self, repository_id: str) -> bool:
        repositories = self._root.find(self._tag("repositories"))
        if repositories is None:
            return False
        for repository in repositories.findall(self._tag("repository")):
            if self._text(repository, "id") == repository_id:
                _remove(repositories, repository)
                return True
        return False

    def add_repository(self, repository_id: str, url: str) -> bool:
        """Declare a repository; returns False if one with that id exists."""
        if repository_id in self.repository_ids():
            return False
        repositories = self._child(self._root, "repositories", 1)
        repository = ET.Element(self._tag("repository"))
        for name, value in (("id", repository_id), ("url", url)):
            ET.SubElement(repository, self._tag(name)).text = value
        _append(repositories, repository, 2, self._indent)
        return True

    # -- dependencies -------------------------------------------------------

    def _artifact(self, dependency: ET.Element) -> Artifact:
        return Artifact(
            group_id=self._text(dependency, "groupId"),
            artifact_id=self._text(dependency, "artifactId") or "",
            version=self._text(dependency, "version"),
        )

    def _dependency(self, container: ET.Element | None, artifact_id: str) -> ET.Element | None:
        if container is None:
            return None
        for dependency in container.findall(self._tag("dependency")):
            if self._text(dependency, "artifactId") == artifact_id:
                return dependency
        return None


class ParentPom(Pom):
    """The build project's parent descriptor."""

    def set_shared_resources_version(self, artifact_id: str, version: str) -> bool:
        """Pin the shared build resources used by the ``distribute`` profile.

        Returns False when the profile does not declare the dependency.
        """
        profiles = self._root.find(self._tag("profiles"))
        if profiles is None:
            return False
        for profile in profiles.findall(self._tag("profile")):
            if self._text(profile, "id") != "distribute":
                continue
            dependencies = profile.find(self._tag("dependencies"))
            dependency = self._dependency(dependencies, artifact_id)
            if dependency is not None:
                self._set_text(dependency, "version", version, 5)
                return True
        return False

    @property
    def release_train(self) -> str | None:
        return self.get_property("releasetrain")

    def set_release_train(self, version: str) -> None:
        self.define_property("releasetrain", version)


class BomPom(Pom):
    """Bill of materials: the train's managed dependency versions."""

    def _managed(self) -> ET.Element | None:
        return self._root.find(self._path("dependencyManagement", "dependencies"))

    def managed_dependencies(self) -> list[Artifact]:
        managed = self._managed()
        if managed is None:
            return []
        return [self._artifact(d) for d in managed.findall(self._tag("dependency"))]

    def managed_dependency(self, artifact_id: str) -> Artifact | None:
        dependency = self._dependency(self._managed(), artifact_id)
        return None if dependency is None else self._artifact(dependency)

    def set_managed_version(
        self, artifact_id: str, version: str, *, group_id: str | None = None
    ) -> bool:
        """Set the managed version of artifact_id.

        A missing entry is declared when group_id is given; without it, nothing
        is added and False is returned.
        """
        dependency = self._dependency(self._managed(), artifact_id)
        if dependency is not None:
            self._set_text(dependency, "version", version, 4)
            return True
        if group_id is None:
            return False

        management = self._child(self._root, "dependencyManagement", 1)
        managed = self._child(management, "dependencies", 2)
        dependency = ET.Element(self._tag("dependency"))
        for name, value in (("groupId", group_id), ("artifactId", artifact_id), ("version", version)):
            ET.SubElement(dependency, self._tag(name)).text = value
        _append(managed, dependency, 3, self._indent)
        return True

    def snapshot_dependencies(self) -> list[Artifact]:
        return [
            a for a in self.managed_dependencies() if a.version and is_snapshot_version(a.version)
        ]


def _namespace_of(tag: str) -> str:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return ""


def _indent_unit(root: ET.Element) -> str:
    text = root.text or ""
    if "\n" in text:
        unit = text.rsplit("\n", 1)[1]
        if unit and not unit.strip():
            return unit
    return "\t"


def _append(parent: ET.Element, child: ET.Element, level: int, unit: str) -> None:
    """Append child at depth level, matching the surrounding indentation."""
    ET.indent(child, space=unit, level=level)
    children = list(parent)
    if children:
        last = children[-1]
        child.tail = last.tail
        last.tail = "\n" + unit * level
    else:
        parent.text = "\n" + unit * level
        child.tail = "\n" + unit * (level - 1)
    parent.append(child)


def _remove(parent: ET.Element, child: ET.Element) -> None:
    """Remove child and hand its trailing whitespace to the previous node."""
    children = list(parent)
    index = children.index(child)
    if index > 0:
        children[index - 1].tail = child.tail
    else:
        parent.text = child.tail
    parent.remove(child)

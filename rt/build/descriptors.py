"""Scoped read-modify-write of project descriptors.

edit_descriptor is the only way the release workflow changes a descriptor:
the file is parsed into a projection, the caller's edit runs, and the result
is written back atomically. If parsing fails, the edit returns Err or raises,
or serialization fails, the file on disk is left untouched.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Callable
from pathlib import Path

from rt.core.result import Err, Ok, Result
from rt.platform.files import atomic_write_bytes

from .errors import BuildError, DescriptorError
from .pom import Pom

__all__ = ["edit_descriptor"]


def edit_descriptor[P: Pom](
    path: Path,
    projection: type[P],
    edit: Callable[[P], Result[None, BuildError]],
) -> Result[None, BuildError]:
    """Apply edit to the descriptor at path and persist it.

    Args:
        path: Descriptor file.
        projection: Pom subclass to view the document through.
        edit: Mutates the projection; an Err aborts without writing.

    Returns:
        Ok(None) once the updated descriptor is on disk, otherwise the error.
    """
    try:
        content = path.read_bytes()
    except OSError as e:
        return Err(DescriptorError(path=path, reason=f"cannot read descriptor: {e}"))

    try:
        pom = projection.parse(content)
    except ET.ParseError as e:
        return Err(DescriptorError(path=path, reason=f"malformed descriptor: {e}"))

    outcome = edit(pom)
    if isinstance(outcome, Err):
        return outcome

    try:
        updated = pom.to_bytes()
    except (TypeError, ValueError) as e:
        return Err(DescriptorError(path=path, reason=f"cannot serialize descriptor: {e}"))

    try:
        atomic_write_bytes(path, updated)
    except OSError as e:
        return Err(DescriptorError(path=path, reason=f"cannot write descriptor: {e}"))

    return Ok(None)

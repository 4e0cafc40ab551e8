"""Helpers for reading untyped TOML tables.

The release configuration is parsed with tomllib into plain dicts; these
helpers narrow the values at the boundary so the dataclasses built from them
stay fully typed.
"""

from __future__ import annotations

import os
from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, expanding ``${VAR}`` and ``~``.

    Returns None if missing, not a str, or empty after expansion and stripping.
    Unset variables expand to nothing so a missing secret reads as unset.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    expanded = os.path.expanduser(_expand_env(value))
    s = expanded.strip()
    return s or None


def get_int(table: Mapping[str, object], key: str) -> int | None:
    value = table.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def get_bool(table: Mapping[str, object], key: str, default: bool = False) -> bool:
    value = table.get(key)
    if isinstance(value, bool):
        return value
    return default


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table from a mapping."""
    return as_str_dict(table.get(key))


def get_list(table: Mapping[str, object], key: str) -> ObjList | None:
    value = table.get(key)
    if isinstance(value, list):
        return cast(ObjList, value)
    return None


def get_str_list(table: Mapping[str, object], key: str) -> tuple[str, ...]:
    """Get a list of non-empty strings; other entries are ignored."""
    values = get_list(table, key) or []
    return tuple(v.strip() for v in values if isinstance(v, str) and v.strip())


def _expand_env(value: str) -> str:
    # os.path.expandvars leaves unknown variables untouched; drop them instead.
    expanded = os.path.expandvars(value)
    if "${" in expanded:
        out: list[str] = []
        rest = expanded
        while "${" in rest:
            head, _, tail = rest.partition("${")
            out.append(head)
            _, closed, remainder = tail.partition("}")
            if not closed:
                out.append("${")
                rest = tail
                break
            rest = remainder
        out.append(rest)
        expanded = "".join(out)
    return expanded

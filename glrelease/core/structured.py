"""Helpers for safely reading untyped configuration trees.

Plugin configuration arrives as whatever the host parsed out of YAML/JSON:
any key may hold any type. These helpers narrow such values at the boundary
without raising.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard, cast

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


def is_obj_list(obj: object) -> TypeGuard[ObjList]:
    """Return True for array-like values (lists and tuples)."""
    return isinstance(obj, (list, tuple))


def as_obj_list(obj: object) -> ObjList | None:
    if is_obj_list(obj):
        return list(obj)
    return None


def get_str(table: Mapping[str, object], key: str) -> str:
    """Return the string stored under key, or "" when missing or mistyped.

    The value is returned verbatim (no stripping).
    """
    value = table.get(key)
    if isinstance(value, str):
        return value
    return ""


def get_str_list(table: Mapping[str, object], key: str) -> tuple[str, ...]:
    """Return the string elements of an array value, skipping everything else."""
    items = as_obj_list(table.get(key))
    if items is None:
        return ()
    return tuple(item for item in items if isinstance(item, str))

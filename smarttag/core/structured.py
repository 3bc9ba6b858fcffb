"""Typed reads from parsed TOML.

``tomllib`` hands back ``dict[str, Any]``; these helpers check each value's
type at the point it is read and return None for anything unexpected, so a
wrong type in a config file falls back to the default instead of crashing.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard

StrDict = dict[str, object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    if not isinstance(obj, dict):
        return False
    keys: list[object] = list(obj)  # pyright: ignore[reportUnknownArgumentType]
    return all(isinstance(k, str) for k in keys)


def as_str_dict(obj: object) -> StrDict | None:
    return obj if is_str_dict(obj) else None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Whitespace-stripped string; empty counts as missing."""
    match table.get(key):
        case str(text) if text.strip():
            return text.strip()
        case _:
            return None


def get_int(table: Mapping[str, object], key: str) -> int | None:
    # bool is an int subclass; `true` is not a number here.
    match table.get(key):
        case bool():
            return None
        case int(number):
            return number
        case _:
            return None


def get_bool(table: Mapping[str, object], key: str) -> bool | None:
    match table.get(key):
        case bool(flag):
            return flag
        case _:
            return None

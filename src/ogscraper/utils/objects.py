"""Helpers for loosely-typed nested mappings."""

from __future__ import annotations

from typing import Any, MutableMapping


def remove_nested_undefined_values(obj: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Delete every key whose value is None, at any depth. Mutates and returns ``obj``.

    Dicts nested inside lists/tuples are cleaned too; cyclic structures are
    walked once per object.
    """
    _prune(obj, set())
    return obj


def _prune(value: Any, seen: set[int]) -> None:
    if id(value) in seen:
        return
    if isinstance(value, MutableMapping):
        seen.add(id(value))
        for key in [k for k, v in value.items() if v is None]:
            del value[key]
        for child in value.values():
            _prune(child, seen)
    elif isinstance(value, (list, tuple)):
        seen.add(id(value))
        for child in value:
            _prune(child, seen)

"""Canonical deep merge utilities.

Features:
- Recursive merging of dicts into dicts and lists into lists (by index)
- In-place: the target is mutated and returned
- Skip-on-undefined: ``UNDEFINED`` source values never replace target values
- Sources never alias into the target; incoming containers are rebuilt
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Tuple

from edit_config.core.types import UNDEFINED


def _items(container: Any) -> Iterable[Tuple[Any, Any]]:
    if isinstance(container, Mapping):
        return container.items()
    if isinstance(container, list):
        return enumerate(container)
    raise TypeError(f"Cannot merge from {type(container).__name__}")


def _lookup(container: Any, key: Any) -> Any:
    if isinstance(container, dict):
        return container.get(key, UNDEFINED)
    if key < len(container):
        return container[key]
    return UNDEFINED


def _put(container: Any, key: Any, value: Any) -> None:
    if isinstance(container, dict):
        container[key] = value
        return
    while len(container) <= key:
        container.append(None)
    container[key] = value


def _same_kind(existing: Any, incoming: Any) -> bool:
    if isinstance(incoming, Mapping):
        return isinstance(existing, dict)
    return isinstance(incoming, list) and isinstance(existing, list)


def _merge_into(target: Any, source: Any) -> None:
    for key, value in _items(source):
        if value is UNDEFINED:
            continue
        if isinstance(value, (Mapping, list)):
            existing = _lookup(target, key)
            if not _same_kind(existing, value):
                existing = {} if isinstance(value, Mapping) else []
                _put(target, key, existing)
            _merge_into(existing, value)
        else:
            _put(target, key, value)


def deep_merge(target: Any, *sources: Any) -> Any:
    """Recursively merge ``sources`` into ``target`` and return ``target``.

    Sources apply left to right, so later sources win. ``None`` and
    ``UNDEFINED`` sources are ignored.

    Example:
        >>> base = {"a": 1, "b": {"c": 2}}
        >>> deep_merge(base, {"b": {"d": 3}}, {"a": UNDEFINED})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    for source in sources:
        if source is None or source is UNDEFINED:
            continue
        if not _same_kind(target, source):
            raise TypeError(
                f"Cannot merge {type(source).__name__} into {type(target).__name__}"
            )
        _merge_into(target, source)
    return target


def mergeable(target: Any, source: Any) -> bool:
    """Whether ``source`` can be merged into ``target`` in place."""
    if source is None or source is UNDEFINED:
        return isinstance(target, (dict, list))
    return _same_kind(target, source)


def empty_like(*sources: Any) -> Any:
    """Return an empty container of the kind the first real source merges into."""
    for source in sources:
        if source is None or source is UNDEFINED:
            continue
        return [] if isinstance(source, list) else {}
    return {}


__all__ = ["deep_merge", "mergeable", "empty_like"]

"""Modification log for data files.

Records which paths were set and which were deleted during a session. The log
is append-only: a path set and later deleted appears in both lists, and
recording a path again keeps its first position.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from edit_config.core.types import DataPath, Key, KeyFilter
from edit_config.core.utils.paths import to_display_string, to_segments

SET = "set"
DELETED = "deleted"


def _arrify(value: Union[str, Sequence[str], None]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def filter_by_prefix(
    paths: Sequence[str],
    *,
    include: Union[str, Sequence[str], None] = None,
    exclude: Union[str, Sequence[str], None] = None,
) -> List[str]:
    """Filter ``paths`` by leading text.

    A path is kept when it starts with any ``include`` entry (if given) and
    with no ``exclude`` entry.

    Example:
        >>> filter_by_prefix(["scripts.a", "name"], exclude="scripts")
        ['name']
    """
    included = _arrify(include)
    excluded = _arrify(exclude)
    result = list(paths)
    if included:
        result = [p for p in result if any(p.startswith(prefix) for prefix in included)]
    if excluded:
        result = [p for p in result if not any(p.startswith(prefix) for prefix in excluded)]
    return result


class ChangeTracker:
    """Insertion-ordered sets of set and deleted paths."""

    def __init__(self) -> None:
        # display path -> segments; dicts keep first-insertion order.
        self._set: Dict[str, List[Key]] = {}
        self._deleted: Dict[str, List[Key]] = {}

    def record_set(self, path: DataPath) -> None:
        self._set.setdefault(to_display_string(path), to_segments(path))

    def record_delete(self, path: DataPath) -> None:
        self._deleted.setdefault(to_display_string(path), to_segments(path))

    def clear(self) -> None:
        self._set.clear()
        self._deleted.clear()

    def __bool__(self) -> bool:
        return bool(self._set or self._deleted)

    def query(
        self,
        filter: Optional[KeyFilter] = None,
        *,
        include: Union[str, Sequence[str], None] = None,
        exclude: Union[str, Sequence[str], None] = None,
    ) -> Dict[str, List[str]]:
        """Return ``{"set": [...], "deleted": [...]}`` as fresh lists.

        Args:
            filter: Called with ``(segments, "set" | "deleted")``; paths for
                which it returns false are dropped.
            include: Keep only paths starting with one of these prefixes.
            exclude: Drop paths starting with one of these prefixes.
        """
        result: Dict[str, List[str]] = {}
        for kind, entries in ((SET, self._set), (DELETED, self._deleted)):
            paths = [
                display
                for display, segments in entries.items()
                if filter is None or filter(list(segments), kind)
            ]
            result[kind] = filter_by_prefix(paths, include=include, exclude=exclude)
        return result


def same_value(left: Any, right: Any) -> bool:
    """Deep equality that also compares scalar types and mapping key order.

    Unlike ``==``, ``1``, ``1.0`` and ``True`` differ here, as do mappings
    with the same bindings in another order: each serializes differently.

    Example:
        >>> same_value({"a": 1}, {"a": True})
        False
    """
    if type(left) is not type(right):
        return False
    if isinstance(left, dict):
        return list(left) == list(right) and all(same_value(left[k], right[k]) for k in left)
    if isinstance(left, list):
        return len(left) == len(right) and all(same_value(a, b) for a, b in zip(left, right))
    return left is right or left == right


__all__ = ["SET", "DELETED", "ChangeTracker", "filter_by_prefix", "same_value"]

"""Data path addressing for nested dict/list trees.

A data path is either a dotted string (``"scripts.build"``) or a sequence of
keys (``["scripts", "build"]``). Keys may be strings, integers or ``None``;
``""`` and ``None`` are ordinary keys, so the document root is addressed only
by an empty sequence.

Missing intermediate segments never raise on reads. Writes create missing
intermediates: a ``list`` when the following segment is an index, a ``dict``
otherwise.
"""
from __future__ import annotations

from typing import Any, List, Optional

from edit_config.core.types import UNDEFINED, DataPath, Key

ROOT_DISPLAY = "[ROOT]"


def to_segments(path: DataPath) -> List[Key]:
    """Return ``path`` as a list of keys.

    Examples:
        >>> to_segments("a.b.c")
        ['a', 'b', 'c']
        >>> to_segments(["a", 0])
        ['a', 0]
        >>> to_segments(None)
        [None]
    """
    if isinstance(path, str):
        return path.split(".")
    if isinstance(path, (list, tuple)):
        return list(path)
    return [path]


def is_root(path: DataPath) -> bool:
    """Whether ``path`` is the empty sequence addressing the document root."""
    return isinstance(path, (list, tuple)) and len(path) == 0


def _key_text(key: Key) -> str:
    return "" if key is None else str(key)


def to_display_string(path: DataPath) -> str:
    """Join ``path`` with dots; the root renders as ``[ROOT]``."""
    if is_root(path):
        return ROOT_DISPLAY
    if isinstance(path, str):
        return path
    return ".".join(_key_text(k) for k in to_segments(path))


def _as_index(key: Key) -> Optional[int]:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, str) and key.isdigit():
        return int(key)
    return None


def _dict_key(container: dict, key: Key) -> Key:
    # Parsed files only carry string keys; let integer segments find them.
    if key not in container and isinstance(key, int) and str(key) in container:
        return str(key)
    return key


def _child(container: Any, key: Key) -> Any:
    if isinstance(container, dict):
        key = _dict_key(container, key)
        return container[key] if key in container else UNDEFINED
    if isinstance(container, list):
        index = _as_index(key)
        if index is not None and index < len(container):
            return container[index]
    return UNDEFINED


def _contains(container: Any, key: Key) -> bool:
    if isinstance(container, dict):
        return _dict_key(container, key) in container
    if isinstance(container, list):
        index = _as_index(key)
        return index is not None and index < len(container)
    return False


def _assign(container: Any, key: Key, value: Any) -> None:
    if isinstance(container, dict):
        container[_dict_key(container, key)] = value
        return
    index = _as_index(key)
    if index is None:
        raise ValueError(f"Cannot use key {key!r} on a list")
    while len(container) <= index:
        container.append(None)
    container[index] = value


def get_path(container: Any, path: DataPath, default: Any = None) -> Any:
    """Return the value at ``path`` or ``default`` when any segment is missing."""
    current = container
    for key in to_segments(path):
        current = _child(current, key)
        if current is UNDEFINED:
            return default
    return current


def has_path(container: Any, path: DataPath) -> bool:
    """Whether every segment of ``path`` exists (own-key semantics)."""
    current = container
    for key in to_segments(path):
        if not _contains(current, key):
            return False
        current = _child(current, key)
    return True


def set_path(container: Any, path: DataPath, value: Any) -> Any:
    """Set ``value`` at ``path``, creating missing intermediate containers.

    Returns ``container`` for chaining. Raises ``ValueError`` for the root
    path, which has no parent to assign into.
    """
    segments = to_segments(path)
    if not segments:
        raise ValueError("Cannot set the root path; replace the container instead")

    current = container
    for position, key in enumerate(segments[:-1]):
        child = _child(current, key)
        if not isinstance(child, (dict, list)):
            child = [] if _as_index(segments[position + 1]) is not None else {}
            _assign(current, key, child)
        current = child
    _assign(current, segments[-1], value)
    return container


def unset_path(container: Any, path: DataPath) -> bool:
    """Remove the terminal key of ``path``. Returns whether anything was removed.

    List items are removed by index, shifting later items down. Ancestors are
    never pruned; see :func:`delete_empty_path`.
    """
    segments = to_segments(path)
    if not segments:
        return False
    parent = get_path(container, segments[:-1], UNDEFINED)
    key = segments[-1]
    if not _contains(parent, key):
        return False
    if isinstance(parent, dict):
        del parent[_dict_key(parent, key)]
    else:
        del parent[_as_index(key)]  # type: ignore[index]
    return True


def is_empty(value: Any) -> bool:
    """``None``, ``UNDEFINED``, ``""`` and empty containers are empty."""
    if value is None or value is UNDEFINED:
        return True
    if isinstance(value, (str, dict, list, tuple)):
        return len(value) == 0
    return False


def delete_empty_path(container: Any, path: DataPath) -> List[List[Key]]:
    """Delete ``path`` and every ancestor left empty by the deletion.

    Walks upward from the parent of ``path`` and stops at the first non-empty
    ancestor; the root container itself is never removed.

    Returns:
        The removed paths, deepest first.
    """
    segments = to_segments(path)
    removed: List[List[Key]] = []
    if not segments:
        return removed
    if unset_path(container, segments):
        removed.append(segments)
    for length in range(len(segments) - 1, 0, -1):
        ancestor = segments[:length]
        if not has_path(container, ancestor) or not is_empty(get_path(container, ancestor)):
            break
        unset_path(container, ancestor)
        removed.append(ancestor)
    return removed


__all__ = [
    "ROOT_DISPLAY",
    "to_segments",
    "is_root",
    "to_display_string",
    "get_path",
    "has_path",
    "set_path",
    "unset_path",
    "is_empty",
    "delete_empty_path",
]

"""Key order reconciliation for mappings."""
from __future__ import annotations

from typing import Any, Iterable, List, Tuple

from edit_config.core.types import Key


def _dedupe(keys: Iterable[Key]) -> List[Key]:
    seen: List[Key] = []
    for key in keys:
        if key not in seen:
            seen.append(key)
    return seen


def _sort_text(key: Key) -> str:
    return "" if key is None else str(key)


def compute_key_order(
    keys: Iterable[Key],
    start: Iterable[Key] = (),
    end: Iterable[Key] = (),
) -> List[Key]:
    """Return ``start``, then remaining keys sorted, then ``end``.

    Keys named in ``start``/``end`` but absent from ``keys`` are dropped.

    Example:
        >>> compute_key_order(["test", "z", "a", "c"], start=["test"], end=["a"])
        ['test', 'c', 'z', 'a']
    """
    present = list(keys)
    start = list(start)
    end = list(end)
    middle = sorted((k for k in present if k not in end), key=_sort_text)
    candidate = _dedupe([*start, *middle, *end])
    return [k for k in candidate if k in present]


def order_keys(
    container: Any,
    start: Iterable[Key] = (),
    end: Iterable[Key] = (),
) -> Tuple[Any, bool]:
    """Reorder the keys of ``container``.

    Returns:
        ``(container, False)`` when the order already matches (or the
        container is not a mapping), otherwise a new mapping of the same type
        with the same bindings in the new order and ``True``.
    """
    if not isinstance(container, dict):
        return container, False
    current = list(container.keys())
    order = compute_key_order(current, start, end)
    if order == current:
        return container, False
    reordered = type(container)()
    for key in order:
        reordered[key] = container[key]
    return reordered, True


__all__ = ["compute_key_order", "order_keys"]

from __future__ import annotations

from edit_config.core.utils.ordering import compute_key_order, order_keys


def test_compute_key_order_sorts_alphabetically() -> None:
    assert compute_key_order(["test", "z", "a", "c"]) == ["a", "c", "test", "z"]


def test_compute_key_order_with_start_and_end() -> None:
    assert compute_key_order(["test", "z", "a", "c"], start=["test"], end=["a"]) == ["test", "c", "z", "a"]


def test_compute_key_order_drops_absent_start_and_end_keys() -> None:
    assert compute_key_order(["b", "a"], start=["missing", "b"], end=["gone"]) == ["b", "a"]


def test_order_keys_is_noop_when_order_matches() -> None:
    data = {"a": 1, "c": 1, "test": 1, "z": 1}
    result, changed = order_keys(data, start=["a", "c", "test", "z"])
    assert changed is False
    assert result is data


def test_order_keys_returns_reordered_copy() -> None:
    data = {"test": 1, "z": 2, "a": 3, "c": 4}
    result, changed = order_keys(data)
    assert changed is True
    assert list(result) == ["a", "c", "test", "z"]
    assert result == data
    assert list(data) == ["test", "z", "a", "c"]


def test_order_keys_ignores_lists_and_scalars() -> None:
    items = [3, 1, 2]
    assert order_keys(items) == (items, False)
    assert order_keys("text") == ("text", False)

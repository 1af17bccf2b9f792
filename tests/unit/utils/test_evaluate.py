from __future__ import annotations

from types import SimpleNamespace

from edit_config.core.types import UNDEFINED
from edit_config.core.utils.evaluate import (
    Always,
    Computed,
    Guarded,
    Literal,
    callback_arguments,
    guard_source,
    invoke,
    resolve_predicate,
    resolve_value,
    value_source,
)


def _doc(data):
    return SimpleNamespace(data=data)


def test_value_source_tags_callables_as_computed() -> None:
    fn = lambda value: value  # noqa: E731
    assert value_source(fn) == Computed(fn)
    assert value_source(3) == Literal(3)
    assert value_source(Literal(fn)) == Literal(fn)


def test_guard_source_defaults_to_always() -> None:
    assert guard_source(None) == Always()
    fn = lambda: True  # noqa: E731
    assert guard_source(fn) == Guarded(fn)
    assert isinstance(guard_source(False), Guarded)


def test_invoke_passes_only_declared_positional_arguments() -> None:
    args = (1, "key", {"key": 1}, ["key"], "doc")
    assert invoke(lambda: "none", args) == "none"
    assert invoke(lambda value: value, args) == 1
    assert invoke(lambda value, key, parent: (key, parent), args) == ("key", {"key": 1})
    assert invoke(lambda *all_args: len(all_args), args) == 5


def test_callback_arguments_for_nested_path() -> None:
    doc = _doc({"scripts": {"test": "jest"}})
    value, key, parent, segments, data_file = callback_arguments(doc, "scripts.test")

    assert value == "jest"
    assert key == "test"
    assert parent == {"test": "jest"}
    assert segments == ["scripts", "test"]
    assert data_file is doc


def test_callback_arguments_for_missing_path_use_undefined() -> None:
    doc = _doc({})
    value, key, parent, segments, _ = callback_arguments(doc, ["a", "b"])
    assert value is UNDEFINED
    assert parent is UNDEFINED
    assert key == "b"
    assert segments == ["a", "b"]


def test_callback_arguments_for_root() -> None:
    data = {"name": "x"}
    doc = _doc(data)
    assert callback_arguments(doc, []) == (data, None, data, [], doc)


def test_resolve_value_computes_from_current_value() -> None:
    doc = _doc({"counter": 1})
    assert resolve_value(lambda value: value + 1, doc, "counter") == 2
    assert resolve_value("literal", doc, "counter") == "literal"


def test_literal_wrapper_keeps_callables_as_values() -> None:
    fn = print
    assert resolve_value(Literal(fn), _doc({}), "x") is fn


def test_resolve_predicate() -> None:
    doc = _doc({"name": "pkg"})
    assert resolve_predicate(None, doc, "name") is True
    assert resolve_predicate(lambda value: value == "pkg", doc, "name") is True
    assert resolve_predicate(lambda value: value == "other", doc, "name") is False
    assert resolve_predicate(False, doc, "name") is False
    assert resolve_predicate(lambda *_: 1, doc, "name") is True

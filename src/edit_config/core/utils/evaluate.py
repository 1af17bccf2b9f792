"""Value-or-function and predicate-or-literal resolution.

``set``, ``delete`` and ``merge`` accept either a literal replacement or a
callable computing it from the current state, plus an optional guard. User
arguments are wrapped into tagged variants (``Literal`` / ``Computed`` and
``Always`` / ``Guarded``) and resolved here with one calling convention::

    fn(value, key, parent, path, data_file)

Callables declaring fewer positional parameters receive only the leading
arguments, so ``lambda value: value + 1`` is a valid value function.
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple, Union

from edit_config.core.types import UNDEFINED, DataPath
from edit_config.core.utils.paths import get_path, to_segments

if TYPE_CHECKING:
    from edit_config.core.data_file import DataFile


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class Computed:
    fn: Callable[..., Any]


@dataclass(frozen=True)
class Always:
    pass


@dataclass(frozen=True)
class Guarded:
    fn: Callable[..., Any]


ValueSource = Union[Literal, Computed]
GuardSource = Union[Always, Guarded]


def value_source(value: Any) -> ValueSource:
    """Wrap a raw user value: callables become ``Computed``."""
    if isinstance(value, (Literal, Computed)):
        return value
    if callable(value):
        return Computed(value)
    return Literal(value)


def guard_source(guard: Any) -> GuardSource:
    """Wrap a raw guard: ``None`` means always, callables become ``Guarded``."""
    if isinstance(guard, (Always, Guarded)):
        return guard
    if guard is None:
        return Always()
    if callable(guard):
        return Guarded(guard)
    # Literal booleans are accepted as constant guards.
    return Guarded(lambda *_: guard)


def _positional_arity(fn: Callable[..., Any]) -> Optional[int]:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


def invoke(fn: Callable[..., Any], args: Tuple[Any, ...]) -> Any:
    """Call ``fn`` with as many of ``args`` as it accepts."""
    arity = _positional_arity(fn)
    if arity is None:
        return fn(*args)
    return fn(*args[:arity])


def callback_arguments(data_file: "DataFile", path: DataPath) -> Tuple[Any, ...]:
    """Build ``(value, key, parent, path, data_file)`` for ``path``.

    For the root path the arguments are ``(data, None, data, [], data_file)``:
    the path is the empty list rather than missing, and callbacks always get
    the data file, not the raw data, as their last argument.
    """
    data = data_file.data
    segments = to_segments(path)
    if not segments:
        return (data, None, data, [], data_file)
    return (
        get_path(data, segments, UNDEFINED),
        segments[-1],
        get_path(data, segments[:-1], UNDEFINED),
        segments,
        data_file,
    )


def resolve_value(value: Any, data_file: "DataFile", path: DataPath) -> Any:
    """Return the literal value, or the result of calling the value function.

    Value functions are called with :func:`callback_arguments`; at the root
    that is ``(data, None, data, [], data_file)``.
    """
    source = value_source(value)
    if isinstance(source, Computed):
        return invoke(source.fn, callback_arguments(data_file, path))
    return source.value


def resolve_predicate(guard: Any, data_file: "DataFile", path: DataPath) -> bool:
    """Return whether an operation guarded by ``guard`` should run."""
    source = guard_source(guard)
    if isinstance(source, Always):
        return True
    return bool(invoke(source.fn, callback_arguments(data_file, path)))


__all__ = [
    "Literal",
    "Computed",
    "Always",
    "Guarded",
    "value_source",
    "guard_source",
    "invoke",
    "callback_arguments",
    "resolve_value",
    "resolve_predicate",
]

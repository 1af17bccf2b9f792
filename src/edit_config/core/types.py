"""Shared types, enums and sentinels for edit-config."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, List, Sequence, Union


class _Undefined:
    """Marker for "no value", distinct from ``None`` (which is JSON ``null``)."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: Any) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Any = _Undefined()


class FileFormat(str, Enum):
    """Data file format."""

    JSON = "json"
    YAML = "yaml"
    JS = "js"
    UNKNOWN = ""

    @property
    def writable(self) -> bool:
        return self in (FileFormat.JSON, FileFormat.YAML)


class LogLevel(int, Enum):
    """Log levels understood by data files, mapped onto :mod:`logging` levels."""

    ERROR = logging.ERROR
    WARN = logging.WARNING
    INFO = logging.INFO
    VERBOSE = 15
    DEBUG = logging.DEBUG
    SILLY = 5


logging.addLevelName(LogLevel.VERBOSE.value, "VERBOSE")
logging.addLevelName(LogLevel.SILLY.value, "SILLY")

# ``None`` and ``""`` are ordinary keys.
Key = Union[str, int, None]
DataPath = Union[Key, Sequence[Key]]
KeyFilter = Callable[[List[Key], str], bool]


__all__ = [
    "UNDEFINED",
    "FileFormat",
    "LogLevel",
    "Key",
    "DataPath",
    "KeyFilter",
]

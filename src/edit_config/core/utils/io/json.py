"""JSON parsing and serialization.

Parsing is lenient (comments, trailing commas, single quotes) via ``json5``
so hand-edited files such as ``tsconfig.json`` load. Output is strict JSON.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import json5

# Default configuration (can be overridden by passing arguments to functions)
DEFAULT_JSON_CONFIG: Dict[str, Any] = {
    "indent": 2,
    "sort_keys": False,
    "ensure_ascii": False,
}


def parse_json_string(content: str) -> Any:
    """Parse JSON (with comments and trailing commas) from ``content``.

    Raises:
        ValueError: If ``content`` is not valid JSON5.
    """
    return json5.loads(content)


def dump_json_string(
    data: Any,
    *,
    indent: int | None = None,
    sort_keys: bool | None = None,
    ensure_ascii: bool | None = None,
) -> str:
    """Serialize ``data`` as JSON text ending with a newline."""
    cfg = dict(DEFAULT_JSON_CONFIG)
    if indent is not None:
        cfg["indent"] = indent
    if sort_keys is not None:
        cfg["sort_keys"] = sort_keys
    if ensure_ascii is not None:
        cfg["ensure_ascii"] = ensure_ascii

    return (
        json.dumps(
            data,
            indent=cfg["indent"],
            sort_keys=cfg["sort_keys"],
            ensure_ascii=cfg["ensure_ascii"],
        )
        + "\n"
    )


__all__ = [
    "DEFAULT_JSON_CONFIG",
    "parse_json_string",
    "dump_json_string",
]

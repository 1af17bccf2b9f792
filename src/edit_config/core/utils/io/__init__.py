"""I/O utilities for edit-config.

This package provides file access and format codecs:
- Core: atomic writes, tolerant text reads, the Storage protocol
- JSON: lenient parsing, strict output
- YAML: safe-load parsing, order-preserving output
- Codecs: per-format parse/serialize pairs
"""
from __future__ import annotations

from .codecs import PARSE_ORDER, Codec, JsonCodec, YamlCodec, get_codec
from .core import (
    DEFAULT_STORAGE,
    FileStorage,
    PathLike,
    Storage,
    atomic_write,
    ensure_parent_dir,
    read_text_tolerated,
    write_text,
)
from .json import DEFAULT_JSON_CONFIG, dump_json_string, parse_json_string
from .yaml import dump_yaml_string, parse_yaml_string

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "atomic_write",
    "read_text_tolerated",
    "write_text",
    "Storage",
    "FileStorage",
    "DEFAULT_STORAGE",
    # json
    "DEFAULT_JSON_CONFIG",
    "parse_json_string",
    "dump_json_string",
    # yaml
    "parse_yaml_string",
    "dump_yaml_string",
    # codecs
    "Codec",
    "JsonCodec",
    "YamlCodec",
    "PARSE_ORDER",
    "get_codec",
]

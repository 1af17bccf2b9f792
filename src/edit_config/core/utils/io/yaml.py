"""YAML parsing and serialization."""
from __future__ import annotations

from typing import Any

import yaml


class _Dumper(yaml.SafeDumper):
    """Safe dumper that indents block sequences under their parent key."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        super().increase_indent(flow, False)


def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    """Represent multiline strings with literal block style."""
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_Dumper.add_representer(str, _str_representer)


def parse_yaml_string(content: str) -> Any:
    """Parse YAML from ``content`` using safe-load semantics.

    Empty documents parse to ``None``.

    Raises:
        yaml.YAMLError: If ``content`` is not valid YAML.
    """
    return yaml.safe_load(content)


def dump_yaml_string(data: Any, sort_keys: bool = False) -> str:
    """Dump ``data`` to a YAML string, keeping key order by default."""
    return yaml.dump(
        data,
        Dumper=_Dumper,
        default_flow_style=False,
        sort_keys=sort_keys,
        allow_unicode=True,
    )


__all__ = [
    "parse_yaml_string",
    "dump_yaml_string",
]

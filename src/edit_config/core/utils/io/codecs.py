"""Format codecs: text <-> data for each writable file format."""
from __future__ import annotations

from typing import Any, Dict, Protocol

from edit_config.core.exceptions import UnsupportedFormatError
from edit_config.core.types import FileFormat

from .json import dump_json_string, parse_json_string
from .yaml import dump_yaml_string, parse_yaml_string


class Codec(Protocol):
    format: FileFormat

    def parse(self, content: str) -> Any: ...

    def serialize(self, data: Any) -> str: ...


class JsonCodec:
    format = FileFormat.JSON

    def parse(self, content: str) -> Any:
        return parse_json_string(content)

    def serialize(self, data: Any) -> str:
        return dump_json_string(data)


class YamlCodec:
    format = FileFormat.YAML

    def parse(self, content: str) -> Any:
        return parse_yaml_string(content)

    def serialize(self, data: Any) -> str:
        return dump_yaml_string(data)


_CODECS: Dict[FileFormat, Codec] = {
    FileFormat.JSON: JsonCodec(),
    FileFormat.YAML: YamlCodec(),
}

# Order in which codecs are tried on content of unknown or mislabeled format.
PARSE_ORDER = (FileFormat.JSON, FileFormat.YAML)


def get_codec(file_format: FileFormat) -> Codec:
    """Return the codec for ``file_format``.

    Files of unknown format serialize as JSON.

    Raises:
        UnsupportedFormatError: For formats that cannot be serialized (``js``).
    """
    if file_format is FileFormat.UNKNOWN:
        return _CODECS[FileFormat.JSON]
    try:
        return _CODECS[file_format]
    except KeyError:
        raise UnsupportedFormatError(
            f"No codec available for '{file_format.value}' files.",
            context={"format": file_format.value},
        ) from None


__all__ = ["Codec", "JsonCodec", "YamlCodec", "PARSE_ORDER", "get_codec"]

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from edit_config.core.exceptions import UnsupportedFormatError
from edit_config.core.types import FileFormat
from edit_config.core.utils.io import core as io_core
from edit_config.core.utils.io import (
    FileStorage,
    Storage,
    dump_json_string,
    dump_yaml_string,
    get_codec,
    parse_json_string,
    parse_yaml_string,
    read_text_tolerated,
    write_text,
)


def test_parse_json_accepts_comments_and_trailing_commas() -> None:
    content = """
    {
      // compiler options
      "compilerOptions": {"strict": true,},
    }
    """
    assert parse_json_string(content) == {"compilerOptions": {"strict": True}}


def test_parse_json_rejects_yaml() -> None:
    with pytest.raises(ValueError):
        parse_json_string("name: example\n")


def test_dump_json_keeps_key_order_and_unicode() -> None:
    text = dump_json_string({"z": 1, "a": "ü"})
    assert text == '{\n  "z": 1,\n  "a": "ü"\n}\n'


def test_dump_json_overrides() -> None:
    assert dump_json_string({"b": 1, "a": 2}, indent=0, sort_keys=True) == '{\n"a": 2,\n"b": 1\n}\n'


def test_yaml_round_trip_keeps_order_and_block_strings() -> None:
    data = {"z": 1, "script": "line one\nline two\n", "list": ["a", "b"]}
    text = dump_yaml_string(data)

    assert text.index("z:") < text.index("script:") < text.index("list:")
    assert "script: |" in text
    assert "  - a" in text
    assert parse_yaml_string(text) == data


def test_parse_yaml_empty_document_is_none() -> None:
    assert parse_yaml_string("") is None


def test_get_codec_by_format() -> None:
    assert get_codec(FileFormat.JSON).format is FileFormat.JSON
    assert get_codec(FileFormat.YAML).format is FileFormat.YAML
    assert get_codec(FileFormat.UNKNOWN).format is FileFormat.JSON
    with pytest.raises(UnsupportedFormatError):
        get_codec(FileFormat.JS)


def test_read_text_tolerated_missing_file(tmp_path: Path) -> None:
    assert read_text_tolerated(tmp_path / "missing.json") is None


def test_read_text_tolerated_propagates_other_errors(tmp_path: Path) -> None:
    with pytest.raises(IsADirectoryError):
        read_text_tolerated(tmp_path)


def test_write_text_creates_parents_and_leaves_no_temp_files(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir" / "config.json"
    write_text(target, "{}\n")

    assert target.read_text(encoding="utf-8") == "{}\n"
    assert os.listdir(target.parent) == ["config.json"]


def test_write_text_keeps_existing_permissions(tmp_path: Path) -> None:
    target = tmp_path / "script.json"
    target.write_text("{}", encoding="utf-8")
    target.chmod(0o640)

    write_text(target, '{"a": 1}')

    assert stat.S_IMODE(target.stat().st_mode) == 0o640
    assert target.read_text(encoding="utf-8") == '{"a": 1}'


def test_file_storage_satisfies_protocol(tmp_path: Path) -> None:
    storage = FileStorage()
    path = tmp_path / "a.yaml"

    assert isinstance(storage, Storage)
    assert storage.exists(path) is False
    assert storage.read_text(path) is None
    storage.write_text(path, "a: 1\n")
    assert storage.exists(path) is True
    assert storage.read_text(path) == "a: 1\n"


def test_write_text_leaves_process_umask_alone(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(io_core.os, "umask", lambda mask: calls.append(mask) or 0)

    target = tmp_path / "new" / "config.json"
    write_text(target, "{}\n")

    assert calls == []
    assert stat.S_IMODE(target.stat().st_mode) == 0o666 & ~io_core._UMASK

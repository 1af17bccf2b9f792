from __future__ import annotations

from pathlib import Path

import pytest

from edit_config.core.discovery import default_search_places, search
from edit_config.core.exceptions import DiscoveryError, ParseError
from edit_config.core.types import FileFormat
from helpers.io_utils import StubCodeProvider, write_json


def test_default_search_places() -> None:
    assert default_search_places("tool") == [
        "package.json",
        ".toolrc",
        ".toolrc.json",
        ".toolrc.yaml",
        ".toolrc.yml",
        ".toolrc.js",
        ".toolrc.cjs",
        "tool.config.js",
        "tool.config.cjs",
    ]


def test_search_finds_package_prop(project: Path) -> None:
    result = search("husky", project, stop_dir=project)

    assert result is not None
    assert result.filepath == project.resolve() / "package.json"
    assert result.config == {"hooks": {"pre-commit": "lint"}}
    assert result.format is FileFormat.JSON
    assert result.is_empty is False


def test_search_supports_dotted_package_prop(project: Path) -> None:
    result = search("hooks", project, package_prop="husky.hooks", stop_dir=project)
    assert result is not None
    assert result.config == {"pre-commit": "lint"}


def test_search_skips_manifest_without_prop(project: Path) -> None:
    result = search("eslint", project, stop_dir=project)
    assert result is not None
    assert result.filepath.name == ".eslintrc.yml"
    assert result.config["rules"] == {"no-console": "warn"}


def test_search_extensionless_rc_detects_format(tmp_path: Path) -> None:
    (tmp_path / ".toolrc").write_text("level: 2\n", encoding="utf-8")
    result = search("tool", tmp_path, stop_dir=tmp_path)

    assert result is not None
    assert result.config == {"level": 2}
    assert result.format is FileFormat.YAML


def test_search_empty_file_is_reported_empty(tmp_path: Path) -> None:
    (tmp_path / ".toolrc.json").write_text("  \n", encoding="utf-8")
    result = search("tool", tmp_path, stop_dir=tmp_path)

    assert result is not None
    assert result.is_empty is True
    assert result.config is None


def test_search_walks_up_to_stop_dir(tmp_path: Path) -> None:
    write_json(tmp_path / ".toolrc.json", {"found": "parent"})
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    result = search("tool", nested, stop_dir=tmp_path)
    assert result is not None
    assert result.config == {"found": "parent"}


def test_search_does_not_pass_stop_dir(tmp_path: Path) -> None:
    write_json(tmp_path / ".toolrc.json", {"found": "too far"})
    nested = tmp_path / "a"
    nested.mkdir()

    assert search("tool", nested, stop_dir=nested) is None


def test_search_code_config_uses_provider(project: Path) -> None:
    provider = StubCodeProvider({"verbose": True})
    result = search("jest", project, stop_dir=project, code_provider=provider)

    assert result is not None
    assert result.format is FileFormat.JS
    assert result.config == {"verbose": True}
    assert provider.calls == [project.resolve() / "jest.config.js"]


def test_search_custom_places(project: Path) -> None:
    result = search("anything", project, search_places=[".eslintrc.yml"], stop_dir=project)
    assert result is not None
    assert result.filepath.name == ".eslintrc.yml"


def test_search_requires_module_name(tmp_path: Path) -> None:
    with pytest.raises(DiscoveryError):
        search("", tmp_path)


def test_search_from_must_be_directory(tmp_path: Path) -> None:
    file_path = write_json(tmp_path / "file.json", {})
    with pytest.raises(DiscoveryError, match="not a directory"):
        search("tool", file_path)


def test_search_malformed_manifest_raises_parse_error(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text('{ "name": ', encoding="utf-8")

    with pytest.raises(ParseError, match="Cannot parse data file") as excinfo:
        search("tool", tmp_path, stop_dir=tmp_path)

    assert set(excinfo.value.context["errors"]) == {"json"}
    assert excinfo.value.context["path"] == str(tmp_path / "package.json")

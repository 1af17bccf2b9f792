"""Node code config loading and prettier formatting, with the processes faked."""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Any, List

import pytest

from edit_config.core import code_config, formatting
from edit_config.core.code_config import NodeCodeConfigProvider
from edit_config.core.exceptions import CodeConfigError
from edit_config.core.formatting import PrettierFormatter
from edit_config.core.utils.subprocess import run_with_timeout


class _FakeRun:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.calls: List[Any] = []

    def __call__(self, cmd, **kwargs) -> subprocess.CompletedProcess:
        self.calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.stdout, stderr=self.stderr)


def _which(found: bool):
    return lambda program: f"/usr/bin/{program}" if found else None


def test_node_provider_parses_exported_json(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeRun(stdout='{"verbose": true}')
    monkeypatch.setattr(code_config, "which", _which(True))
    monkeypatch.setattr(code_config, "run_with_timeout", fake)
    module = tmp_path / "jest.config.js"

    assert NodeCodeConfigProvider().load(module) == {"verbose": True}
    cmd, kwargs = fake.calls[0]
    assert cmd[0] == "/usr/bin/node"
    assert cmd[-1] == str(module.resolve())
    assert kwargs["cwd"] == str(tmp_path.resolve())


def test_node_provider_missing_executable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(code_config, "which", _which(False))
    with pytest.raises(CodeConfigError, match="executable not found"):
        NodeCodeConfigProvider().load(tmp_path / "a.js")


def test_node_provider_module_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(code_config, "which", _which(True))
    monkeypatch.setattr(code_config, "run_with_timeout", _FakeRun(returncode=1, stderr="SyntaxError\n"))
    with pytest.raises(CodeConfigError, match="SyntaxError") as excinfo:
        NodeCodeConfigProvider().load(tmp_path / "a.js")
    assert excinfo.value.context["returncode"] == 1


def test_node_provider_timeout(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _timeout(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(code_config, "which", _which(True))
    monkeypatch.setattr(code_config, "run_with_timeout", _timeout)
    with pytest.raises(CodeConfigError, match="Timed out"):
        NodeCodeConfigProvider(timeout=1).load(tmp_path / "a.js")


def test_prettier_resolves_config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(formatting, "which", _which(True))
    monkeypatch.setattr(formatting, "run_with_timeout", _FakeRun(stdout=".prettierrc\n"))
    assert PrettierFormatter().resolve_profile(tmp_path / "a.json") == ".prettierrc"


def test_prettier_without_config_or_binary(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(formatting, "which", _which(True))
    monkeypatch.setattr(formatting, "run_with_timeout", _FakeRun(returncode=1))
    assert PrettierFormatter().resolve_profile(tmp_path / "a.json") is None

    monkeypatch.setattr(formatting, "which", _which(False))
    assert PrettierFormatter().resolve_profile(tmp_path / "a.json") is None
    assert PrettierFormatter().format("{}", profile=".prettierrc", parser="json", path=tmp_path) == "{}"


def test_prettier_format_pipes_text(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeRun(stdout='{ "a": 1 }\n')
    monkeypatch.setattr(formatting, "which", _which(True))
    monkeypatch.setattr(formatting, "run_with_timeout", fake)

    out = PrettierFormatter().format('{"a":1}', profile=".prettierrc", parser="json", path=tmp_path / "a.json")

    assert out == '{ "a": 1 }\n'
    cmd, kwargs = fake.calls[0]
    assert cmd[1:] == ["--config", ".prettierrc", "--parser", "json", "--stdin-filepath", str(tmp_path / "a.json")]
    assert kwargs["input"] == '{"a":1}'


def test_run_with_timeout_captures_output() -> None:
    completed = run_with_timeout([sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"], input="abc")
    assert completed.returncode == 0
    assert completed.stdout.strip() == "ABC"


def test_run_with_timeout_check_and_timeout() -> None:
    with pytest.raises(subprocess.CalledProcessError):
        run_with_timeout([sys.executable, "-c", "raise SystemExit(3)"], check=True)
    with pytest.raises(subprocess.TimeoutExpired):
        run_with_timeout([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)

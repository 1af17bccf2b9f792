import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'edit_config' and tests/ as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from helpers.io_utils import RecordingFormatter, StubCodeProvider, write_json  # noqa: E402

PACKAGE_JSON = {
    "name": "example-package",
    "counter": 1,
    "scripts": {"test": "jest"},
    "husky": {"hooks": {"pre-commit": "lint"}},
}

ESLINT_YAML = """\
root: true
extends:
  - standard
rules:
  no-console: warn
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project directory with package.json, a YAML rc file and a JS config."""
    root = tmp_path / "project"
    root.mkdir()
    write_json(root / "package.json", PACKAGE_JSON)
    (root / ".eslintrc.yml").write_text(ESLINT_YAML, encoding="utf-8")
    (root / "jest.config.js").write_text("module.exports = { verbose: true };\n", encoding="utf-8")
    return root


@pytest.fixture
def code_provider() -> StubCodeProvider:
    return StubCodeProvider({"verbose": True})


@pytest.fixture
def formatter() -> RecordingFormatter:
    return RecordingFormatter()

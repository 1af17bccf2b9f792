"""Loading of JavaScript config modules (``.eslintrc.js``, ``x.config.cjs``).

Code configs are evaluated by an external runtime and only their exported
data is consumed; data files built from them are always read-only.
"""
from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from edit_config.core.exceptions import CodeConfigError
from edit_config.core.utils.subprocess import DEFAULT_TIMEOUT_SECONDS, run_with_timeout, which

logger = logging.getLogger(__name__)

# Prints the module's export (``default`` for ES modules) as JSON.
_NODE_SCRIPT = """
const { pathToFileURL } = require("url");
import(pathToFileURL(process.argv[1]).href)
  .then((mod) => {
    const value = mod && mod.default !== undefined ? mod.default : mod;
    process.stdout.write(JSON.stringify(value === undefined ? null : value));
  })
  .catch((error) => {
    process.stderr.write(String((error && error.stack) || error));
    process.exit(1);
  });
"""


@runtime_checkable
class CodeConfigProvider(Protocol):
    """Evaluates a code config module and returns its exported data."""

    def load(self, path: Path) -> Any: ...


class NodeCodeConfigProvider:
    """Evaluate JavaScript config modules with the ``node`` executable."""

    def __init__(self, executable: str = "node", timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.executable = executable
        self.timeout = timeout

    def load(self, path: Path) -> Any:
        binary: Optional[str] = which(self.executable)
        if binary is None:
            raise CodeConfigError(
                f"Cannot load '{path}': '{self.executable}' executable not found on PATH.",
                context={"path": str(path)},
            )

        logger.debug("Evaluating code config %s with %s", path, binary)
        try:
            completed = run_with_timeout(
                [binary, "-e", _NODE_SCRIPT, str(Path(path).resolve())],
                timeout=self.timeout,
                cwd=str(Path(path).resolve().parent),
            )
        except subprocess.TimeoutExpired as exc:
            raise CodeConfigError(
                f"Timed out after {self.timeout}s loading '{path}'.",
                context={"path": str(path)},
            ) from exc

        if completed.returncode != 0:
            raise CodeConfigError(
                f"Cannot load '{path}': {completed.stderr.strip()}",
                context={"path": str(path), "returncode": completed.returncode},
            )
        try:
            return json.loads(completed.stdout or "null")
        except json.JSONDecodeError as exc:
            raise CodeConfigError(
                f"Cannot load '{path}': module export is not serializable.",
                context={"path": str(path)},
            ) from exc


DEFAULT_CODE_PROVIDER = NodeCodeConfigProvider()


__all__ = ["CodeConfigProvider", "NodeCodeConfigProvider", "DEFAULT_CODE_PROVIDER"]

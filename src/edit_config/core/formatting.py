"""Optional output formatting through the ``prettier`` CLI."""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

from edit_config.core.utils.subprocess import DEFAULT_TIMEOUT_SECONDS, run_with_timeout, which

logger = logging.getLogger(__name__)


@runtime_checkable
class Formatter(Protocol):
    """Reformats serialized text according to a resolved profile."""

    def resolve_profile(self, path: Path) -> Optional[Any]: ...

    def format(self, text: str, *, profile: Any, parser: str, path: Path) -> str: ...


class PrettierFormatter:
    """Format JSON/YAML output with ``prettier``.

    The profile is the path of the prettier configuration governing a file,
    as reported by ``prettier --find-config-path``; files without one are
    left as serialized.
    """

    def __init__(self, executable: str = "prettier", timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.executable = executable
        self.timeout = timeout

    def resolve_profile(self, path: Path) -> Optional[str]:
        binary = which(self.executable)
        if binary is None:
            return None
        try:
            completed = run_with_timeout(
                [binary, "--find-config-path", str(path)],
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.warning("Timed out resolving prettier config for %s", path)
            return None
        config_path = completed.stdout.strip()
        if completed.returncode != 0 or not config_path:
            return None
        return config_path

    def format(self, text: str, *, profile: Any, parser: str, path: Path) -> str:
        binary = which(self.executable)
        if binary is None:
            return text
        completed = run_with_timeout(
            [binary, "--config", str(profile), "--parser", parser, "--stdin-filepath", str(path)],
            input=text,
            timeout=self.timeout,
            check=True,
        )
        return completed.stdout


__all__ = ["Formatter", "PrettierFormatter"]

"""Subprocess helpers for external tools (``node``, ``prettier``).

- Commands run without a shell
- Output is captured as text
- On timeout the whole process group is terminated
"""
from __future__ import annotations

import os
import shlex
import shutil
import signal
import subprocess
from typing import Any, Optional, Sequence

DEFAULT_TIMEOUT_SECONDS = 30.0


def _flatten_cmd(cmd: Any) -> Sequence[str]:
    if isinstance(cmd, (list, tuple)):
        return [str(p) for p in cmd]
    return shlex.split(str(cmd))


def _popen_process_group_kwargs() -> dict[str, Any]:
    if os.name == "posix":
        return {"start_new_session": True}
    return {}


def _terminate_process_group(proc: subprocess.Popen[Any]) -> None:
    if proc.poll() is not None:
        return
    try:
        if os.name == "posix":
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except OSError:
        pass
    try:
        proc.wait(timeout=0.2)
    except subprocess.TimeoutExpired:
        pass


def which(program: str) -> Optional[str]:
    """Return the full path of ``program`` on ``PATH``, if any."""
    return shutil.which(program)


def run_with_timeout(
    cmd: Any,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    input: Optional[str] = None,
    cwd: Optional[str] = None,
    env: Optional[dict[str, str]] = None,
    check: bool = False,
) -> subprocess.CompletedProcess:
    """Run ``cmd`` capturing text output, killing it after ``timeout`` seconds.

    Raises:
        subprocess.TimeoutExpired: If the command does not finish in time.
        subprocess.CalledProcessError: If ``check`` and the exit code is non-zero.
    """
    argv = list(_flatten_cmd(cmd))
    proc = subprocess.Popen(
        argv,
        cwd=cwd,
        env=env,
        stdin=subprocess.PIPE if input is not None else subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        **_popen_process_group_kwargs(),
    )
    try:
        stdout, stderr = proc.communicate(input=input, timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        _terminate_process_group(proc)
        raise subprocess.TimeoutExpired(
            argv, timeout, output=exc.output, stderr=exc.stderr
        ) from None

    completed = subprocess.CompletedProcess(
        argv,
        proc.returncode if proc.returncode is not None else 0,
        stdout=stdout,
        stderr=stderr,
    )
    if check and completed.returncode != 0:
        raise subprocess.CalledProcessError(
            completed.returncode,
            argv,
            output=stdout,
            stderr=stderr,
        )
    return completed


__all__ = ["DEFAULT_TIMEOUT_SECONDS", "which", "run_with_timeout"]

"""Core I/O utilities for edit-config.

Single source of truth for file access:
- Atomic writes with fsync
- Text reads that report a missing file as ``None``
- The ``Storage`` protocol data files read and write through
"""
from __future__ import annotations

import fcntl
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, Protocol, TextIO, Union, runtime_checkable

PathLike = Union[str, Path]


def _read_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


# Read once at import: os.umask can only be queried by setting it, process-wide.
_UMASK = _read_umask()


def ensure_parent_dir(path: Path) -> None:
    """Ensure the parent directory for ``path`` exists."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def atomic_write(
    path: Path,
    write_fn: Callable[[TextIO], None],
    *,
    encoding: str = "utf-8",
) -> None:
    """Write to ``path`` atomically using a temp file + fsync + rename.

    - Parent directory is created if missing
    - Data is written to a temporary file in the same directory
    - File is fsync'd, then atomically replaced
    - Any leftover temp file is cleaned up on failure

    Args:
        path: Target file path
        write_fn: Callable that writes content to the file object
        encoding: Text encoding (default: utf-8)
    """
    path = Path(path)
    ensure_parent_dir(path)

    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            dir=str(path.parent),
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        if path.exists():
            # Keep the permissions of the file being replaced.
            os.chmod(tmp_path, path.stat().st_mode & 0o7777)
        else:
            os.chmod(tmp_path, 0o666 & ~_UMASK)
        os.replace(str(tmp_path), str(path))
    finally:
        if tmp_path is not None and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass


def read_text_tolerated(path: PathLike) -> Optional[str]:
    """Read a UTF-8 text file, returning ``None`` when it does not exist.

    Errors other than a missing file (permissions, directories, ...) are
    propagated to callers.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def write_text(path: PathLike, content: str) -> None:
    """Atomically write UTF-8 text to ``path``."""
    target = Path(path)

    def _writer(f: TextIO) -> None:
        f.write(content)

    atomic_write(target, _writer)


@runtime_checkable
class Storage(Protocol):
    """File system operations used by data files."""

    def exists(self, path: PathLike) -> bool: ...

    def read_text(self, path: PathLike) -> Optional[str]: ...

    def write_text(self, path: PathLike, content: str) -> None: ...


class FileStorage:
    """Local file system storage."""

    def exists(self, path: PathLike) -> bool:
        return Path(path).exists()

    def read_text(self, path: PathLike) -> Optional[str]:
        return read_text_tolerated(path)

    def write_text(self, path: PathLike, content: str) -> None:
        write_text(path, content)


DEFAULT_STORAGE = FileStorage()


__all__ = [
    "PathLike",
    "ensure_parent_dir",
    "atomic_write",
    "read_text_tolerated",
    "write_text",
    "Storage",
    "FileStorage",
    "DEFAULT_STORAGE",
]

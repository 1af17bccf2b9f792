"""Manage multiple data files.

Data files are cached by absolute path for the lifetime of the manager, so
every caller editing the same file shares one :class:`DataFile`. Files
loaded through discovery are cached under the path they resolved to, with the
module name kept as an alias. A file edited through a subtree view
(``root_data_path``) is cached separately from the whole document; on save
the whole document is written first and subtree views are spliced in after.

Batch loads and saves run in a thread pool; failures are collected and
raised together once every member has finished.
"""
from __future__ import annotations

import concurrent.futures
import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from edit_config.core.code_config import CodeConfigProvider
from edit_config.core.data_file import DataFile, LoggerLike
from edit_config.core.exceptions import BatchError
from edit_config.core.formatting import Formatter
from edit_config.core.types import UNDEFINED, DataPath
from edit_config.core.utils.io import PathLike, Storage
from edit_config.core.utils.paths import to_display_string

logger = logging.getLogger(__name__)


class Manager:
    """Load, cache and save a set of data files under a common root."""

    def __init__(
        self,
        root: Optional[PathLike] = None,
        *,
        logger: Optional[LoggerLike] = None,
        save_if_changed: bool = False,
        formatter: Optional[Formatter] = None,
        storage: Optional[Storage] = None,
        code_provider: Optional[CodeConfigProvider] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        """
        Args:
            root: Directory relative paths are resolved against (default: cwd).
            logger: Logger handed to every data file.
            save_if_changed: Skip writing files whose data did not change.
            formatter: Formatter applied to serialized output; its profile is
                resolved once, from the first file loaded.
            storage: File system stand-in shared by all data files.
            code_provider: Evaluator for ``js`` config modules.
            max_workers: Thread pool size for batch operations.
        """
        self._root = Path(os.path.abspath(root)) if root is not None else Path.cwd()
        self._logger: LoggerLike = logger if logger is not None else logging.getLogger(__name__)
        self._save_if_changed = save_if_changed
        self._formatter = formatter
        self._storage = storage
        self._code_provider = code_provider
        self._max_workers = max_workers
        self._files: Dict[str, DataFile] = {}
        # discovery request key -> cache key of the file it resolved to
        self._aliases: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._prettier_config: Any = UNDEFINED

    @property
    def root(self) -> Path:
        return self._root

    @property
    def files(self) -> Dict[str, DataFile]:
        """Cached data files keyed by cache key (a copy).

        Whole files are keyed by absolute path; subtree views by
        ``"<absolute path>#<dotted subtree path>"``.
        """
        with self._lock:
            return dict(self._files)

    def _key(self, path: PathLike) -> str:
        return os.path.normpath(os.path.join(self._root, path))

    def _cache_key(self, path: PathLike, root_data_path: Optional[DataPath] = None) -> str:
        key = self._key(path)
        if root_data_path:
            key = f"{key}#{to_display_string(root_data_path)}"
        return key

    def get_cached(self, path: PathLike, root_data_path: Optional[DataPath] = None) -> Optional[DataFile]:
        """Return the cached data file for ``path`` (or a discovered module name) without loading it."""
        key = self._cache_key(path, root_data_path)
        with self._lock:
            return self._files.get(self._aliases.get(key, key))

    def _profile(self, path: str) -> Any:
        # Resolved once per manager; concurrent first resolutions are equivalent.
        if self._formatter is None:
            return None
        if self._prettier_config is UNDEFINED:
            self._prettier_config = self._formatter.resolve_profile(Path(path))
        return self._prettier_config

    def _options(self, path: str, options: Dict[str, Any]) -> Dict[str, Any]:
        merged: Dict[str, Any] = {
            "root_dir": self._root,
            "logger": self._logger,
            "save_if_changed": self._save_if_changed,
            "storage": self._storage,
            "formatter": self._formatter,
            "prettier_config": self._profile(path),
            "code_provider": self._code_provider,
        }
        merged.update(options)
        return merged

    def _cache(self, key: str, factory: Callable[[], DataFile]) -> DataFile:
        cached = self.get_cached(key)
        if cached is not None:
            return cached
        data_file = factory()
        with self._lock:
            return self._files.setdefault(key, data_file)

    def load(self, path: PathLike, **options: Any) -> DataFile:
        """Load ``path`` (relative to the root), or return the cached data file.

        Accepts the options of :meth:`DataFile.load`. With ``cosmiconfig``,
        ``path`` is a module name and the search starts at the root.
        """
        if options.get("cosmiconfig"):
            return self._discover(str(path), options)

        key = self._cache_key(path, options.get("root_data_path"))
        return self._cache(key, lambda: DataFile.load(self._key(path), **self._options(self._key(path), options)))

    def _discover(self, module_name: str, options: Dict[str, Any]) -> DataFile:
        alias = self._cache_key(module_name, options.get("root_data_path"))
        with self._lock:
            if alias in self._aliases:
                return self._files[self._aliases[alias]]

        data_file = DataFile.load(module_name, **self._options(self._key(module_name), options))
        key = self._cache_key(data_file.path, data_file.root_data_path)
        with self._lock:
            data_file = self._files.setdefault(key, data_file)
            self._aliases[alias] = key
        return data_file

    def from_data(self, path: PathLike, data: Any, **options: Any) -> DataFile:
        """Create (or return the cached) data file for ``path`` from ``data``."""
        key = self._cache_key(path, options.get("root_data_path"))
        return self._cache(
            key,
            lambda: DataFile.from_data(self._key(path), data, **self._options(self._key(path), options)),
        )

    def _run_batch(
        self,
        operation: str,
        items: Sequence[Any],
        fn: Callable[[Any], Any],
        label: Callable[[Any], str],
    ) -> List[Any]:
        results: List[Any] = [None] * len(items)
        errors: Dict[str, BaseException] = {}
        with concurrent.futures.ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {executor.submit(fn, item): index for index, item in enumerate(items)}
            for future in concurrent.futures.as_completed(futures):
                index = futures[future]
                try:
                    results[index] = future.result()
                except Exception as exc:
                    errors[label(items[index])] = exc
                    self._logger.error("Failed to %s %s: %s", operation, label(items[index]), exc)

        if errors:
            names = ", ".join(sorted(errors))
            raise BatchError(
                f"Failed to {operation} {len(errors)} file(s): {names}",
                operation=operation,
                errors=errors,
            )
        return results

    def load_all(self, paths: Sequence[PathLike], **options: Any) -> List[DataFile]:
        """Load several files concurrently, in the order of ``paths``.

        Raises:
            BatchError: If any file fails to load (after all loads finished).
        """
        return self._run_batch("load", list(paths), lambda p: self.load(p, **options), self._key)

    @staticmethod
    def _save_views(group: Tuple[str, List[DataFile]]) -> None:
        # Whole document first; subtree views re-read it and splice themselves in.
        _, data_files = group
        for data_file in sorted(data_files, key=lambda f: f.root_data_path is not None):
            data_file.save(throw_on_read_only=False)

    def save_all(self) -> None:
        """Save every cached data file; read-only files are skipped with a warning.

        Files run concurrently; the data files sharing one path are saved one
        after another.

        Raises:
            BatchError: If any file fails to save (after all saves finished).
        """
        groups: Dict[str, List[DataFile]] = {}
        for data_file in self.files.values():
            groups.setdefault(str(data_file.path), []).append(data_file)
        self._run_batch("save", list(groups.items()), self._save_views, lambda group: group[0])


__all__ = ["Manager"]

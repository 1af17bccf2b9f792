"""Read, edit and write a single configuration file.

A :class:`DataFile` owns the parsed data of one file and offers chainable,
optionally guarded mutations::

    DataFile.load("package.json") \\
        .set("scripts.build", "tsc") \\
        .merge("scripts", {"test": "jest"}, when=lambda scripts: "test" not in scripts) \\
        .sort_keys("scripts") \\
        .save()

Mutations only touch memory; nothing is written until :meth:`DataFile.save`.
"""
from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from edit_config.core.code_config import DEFAULT_CODE_PROVIDER, CodeConfigProvider
from edit_config.core.exceptions import (
    ReadOnlyError,
    UnsupportedConstructionError,
    UnsupportedFormatError,
)
from edit_config.core.formatting import Formatter, PrettierFormatter
from edit_config.core.loader import (
    coerce_format,
    discover_data,
    format_from_file_name,
    read_data,
    validate_shape,
)
from edit_config.core.types import UNDEFINED, DataPath, FileFormat, Key, KeyFilter, LogLevel
from edit_config.core.utils.changes import ChangeTracker, same_value
from edit_config.core.utils.evaluate import resolve_predicate, resolve_value
from edit_config.core.utils.io import DEFAULT_STORAGE, PathLike, Storage, get_codec
from edit_config.core.utils.merge import deep_merge, empty_like, mergeable
from edit_config.core.utils.ordering import order_keys
from edit_config.core.utils.paths import (
    delete_empty_path,
    get_path,
    has_path,
    is_root,
    set_path,
    to_display_string,
    to_segments,
    unset_path,
)

logger = logging.getLogger(__name__)

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]
FormatLike = Union[FileFormat, str, None]


def _absolute(path: PathLike, root_dir: Optional[PathLike] = None) -> Path:
    if root_dir is not None and not os.path.isabs(path):
        path = os.path.join(root_dir, path)
    return Path(os.path.abspath(path))


class DataFile:
    """Read, edit and write configuration files."""

    def __init__(
        self,
        path: PathLike,
        data: Any,
        found: bool,
        *,
        format: FormatLike = None,
        logger: Optional[LoggerLike] = None,
        default_data: Any = None,
        prettier_config: Any = UNDEFINED,
        root_data_path: Optional[DataPath] = None,
        root_dir: Optional[PathLike] = None,
        read_only: bool = False,
        save_if_changed: bool = False,
        storage: Optional[Storage] = None,
        formatter: Optional[Formatter] = None,
        code_provider: Optional[CodeConfigProvider] = None,
    ) -> None:
        #: Actual data.
        self.data = validate_shape(data, path)
        self._found = found
        self._path = Path(path)
        self._format = coerce_format(format) or FileFormat.UNKNOWN
        self._logger: LoggerLike = logger if logger is not None else logging.getLogger(__name__)
        self._default_data = default_data
        self._root_dir = Path(root_dir) if root_dir is not None else None
        self._root_data_path: Optional[List[Key]] = (
            to_segments(root_data_path) if root_data_path else None
        )
        self._read_only = read_only is True
        self._save_if_changed = save_if_changed
        self._storage = storage or DEFAULT_STORAGE
        self._code_provider = code_provider or DEFAULT_CODE_PROVIDER
        if formatter is None and prettier_config is not None and prettier_config is not UNDEFINED:
            formatter = PrettierFormatter()
        self._formatter = formatter
        # UNDEFINED until resolved; None means "no formatting".
        self._prettier_config: Any = prettier_config
        self._changes = ChangeTracker()
        self._sorted = False
        self._snapshot: Any = UNDEFINED
        self._take_snapshot()

    def __repr__(self) -> str:
        return f"DataFile({str(self._path)!r}, format={self._format.value!r}, found={self._found})"

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def found(self) -> bool:
        """Whether the file existed (or discovery found a configuration)."""
        return self._found

    @property
    def path(self) -> Path:
        return self._path

    @property
    def format(self) -> FileFormat:
        return self._format

    @property
    def short_path(self) -> str:
        """File path relative to ``root_dir`` when one was given."""
        if self._root_dir is None:
            return os.path.normpath(str(self._path))
        return os.path.normpath(os.path.relpath(self._path, self._root_dir))

    @property
    def read_only(self) -> bool:
        """Whether the file can be saved by this library."""
        return not self._format.writable or self._read_only

    @property
    def root_data_path(self) -> Optional[List[Key]]:
        """Keys of the edited subtree inside the file; ``None`` for whole files."""
        return list(self._root_data_path) if self._root_data_path else None

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def has(self, path: DataPath) -> bool:
        """Return whether ``path`` exists in the data.

        Example:
            data_file.has("scripts.build")
            data_file.has(["scripts", "build"])
        """
        return has_path(self.data, path)

    def get(self, path: DataPath, default: Any = None) -> Any:
        """Return the value at ``path``, or ``default`` when it does not exist."""
        return get_path(self.data, path, default)

    def get_modified_keys(
        self,
        filter: Optional[KeyFilter] = None,
        *,
        include: Union[str, Sequence[str], None] = None,
        exclude: Union[str, Sequence[str], None] = None,
    ) -> Dict[str, List[str]]:
        """Return the paths set and deleted since load, as ``{"set": [...], "deleted": [...]}``.

        Args:
            filter: Called with ``(path_keys, "set" | "deleted")``; return
                false to drop a path.
            include: Keep only paths starting with one of these prefixes.
            exclude: Drop paths starting with one of these prefixes.

        Example:
            data_file.get_modified_keys(include="scripts", exclude=["scripts.validate"])
        """
        return self._changes.query(filter, include=include, exclude=exclude)

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    def set(self, path: DataPath, value: Any, *, when: Any = None) -> "DataFile":
        """Set the value at ``path``, creating missing containers.

        Lists are created for missing index segments, dicts for all other
        missing segments. ``value`` may be a function of
        ``(value, key, parent, path, data_file)``; ``when`` is an optional guard
        with the same arguments.

        Example:
            data_file \\
                .set("scripts.build", "tsc") \\
                .set(["scripts", "test"], "jest", when=lambda value: value != "mocha")
        """
        should_do = resolve_predicate(when, self, path)
        if should_do:
            new_value = resolve_value(value, self, path)
            if is_root(path):
                self.data = validate_shape(new_value, self._path)
            else:
                set_path(self.data, path, new_value)
            self._changes.record_set(path)
        self._log_operation("set", should_do, path)
        return self

    def delete(self, path: DataPath, *, when: Any = None) -> "DataFile":
        """Delete the value at ``path``.

        Example:
            data_file \\
                .delete("scripts.build") \\
                .delete(["scripts", "test"], when=lambda value: value != "jest")
        """
        should_do = resolve_predicate(when, self, path)
        if should_do:
            unset_path(self.data, path)
            self._changes.record_delete(path)
        self._log_operation("deleted", should_do, path)
        return self

    def delete_empty_path(self, path: DataPath, *, when: Any = None) -> "DataFile":
        """Delete ``path`` and every ancestor the deletion leaves empty."""
        should_do = resolve_predicate(when, self, path)
        if should_do:
            for removed in delete_empty_path(self.data, path):
                self._changes.record_delete(removed)
        self._log_operation("deleted", should_do, path)
        return self

    def merge(self, path: DataPath, *sources: Any, when: Any = None) -> "DataFile":
        """Deep merge ``sources`` into the value at ``path``.

        Dicts and lists merge recursively; other values are replaced.
        ``UNDEFINED`` source values are skipped. Sources apply left to right.
        Each source may be a function of the current value. Use ``[]`` as
        ``path`` to merge into the root, since ``""`` and ``None`` are keys.

        Example:
            data_file.merge("scripts", {"build": "tsc"}, when=lambda s: s.get("build") != "babel")
            data_file.merge([], {"name": "my-module"}, {"version": "1.0.0"})
        """
        should_do = resolve_predicate(when, self, path)
        if should_do:
            resolved = [resolve_value(source, self, path) for source in sources]
            if is_root(path):
                deep_merge(self.data, *resolved)
            else:
                target = get_path(self.data, path, UNDEFINED)
                if has_path(self.data, path) and all(mergeable(target, s) for s in resolved):
                    deep_merge(target, *resolved)
                else:
                    set_path(self.data, path, deep_merge(empty_like(*resolved), *resolved))
            self._changes.record_set(path)
        self._log_operation("merged", should_do, path)
        return self

    def sort_keys(
        self,
        path: DataPath = (),
        *,
        start: Sequence[Key] = (),
        end: Sequence[Key] = (),
    ) -> "DataFile":
        """Reorder the keys at ``path``: ``start`` keys, the rest sorted, then ``end`` keys.

        New keys are appended at the end of a mapping, so this is used to put
        them where they belong before saving. Already ordered keys are left
        untouched and do not mark the file as changed.

        Example:
            data_file.sort_keys("scripts", start=["build", "lint"], end=["release"])
            data_file.sort_keys(start=["name", "description"], end=["dependencies"])
        """
        changed = False
        if not is_root(path) and self.has(path):
            reordered, changed = order_keys(self.get(path), start, end)
            if changed:
                set_path(self.data, path, reordered)
        elif is_root(path) or path is None or path == "":
            reordered, changed = order_keys(self.data, start, end)
            if changed:
                self.data = reordered

        if changed:
            self._sorted = True
            self._log(LogLevel.INFO, f"Keys sorted: '{to_display_string(path)}' in '{self.short_path}'.")
        else:
            self._log(LogLevel.DEBUG, f"Keys already sorted: '{to_display_string(path)}' in '{self.short_path}'.")
        return self

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def serialize(self, whole_file: bool = False) -> str:
        """Return the data serialized in the file's format.

        Args:
            whole_file: For files loaded with ``root_data_path``, re-read the
                whole file and serialize it with this data spliced in.
        """
        data = self.data
        if self._root_data_path and whole_file:
            base = self._default_data if self._default_data is not None else self.data
            full = read_data(
                self._path,
                base,
                storage=self._storage,
                code_provider=self._code_provider,
            ).data
            data = set_path(full, self._root_data_path, self.data)

        content = get_codec(self._format).serialize(data)
        profile = self._formatter_profile()
        if profile:
            content = self._formatter.format(  # type: ignore[union-attr]
                content,
                profile=profile,
                parser=self._format.value or FileFormat.JSON.value,
                path=self._path,
            )
        return content

    def save(self, *, throw_on_read_only: bool = True) -> bool:
        """Write the file.

        Returns:
            Whether the file was written. Read-only files (when
            ``throw_on_read_only`` is false) and unchanged files under the
            save-if-changed policy are skipped.

        Raises:
            ReadOnlyError: If the file is read-only and ``throw_on_read_only``.
        """
        if self.read_only:
            level = LogLevel.ERROR if throw_on_read_only else LogLevel.WARN
            self._log(level, f"File not saved: '{self.short_path}' is marked as read-only or is a 'js' file.")
            if throw_on_read_only:
                raise ReadOnlyError(
                    f"Cannot save: {self._path} is marked as read-only or is a 'js' file.",
                    context={"path": str(self._path), "format": self._format.value},
                )
            return False

        if self._save_if_changed and not self._is_changed():
            self._log(LogLevel.VERBOSE, f"File not saved: '{self.short_path}' has no changes.")
            return False

        self._storage.write_text(self._path, self.serialize(True))
        self._found = True
        self._sorted = False
        self._take_snapshot()
        self._log(LogLevel.INFO, f"File saved: {self.short_path}")
        return True

    def reload(self) -> "DataFile":
        """Re-read data from disk, resetting to default data when the file is gone.

        The modification log, the change snapshot and the sorted flag are reset.
        """
        base = self._default_data if self._default_data is not None else self.data
        result = read_data(
            self._path,
            base,
            self._root_data_path,
            storage=self._storage,
            code_provider=self._code_provider,
        )
        self.data = result.data
        self._found = result.found
        self._changes.clear()
        self._sorted = False
        self._take_snapshot()
        self._log(LogLevel.DEBUG, f"File reloaded: {self.short_path}")
        return self

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _take_snapshot(self) -> None:
        if self._save_if_changed:
            self._snapshot = copy.deepcopy(self.data)

    def _is_changed(self) -> bool:
        if self._sorted or not self._found:
            return True
        return not same_value(self.data, self._snapshot)

    def _formatter_profile(self) -> Any:
        if self._formatter is None:
            return None
        if self._prettier_config is UNDEFINED:
            self._prettier_config = self._formatter.resolve_profile(self._path)
        return self._prettier_config

    def _log(self, level: LogLevel, message: str) -> None:
        self._logger.log(int(level), message)

    def _log_operation(self, operation: str, success: bool, path: DataPath) -> None:
        negation = "" if success else "not "
        level = LogLevel.INFO if success else LogLevel.WARN
        self._log(level, f"Key {negation}{operation}: '{to_display_string(path)}' in '{self.short_path}'.")

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def from_data(
        cls,
        path: PathLike,
        data: Any,
        *,
        default_format: FormatLike = None,
        root_dir: Optional[PathLike] = None,
        storage: Optional[Storage] = None,
        **options: Any,
    ) -> "DataFile":
        """Create a data file from ``data``, to be saved later at ``path``.

        Raises:
            UnsupportedConstructionError: For ``js`` targets.
            UnsupportedFormatError: For unsupported extensions.
        """
        full_path = _absolute(path, root_dir)
        file_format = format_from_file_name(full_path)
        if file_format is FileFormat.JS:
            raise UnsupportedConstructionError(
                f"Cannot create DataFile from data for 'js' file: {full_path}",
                context={"path": str(full_path)},
            )
        if file_format is None:
            raise UnsupportedFormatError(
                f"Unsupported file type: {full_path}",
                context={"path": str(full_path)},
            )
        if file_format is FileFormat.UNKNOWN:
            file_format = coerce_format(default_format) or FileFormat.UNKNOWN

        storage = storage or DEFAULT_STORAGE
        found = storage.exists(full_path)
        options.setdefault("default_data", copy.deepcopy(data))
        return cls(
            full_path,
            data,
            found,
            format=file_format,
            root_dir=root_dir,
            storage=storage,
            **options,
        )

    @classmethod
    def load(
        cls,
        path: PathLike,
        *,
        default_data: Any = None,
        default_format: FormatLike = None,
        cosmiconfig: Union[bool, Mapping[str, Any]] = False,
        root_data_path: Optional[DataPath] = None,
        root_dir: Optional[PathLike] = None,
        storage: Optional[Storage] = None,
        code_provider: Optional[CodeConfigProvider] = None,
        **options: Any,
    ) -> "DataFile":
        """Read data from ``path``; missing files get ``default_data`` (``{}``).

        With ``cosmiconfig``, ``path`` is a module name whose configuration is
        searched for instead (see :func:`edit_config.core.discovery.search`).

        Raises:
            UnsupportedFormatError: If the extension is not supported.
            ParseError: If the file exists but cannot be parsed.
            InvalidShapeError: If the content is not a dict or a list.
        """
        if default_data is None:
            default_data = {}
        fallback_format = coerce_format(default_format)
        storage = storage or DEFAULT_STORAGE
        code_provider = code_provider or DEFAULT_CODE_PROVIDER

        if cosmiconfig:
            discovered = discover_data(
                str(path),
                default_data,
                cosmiconfig,
                root_dir=root_dir,
                root_data_path=root_data_path,
                default_format=fallback_format,
                storage=storage,
                code_provider=code_provider,
            )
            file_format = discovered.format
            if file_format is FileFormat.UNKNOWN and fallback_format is not None:
                file_format = fallback_format
            return cls(
                discovered.path,
                discovered.data,
                discovered.found,
                format=file_format,
                default_data=default_data,
                root_data_path=discovered.root_data_path,
                root_dir=root_dir,
                storage=storage,
                code_provider=code_provider,
                **options,
            )

        full_path = _absolute(path, root_dir)
        result = read_data(
            full_path,
            default_data,
            root_data_path,
            storage=storage,
            code_provider=code_provider,
        )
        file_format = result.format
        if file_format is FileFormat.UNKNOWN and fallback_format is not None:
            file_format = fallback_format
        return cls(
            full_path,
            result.data,
            result.found,
            format=file_format,
            default_data=default_data,
            root_data_path=root_data_path,
            root_dir=root_dir,
            storage=storage,
            code_provider=code_provider,
            **options,
        )


def load_data_file(path: PathLike, **options: Any) -> DataFile:
    """Shortcut for :meth:`DataFile.load`."""
    return DataFile.load(path, **options)


__all__ = ["DataFile", "load_data_file"]

"""Configuration discovery (cosmiconfig-style search).

Looks for a named configuration in a directory and its ancestors, checking
a fixed list of places in each directory:

- ``package.json`` (only when it has the ``package_prop`` key)
- ``.<name>rc`` (JSON or YAML, detected from content)
- ``.<name>rc.json``, ``.<name>rc.yaml``, ``.<name>rc.yml``
- ``.<name>rc.js``, ``.<name>rc.cjs``
- ``<name>.config.js``, ``<name>.config.cjs``

The search stops at the first hit, or after ``stop_dir`` (home directory by
default) or the file system root has been searched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence

from edit_config.core.code_config import DEFAULT_CODE_PROVIDER, CodeConfigProvider
from edit_config.core.exceptions import DiscoveryError, ParseError
from edit_config.core.types import UNDEFINED, FileFormat
from edit_config.core.utils.io import DEFAULT_STORAGE, PathLike, Storage, parse_json_string
from edit_config.core.utils.paths import get_path, to_segments

logger = logging.getLogger(__name__)

PACKAGE_MANIFEST = "package.json"


@dataclass(frozen=True)
class DiscoveryResult:
    """A configuration found by :func:`search`."""

    filepath: Path
    config: Any
    is_empty: bool
    format: FileFormat


def default_search_places(module_name: str) -> List[str]:
    return [
        PACKAGE_MANIFEST,
        f".{module_name}rc",
        f".{module_name}rc.json",
        f".{module_name}rc.yaml",
        f".{module_name}rc.yml",
        f".{module_name}rc.js",
        f".{module_name}rc.cjs",
        f"{module_name}.config.js",
        f"{module_name}.config.cjs",
    ]


def _load_manifest(path: Path, content: str, package_prop: str) -> Optional[DiscoveryResult]:
    try:
        manifest = parse_json_string(content)
    except ValueError as exc:
        raise ParseError(
            f"Cannot parse data file '{path}'. JSON error: {exc}",
            path=str(path),
            errors={FileFormat.JSON.value: str(exc)},
        ) from exc
    config = get_path(manifest, to_segments(package_prop), UNDEFINED)
    if config is UNDEFINED:
        return None
    return DiscoveryResult(path, config, config is None, FileFormat.JSON)


def _load_place(
    path: Path,
    *,
    package_prop: str,
    storage: Storage,
    code_provider: CodeConfigProvider,
) -> Optional[DiscoveryResult]:
    # Lazy import: loader depends on this module.
    from edit_config.core.loader import format_from_file_name, parse_content

    file_format = format_from_file_name(path)
    if file_format is FileFormat.JS:
        config = code_provider.load(path)
        return DiscoveryResult(path, config, config is None, FileFormat.JS)

    content = storage.read_text(path)
    if content is None:
        return None
    if path.name == PACKAGE_MANIFEST:
        return _load_manifest(path, content, package_prop)
    if not content.strip():
        return DiscoveryResult(path, None, True, file_format or FileFormat.UNKNOWN)

    config, detected = parse_content(content, path)
    if file_format in (None, FileFormat.UNKNOWN):
        file_format = detected
    return DiscoveryResult(path, config, config is None, file_format)


def search(
    module_name: str,
    search_from: Optional[PathLike] = None,
    *,
    package_prop: Optional[str] = None,
    search_places: Optional[Sequence[str]] = None,
    stop_dir: Optional[PathLike] = None,
    storage: Storage = DEFAULT_STORAGE,
    code_provider: CodeConfigProvider = DEFAULT_CODE_PROVIDER,
) -> Optional[DiscoveryResult]:
    """Search for ``module_name`` configuration starting at ``search_from``.

    Args:
        module_name: Name of the tool whose configuration is searched.
        search_from: Directory to start from (default: current directory).
        package_prop: Key (dotted allowed) holding the configuration in
            ``package.json`` (default: ``module_name``).
        search_places: File names checked in each directory, in order.
        stop_dir: Last directory searched (default: home directory).

    Returns:
        The first configuration found, or ``None``.

    Raises:
        DiscoveryError: If ``module_name`` is empty or ``search_from`` is not
            a directory.
    """
    if not module_name:
        raise DiscoveryError("A module name is required for configuration discovery.")

    directory = Path(search_from if search_from is not None else Path.cwd()).resolve()
    if not directory.is_dir():
        raise DiscoveryError(
            f"Cannot search for '{module_name}' configuration: {directory} is not a directory.",
            context={"module_name": module_name, "search_from": str(directory)},
        )
    stop = Path(stop_dir).resolve() if stop_dir is not None else Path.home().resolve()
    places = list(search_places) if search_places is not None else default_search_places(module_name)
    prop = package_prop or module_name

    while True:
        for place in places:
            candidate = directory / place
            if not storage.exists(candidate):
                continue
            result = _load_place(
                candidate,
                package_prop=prop,
                storage=storage,
                code_provider=code_provider,
            )
            if result is not None:
                logger.debug("Found '%s' configuration in %s", module_name, candidate)
                return result
        if directory == stop or directory.parent == directory:
            return None
        directory = directory.parent


__all__ = ["PACKAGE_MANIFEST", "DiscoveryResult", "default_search_places", "search"]

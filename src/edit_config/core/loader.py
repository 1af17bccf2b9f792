"""Reading data files: format resolution, parsing and shape validation.

Decision tree used when a data file is loaded:

1. The format comes from the file extension. Unknown extensions are rejected
   unless discovery is requested.
2. With discovery, the configuration is searched for by name; a miss yields
   default data at a conventional ``.<name>rc.json`` location.
3. Otherwise the file is read. A missing file yields default data; a code
   module is evaluated; anything else is parsed as JSON, then as YAML.
4. The parsed root must be a dict or a list.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from edit_config.core.code_config import DEFAULT_CODE_PROVIDER, CodeConfigProvider
from edit_config.core.discovery import PACKAGE_MANIFEST, search
from edit_config.core.exceptions import InvalidShapeError, ParseError, UnsupportedFormatError
from edit_config.core.types import UNDEFINED, DataPath, FileFormat, Key
from edit_config.core.utils.io import DEFAULT_STORAGE, PARSE_ORDER, PathLike, Storage, get_codec
from edit_config.core.utils.paths import get_path, to_segments

logger = logging.getLogger(__name__)

_EXTENSION_FORMATS: Dict[str, FileFormat] = {
    ".json": FileFormat.JSON,
    ".yaml": FileFormat.YAML,
    ".yml": FileFormat.YAML,
    ".js": FileFormat.JS,
    ".cjs": FileFormat.JS,
    ".mjs": FileFormat.JS,
}


@dataclass
class ReadResult:
    data: Any
    format: FileFormat
    found: bool


@dataclass
class DiscoveredData:
    path: Path
    data: Any
    format: FileFormat
    found: bool
    root_data_path: Optional[List[Key]] = field(default=None)


def format_from_file_name(path: PathLike) -> Optional[FileFormat]:
    """Return the format implied by the extension of ``path``.

    Returns ``FileFormat.UNKNOWN`` for names without an extension (such as
    ``.eslintrc``) and ``None`` for unsupported extensions.
    """
    suffix = Path(path).suffix.lower()
    if not suffix:
        return FileFormat.UNKNOWN
    return _EXTENSION_FORMATS.get(suffix)


def coerce_format(value: Union[FileFormat, str, None]) -> Optional[FileFormat]:
    if value is None or isinstance(value, FileFormat):
        return value
    try:
        return FileFormat(value)
    except ValueError:
        raise UnsupportedFormatError(f"Unsupported file format: {value!r}") from None


def parse_content(content: str, path: PathLike) -> Tuple[Any, FileFormat]:
    """Parse ``content`` trying JSON first, then YAML.

    Returns:
        The parsed data and the format of the codec that succeeded.

    Raises:
        ParseError: If no codec can parse ``content``; the message lists every
            codec's error.
    """
    errors: Dict[str, str] = {}
    for file_format in PARSE_ORDER:
        try:
            return get_codec(file_format).parse(content), file_format
        except Exception as exc:  # codecs raise library-specific errors
            errors[file_format.value] = str(exc)

    details = " ".join(f"{name.upper()} error: {message}" for name, message in errors.items())
    raise ParseError(f"Cannot parse data file '{path}'. {details}", path=str(path), errors=errors)


def validate_shape(data: Any, path: PathLike) -> Any:
    """Ensure ``data`` is a dict or a list.

    Raises:
        InvalidShapeError: For scalars and empty content.
    """
    if not isinstance(data, (dict, list)):
        raise InvalidShapeError(
            f"Data file '{path}' content must be an object or an array, "
            f"got {type(data).__name__}.",
            context={"path": str(path)},
        )
    return data


def extract_subtree(data: Any, root_data_path: Optional[DataPath], default_data: Any, path: PathLike) -> Any:
    """Return the part of ``data`` at ``root_data_path`` (default data when absent)."""
    if not root_data_path:
        return data
    subtree = get_path(data, root_data_path, UNDEFINED)
    if subtree is UNDEFINED or subtree is None:
        return copy.deepcopy(default_data)
    return validate_shape(subtree, f"{path}#{'.'.join(str(k) for k in to_segments(root_data_path))}")


def read_data(
    path: PathLike,
    default_data: Any,
    root_data_path: Optional[DataPath] = None,
    *,
    storage: Storage = DEFAULT_STORAGE,
    code_provider: CodeConfigProvider = DEFAULT_CODE_PROVIDER,
) -> ReadResult:
    """Read and validate the data of ``path``.

    Missing files produce a deep copy of ``default_data`` with
    ``found=False``. Files without an extension take the format of the codec
    that parsed them.

    Raises:
        UnsupportedFormatError: If the extension is not supported.
        ParseError: If the content cannot be parsed.
        InvalidShapeError: If the content is not a dict or a list.
    """
    file_format = format_from_file_name(path)
    if file_format is None:
        raise UnsupportedFormatError(
            f"Unsupported file type: {path}",
            context={"path": str(path), "suffix": Path(path).suffix},
        )

    if file_format is FileFormat.JS:
        if not storage.exists(path):
            return ReadResult(copy.deepcopy(default_data), file_format, False)
        data = code_provider.load(Path(path))
    else:
        content = storage.read_text(path)
        if content is None:
            return ReadResult(copy.deepcopy(default_data), file_format, False)
        data, detected = parse_content(content, path)
        if file_format is FileFormat.UNKNOWN:
            file_format = detected

    validate_shape(data, path)
    data = extract_subtree(data, root_data_path, default_data, path)
    logger.debug("Read %s data from %s", file_format.value or "unknown", path)
    return ReadResult(data, file_format, True)


def _discovery_options(cosmiconfig: Union[bool, Mapping[str, Any]]) -> Tuple[Dict[str, Any], Any]:
    if not isinstance(cosmiconfig, Mapping):
        return {}, None
    return dict(cosmiconfig.get("options") or {}), cosmiconfig.get("search_from")


def discover_data(
    module_name: str,
    default_data: Any,
    cosmiconfig: Union[bool, Mapping[str, Any]],
    *,
    root_dir: Optional[PathLike] = None,
    root_data_path: Optional[DataPath] = None,
    default_format: Optional[FileFormat] = None,
    storage: Storage = DEFAULT_STORAGE,
    code_provider: CodeConfigProvider = DEFAULT_CODE_PROVIDER,
) -> DiscoveredData:
    """Find ``module_name`` configuration and return the data to edit.

    ``cosmiconfig`` is ``True`` or a mapping with optional ``options``
    (``package_prop``, ``search_places``, ``stop_dir``) and ``search_from``
    (default: ``root_dir``).

    When the configuration lives in ``package.json`` the returned
    ``root_data_path`` is ``[package_prop, *root_data_path]`` so saving
    splices the data back under that key.
    """
    options, search_from = _discovery_options(cosmiconfig)
    search_from = search_from if search_from is not None else root_dir
    base = Path(search_from) if search_from is not None else Path.cwd()
    own_path = to_segments(root_data_path) if root_data_path else []

    result = search(
        module_name,
        base,
        storage=storage,
        code_provider=code_provider,
        **options,
    )

    if result is None:
        suffix = ".yaml" if default_format is FileFormat.YAML else ".json"
        path = base.absolute() / f".{module_name}rc{suffix}"
        logger.debug("No '%s' configuration found from %s", module_name, base)
        return DiscoveredData(path, copy.deepcopy(default_data), format_from_file_name(path), False)  # type: ignore[arg-type]

    data_path = list(own_path)
    if result.filepath.name == PACKAGE_MANIFEST:
        prop = options.get("package_prop") or module_name
        data_path = [*to_segments(prop), *own_path]

    config = copy.deepcopy(default_data) if result.is_empty else validate_shape(result.config, result.filepath)
    data = extract_subtree(config, own_path, default_data, result.filepath)
    return DiscoveredData(result.filepath, data, result.format, True, data_path or None)


__all__ = [
    "ReadResult",
    "DiscoveredData",
    "format_from_file_name",
    "coerce_format",
    "parse_content",
    "validate_shape",
    "extract_subtree",
    "read_data",
    "discover_data",
]

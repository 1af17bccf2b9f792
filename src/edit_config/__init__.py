"""
edit-config - read, edit and write configuration files

Loads JSON and YAML files (and JavaScript config modules, read-only),
applies chainable and optionally guarded edits in memory, and writes the
result back keeping key order.
"""
import logging

from edit_config.core.code_config import CodeConfigProvider, NodeCodeConfigProvider
from edit_config.core.data_file import DataFile, load_data_file
from edit_config.core.discovery import DiscoveryResult, search
from edit_config.core.exceptions import (
    BatchError,
    CodeConfigError,
    DiscoveryError,
    EditConfigError,
    InvalidShapeError,
    ParseError,
    ReadOnlyError,
    UnsupportedConstructionError,
    UnsupportedFormatError,
)
from edit_config.core.formatting import Formatter, PrettierFormatter
from edit_config.core.manager import Manager
from edit_config.core.types import UNDEFINED, DataPath, FileFormat, LogLevel
from edit_config.core.utils.evaluate import Computed, Literal
from edit_config.core.utils.io import FileStorage, Storage

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.8.0"
__all__ = [
    "__version__",
    "DataFile",
    "load_data_file",
    "Manager",
    "UNDEFINED",
    "DataPath",
    "FileFormat",
    "LogLevel",
    "Literal",
    "Computed",
    "Storage",
    "FileStorage",
    "Formatter",
    "PrettierFormatter",
    "CodeConfigProvider",
    "NodeCodeConfigProvider",
    "DiscoveryResult",
    "search",
    "EditConfigError",
    "UnsupportedFormatError",
    "ParseError",
    "InvalidShapeError",
    "ReadOnlyError",
    "UnsupportedConstructionError",
    "DiscoveryError",
    "CodeConfigError",
    "BatchError",
]

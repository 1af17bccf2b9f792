"""Helpers behind :class:`edit_config.core.data_file.DataFile`."""
from __future__ import annotations

from .changes import ChangeTracker
from .evaluate import resolve_predicate, resolve_value
from .merge import deep_merge
from .ordering import compute_key_order, order_keys
from .paths import (
    delete_empty_path,
    get_path,
    has_path,
    set_path,
    to_display_string,
    to_segments,
    unset_path,
)

__all__ = [
    "ChangeTracker",
    "resolve_predicate",
    "resolve_value",
    "deep_merge",
    "compute_key_order",
    "order_keys",
    "delete_empty_path",
    "get_path",
    "has_path",
    "set_path",
    "to_display_string",
    "to_segments",
    "unset_path",
]

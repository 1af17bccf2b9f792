from __future__ import annotations

from typing import Any, Dict, Mapping


class EditConfigError(Exception):
    """Base exception for edit-config."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class UnsupportedFormatError(EditConfigError, ValueError):
    """Raised when a file extension maps to no known data format."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        EditConfigError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ParseError(EditConfigError, ValueError):
    """Raised when file content cannot be parsed by any codec."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        errors: Mapping[str, str] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if path:
            ctx["path"] = path
        if errors:
            ctx["errors"] = dict(errors)
        EditConfigError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)


class InvalidShapeError(EditConfigError, ValueError):
    """Raised when parsed content is not an object or array."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        EditConfigError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ReadOnlyError(EditConfigError, PermissionError):
    """Raised when saving a read-only data file."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        EditConfigError.__init__(self, message, context=context)
        PermissionError.__init__(self, message)


class UnsupportedConstructionError(EditConfigError, ValueError):
    """Raised when a data file cannot be created for the requested target."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        EditConfigError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class DiscoveryError(EditConfigError):
    """Raised when a configuration search fails for reasons other than a miss."""


class CodeConfigError(EditConfigError, RuntimeError):
    """Raised when a code config module cannot be evaluated."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        EditConfigError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class BatchError(EditConfigError):
    """Raised when one or more members of a batch operation fail.

    ``errors`` maps each failing file path to the exception it raised.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        errors: Mapping[str, BaseException],
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        ctx["operation"] = operation
        ctx["paths"] = sorted(errors)
        super().__init__(message, context=ctx)
        self.errors: Dict[str, BaseException] = dict(errors)


__all__ = [
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

"""dbdiagram error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse
- 4xxx: Render
- 5xxx: Patch
- 9xxx: Internal

Parse problems inside a schema document are never raised; they are
collected as diagnostics on the parsed model. The errors here cover the
boundaries where something must stop: bad configuration, an unknown
source format, a failed render pass, or an edit that could not land.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Parse (3xxx)
    PARSE_UNSUPPORTED_FORMAT = 3001
    PARSE_SOURCE_UNREADABLE = 3002

    # Render (4xxx)
    RENDER_FAILED = 4001

    # Patch (5xxx)
    PATCH_TARGET_NOT_FOUND = 5001
    PATCH_NOT_WRITABLE = 5002
    PATCH_INVALID_EDIT = 5003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class DiagramError(Exception):
    """Base error with structured context for CLI and log output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PATCH_NOT_WRITABLE')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DiagramError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ParseError(DiagramError):
    """Source-level errors that prevent parsing from starting at all."""

    @classmethod
    def unsupported_format(cls, fmt: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_UNSUPPORTED_FORMAT,
            message=f"Unsupported format: {fmt}",
            details={"format": fmt},
        )

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_SOURCE_UNREADABLE,
            message=f"Cannot read schema source {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class RenderError(DiagramError):
    """Failure while turning a parsed schema into a scene."""

    @classmethod
    def failed(cls, reason: str, **details: Any) -> "RenderError":
        return cls(
            code=ErrorCode.RENDER_FAILED,
            message=f"Error rendering diagram: {reason}",
            details=details,
        )


class PatchError(DiagramError):
    """An edit that cannot be written back into the source text.

    SourcePatcher.apply() never lets these escape; they are raised by the
    lower-level planning step and turned into a logged, dropped edit.
    """

    @classmethod
    def target_not_found(cls, kind: str, name: str) -> "PatchError":
        return cls(
            code=ErrorCode.PATCH_TARGET_NOT_FOUND,
            message=f"No {kind} named '{name}' in the current text",
            details={"kind": kind, "name": name},
        )

    @classmethod
    def not_writable(cls, reason: str = "document is read-only") -> "PatchError":
        return cls(
            code=ErrorCode.PATCH_NOT_WRITABLE,
            message=f"Document not writable: {reason}",
            retryable=True,
            details={"reason": reason},
        )

    @classmethod
    def invalid_edit(cls, reason: str, **details: Any) -> "PatchError":
        return cls(
            code=ErrorCode.PATCH_INVALID_EDIT,
            message=f"Invalid edit: {reason}",
            details=details,
        )


class InternalError(DiagramError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

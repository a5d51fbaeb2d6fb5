"""Core module exports."""

from dbdiagram.core.errors import (
    ConfigError,
    DiagramError,
    ErrorCode,
    InternalError,
    ParseError,
    PatchError,
    RenderError,
)
from dbdiagram.core.logging import (
    bind_render,
    clear_render,
    configure_logging,
    get_logger,
    get_render_id,
    render_context,
)
from dbdiagram.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "DiagramError",
    "ErrorCode",
    "ConfigError",
    "ParseError",
    "RenderError",
    "PatchError",
    "InternalError",
    # Logging
    "bind_render",
    "clear_render",
    "configure_logging",
    "get_logger",
    "get_render_id",
    "render_context",
    # Progress
    "pluralize",
    "spinner",
    "status",
]

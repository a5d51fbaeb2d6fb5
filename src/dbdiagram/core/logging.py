"""structlog setup for dbdiagram.

Events go through stdlib handlers, one per configured output, so a JSON
log file and a console stream can run side by side at different levels.
While a render runs, every event carries the render's context:

    render_id  short hex id shared by one parse/route/draw pass
    format     the source format key ("dbml")
    source     the source path, when the text came from a file
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from uuid import uuid4

import structlog

from dbdiagram.config.models import LoggingConfig, LogOutputConfig
from dbdiagram.core.progress import is_console_suppressed

_CONTEXT_KEYS = ("render_id", "format", "source")

_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
]


def bind_render(
    *, fmt: str | None = None, source: str | None = None, render_id: str | None = None
) -> str:
    """Bind the render context for the current task. Returns the render id."""
    rid = render_id or uuid4().hex[:12]
    context = {"render_id": rid, "format": fmt, "source": source}
    structlog.contextvars.bind_contextvars(**{k: v for k, v in context.items() if v})
    return rid


def clear_render() -> None:
    structlog.contextvars.unbind_contextvars(*_CONTEXT_KEYS)


def get_render_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("render_id")


@contextmanager
def render_context(*, fmt: str | None = None, source: str | None = None) -> Iterator[str]:
    """Scope the render context to a block; yields the render id."""
    rid = bind_render(fmt=fmt, source=source)
    try:
        yield rid
    finally:
        clear_render()


def _level(name: str) -> int:
    return logging.getLevelNamesMapping()[name.upper()]


def _handler(output: LogOutputConfig) -> logging.Handler:
    stream = {"stderr": sys.stderr, "stdout": sys.stdout}.get(output.destination)
    if stream is None:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(path, encoding="utf-8")
        renderer = (
            structlog.processors.JSONRenderer()
            if output.format == "json"
            else structlog.dev.ConsoleRenderer(colors=False)
        )
    else:
        handler = logging.StreamHandler(stream)
        # a spinner owns the terminal; file outputs keep recording
        handler.addFilter(lambda _record: not is_console_suppressed())
        renderer = (
            structlog.processors.JSONRenderer()
            if output.format == "json"
            else structlog.dev.ConsoleRenderer(colors=stream.isatty(), pad_event_to=0)
        )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_PRE_CHAIN)
    )
    return handler


def configure_logging(config: LoggingConfig | None = None, *, level: str | None = None) -> None:
    """Install one handler per configured output.

    level overrides the configured level for the root and for every
    output that does not name its own (the CLI's -v flag).
    """
    config = config or LoggingConfig()
    root_level = _level(level or config.level)

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in root.handlers:
        old.close()
    root.handlers.clear()
    root.setLevel(root_level)
    # watchfiles reports every filtered change at debug
    logging.getLogger("watchfiles").setLevel(logging.WARNING)

    for output in config.outputs:
        handler = _handler(output)
        handler.setLevel(_level(output.level) if output.level else root_level)
        root.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    return logger.bind(logger=name) if name else logger  # type: ignore[no-any-return]

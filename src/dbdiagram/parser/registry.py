"""Format key -> parser lookup.

Format keys are file-extension-like: "dbml", ".dbml" and "DBML" all
name the same parser.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from dbdiagram.config.constants import DEFAULT_FORMAT
from dbdiagram.core.errors import ParseError
from dbdiagram.parser.dbml import DbmlParser
from dbdiagram.schema.models import Schema


class SchemaParser(Protocol):
    def parse(self, text: str) -> Schema: ...


_PARSERS: dict[str, Callable[[], SchemaParser]] = {
    "dbml": DbmlParser,
}


def normalize_format(fmt: str) -> str:
    return fmt.strip().lower().removeprefix(".")


def register_parser(fmt: str, factory: Callable[[], SchemaParser]) -> None:
    _PARSERS[normalize_format(fmt)] = factory


def supported_formats() -> list[str]:
    return sorted(_PARSERS)


def get_parser(fmt: str) -> SchemaParser:
    """Instantiate the parser for fmt.

    Raises:
        ParseError: If no parser is registered for fmt.
    """
    factory = _PARSERS.get(normalize_format(fmt))
    if factory is None:
        raise ParseError.unsupported_format(fmt)
    return factory()


def format_for_path(path: Path) -> str:
    """Format key from a file suffix, or the default when there is none."""
    return normalize_format(path.suffix) if path.suffix else DEFAULT_FORMAT


def parse_schema(text: str, fmt: str = DEFAULT_FORMAT) -> Schema:
    return get_parser(fmt).parse(text)

"""Schema source parsing."""

from dbdiagram.parser.cleaner import clean_text
from dbdiagram.parser.dbml import DbmlParser
from dbdiagram.parser.registry import (
    SchemaParser,
    format_for_path,
    get_parser,
    normalize_format,
    parse_schema,
    register_parser,
    supported_formats,
)
from dbdiagram.parser.settings import parse_settings, split_settings
from dbdiagram.parser.syntax import BlockNode, SyntaxTree, normalize_name, parse_blocks

__all__ = [
    "BlockNode",
    "DbmlParser",
    "SchemaParser",
    "SyntaxTree",
    "clean_text",
    "format_for_path",
    "get_parser",
    "normalize_format",
    "normalize_name",
    "parse_blocks",
    "parse_schema",
    "parse_settings",
    "register_parser",
    "split_settings",
    "supported_formats",
]

"""Tests for format lookup."""

from pathlib import Path

import pytest

from dbdiagram.core.errors import ErrorCode, ParseError
from dbdiagram.parser.dbml import DbmlParser
from dbdiagram.parser.registry import (
    format_for_path,
    get_parser,
    normalize_format,
    parse_schema,
    register_parser,
    supported_formats,
)


class TestRegistry:
    """Parser registry tests."""

    @pytest.mark.parametrize("fmt", ["dbml", ".dbml", " DBML "])
    def test_format_keys_normalized(self, fmt: str) -> None:
        assert normalize_format(fmt) == "dbml"
        assert isinstance(get_parser(fmt), DbmlParser)

    def test_unknown_format_raises(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse_schema("Table a {}", "xyz")

        assert exc_info.value.code == ErrorCode.PARSE_UNSUPPORTED_FORMAT
        assert exc_info.value.message == "Unsupported format: xyz"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            (Path("shop.dbml"), "dbml"),
            (Path("shop.DBML"), "dbml"),
            (Path("schema"), "dbml"),
            (Path("schema.sql"), "sql"),
        ],
    )
    def test_format_for_path(self, path: Path, expected: str) -> None:
        assert format_for_path(path) == expected

    def test_register_parser(self) -> None:
        register_parser(".dbd", DbmlParser)

        assert "dbd" in supported_formats()
        assert parse_schema("Table a {\n  id int\n}", "dbd").tables[0].name == "a"

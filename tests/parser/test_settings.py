"""Tests for settings list splitting and interpretation."""

import pytest

from dbdiagram.parser.settings import (
    SettingsKind,
    interpret_settings,
    normalize_key,
    parse_settings,
    split_settings,
)
from dbdiagram.schema.models import Severity


class TestSplitSettings:
    """split_settings tokenization tests."""

    def test_given_quoted_commas_when_split_then_not_split(self) -> None:
        """Commas inside quotes and backticks stay in the value."""
        # Given
        text = "pk, note: 'id, as text', default: `concat(a, b)`"

        # When
        items = split_settings(text)

        # Then
        assert [item.key for item in items] == ["pk", "note", "default"]
        assert items[0].is_flag
        assert items[1].value == "'id, as text'"
        assert items[2].value == "`concat(a, b)`"

    def test_given_base_offset_when_split_then_spans_absolute(self) -> None:
        """Spans point into the enclosing text when a base is given."""
        # Given
        source = "Table t [x: 10, y: 20] {}"
        start = source.index("[") + 1
        end = source.index("]")

        # When
        items = split_settings(source[start:end], base=start)

        # Then
        values = [source[i.value_span.start : i.value_span.end] for i in items if i.value_span]
        keys = [source[i.key_span.start : i.key_span.end] for i in items]
        assert values == ["10", "20"]
        assert keys == ["x", "y"]

    def test_given_empty_items_when_split_then_skipped(self) -> None:
        assert [i.key for i in split_settings(" , pk ,, ")] == ["pk"]

    def test_keys_normalized(self) -> None:
        assert normalize_key("Not   NULL") == "not null"
        assert parse_settings("Primary Key, Note: 'x'") == {"primary key": "true", "note": "'x'"}

    def test_later_keys_win(self) -> None:
        assert parse_settings("x: 1, x: 2") == {"x": "2"}


class TestInterpretSettings:
    """Typed reading of known keys."""

    def test_given_table_settings_when_interpreted_then_numbers_converted(self) -> None:
        raw = {"x": "12.0", "y": "-4.5", "color": "'#abc'"}
        typed = interpret_settings(raw, SettingsKind.TABLE)

        assert typed.number("x") == 12
        assert isinstance(typed.number("x"), int)
        assert typed.number("y") == -4.5
        assert typed.text("color") == "#abc"
        assert typed.diagnostics == ()

    def test_given_unknown_key_when_interpreted_then_hint(self) -> None:
        typed = interpret_settings({"shadow": "true"}, SettingsKind.TABLE, line=3)

        assert len(typed.diagnostics) == 1
        assert typed.diagnostics[0].severity == Severity.HINT
        assert typed.diagnostics[0].line == 3

    @pytest.mark.parametrize(
        ("kind", "raw"),
        [
            (SettingsKind.NOTE, {"width": "wide"}),
            (SettingsKind.FIELD, {"pk": "yes"}),
            (SettingsKind.REF, {"delete": "explode"}),
        ],
    )
    def test_given_bad_value_when_interpreted_then_warning(
        self, kind: SettingsKind, raw: dict[str, str]
    ) -> None:
        typed = interpret_settings(raw, kind)

        assert typed.values == {}
        assert typed.diagnostics[0].severity == Severity.WARNING
        assert typed.diagnostics[0].code == "invalid-setting"

    def test_flags(self) -> None:
        typed = interpret_settings({"pk": "true", "unique": "true"}, SettingsKind.FIELD)

        assert typed.flag("pk")
        assert typed.flag("unique")
        assert not typed.flag("not null")

"""Tests for source write-back."""

import pytest

from dbdiagram.core.errors import ErrorCode, PatchError
from dbdiagram.parser.dbml import DbmlParser
from dbdiagram.patcher.document import TextDocument
from dbdiagram.patcher.edits import EntityKind, SchemaEdit
from dbdiagram.patcher.patcher import SourcePatcher, format_value


@pytest.fixture
def patcher() -> SourcePatcher:
    return SourcePatcher()


class TestFormatValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, "true"),
            (False, "false"),
            (120, "120"),
            (120.0, "120"),
            (12.5, "12.5"),
            (-20, "-20"),
            ("#79AD51", "#79AD51"),
            ("Rectilinear", "Rectilinear"),
            ("two words", "'two words'"),
            ("it's", "'it\\'s'"),
        ],
    )
    def test_values(self, value: int | float | bool | str, expected: str) -> None:
        assert format_value(value) == expected


class TestTableEdits:
    """Table settings rewrites."""

    def test_given_no_settings_when_moved_then_bracket_inserted(
        self, patcher: SourcePatcher
    ) -> None:
        # Given
        text = "Table users {\n  id int\n}\n"

        # When
        result = patcher.preview(text, SchemaEdit.move_table("users", 120, 80))

        # Then
        assert result == "Table users [x: 120, y: 80] {\n  id int\n}\n"

    def test_given_existing_settings_when_moved_then_rewritten_in_place(
        self, patcher: SourcePatcher
    ) -> None:
        text = "Table users [x: 10, note: 'keep'] {\n}\n"

        result = patcher.preview(text, SchemaEdit.move_table("users", 120, 80))

        assert result == "Table users [x: 120, note: 'keep', y: 80] {\n}\n"

    def test_given_empty_value_when_moved_then_written_with_space(
        self, patcher: SourcePatcher
    ) -> None:
        """A key left without a value gets `key: value` spacing like every other write."""
        text = "Table users [x: 10, width:] {\n}\n"

        result = patcher.preview(text, SchemaEdit.move_table("users", 120, 80, 240))

        assert result == "Table users [x: 120, width: 240, y: 80] {\n}\n"

    def test_given_trailing_comma_when_appended_then_single_space(
        self, patcher: SourcePatcher
    ) -> None:
        text = "Table t [x: 1,] {\n}\n"

        result = patcher.preview(text, SchemaEdit(EntityKind.TABLE, "t", {"y": 2}))

        assert result == "Table t [x: 1, y: 2] {\n}\n"

    def test_given_flag_item_when_rewritten_then_gets_value(self, patcher: SourcePatcher) -> None:
        text = "Table t [x, y: 2] {\n}\n"

        result = patcher.preview(text, SchemaEdit(EntityKind.TABLE, "t", {"x": 5}))

        assert result == "Table t [x: 5, y: 2] {\n}\n"

    def test_given_comments_when_patched_then_untouched(self, patcher: SourcePatcher) -> None:
        """Only the settings list changes; the rest is byte-identical."""
        text = (
            "// header [x: 1]\n"
            "Table users [x: 10] { // trailing\n"
            "  id int /* inline */\n"
            "}\n"
            "// footer\n"
        )

        result = patcher.preview(text, SchemaEdit.move_table("users", 120, 80, 300))

        assert result == text.replace("[x: 10]", "[x: 120, y: 80, width: 300]")

    @pytest.mark.parametrize(
        ("header", "identity"),
        [
            ("public.users", "users"),
            ("users", "public.users"),
            ('"order items"', "order items"),
            ('"shop"."orders"', "shop.orders"),
        ],
    )
    def test_given_name_variants_when_patched_then_found(
        self, patcher: SourcePatcher, header: str, identity: str
    ) -> None:
        text = f"Table {header} {{\n  id int\n}}\n"

        result = patcher.preview(text, SchemaEdit.move_table(identity, 1, 2))

        assert result == f"Table {header} [x: 1, y: 2] {{\n  id int\n}}\n"

    def test_given_commented_out_table_when_patched_then_not_found(
        self, patcher: SourcePatcher
    ) -> None:
        text = "// Table ghost {\n// }\nTable users {\n}\n"

        with pytest.raises(PatchError) as exc_info:
            patcher.plan(text, SchemaEdit.move_table("ghost", 1, 2))

        assert exc_info.value.code == ErrorCode.PATCH_TARGET_NOT_FOUND

    def test_given_small_change_when_planned_then_minimal_splice(
        self, patcher: SourcePatcher
    ) -> None:
        text = "Table t [x: 10, y: 5] {\n}\n"

        splice = patcher.plan(text, SchemaEdit.move_table("t", 12, 5))

        assert splice.text == "2"
        assert (splice.start, splice.end) == (text.index("10") + 1, text.index("10") + 2)

    def test_given_empty_values_when_planned_then_invalid(self, patcher: SourcePatcher) -> None:
        with pytest.raises(PatchError) as exc_info:
            patcher.plan("Table t {\n}\n", SchemaEdit(EntityKind.TABLE, "t", {}))

        assert exc_info.value.code == ErrorCode.PATCH_INVALID_EDIT


class TestNoteEdits:
    def test_given_note_when_moved_then_geometry_written(self, patcher: SourcePatcher) -> None:
        text = "Note todo [x: 10, y: 20] {\n  'hi'\n}\n"

        result = patcher.preview(text, SchemaEdit.move_note("todo", 30, 40, 200, 150))

        assert result == "Note todo [x: 30, y: 40, width: 200, height: 150] {\n  'hi'\n}\n"

    def test_given_table_note_when_moved_then_only_sticky_note_matches(
        self, patcher: SourcePatcher
    ) -> None:
        text = "Table todo {\n  id int\n  Note: 'table note'\n}\nNote todo {\n  'sticky'\n}\n"

        result = patcher.preview(text, SchemaEdit.move_note("todo", 1, 2, 3, 4))

        assert result.endswith("Note todo [x: 1, y: 2, width: 3, height: 4] {\n  'sticky'\n}\n")
        assert result.startswith("Table todo {\n")


class TestProjectEdits:
    """Project block rewrites."""

    def test_given_project_when_set_then_values_replaced_and_appended(
        self, patcher: SourcePatcher
    ) -> None:
        # Given
        text = "Project shop {\n  zoom: 1\n  note: 'x'\n}\n"

        # When
        result = patcher.preview(text, SchemaEdit.set_project({"zoom": 1.5, "panX": -20}))

        # Then
        assert result == "Project shop {\n  zoom: 1.5\n  note: 'x'\n  panX: -20\n}\n"

    def test_given_key_case_differs_when_set_then_existing_key_rewritten(
        self, patcher: SourcePatcher
    ) -> None:
        text = "Project shop {\n    LineStyle: 'Curve'\n}\n"

        result = patcher.preview(text, SchemaEdit.set_project({"lineStyle": "Oblique"}))

        assert result == "Project shop {\n    LineStyle: Oblique\n}\n"

    def test_given_no_project_when_set_then_block_created(self, patcher: SourcePatcher) -> None:
        text = "Table a {\n}\n"

        result = patcher.preview(text, SchemaEdit.set_project({"zoom": 2}, name="shop"))

        assert result == 'Project "shop" {\n  zoom: 2\n}\n\nTable a {\n}\n'

    def test_given_no_name_when_created_then_default_name(self, patcher: SourcePatcher) -> None:
        result = patcher.preview("", SchemaEdit.set_project({"showGrid": False}))

        assert result == 'Project "project" {\n  showGrid: false\n}\n\n'


class TestApply:
    """Committing edits to documents."""

    def test_given_writable_document_when_applied_then_reparse_sees_values(
        self, patcher: SourcePatcher
    ) -> None:
        # Given
        document = TextDocument("Table users {\n  id int [pk]\n}\n")

        # When
        applied = patcher.apply(document, SchemaEdit.move_table("users", 120, 80.5, 300))

        # Then
        assert applied
        assert document.revision == 1
        table = DbmlParser().parse(document.read_text()).table("users")
        assert table is not None
        assert (table.x, table.y, table.width) == (120, 80.5, 300)

    def test_given_read_only_document_when_applied_then_dropped(
        self, patcher: SourcePatcher
    ) -> None:
        text = "Table users {\n}\n"
        document = TextDocument(text, writable=False)

        assert not patcher.apply(document, SchemaEdit.move_table("users", 1, 2))
        assert document.read_text() == text

    def test_given_missing_target_when_applied_then_dropped(self, patcher: SourcePatcher) -> None:
        document = TextDocument("Table users {\n}\n")

        assert not patcher.apply(document, SchemaEdit.move_table("orders", 1, 2))
        assert document.revision == 0

    def test_given_same_values_when_applied_then_no_write(self, patcher: SourcePatcher) -> None:
        document = TextDocument("Table users [x: 10, y: 20] {\n}\n")

        assert patcher.apply(document, SchemaEdit.move_table("users", 10, 20))
        assert document.revision == 0

    def test_given_two_edits_when_applied_then_both_land(self, patcher: SourcePatcher) -> None:
        document = TextDocument("Table a {\n}\nTable b {\n}\n")

        patcher.apply(document, SchemaEdit.move_table("a", 1, 2))
        patcher.apply(document, SchemaEdit.move_table("b", 3, 4))

        assert document.read_text() == "Table a [x: 1, y: 2] {\n}\nTable b [x: 3, y: 4] {\n}\n"

"""Tests for partial injection and merging."""

from dbdiagram.parser.partials import Injection, merge_table
from dbdiagram.schema.models import Field, IndexDef, TablePartial


def _partial() -> TablePartial:
    return TablePartial(
        name="base",
        fields=(Field("id", "int", is_pk=True), Field("created_at", "timestamp")),
        settings={"color": "#ccc", "x": "10"},
        indexes=(IndexDef(columns=("created_at",), settings={"name": "'p'"}),),
    )


class TestMergeTable:
    """merge_table ordering and override tests."""

    def test_given_redeclared_field_when_merged_then_first_position_kept(self) -> None:
        """A later declaration replaces attributes but keeps the slot."""
        # Given
        entries = [
            Injection("base"),
            Field("name", "varchar"),
            Field("id", "uuid"),
        ]

        # When
        merged, problems = merge_table(entries, {"base": _partial()}, header_settings={})

        # Then
        assert problems == []
        assert [f.name for f in merged.fields] == ["id", "created_at", "name"]
        assert merged.fields[0].type == "uuid"
        assert not merged.fields[0].is_pk

    def test_given_header_settings_when_merged_then_table_wins(self) -> None:
        merged, _ = merge_table(
            [Injection("base")], {"base": _partial()}, header_settings={"color": "#fff"}
        )

        assert merged.settings == {"color": "#fff", "x": "10"}

    def test_given_table_index_when_merged_then_replaces_partial_index(self) -> None:
        own = IndexDef(columns=("CREATED_AT",), settings={"name": "'own'"})

        merged, _ = merge_table(
            [Injection("base")], {"base": _partial()}, header_settings={}, indexes=[own]
        )

        assert merged.indexes == (own,)

    def test_given_unknown_partial_when_merged_then_diagnostic(self) -> None:
        merged, problems = merge_table(
            [Injection("missing", line=3), Field("id", "int")],
            {},
            header_settings={},
            table_name="users",
        )

        assert [f.name for f in merged.fields] == ["id"]
        assert problems[0].line == 3
        assert "missing" in problems[0].message

    def test_given_partial_notes_when_merged_then_last_injected_note_kept(self) -> None:
        noted = TablePartial(name="audit", note="Audited table")
        later = TablePartial(name="soft", note="Soft-deleted rows")

        merged, _ = merge_table(
            [Injection("base"), Injection("audit"), Injection("soft")],
            {"base": _partial(), "audit": noted, "soft": later},
            header_settings={},
        )

        assert merged.note == "Soft-deleted rows"
        plain, _ = merge_table([Injection("base")], {"base": _partial()}, header_settings={})
        assert plain.note is None

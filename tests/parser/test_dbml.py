"""End-to-end tests for the DBML parser."""

import pytest

from dbdiagram.config.models import LineStyle
from dbdiagram.parser.dbml import DbmlParser
from dbdiagram.schema.models import Cardinality, Severity

SHOP = """\
// Demo shop schema
Project shop {
  database_type: 'PostgreSQL'
  lineStyle: 'Rectilinear'
  showGrid: false
  zoom: 1.5
  gridSize: 40
}

Enum order_status {
  pending
  shipped [note: 'left the warehouse']
}

TablePartial timestamps [color: #cccccc] {
  created_at timestamp
  updated_at timestamp
}

/// Registered customers
Table users as U [x: 100, y: 40.5, width: 300] {
  id int [pk, increment]
  email varchar [unique, not null]
  ~timestamps
  indexes {
    (email, created_at) [name: 'idx_email_created']
    email [unique]
  }
}

Table orders {
  id int [pk]
  user_id int [ref: > users.id]
  status order_status
  Note: 'One row per checkout'
}

Ref: U.id < orders.user_id [delete: cascade]

Note todo [x: 10, y: 20, width: 200, height: 150, color: #ffcc00] {
  'Split orders by region'
}
"""


@pytest.fixture
def parser() -> DbmlParser:
    return DbmlParser()


class TestDbmlParser:
    """Structural parse tests."""

    def test_given_one_line_table_when_parsed_then_two_fields(self, parser: DbmlParser) -> None:
        """Fields written on one line are read separately."""
        # When
        schema = parser.parse("Table users { id int [pk] name varchar }")

        # Then
        users = schema.tables[0]
        assert [f.name for f in users.fields] == ["id", "name"]
        assert users.fields[0].is_pk is True
        assert users.fields[0].is_fk is False

    def test_given_short_ref_when_parsed_then_one_to_many(self, parser: DbmlParser) -> None:
        schema = parser.parse(
            "Table users {\n  id int\n}\nTable posts {\n  user_id int\n}\n"
            "Ref: users.id < posts.user_id\n"
        )

        assert len(schema.relationships) == 1
        relationship = schema.relationships[0]
        assert relationship.cardinality == Cardinality.ONE_TO_MANY
        assert (relationship.from_table, relationship.to_table) == ("users", "posts")

    def test_given_full_schema_when_parsed_then_tables_read(self, parser: DbmlParser) -> None:
        schema = parser.parse(SHOP)

        assert [t.name for t in schema.tables] == ["users", "orders"]
        users = schema.table("U")
        assert users is not None
        assert users.alias == "U"
        assert (users.x, users.y, users.width) == (100, 40.5, 300)
        assert users.color == "#cccccc"
        assert users.note == "Registered customers"
        assert [f.name for f in users.fields] == [
            "id",
            "email",
            "created_at",
            "updated_at",
        ]
        assert len(users.indexes) == 2

        orders = schema.table("orders")
        assert orders is not None
        assert orders.note == "One row per checkout"
        assert orders.x is None
        status = orders.get_field("status")
        assert status is not None
        assert status.enum_values == ("pending", "shipped")

    def test_given_inline_and_short_refs_when_parsed_then_both_kept(
        self, parser: DbmlParser
    ) -> None:
        schema = parser.parse(SHOP)

        inline, short = schema.relationships
        assert inline.from_table == "orders"
        assert inline.cardinality == Cardinality.MANY_TO_ONE
        assert short.from_table == "U"
        assert short.settings == {"delete": "cascade"}
        assert schema.resolve(short.from_table) is schema.tables[0]

    def test_given_project_when_parsed_then_typed_values(self, parser: DbmlParser) -> None:
        schema = parser.parse(SHOP)

        assert schema.project_name == "shop"
        assert schema.project.database_type == "PostgreSQL"
        assert schema.project.line_style == LineStyle.RECTILINEAR
        assert schema.project.show_grid is False
        assert schema.project.zoom == 1.5
        assert schema.project.grid_size == 40

    def test_given_sticky_note_when_parsed_then_geometry_read(self, parser: DbmlParser) -> None:
        schema = parser.parse(SHOP)

        note = schema.note("todo")
        assert note is not None
        assert note.content == "Split orders by region"
        assert (note.x, note.y, note.width, note.height) == (10, 20, 200, 150)
        assert note.color == "#ffcc00"

    def test_given_note_without_settings_when_parsed_then_defaults(
        self, parser: DbmlParser
    ) -> None:
        note = parser.parse("Note hint {\n  'hello'\n}\n").notes[0]

        assert (note.x, note.y, note.width, note.height) == (0, 0, 250, None)
        assert note.color == "#fff9c4"

    def test_given_enum_notes_when_parsed_then_kept(self, parser: DbmlParser) -> None:
        enum = parser.parse(SHOP).enum("order_status")

        assert enum is not None
        assert enum.notes == {"shipped": "left the warehouse"}

    def test_given_duplicate_ids_when_parsed_then_suffixed(self, parser: DbmlParser) -> None:
        schema = parser.parse('Table "a b" {\n  id int\n}\nTable a_b {\n  id int\n}\n')

        assert [t.id for t in schema.tables] == ["a_b", "a_b_2"]

    def test_given_broken_block_when_parsed_then_others_survive(
        self, parser: DbmlParser
    ) -> None:
        """One unreadable block never takes the rest of the document down."""
        schema = parser.parse(
            "Table good {\n  id int\n}\nTable broken {\n  id int\n  ?? nonsense\n}\n"
            "Table open {\n  id int\n"
        )

        assert [t.name for t in schema.tables] == ["good", "broken"]
        assert [f.name for f in schema.tables[1].fields] == ["id"]
        assert not schema.ok
        assert any(d.severity == Severity.WARNING for d in schema.diagnostics)

    def test_given_unclosed_paren_in_ref_when_parsed_then_later_blocks_survive(
        self, parser: DbmlParser
    ) -> None:
        """An unclosed '(' stops at the next block keyword, not the end of the file."""
        # Given
        text = (
            "Table a {\n  id int\n}\nRef: a.(id, x > b.id\n"
            "Table b {\n  id int\n}\nTable c {\n  id int\n}\n"
        )

        # When
        schema = parser.parse(text)

        # Then
        assert [t.name for t in schema.tables] == ["a", "b", "c"]
        assert schema.relationships == ()
        assert any(
            d.severity == Severity.ERROR and d.message == "Unclosed '('" and d.line == 4
            for d in schema.diagnostics
        )

    def test_given_unclosed_header_bracket_when_parsed_then_later_blocks_survive(
        self, parser: DbmlParser
    ) -> None:
        text = (
            "Table a [headercolor: #fff {\n  id int\n}\n"
            "Table b {\n  id int\n}\nRef: b.id > c.id\nTable c {\n  id int\n}\n"
        )

        schema = parser.parse(text)

        assert [t.name for t in schema.tables] == ["b", "c"]
        assert len(schema.relationships) == 1
        assert any(
            d.severity == Severity.ERROR and d.message == "Unclosed '['"
            for d in schema.diagnostics
        )

    def test_given_partial_note_when_injected_then_used_unless_table_has_one(
        self, parser: DbmlParser
    ) -> None:
        schema = parser.parse(
            "TablePartial audit {\n  changed_by int\n  Note: 'Audited'\n}\n"
            "Table plain {\n  id int\n  ~audit\n}\n"
            "Table own {\n  id int\n  ~audit\n  Note: 'Own note'\n}\n"
        )

        plain, own = schema.tables
        assert plain.note == "Audited"
        assert own.note == "Own note"

    def test_given_empty_text_when_parsed_then_empty_schema(self, parser: DbmlParser) -> None:
        schema = parser.parse("")

        assert schema.tables == ()
        assert schema.diagnostics == ()

    def test_given_unknown_block_when_parsed_then_info(self, parser: DbmlParser) -> None:
        schema = parser.parse("Widget w {\n  a b\n}\n")

        assert schema.diagnostics[0].severity == Severity.INFO

    def test_to_dict_is_plain_data(self, parser: DbmlParser) -> None:
        data = parser.parse(SHOP).to_dict()

        assert data["project"]["zoom"] == 1.5
        assert data["tables"][0]["name"] == "users"
        assert data["relationships"][0]["cardinality"] == "n:1"

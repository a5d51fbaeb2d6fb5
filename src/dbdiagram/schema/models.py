"""Schema model produced by the parser.

Every record is an immutable snapshot. A parse builds a fresh Schema;
nothing here is updated in place or cached across edits.

Relationships refer to tables and columns by name, the way the source
text spells them. Schema.resolve() turns such a name into the Table it
denotes when the router needs geometry.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

from dbdiagram.config.constants import (
    COLUMN_ANCHOR_PREFIX,
    DEFAULT_SCHEMA,
    ID_FALLBACK,
    NOTE_DEFAULT_COLOR,
    NOTE_DEFAULT_WIDTH,
    TABLE_ANCHOR_PREFIX,
)
from dbdiagram.config.models import LineStyle

Scalar = int | float | bool | str

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def sanitize_id(name: str) -> str:
    """Map a display name to an identifier-safe slug."""
    slug = _UNSAFE_ID_CHARS.sub("_", name)
    return slug or ID_FALLBACK


def column_anchor_id(table_id: str, column: str) -> str:
    return f"{COLUMN_ANCHOR_PREFIX}{table_id}-{column}"


def table_anchor_id(table_id: str) -> str:
    return f"{TABLE_ANCHOR_PREFIX}{table_id}"


class Cardinality(StrEnum):
    """Relationship multiplicity, read from the from-side."""

    ONE_TO_ONE = "1:1"
    ONE_TO_MANY = "1:n"
    MANY_TO_ONE = "n:1"
    MANY_TO_MANY = "m:n"

    @classmethod
    def from_operator(cls, op: str) -> Cardinality:
        """Map a ref operator to a cardinality. Unknown operators mean 1:n."""
        return _OPERATORS.get(op.strip(), cls.ONE_TO_MANY)

    @property
    def glyphs(self) -> tuple[str, str]:
        """Label glyphs for the (from, to) ends."""
        left, right = self.value.split(":")
        return left, right


_OPERATORS = {
    "<": Cardinality.ONE_TO_MANY,
    ">": Cardinality.MANY_TO_ONE,
    "-": Cardinality.ONE_TO_ONE,
    "<>": Cardinality.MANY_TO_MANY,
}


class Severity(StrEnum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A problem found while parsing. Never fatal."""

    message: str
    line: int | None = None
    severity: Severity = Severity.WARNING
    code: str | None = None

    def __str__(self) -> str:
        where = f"line {self.line}: " if self.line is not None else ""
        return f"{self.severity.value}: {where}{self.message}"


@dataclass(frozen=True, slots=True)
class InlineRef:
    """A `ref:` setting on a field."""

    operator: str
    to_table: str
    to_column: str

    @property
    def cardinality(self) -> Cardinality:
        return Cardinality.from_operator(self.operator)


@dataclass(frozen=True, slots=True)
class Field:
    """One column of a table."""

    name: str
    type: str
    is_pk: bool = False
    is_unique: bool = False
    is_not_null: bool = False
    is_fk: bool = False
    is_increment: bool = False
    note: str | None = None
    default: str | None = None
    enum_values: tuple[str, ...] | None = None
    inline_ref: InlineRef | None = None
    settings: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class IndexDef:
    """An entry of an `indexes { }` block."""

    columns: tuple[str, ...]
    settings: Mapping[str, str] = field(default_factory=dict)
    raw: str = ""

    @property
    def key(self) -> str:
        """Merge key: the sorted, lower-cased column list."""
        return "|".join(sorted(c.lower() for c in self.columns))


@dataclass(frozen=True, slots=True)
class Table:
    id: str
    name: str
    fields: tuple[Field, ...] = ()
    alias: str | None = None
    note: str | None = None
    color: str | None = None
    width: float | None = None
    x: float | None = None
    y: float | None = None
    settings: Mapping[str, str] = field(default_factory=dict)
    indexes: tuple[IndexDef, ...] = ()

    @property
    def schema_name(self) -> str:
        head, sep, _ = self.name.rpartition(".")
        return head if sep else DEFAULT_SCHEMA

    @property
    def short_name(self) -> str:
        return self.name.rpartition(".")[2]

    @property
    def anchor_id(self) -> str:
        return table_anchor_id(self.id)

    def get_field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def column_anchor(self, column: str) -> str:
        return column_anchor_id(self.id, column)


@dataclass(frozen=True, slots=True)
class TablePartial:
    """A reusable bundle injected into tables with `~name`. Parse-time only."""

    name: str
    fields: tuple[Field, ...] = ()
    settings: Mapping[str, str] = field(default_factory=dict)
    indexes: tuple[IndexDef, ...] = ()
    note: str | None = None


@dataclass(frozen=True, slots=True)
class Relationship:
    from_table: str
    from_columns: tuple[str, ...]
    to_table: str
    to_columns: tuple[str, ...]
    cardinality: Cardinality = Cardinality.ONE_TO_MANY
    settings: Mapping[str, str] = field(default_factory=dict)
    name: str | None = None

    @property
    def pairs(self) -> list[tuple[str, str]]:
        """Positional column pairs; the longer list is truncated."""
        return list(zip(self.from_columns, self.to_columns, strict=False))

    @property
    def color(self) -> str | None:
        value = self.settings.get("color")
        return value.strip("'\"") if value else None


@dataclass(frozen=True, slots=True)
class Note:
    """A free-standing sticky note."""

    id: str
    name: str
    content: str = ""
    x: float = 0
    y: float = 0
    width: float = NOTE_DEFAULT_WIDTH
    height: float | None = None
    color: str = NOTE_DEFAULT_COLOR


@dataclass(frozen=True, slots=True)
class EnumDef:
    name: str
    values: tuple[str, ...] = ()
    notes: Mapping[str, str] = field(default_factory=dict)

    @property
    def short_name(self) -> str:
        return self.name.rpartition(".")[2]


@dataclass(frozen=True, slots=True)
class ProjectSettings:
    """Open map of project-level scalars plus typed views of the known keys.

    Keys keep their source spelling; lookups are case-insensitive. A known
    key whose value cannot be read as the expected type reads as unset.
    """

    values: Mapping[str, Scalar] = field(default_factory=dict)

    def get(self, key: str, default: Scalar | None = None) -> Scalar | None:
        wanted = key.lower()
        for k, v in self.values.items():
            if k.lower() == wanted:
                return v
        return default

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def _number(self, key: str) -> float | None:
        value = self.get(key)
        if isinstance(value, bool):
            return None
        if isinstance(value, int | float):
            return float(value)
        return None

    @property
    def zoom(self) -> float | None:
        value = self._number("zoom")
        return value if value is not None and value > 0 else None

    @property
    def pan_x(self) -> float | None:
        return self._number("panX")

    @property
    def pan_y(self) -> float | None:
        return self._number("panY")

    @property
    def grid_size(self) -> int | None:
        value = self._number("gridSize")
        return int(value) if value is not None and value > 0 else None

    @property
    def show_grid(self) -> bool | None:
        value = self.get("showGrid")
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        return None

    @property
    def line_style(self) -> LineStyle | None:
        return LineStyle.parse(self.get("lineStyle"))

    @property
    def database_type(self) -> str | None:
        value = self.get("database_type") or self.get("databaseType")
        return value if isinstance(value, str) else None

    @property
    def note(self) -> str | None:
        value = self.get("note")
        return value if isinstance(value, str) else None


@dataclass(frozen=True, slots=True)
class Schema:
    """The parsed model of one schema document."""

    tables: tuple[Table, ...] = ()
    relationships: tuple[Relationship, ...] = ()
    notes: tuple[Note, ...] = ()
    enums: tuple[EnumDef, ...] = ()
    project: ProjectSettings = field(default_factory=ProjectSettings)
    project_name: str | None = None
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return not any(d.severity == Severity.ERROR for d in self.diagnostics)

    def table(self, name: str) -> Table | None:
        """Find a table by name or alias."""
        return self.resolve(name)

    def table_id(self, name: str) -> str | None:
        table = self.resolve(name)
        return table.id if table else None

    def resolve(self, name: str) -> Table | None:
        """Resolve a reference as written in the source to its Table.

        Tries the exact name, then an alias, then the name with the
        default schema added or removed. Matching ignores quotes.
        """
        wanted = name.replace('"', "").strip()
        for table in self.tables:
            if table.name == wanted:
                return table
        for table in self.tables:
            if table.alias and table.alias == wanted:
                return table
        prefix = f"{DEFAULT_SCHEMA}."
        if wanted.startswith(prefix):
            alt = wanted[len(prefix) :]
        else:
            alt = prefix + wanted
        for table in self.tables:
            if table.name == alt:
                return table
        return None

    def note(self, name: str) -> Note | None:
        for note in self.notes:
            if note.name == name:
                return note
        return None

    def enum(self, name: str) -> EnumDef | None:
        for enum in self.enums:
            if enum.name == name:
                return enum
        return None

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form for JSON output."""
        data = asdict(self)
        data["project"] = dict(self.project.values)
        data["diagnostics"] = [
            {"message": d.message, "line": d.line, "severity": d.severity.value, "code": d.code}
            for d in self.diagnostics
        ]
        return data

"""Partial merge engine.

A TablePartial is a named bundle of fields, settings and indexes that a
table pulls in with an injection line:

    TablePartial timestamps [color: #ccc] {
        created_at timestamp
        updated_at timestamp
    }

    Table users {
        id int [pk]
        ~timestamps
        created_at timestamptz   // redeclared: keeps its slot, takes new attributes
    }

Walking the body top to bottom, each field (local or injected) lands in
an ordered map keyed by name. The first occurrence fixes the position;
later occurrences replace the attributes in place. Settings merge by key
and indexes by their sorted column list, in injection order. The table's
own `indexes { }` entries and header settings are applied last, so they
win over every partial. A partial's note is used only by a table
without one of its own; the last injected note wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from dbdiagram.schema.models import Diagnostic, Field, IndexDef, Severity, TablePartial


@dataclass(frozen=True, slots=True)
class Injection:
    """A `~name` line in a table body."""

    name: str
    line: int | None = None


@dataclass(frozen=True, slots=True)
class MergedTable:
    fields: tuple[Field, ...]
    settings: Mapping[str, str]
    indexes: tuple[IndexDef, ...]
    note: str | None = None


def merge_table(
    entries: Iterable[Field | Injection],
    partials: Mapping[str, TablePartial],
    *,
    header_settings: Mapping[str, str],
    indexes: Iterable[IndexDef] = (),
    table_name: str = "",
) -> tuple[MergedTable, list[Diagnostic]]:
    """Resolve injections and local fields into the table's final shape."""
    fields: dict[str, Field] = {}
    settings: dict[str, str] = {}
    merged_indexes: dict[str, IndexDef] = {}
    note: str | None = None
    diagnostics: list[Diagnostic] = []

    for entry in entries:
        if isinstance(entry, Field):
            fields[entry.name] = entry
            continue

        partial = partials.get(entry.name)
        if partial is None:
            diagnostics.append(
                Diagnostic(
                    message=f"Table '{table_name}' injects unknown partial '{entry.name}'",
                    line=entry.line,
                    severity=Severity.WARNING,
                    code="partial",
                )
            )
            continue
        for f in partial.fields:
            fields[f.name] = f
        settings.update(partial.settings)
        for index in partial.indexes:
            merged_indexes[index.key] = index
        if partial.note:
            note = partial.note

    for index in indexes:
        merged_indexes[index.key] = index
    settings.update(header_settings)

    return (
        MergedTable(
            fields=tuple(fields.values()),
            settings=settings,
            indexes=tuple(merged_indexes.values()),
            note=note,
        ),
        diagnostics,
    )

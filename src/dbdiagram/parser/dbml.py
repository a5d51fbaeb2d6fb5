"""Structural parser: schema text to Schema.

Pipeline:
    raw text -> clean_text() -> parse_blocks() -> per-block readers -> Schema

Each top-level block is read on its own. A block that cannot be read is
reported as a Diagnostic and skipped; every other block still makes it
into the Schema.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping

import structlog

from dbdiagram.parser.cleaner import clean_text
from dbdiagram.parser.fields import parse_field, split_declarations
from dbdiagram.parser.indexes import parse_index_block
from dbdiagram.parser.lexer import unquote
from dbdiagram.parser.partials import Injection, merge_table
from dbdiagram.parser.relationships import parse_ref_line, split_settings_bracket
from dbdiagram.parser.settings import SettingsKind, interpret_settings, parse_settings
from dbdiagram.parser.syntax import BlockNode, SyntaxTree, parse_blocks
from dbdiagram.schema.models import (
    Diagnostic,
    EnumDef,
    Field,
    IndexDef,
    Note,
    ProjectSettings,
    Relationship,
    Scalar,
    Schema,
    Severity,
    Table,
    TablePartial,
    sanitize_id,
)

logger = structlog.get_logger()

_SKIPPED_BLOCKS = frozenset({"tablegroup"})


def _unique_id(name: str, taken: set[str]) -> str:
    base = sanitize_id(name)
    candidate = base
    suffix = 2
    while candidate in taken:
        candidate = f"{base}_{suffix}"
        suffix += 1
    taken.add(candidate)
    return candidate


def _scalar(raw: str) -> Scalar:
    """Project values: quotes stripped, numbers and booleans converted."""
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return unquote(value)
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def _note_content(block: BlockNode, text: str) -> str:
    return unquote(block.body_text(text).strip()).strip()


@dataclasses.dataclass
class _Body:
    entries: list[Field | Injection]
    indexes: list[IndexDef]
    note: str | None


class DbmlParser:
    """Parser for DBML-style schema text."""

    format = "dbml"

    def parse(self, text: str) -> Schema:
        cleaned = clean_text(text)
        tree = parse_blocks(cleaned)
        diagnostics: list[Diagnostic] = list(tree.diagnostics)

        enums = self._enums(tree, diagnostics)
        project_name, project = self._project(tree, diagnostics)
        partials = self._partials(tree, diagnostics)
        tables, inline_refs = self._tables(tree, partials, enums, diagnostics)
        refs = self._refs(tree, diagnostics)
        notes = self._notes(tree, diagnostics)

        known = {"project", "enum", "tablepartial", "table", "ref", "note", *_SKIPPED_BLOCKS}
        for block in tree.blocks:
            if block.keyword not in known:
                diagnostics.append(
                    Diagnostic(
                        message=f"Unsupported block '{block.keyword or '?'}' skipped",
                        line=block.line,
                        severity=Severity.INFO,
                        code="block",
                    )
                )

        schema = Schema(
            tables=tuple(tables),
            relationships=tuple(inline_refs + refs),
            notes=tuple(notes),
            enums=tuple(enums.values()),
            project=project,
            project_name=project_name,
            diagnostics=tuple(diagnostics),
        )
        logger.debug(
            "schema_parsed",
            tables=len(schema.tables),
            relationships=len(schema.relationships),
            notes=len(schema.notes),
            diagnostics=len(schema.diagnostics),
        )
        return schema

    # -------------------------------------------------------------------------
    # Project / Enum
    # -------------------------------------------------------------------------

    def _project(
        self, tree: SyntaxTree, diagnostics: list[Diagnostic]
    ) -> tuple[str | None, ProjectSettings]:
        blocks = tree.find("project")
        if not blocks:
            return None, ProjectSettings()
        for extra in blocks[1:]:
            diagnostics.append(
                Diagnostic(
                    message="Only the first Project block is used",
                    line=extra.line,
                    severity=Severity.WARNING,
                    code="project",
                )
            )

        block = blocks[0]
        values: dict[str, Scalar] = {}
        for prop in block.properties:
            key = "note" if prop.key.lower() == "note" else prop.key
            values[key] = _scalar(prop.value)
        for child in block.children_named("note"):
            values["note"] = _note_content(child, tree.text)
        for line in block.lines:
            diagnostics.append(
                Diagnostic(
                    message=f"Expected 'key: value' in Project, got '{line.text}'",
                    line=line.line,
                    severity=Severity.WARNING,
                    code="project",
                )
            )
        return block.name, ProjectSettings(values=values)

    def _enums(self, tree: SyntaxTree, diagnostics: list[Diagnostic]) -> dict[str, EnumDef]:
        enums: dict[str, EnumDef] = {}
        for block in tree.find("enum"):
            if not block.name:
                diagnostics.append(
                    Diagnostic("Enum without a name skipped", block.line, Severity.ERROR, "enum")
                )
                continue
            values: list[str] = []
            notes: dict[str, str] = {}
            for line in block.lines:
                head, settings_text = split_settings_bracket(line.text)
                value = unquote(head.strip())
                values.append(value)
                typed = interpret_settings(
                    parse_settings(settings_text or ""), SettingsKind.ENUM_VALUE, line=line.line
                )
                diagnostics.extend(typed.diagnostics)
                if note := typed.text("note"):
                    notes[value] = note
            enums[block.name] = EnumDef(name=block.name, values=tuple(values), notes=notes)
        return enums

    # -------------------------------------------------------------------------
    # Tables and partials
    # -------------------------------------------------------------------------

    def _body(self, block: BlockNode, text: str, diagnostics: list[Diagnostic]) -> _Body:
        indexes: list[IndexDef] = []
        note: str | None = None

        for child in block.children:
            if child.keyword == "indexes":
                found, problems = parse_index_block(child)
                indexes.extend(found)
                diagnostics.extend(problems)
            elif child.keyword == "note":
                note = _note_content(child, text)
            else:
                diagnostics.append(
                    Diagnostic(
                        message=f"Unsupported '{child.keyword}' block inside {block.name}",
                        line=child.line,
                        severity=Severity.INFO,
                        code="block",
                    )
                )

        for prop in block.properties:
            if prop.key.lower() == "note":
                note = unquote(prop.value.strip())
            else:
                diagnostics.append(
                    Diagnostic(
                        message=f"Unexpected '{prop.key}:' inside {block.name}",
                        line=prop.line,
                        severity=Severity.WARNING,
                        code="field",
                    )
                )

        entries: list[Field | Injection] = []
        for line in block.lines:
            if line.text.startswith("~"):
                entries.append(Injection(name=unquote(line.text[1:].strip()), line=line.line))
                continue
            for position, declaration in enumerate(split_declarations(line.text)):
                doc = line.doc if position == 0 else ()
                field, problems = parse_field(declaration, doc=doc, line=line.line)
                diagnostics.extend(problems)
                if field is not None:
                    entries.append(field)

        return _Body(entries=entries, indexes=indexes, note=note)

    def _partials(
        self, tree: SyntaxTree, diagnostics: list[Diagnostic]
    ) -> dict[str, TablePartial]:
        partials: dict[str, TablePartial] = {}
        for block in tree.find("tablepartial"):
            if not block.name:
                diagnostics.append(
                    Diagnostic("TablePartial without a name skipped", block.line, Severity.ERROR)
                )
                continue
            body = self._body(block, tree.text, diagnostics)
            fields: dict[str, Field] = {}
            for entry in body.entries:
                if isinstance(entry, Injection):
                    diagnostics.append(
                        Diagnostic(
                            message=f"Partial '{block.name}' cannot inject '{entry.name}'",
                            line=entry.line,
                            severity=Severity.WARNING,
                            code="partial",
                        )
                    )
                    continue
                fields[entry.name] = entry
            partials[block.name] = TablePartial(
                name=block.name,
                fields=tuple(fields.values()),
                settings=parse_settings(block.settings_text(tree.text)),
                indexes=tuple(body.indexes),
                note=body.note,
            )
        return partials

    def _tables(
        self,
        tree: SyntaxTree,
        partials: Mapping[str, TablePartial],
        enums: Mapping[str, EnumDef],
        diagnostics: list[Diagnostic],
    ) -> tuple[list[Table], list[Relationship]]:
        tables: list[Table] = []
        inline_refs: list[Relationship] = []
        taken: set[str] = set()
        seen_names: set[str] = set()

        by_short_name = {e.short_name: e for e in enums.values()}

        for block in tree.find("table"):
            if not block.name:
                diagnostics.append(
                    Diagnostic("Table without a name skipped", block.line, Severity.ERROR, "table")
                )
                continue
            if block.name in seen_names:
                diagnostics.append(
                    Diagnostic(
                        message=f"Duplicate table '{block.name}'",
                        line=block.line,
                        severity=Severity.WARNING,
                        code="table",
                    )
                )
            seen_names.add(block.name)

            body = self._body(block, tree.text, diagnostics)
            merged, problems = merge_table(
                body.entries,
                partials,
                header_settings=parse_settings(block.settings_text(tree.text)),
                indexes=body.indexes,
                table_name=block.name,
            )
            diagnostics.extend(problems)
            typed = interpret_settings(merged.settings, SettingsKind.TABLE, line=block.line)
            diagnostics.extend(typed.diagnostics)

            fields: list[Field] = []
            for f in merged.fields:
                enum = enums.get(f.type) or by_short_name.get(f.type)
                if enum is not None:
                    f = dataclasses.replace(f, enum_values=enum.values)
                fields.append(f)

            note = body.note or typed.text("note")
            if note is None and block.doc:
                note = "\n".join(block.doc)
            if note is None:
                note = merged.note

            table = Table(
                id=_unique_id(block.name, taken),
                name=block.name,
                alias=block.alias,
                fields=tuple(fields),
                note=note,
                color=typed.text("color") or typed.text("headercolor"),
                width=typed.number("width"),
                x=typed.number("x"),
                y=typed.number("y"),
                settings=merged.settings,
                indexes=merged.indexes,
            )
            tables.append(table)

            for f in fields:
                if f.inline_ref is None:
                    continue
                inline_refs.append(
                    Relationship(
                        from_table=table.name,
                        from_columns=(f.name,),
                        to_table=f.inline_ref.to_table,
                        to_columns=(f.inline_ref.to_column,),
                        cardinality=f.inline_ref.cardinality,
                    )
                )

        return tables, inline_refs

    # -------------------------------------------------------------------------
    # Refs and sticky notes
    # -------------------------------------------------------------------------

    def _refs(self, tree: SyntaxTree, diagnostics: list[Diagnostic]) -> list[Relationship]:
        relationships: list[Relationship] = []
        for block in tree.find("ref"):
            if not block.lines:
                diagnostics.append(
                    Diagnostic("Empty Ref block", block.line, Severity.WARNING, "ref")
                )
            for line in block.lines:
                relationship, problems = parse_ref_line(line.text, line=line.line, name=block.name)
                diagnostics.extend(problems)
                if relationship is not None:
                    relationships.append(relationship)
        return relationships

    def _notes(self, tree: SyntaxTree, diagnostics: list[Diagnostic]) -> list[Note]:
        notes: list[Note] = []
        taken: set[str] = set()
        for block in tree.find("note"):
            if not block.name:
                diagnostics.append(
                    Diagnostic("Sticky note without a name skipped", block.line, Severity.WARNING)
                )
                continue
            typed = interpret_settings(
                parse_settings(block.settings_text(tree.text)), SettingsKind.NOTE, line=block.line
            )
            diagnostics.extend(typed.diagnostics)
            defaults = Note(id="", name="")
            width = typed.number("width")
            notes.append(
                Note(
                    id=_unique_id(block.name, taken),
                    name=block.name,
                    content=_note_content(block, tree.text),
                    x=typed.number("x") or defaults.x,
                    y=typed.number("y") or defaults.y,
                    width=width if width is not None else defaults.width,
                    height=typed.number("height"),
                    color=typed.text("color") or defaults.color,
                )
            )
        return notes

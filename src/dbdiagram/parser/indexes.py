"""Entries of an `indexes { }` block.

    indexes {
        (user_id, created_at) [name: 'idx_user_created']
        email [unique]
        `lower(email)`
    }
"""

from __future__ import annotations

from dbdiagram.parser.lexer import unquote
from dbdiagram.parser.relationships import split_settings_bracket
from dbdiagram.parser.settings import SettingsKind, interpret_settings, parse_settings
from dbdiagram.parser.syntax import BlockNode
from dbdiagram.schema.models import Diagnostic, IndexDef, Severity


def parse_index_line(
    text: str, *, line: int | None = None
) -> tuple[IndexDef | None, list[Diagnostic]]:
    head, settings_text = split_settings_bracket(text.strip())
    head = head.strip()
    if head.startswith("(") and head.endswith(")"):
        head = head[1:-1]
    columns = tuple(unquote(c.strip()) for c in head.split(",") if c.strip())
    if not columns:
        return None, [
            Diagnostic(
                message=f"Index without columns: '{text.strip()}'",
                line=line,
                severity=Severity.WARNING,
                code="index",
            )
        ]
    raw = parse_settings(settings_text or "")
    typed = interpret_settings(raw, SettingsKind.INDEX, line=line)
    return IndexDef(columns=columns, settings=raw, raw=text.strip()), list(typed.diagnostics)


def parse_index_block(block: BlockNode) -> tuple[list[IndexDef], list[Diagnostic]]:
    indexes: list[IndexDef] = []
    diagnostics: list[Diagnostic] = []
    for node in block.lines:
        index, problems = parse_index_line(node.text, line=node.line)
        diagnostics.extend(problems)
        if index is not None:
            indexes.append(index)
    return indexes, diagnostics

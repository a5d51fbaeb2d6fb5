"""Ref endpoint and operator parsing.

An endpoint path is one of

    table.column
    schema.table.column
    table.(col1, col2)
    schema.table.(col1, col2)

with any segment optionally double-quoted. A ref line is
`<path> <op> <path> [settings]` where op is one of `<`, `>`, `-`, `<>`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from dbdiagram.parser.lexer import unquote
from dbdiagram.parser.settings import SettingsKind, interpret_settings, parse_settings
from dbdiagram.schema.models import Cardinality, Diagnostic, Relationship, Severity

_COMPOSITE = re.compile(r"^(.*)\.\((.*)\)$", re.DOTALL)


@dataclass(frozen=True, slots=True)
class RefPath:
    table: str
    columns: tuple[str, ...]


def _split_dotted(text: str) -> list[str]:
    """Split on dots outside double quotes."""
    parts: list[str] = []
    current: list[str] = []
    quoted = False
    for ch in text:
        if ch == '"':
            quoted = not quoted
        if ch == "." and not quoted:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts]


def parse_ref_path(path: str) -> RefPath | None:
    """Parse an endpoint. Returns None when there is no table/column split."""
    clean = path.strip()

    composite = _COMPOSITE.match(clean)
    if composite:
        table_part, cols_part = composite.groups()
        table = ".".join(unquote(p) for p in _split_dotted(table_part) if p)
        columns = tuple(unquote(c.strip()) for c in cols_part.split(",") if c.strip())
        if not table or not columns:
            return None
        return RefPath(table=table, columns=columns)

    parts = _split_dotted(clean)
    if len(parts) < 2 or not all(parts):
        return None
    column = unquote(parts[-1])
    table = ".".join(unquote(p) for p in parts[:-1])
    return RefPath(table=table, columns=(column,))


def _top_level_positions(text: str) -> list[tuple[int, str]]:
    """(offset, char) of every character outside quotes and parentheses."""
    found: list[tuple[int, str]] = []
    quote: str | None = None
    depth = 0
    for i, ch in enumerate(text):
        if quote is not None:
            if ch == quote:
                quote = None
            continue
        if ch in "'\"`":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif depth == 0:
            found.append((i, ch))
    return found


def find_operator(text: str) -> tuple[int, str] | None:
    """Locate the first ref operator outside quotes and parentheses."""
    positions = _top_level_positions(text)
    for idx, (offset, ch) in enumerate(positions):
        if ch == "<":
            nxt = positions[idx + 1] if idx + 1 < len(positions) else None
            if nxt is not None and nxt == (offset + 1, ">"):
                return offset, "<>"
            return offset, "<"
        if ch in ">-=":
            return offset, ch
    return None


def split_settings_bracket(text: str) -> tuple[str, str | None]:
    """Split `head [settings]` into (head, settings text or None)."""
    for offset, ch in _top_level_positions(text):
        if ch == "[":
            close = text.rfind("]")
            if close <= offset:
                return text[:offset].rstrip(), text[offset + 1 :]
            return text[:offset].rstrip(), text[offset + 1 : close]
    return text, None


def parse_ref_line(
    text: str, *, line: int | None = None, name: str | None = None
) -> tuple[Relationship | None, list[Diagnostic]]:
    """Parse one `<path> <op> <path> [settings]` line."""
    head, settings_text = split_settings_bracket(text.strip())
    found = find_operator(head)
    if found is None:
        return None, [
            Diagnostic(
                message=f"Ref without an operator: '{text.strip()}'",
                line=line,
                severity=Severity.WARNING,
                code="ref",
            )
        ]
    offset, op = found
    left = parse_ref_path(head[:offset])
    right = parse_ref_path(head[offset + len(op) :])
    if left is None or right is None:
        return None, [
            Diagnostic(
                message=f"Cannot read ref endpoints: '{text.strip()}'",
                line=line,
                severity=Severity.WARNING,
                code="ref",
            )
        ]

    raw = parse_settings(settings_text or "")
    typed = interpret_settings(raw, SettingsKind.REF, line=line)
    relationship = Relationship(
        from_table=left.table,
        from_columns=left.columns,
        to_table=right.table,
        to_columns=right.columns,
        cardinality=Cardinality.from_operator(op),
        settings=raw,
        name=name,
    )
    return relationship, list(typed.diagnostics)

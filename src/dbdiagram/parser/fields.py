"""Field declaration parsing: `name type [settings]`."""

from __future__ import annotations

import re

from dbdiagram.parser.lexer import unquote
from dbdiagram.parser.relationships import find_operator, parse_ref_path
from dbdiagram.parser.settings import SettingsKind, interpret_settings, parse_settings
from dbdiagram.schema.models import Diagnostic, Field, InlineRef, Severity

_NAME = re.compile(r'^("(?:[^"\\]|\\.)*"|\w+)\s+(.+)$', re.DOTALL)
_TYPE = re.compile(r'^(?:"[^"]*"|[\w.]+)(?:\s*\([^)]*\))?(?:\[\])*$')


def _settings_bounds(rest: str) -> tuple[int, int] | None:
    """Offsets of the settings bracket contents in rest, skipping `[]` array suffixes."""
    quote: str | None = None
    depth = 0
    i = 0
    n = len(rest)
    while i < n:
        ch = rest[i]
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in "'\"`":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif ch == "[" and depth == 0:
            if rest.startswith("[]", i):
                i += 2
                continue
            close = _matching_bracket(rest, i)
            return i + 1, close
        i += 1
    return None


def _matching_bracket(text: str, open_at: int) -> int:
    quote: str | None = None
    depth = 0
    for i in range(open_at, len(text)):
        ch = text[i]
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in "'\"`":
            quote = ch
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return i
    return len(text)


def _inline_ref(value: str, line: int | None) -> tuple[InlineRef | None, Diagnostic | None]:
    found = find_operator(value)
    if found is None:
        return None, None
    offset, op = found
    target = parse_ref_path(value[offset + len(op) :])
    if target is None or len(target.columns) != 1:
        return None, Diagnostic(
            message=f"Cannot read inline ref target '{value.strip()}'",
            line=line,
            severity=Severity.WARNING,
            code="ref",
        )
    return InlineRef(operator=op, to_table=target.table, to_column=target.columns[0]), None


def split_declarations(text: str) -> list[str]:
    """Split several declarations written on one line.

    `id int [pk] name varchar` holds two fields: a declaration ends where
    its settings bracket closes and whatever follows starts the next one.
    A line without a closed bracket in the middle is returned whole.
    """
    parts: list[str] = []
    rest = text.strip()
    while rest:
        match = _NAME.match(rest)
        if not match:
            parts.append(rest)
            break
        offset = match.start(2)
        tail = rest[offset:]
        bounds = _settings_bounds(tail)
        if bounds is None or bounds[1] >= len(tail) - 1:
            parts.append(rest)
            break
        end = offset + bounds[1] + 1
        parts.append(rest[:end].rstrip())
        rest = rest[end:].strip()
    return parts


def parse_field(
    text: str, *, doc: tuple[str, ...] = (), line: int | None = None
) -> tuple[Field | None, list[Diagnostic]]:
    """Parse one field line.

    Doc comments become the field note unless a `note:` setting is present.
    Returns (None, diagnostics) for lines that are not field declarations.
    """
    match = _NAME.match(text.strip())
    if not match:
        return None, [
            Diagnostic(
                message=f"Cannot read field declaration '{text.strip()}'",
                line=line,
                severity=Severity.WARNING,
                code="field",
            )
        ]
    name = unquote(match.group(1))
    rest = match.group(2)

    bounds = _settings_bounds(rest)
    if bounds is None:
        type_text, settings_text = rest, ""
    else:
        type_text, settings_text = rest[: bounds[0] - 1], rest[bounds[0] : bounds[1]]
    type_text = " ".join(type_text.split())

    if not _TYPE.match(type_text):
        return None, [
            Diagnostic(
                message=f"Cannot read type '{type_text}' of field '{name}'",
                line=line,
                severity=Severity.WARNING,
                code="field",
            )
        ]

    raw = parse_settings(settings_text)
    typed = interpret_settings(raw, SettingsKind.FIELD, line=line)
    diagnostics = list(typed.diagnostics)

    inline_ref = None
    ref_value = typed.text("ref")
    if ref_value is not None:
        inline_ref, problem = _inline_ref(ref_value, line)
        if problem is not None:
            diagnostics.append(problem)

    note = typed.text("note")
    if note is None and doc:
        note = "\n".join(doc)

    field = Field(
        name=name,
        type=unquote(type_text),
        is_pk=typed.flag("pk") or typed.flag("primary key"),
        is_unique=typed.flag("unique"),
        is_not_null=typed.flag("not null"),
        is_fk=inline_ref is not None,
        is_increment=typed.flag("increment"),
        note=note,
        default=typed.text("default"),
        inline_ref=inline_ref,
        settings=raw,
    )
    return field, diagnostics

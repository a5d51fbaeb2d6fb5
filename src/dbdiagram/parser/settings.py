"""Settings list tokenizer and typed interpretation.

A settings list is the text between `[` and `]`:

    [pk, not null, note: 'id, as text', default: `now()`]

split_settings() splits on top-level commas (commas inside quotes,
backticks, brackets or parentheses do not split) and keeps the offsets
of every key and value so the patcher can rewrite one value in place.
parse_settings() collapses that into a last-write-wins map.

interpret_settings() reads the keys a given entity kind understands into
typed values and reports unknown keys and unreadable values.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from dbdiagram.parser.lexer import Span, unquote
from dbdiagram.schema.models import Diagnostic, Severity

_PAIRS = {"[": "]", "(": ")"}


@dataclass(frozen=True, slots=True)
class SettingItem:
    """One comma-separated item of a settings list."""

    key: str
    value: str
    span: Span
    key_span: Span
    value_span: Span | None = None

    @property
    def is_flag(self) -> bool:
        return self.value_span is None


def normalize_key(key: str) -> str:
    """Lower-case and collapse inner whitespace: 'Primary  Key' -> 'primary key'."""
    return " ".join(key.lower().split())


def _split_points(text: str) -> list[tuple[int, int]]:
    """(start, end) of each top-level comma-separated chunk."""
    chunks: list[tuple[int, int]] = []
    quote: str | None = None
    depth = 0
    start = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if quote is not None:
            if ch == "\\" and quote != "`":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "'\"`":
            quote = ch
        elif ch in _PAIRS:
            depth += 1
        elif ch in _PAIRS.values():
            depth = max(0, depth - 1)
        elif ch == "," and depth == 0:
            chunks.append((start, i))
            start = i + 1
        i += 1
    chunks.append((start, n))
    return chunks


def _first_colon(text: str) -> int:
    quote: str | None = None
    for i, ch in enumerate(text):
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in "'\"`":
            quote = ch
        elif ch == ":":
            return i
    return -1


def _trimmed(text: str, start: int, end: int) -> tuple[int, int]:
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end


def split_settings(text: str, base: int = 0) -> list[SettingItem]:
    """Split settings text into items with absolute spans (offset by base)."""
    items: list[SettingItem] = []
    for chunk_start, chunk_end in _split_points(text):
        start, end = _trimmed(text, chunk_start, chunk_end)
        if start == end:
            continue
        chunk = text[start:end]
        colon = _first_colon(chunk)
        if colon == -1:
            items.append(
                SettingItem(
                    key=normalize_key(chunk),
                    value="true",
                    span=Span(base + start, base + end),
                    key_span=Span(base + start, base + end),
                )
            )
            continue
        key_start, key_end = _trimmed(text, start, start + colon)
        value_start, value_end = _trimmed(text, start + colon + 1, end)
        items.append(
            SettingItem(
                key=normalize_key(text[key_start:key_end]),
                value=text[value_start:value_end],
                span=Span(base + start, base + end),
                key_span=Span(base + key_start, base + key_end),
                value_span=Span(base + value_start, base + value_end),
            )
        )
    return items


def parse_settings(text: str) -> dict[str, str]:
    """Key -> raw value map. Later items overwrite earlier ones."""
    return {item.key: item.value for item in split_settings(text)}


# =============================================================================
# Typed interpretation
# =============================================================================


class SettingsKind(StrEnum):
    TABLE = "table"
    NOTE = "note"
    FIELD = "field"
    REF = "ref"
    INDEX = "index"
    ENUM_VALUE = "enum value"


def _number(raw: str) -> int | float:
    value = float(unquote(raw).strip())
    return int(value) if value.is_integer() else value


def _text(raw: str) -> str:
    return unquote(raw.strip())


def _flag(raw: str) -> bool:
    if raw.lower() not in ("true", ""):
        raise ValueError(f"flag takes no value, got {raw!r}")
    return True


def _color(raw: str) -> str:
    value = unquote(raw.strip())
    if not value:
        raise ValueError("empty color")
    return value


def _ref(raw: str) -> str:
    value = raw.strip()
    if not value or value[0] not in "<>-=":
        raise ValueError(f"ref needs an operator, got {raw!r}")
    return value


def _action(raw: str) -> str:
    value = normalize_key(unquote(raw))
    if value not in ("cascade", "restrict", "set null", "set default", "no action"):
        raise ValueError(f"unknown referential action {raw!r}")
    return value


_Converter = Callable[[str], object]

_KNOWN: dict[SettingsKind, dict[str, _Converter]] = {
    SettingsKind.TABLE: {
        "x": _number,
        "y": _number,
        "width": _number,
        "color": _color,
        "headercolor": _color,
        "note": _text,
    },
    SettingsKind.NOTE: {
        "x": _number,
        "y": _number,
        "width": _number,
        "height": _number,
        "color": _color,
    },
    SettingsKind.FIELD: {
        "pk": _flag,
        "primary key": _flag,
        "unique": _flag,
        "not null": _flag,
        "null": _flag,
        "increment": _flag,
        "note": _text,
        "default": _text,
        "ref": _ref,
    },
    SettingsKind.REF: {
        "delete": _action,
        "update": _action,
        "color": _color,
        "name": _text,
    },
    SettingsKind.INDEX: {
        "pk": _flag,
        "unique": _flag,
        "name": _text,
        "type": _text,
        "note": _text,
    },
    SettingsKind.ENUM_VALUE: {
        "note": _text,
    },
}


@dataclass(frozen=True, slots=True)
class TypedSettings:
    """Known settings read into Python values, plus what could not be read."""

    values: Mapping[str, object]
    diagnostics: tuple[Diagnostic, ...] = ()

    def get(self, key: str, default: object = None) -> object:
        return self.values.get(key, default)

    def number(self, key: str) -> float | None:
        value = self.values.get(key)
        return value if isinstance(value, int | float) and not isinstance(value, bool) else None

    def text(self, key: str) -> str | None:
        value = self.values.get(key)
        return value if isinstance(value, str) else None

    def flag(self, key: str) -> bool:
        return self.values.get(key) is True


def interpret_settings(
    raw: Mapping[str, str], kind: SettingsKind, *, line: int | None = None
) -> TypedSettings:
    """Convert the keys known for kind. Unknown keys are hinted, bad values warned."""
    known = _KNOWN[kind]
    values: dict[str, object] = {}
    diagnostics: list[Diagnostic] = []
    for key, value in raw.items():
        convert = known.get(key)
        if convert is None:
            diagnostics.append(
                Diagnostic(
                    message=f"Unknown {kind.value} setting '{key}'",
                    line=line,
                    severity=Severity.HINT,
                    code="unknown-setting",
                )
            )
            continue
        try:
            values[key] = convert(value)
        except ValueError as e:
            diagnostics.append(
                Diagnostic(
                    message=f"Invalid {kind.value} setting '{key}': {e}",
                    line=line,
                    severity=Severity.WARNING,
                    code="invalid-setting",
                )
            )
    return TypedSettings(values=values, diagnostics=tuple(diagnostics))

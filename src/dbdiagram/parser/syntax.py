"""Recursive-descent block parser producing a span-annotated syntax tree.

The grammar handled here is deliberately shallow:

    document  := (block | short_ref | doc)*
    block     := WORD header_name? ("as" name)? settings? "{" body "}"
    short_ref := "Ref" name? ":" rest-of-line
    body      := (block | property | line | doc)*
    property  := WORD ":" value            (e.g. `Note: '...'`, `database_type: 'x'`)
    line      := anything else up to a newline outside brackets

Blocks nest to any depth, so `indexes { }` or `Note { }` inside a table
never cut the table body short. Every node records where it sits in the
text; the patcher uses those spans to rewrite a header in place.

Malformed input never raises. An unclosed brace, a stray closing brace,
or an unexpected top-level statement each become a Diagnostic and the
parser carries on with the next construct.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from dbdiagram.parser.lexer import Span, Token, TokenKind, tokenize, unquote
from dbdiagram.schema.models import Diagnostic, Severity

_OPENERS = (TokenKind.LBRACKET, TokenKind.LPAREN)
_CLOSERS = (TokenKind.RBRACKET, TokenKind.RPAREN)
_TOP_LEVEL_KEYWORDS = frozenset(
    {"table", "ref", "enum", "project", "note", "tablepartial", "tablegroup"}
)


@dataclass(frozen=True, slots=True)
class LineNode:
    """One logical body line (field, index entry, ref, enum value, injection)."""

    text: str
    span: Span
    line: int
    doc: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PropertyNode:
    """A `key: value` line inside a body."""

    key: str
    value: str
    span: Span
    value_span: Span
    line: int


@dataclass(frozen=True, slots=True)
class BlockNode:
    keyword: str
    span: Span
    line: int
    name: str | None = None
    name_span: Span | None = None
    alias: str | None = None
    settings_span: Span | None = None
    open_brace: int | None = None
    body_span: Span | None = None
    children: tuple[BlockNode, ...] = ()
    lines: tuple[LineNode, ...] = ()
    properties: tuple[PropertyNode, ...] = ()
    doc: tuple[str, ...] = ()
    short_form: bool = False

    @property
    def bracket_span(self) -> Span | None:
        """Span of the settings list including its brackets."""
        if self.settings_span is None:
            return None
        return Span(self.settings_span.start - 1, self.settings_span.end + 1)

    def settings_text(self, text: str) -> str:
        return self.settings_span.slice(text) if self.settings_span else ""

    def body_text(self, text: str) -> str:
        return self.body_span.slice(text) if self.body_span else ""

    def children_named(self, keyword: str) -> list[BlockNode]:
        wanted = keyword.lower()
        return [c for c in self.children if c.keyword == wanted]

    def get_property(self, key: str) -> PropertyNode | None:
        """Last property with this key (case-insensitive)."""
        wanted = key.lower()
        found = None
        for prop in self.properties:
            if prop.key.lower() == wanted:
                found = prop
        return found


@dataclass(frozen=True, slots=True)
class SyntaxTree:
    text: str
    blocks: tuple[BlockNode, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    def find(self, keyword: str, name: str | None = None) -> list[BlockNode]:
        """Top-level blocks with this keyword, optionally filtered by normalized name."""
        wanted = keyword.lower()
        matches = [b for b in self.blocks if b.keyword == wanted]
        if name is None:
            return matches
        key = normalize_name(name)
        return [b for b in matches if b.name is not None and normalize_name(b.name) == key]


def normalize_name(name: str) -> str:
    """Identity used to compare entity names: no quotes, no whitespace."""
    return "".join(ch for ch in name if ch not in "\"'`" and not ch.isspace())


@dataclass
class _Header:
    name: str | None = None
    name_span: Span | None = None
    alias: str | None = None
    settings_span: Span | None = None
    leftovers: list[Token] = field(default_factory=list)


class BlockParser:
    """Parses cleaned schema text into a SyntaxTree."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = list(tokenize(text))
        self.diagnostics: list[Diagnostic] = []

    def parse(self) -> SyntaxTree:
        blocks, _lines, _props = self._parse_sequence(0, len(self.tokens), top_level=True)
        return SyntaxTree(
            text=self.text,
            blocks=tuple(blocks),
            diagnostics=tuple(self.diagnostics),
        )

    def _warn(self, message: str, line: int, severity: Severity = Severity.WARNING) -> None:
        self.diagnostics.append(
            Diagnostic(message=message, line=line, severity=severity, code="syntax")
        )

    def _match_brace(self, open_idx: int, stop: int) -> int | None:
        depth = 0
        for idx in range(open_idx, stop):
            kind = self.tokens[idx].kind
            if kind is TokenKind.LBRACE:
                depth += 1
            elif kind is TokenKind.RBRACE:
                depth -= 1
                if depth == 0:
                    return idx
        return None

    def _starts_block(self, idx: int, stop: int) -> bool:
        """True when the first token after the newline at idx opens a top-level construct."""
        k = idx + 1
        while k < stop and self.tokens[k].kind in (TokenKind.NEWLINE, TokenKind.DOC):
            k += 1
        if k >= stop or self.tokens[k].kind is not TokenKind.WORD:
            return False
        word = self.tokens[k].value.lower()
        if word not in _TOP_LEVEL_KEYWORDS:
            return False
        # `Note:` is a table property, not a sticky note
        follows_colon = k + 1 < stop and self.tokens[k + 1].kind is TokenKind.COLON
        return word != "note" or not follows_colon

    def _scan_line(self, start: int, stop: int, *, top_level: bool) -> tuple[int, int | None]:
        """Find the end of the logical line at start.

        Returns (end index, index of an opening brace or None). The line
        ends at a newline or closing brace outside brackets, or at the
        first opening brace outside brackets. At top level an unclosed
        bracket also ends at the newline before the next block keyword.
        """
        opened: list[Token] = []
        j = start
        while j < stop:
            tok = self.tokens[j]
            kind = tok.kind
            if kind in _OPENERS:
                opened.append(tok)
            elif kind in _CLOSERS:
                if opened:
                    opened.pop()
            elif not opened and kind in (TokenKind.NEWLINE, TokenKind.RBRACE):
                return j, None
            elif not opened and kind is TokenKind.LBRACE:
                return j, j
            elif top_level and kind is TokenKind.NEWLINE and self._starts_block(j, stop):
                self._warn(f"Unclosed '{opened[0].value}'", opened[0].line, Severity.ERROR)
                return j, None
            j += 1
        return stop, None

    def _parse_sequence(
        self, start: int, stop: int, *, top_level: bool
    ) -> tuple[list[BlockNode], list[LineNode], list[PropertyNode]]:
        blocks: list[BlockNode] = []
        lines: list[LineNode] = []
        props: list[PropertyNode] = []
        pending_doc: list[str] = []
        i = start

        while i < stop:
            tok = self.tokens[i]
            if tok.kind is TokenKind.NEWLINE:
                i += 1
                continue
            if tok.kind is TokenKind.DOC:
                pending_doc.append(tok.value)
                i += 1
                continue
            if tok.kind is TokenKind.RBRACE:
                self._warn("Unmatched '}'", tok.line, Severity.ERROR)
                i += 1
                continue

            end, brace_at = self._scan_line(i, stop, top_level=top_level)

            if brace_at is not None:
                close = self._match_brace(brace_at, stop)
                if close is None:
                    self._warn(
                        f"Unclosed '{{' after '{tok.value}'; block skipped",
                        tok.line,
                        Severity.ERROR,
                    )
                    pending_doc = []
                    i = brace_at + 1
                    continue
                blocks.append(self._block(i, brace_at, close, tuple(pending_doc)))
                pending_doc = []
                i = close + 1
                continue

            segment = self.tokens[i:end]
            if top_level:
                short_ref = self._short_ref(segment, tuple(pending_doc))
                if short_ref is not None:
                    blocks.append(short_ref)
                else:
                    self._warn(f"Unexpected statement '{tok.value}' skipped", tok.line)
            else:
                node = self._line_or_property(segment, tuple(pending_doc))
                if isinstance(node, PropertyNode):
                    props.append(node)
                elif node is not None:
                    lines.append(node)
            pending_doc = []
            i = end

        return blocks, lines, props

    def _read_header(self, tokens: list[Token]) -> _Header:
        header = _Header()
        k = 0
        n = len(tokens)

        name_parts: list[str] = []
        name_tokens: list[Token] = []
        while k < n and tokens[k].kind in (TokenKind.WORD, TokenKind.STRING):
            if name_tokens and tokens[k].kind is TokenKind.WORD and tokens[k].value.lower() == "as":
                break
            name_parts.append(unquote(tokens[k].value))
            name_tokens.append(tokens[k])
            k += 1
            if k < n and tokens[k].kind is TokenKind.DOT:
                k += 1
                continue
            break
        if name_tokens:
            header.name = ".".join(name_parts)
            header.name_span = Span(name_tokens[0].start, name_tokens[-1].end)

        if (
            k + 1 < n
            and tokens[k].kind is TokenKind.WORD
            and tokens[k].value.lower() == "as"
            and tokens[k + 1].kind in (TokenKind.WORD, TokenKind.STRING)
        ):
            header.alias = unquote(tokens[k + 1].value)
            k += 2

        if k < n and tokens[k].kind is TokenKind.LBRACKET:
            depth = 0
            for m in range(k, n):
                if tokens[m].kind is TokenKind.LBRACKET:
                    depth += 1
                elif tokens[m].kind is TokenKind.RBRACKET:
                    depth -= 1
                    if depth == 0:
                        header.settings_span = Span(tokens[k].end, tokens[m].start)
                        k = m + 1
                        break
            else:
                header.leftovers.append(tokens[k])
                k = n

        header.leftovers.extend(t for t in tokens[k:] if t.kind is not TokenKind.NEWLINE)
        return header

    def _block(self, start: int, brace_at: int, close: int, doc: tuple[str, ...]) -> BlockNode:
        head = self.tokens[start]
        keyword = head.value.lower() if head.kind is TokenKind.WORD else ""
        header = self._read_header(self.tokens[start + 1 : brace_at])
        for extra in header.leftovers:
            if extra.kind is TokenKind.DOC:
                continue
            self._warn(f"Unexpected '{extra.value}' in {head.value} header", extra.line)

        children, lines, props = self._parse_sequence(brace_at + 1, close, top_level=False)
        return BlockNode(
            keyword=keyword,
            span=Span(head.start, self.tokens[close].end),
            line=head.line,
            name=header.name,
            name_span=header.name_span,
            alias=header.alias,
            settings_span=header.settings_span,
            open_brace=self.tokens[brace_at].start,
            body_span=Span(self.tokens[brace_at].end, self.tokens[close].start),
            children=tuple(children),
            lines=tuple(lines),
            properties=tuple(props),
            doc=doc,
        )

    def _short_ref(self, segment: list[Token], doc: tuple[str, ...]) -> BlockNode | None:
        head = segment[0]
        if head.kind is not TokenKind.WORD or head.value.lower() != "ref":
            return None
        colon = next(
            (k for k, t in enumerate(segment) if t.kind is TokenKind.COLON),
            None,
        )
        if colon is None:
            return None
        header = self._read_header(segment[1:colon])
        body = [t for t in segment[colon + 1 :] if t.kind is not TokenKind.DOC]
        if not body:
            self._warn("Ref without an endpoint pair", head.line)
            return None
        body_span = Span(body[0].start, body[-1].end)
        line = LineNode(text=body_span.slice(self.text), span=body_span, line=body[0].line)
        return BlockNode(
            keyword="ref",
            span=Span(head.start, body[-1].end),
            line=head.line,
            name=header.name,
            name_span=header.name_span,
            body_span=body_span,
            lines=(line,),
            doc=doc,
            short_form=True,
        )

    def _line_or_property(
        self, segment: list[Token], doc: tuple[str, ...]
    ) -> LineNode | PropertyNode | None:
        inline_doc = [t.value for t in segment if t.kind is TokenKind.DOC]
        body = [t for t in segment if t.kind is not TokenKind.DOC]
        if not body:
            return None

        first = body[0]
        if (
            len(body) >= 2
            and first.kind is TokenKind.WORD
            and body[1].kind is TokenKind.COLON
        ):
            if len(body) > 2:
                value_span = Span(body[2].start, body[-1].end)
            else:
                value_span = Span(body[1].end, body[1].end)
            return PropertyNode(
                key=first.value,
                value=value_span.slice(self.text).strip(),
                span=Span(first.start, body[-1].end),
                value_span=value_span,
                line=first.line,
            )

        span = Span(first.start, body[-1].end)
        return LineNode(
            text=span.slice(self.text),
            span=span,
            line=first.line,
            doc=(*doc, *inline_doc),
        )


def parse_blocks(text: str) -> SyntaxTree:
    """Parse cleaned text into a SyntaxTree."""
    return BlockParser(text).parse()

"""Tokenizer for cleaned schema text.

Tokens carry absolute offsets into the text they came from. Whitespace
is dropped except newlines, which the block parser uses to find logical
lines. String literals and `///` doc comments are single tokens, so a
brace or bracket inside either never affects nesting.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum


class TokenKind(StrEnum):
    WORD = "word"
    STRING = "string"
    DOC = "doc"
    NEWLINE = "newline"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    LPAREN = "("
    RPAREN = ")"
    COLON = ":"
    COMMA = ","
    DOT = "."
    TILDE = "~"
    OPERATOR = "op"
    OTHER = "other"


_SINGLE = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "~": TokenKind.TILDE,
}

_QUOTES = ("'''", "'", '"', "`")


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open [start, end) offsets into the source text."""

    start: int
    end: int

    def slice(self, text: str) -> str:
        return text[self.start : self.end]

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    value: str
    span: Span
    line: int

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def _read_string(text: str, pos: int) -> tuple[str, int]:
    """Return (quote, end offset) for the literal starting at pos."""
    quote = next(q for q in _QUOTES if text.startswith(q, pos))
    i = pos + len(quote)
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\" and quote != "`":
            i += 2
            continue
        if text.startswith(quote, i):
            return quote, i + len(quote)
        if ch == "\n" and quote in ("'", '"'):
            return quote, i
        i += 1
    return quote, n


def tokenize(text: str) -> Iterator[Token]:
    """Yield tokens for text. Never raises; odd characters become OTHER."""
    i = 0
    n = len(text)
    line = 1
    while i < n:
        ch = text[i]

        if ch == "\n":
            yield Token(TokenKind.NEWLINE, "\n", Span(i, i + 1), line)
            line += 1
            i += 1
            continue

        if ch.isspace():
            i += 1
            continue

        if text.startswith("///", i):
            eol = text.find("\n", i)
            end = n if eol == -1 else eol
            yield Token(TokenKind.DOC, text[i + 3 : end].strip(), Span(i, end), line)
            i = end
            continue

        if ch in "'\"`":
            _quote, end = _read_string(text, i)
            value = text[i:end]
            yield Token(TokenKind.STRING, value, Span(i, end), line)
            line += value.count("\n")
            i = end
            continue

        if _is_word_char(ch):
            j = i + 1
            while j < n and _is_word_char(text[j]):
                j += 1
            yield Token(TokenKind.WORD, text[i:j], Span(i, j), line)
            i = j
            continue

        if text.startswith("<>", i):
            yield Token(TokenKind.OPERATOR, "<>", Span(i, i + 2), line)
            i += 2
            continue

        if ch in "<>-=":
            yield Token(TokenKind.OPERATOR, ch, Span(i, i + 1), line)
            i += 1
            continue

        kind = _SINGLE.get(ch, TokenKind.OTHER)
        yield Token(kind, ch, Span(i, i + 1), line)
        i += 1


def unquote(value: str) -> str:
    """Strip one layer of matching quotes ('''...''', '...', "...", `...`)."""
    for quote in _QUOTES:
        if len(value) >= 2 * len(quote) and value.startswith(quote) and value.endswith(quote):
            return value[len(quote) : -len(quote)]
    return value

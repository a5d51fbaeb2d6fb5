"""Comment removal that keeps every offset stable.

`//` line comments and `/* */` block comments are overwritten with
spaces (newlines are kept), so offset N in the cleaned text is offset N
in the raw text. The source patcher relies on this to reuse parser spans
against the raw buffer.

`///` doc comments survive untouched, both as whole lines and trailing a
declaration.

Comment markers inside string literals ('...', "...", '''...''', `...`)
are left alone, so `note: 'see http://example.com'` keeps its URL.
"""

from __future__ import annotations

_QUOTES = ("'''", "'", '"', "`")


def _blank(chunk: str) -> str:
    return "".join("\n" if ch == "\n" else " " for ch in chunk)


def _string_end(text: str, pos: int, quote: str) -> int:
    """Offset just past the literal opened at pos. Runs to EOF if unterminated."""
    i = pos + len(quote)
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\" and quote != "`":
            i += 2
            continue
        if text.startswith(quote, i):
            return i + len(quote)
        if ch == "\n" and len(quote) == 1 and quote != "`":
            # Single-line literal left open; stop at the line end.
            return i
        i += 1
    return n


def clean_text(text: str) -> str:
    """Blank out comments, preserving doc comments and string literals."""
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if ch in "'\"`":
            quote = next(q for q in _QUOTES if text.startswith(q, i))
            end = _string_end(text, i, quote)
            out.append(text[i:end])
            i = end
            continue

        if text.startswith("/*", i):
            close = text.find("*/", i + 2)
            end = n if close == -1 else close + 2
            out.append(_blank(text[i:end]))
            i = end
            continue

        if text.startswith("//", i):
            eol = text.find("\n", i)
            end = n if eol == -1 else eol
            if text.startswith("///", i):
                out.append(text[i:end])
            else:
                out.append(_blank(text[i:end]))
            i = end
            continue

        out.append(ch)
        i += 1

    return "".join(out)

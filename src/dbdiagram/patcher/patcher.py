"""Surgical write-back of diagram edits into schema source.

A SchemaEdit is turned into exactly one Splice against the text as it is
right now. The target block is located in the syntax tree of the cleaned
text (whose offsets equal the raw text's), and only its settings list or
project body is touched:

    Table users [x: 10, note: 'keep'] {     ->  Table users [x: 120, note: 'keep', y: 80] {
    Table users {                           ->  Table users [x: 120, y: 80] {

Everything else in the document, including comments and formatting,
stays byte-for-byte identical.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

import structlog

from dbdiagram.core.errors import PatchError
from dbdiagram.parser.cleaner import clean_text
from dbdiagram.parser.lexer import Span
from dbdiagram.parser.settings import normalize_key, split_settings
from dbdiagram.parser.syntax import BlockNode, SyntaxTree, parse_blocks
from dbdiagram.patcher.document import Document
from dbdiagram.patcher.edits import EntityKind, Scalar, SchemaEdit
from dbdiagram.patcher.splice import Splice

logger = structlog.get_logger()

_SIMPLE_TOKEN = re.compile(r"[#\w.-]+")
_DEFAULT_SCHEMA_PREFIX = "public."
_DEFAULT_INDENT = "  "
_DEFAULT_PROJECT_NAME = "project"


def format_value(value: Scalar) -> str:
    """Render a setting value the way a person would type it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value).rstrip("0").rstrip(".")
    text = str(value)
    if _SIMPLE_TOKEN.fullmatch(text):
        return text
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _find_block(tree: SyntaxTree, keyword: str, name: str) -> BlockNode | None:
    candidates = tree.find(keyword, name)
    if not candidates and keyword == "table":
        bare = name.strip()
        if bare.startswith(_DEFAULT_SCHEMA_PREFIX):
            candidates = tree.find(keyword, bare[len(_DEFAULT_SCHEMA_PREFIX) :])
        elif "." not in bare:
            candidates = tree.find(keyword, _DEFAULT_SCHEMA_PREFIX + bare)
    candidates = [c for c in candidates if c.open_brace is not None]
    return candidates[0] if candidates else None


def _rewrite_settings(text: str, block: BlockNode, values: Mapping[str, str]) -> Splice:
    if block.settings_span is None:
        assert block.open_brace is not None
        inner = ", ".join(f"{key}: {value}" for key, value in values.items())
        return Splice(block.open_brace, block.open_brace, f"[{inner}] ")

    span = block.settings_span
    content = span.slice(text)
    wanted = {normalize_key(key): key for key in values}
    seen: set[str] = set()
    pieces: list[str] = []
    cursor = 0
    for item in split_settings(content):
        key = wanted.get(item.key)
        if key is None:
            continue
        seen.add(key)
        if item.value_span is None:
            replace, replacement = item.span, f"{key}: {values[key]}"
        elif len(item.value_span) == 0:
            replace, replacement = item.value_span, f" {values[key]}"
        else:
            replace, replacement = item.value_span, values[key]
        pieces.append(content[cursor : replace.start])
        pieces.append(replacement)
        cursor = replace.end

    missing = [key for key in values if key not in seen]
    if missing:
        stripped = content.rstrip()
        pieces.append(content[cursor : len(stripped)])
        addition = ", ".join(f"{key}: {values[key]}" for key in missing)
        if not stripped.strip():
            pieces.append(addition)
        elif stripped.endswith(","):
            pieces.append(" " + addition)
        else:
            pieces.append(", " + addition)
        cursor = len(stripped)
    pieces.append(content[cursor:])

    return Splice(span.start, span.end, "".join(pieces))


def _body_indent(text: str, block: BlockNode) -> str:
    anchors = [p.span.start for p in block.properties] + [ln.span.start for ln in block.lines]
    if not anchors:
        return _DEFAULT_INDENT
    first = min(anchors)
    line_start = text.rfind("\n", 0, first) + 1
    indent = text[line_start:first]
    return indent if indent and not indent.strip() else _DEFAULT_INDENT


def _rewrite_project(text: str, block: BlockNode, values: Mapping[str, str]) -> Splice:
    assert block.body_span is not None
    body = block.body_span
    replacements: list[tuple[Span, str]] = []
    seen: set[str] = set()
    for prop in block.properties:
        key = next((k for k in values if k.lower() == prop.key.lower()), None)
        if key is None:
            continue
        seen.add(key)
        value = values[key]
        if len(prop.value_span) == 0:
            value = " " + value
        replacements.append((prop.value_span, value))

    missing = [key for key in values if key not in seen]
    if missing:
        content = body.slice(text)
        content_end = body.start + len(content.rstrip())
        indent = _body_indent(text, block)
        addition = "".join(f"\n{indent}{key}: {values[key]}" for key in missing)
        if "\n" not in text[content_end : body.end]:
            addition += "\n"
        replacements.append((Span(content_end, content_end), addition))

    replacements.sort(key=lambda item: item[0].start)
    start = replacements[0][0].start
    end = replacements[-1][0].end
    pieces: list[str] = []
    cursor = start
    for span, value in replacements:
        pieces.append(text[cursor : span.start])
        pieces.append(value)
        cursor = span.end
    return Splice(start, end, "".join(pieces))


def _new_project(name: str | None, values: Mapping[str, str]) -> Splice:
    label = (name or _DEFAULT_PROJECT_NAME).replace('"', "")
    lines = "".join(f"{_DEFAULT_INDENT}{key}: {value}\n" for key, value in values.items())
    return Splice(0, 0, f'Project "{label}" {{\n{lines}}}\n\n')


class SourcePatcher:
    """Plans and commits one SchemaEdit at a time."""

    def plan(self, text: str, edit: SchemaEdit) -> Splice:
        """Compute the minimal splice for edit against text.

        Raises:
            PatchError: if the edit is empty or its target is not in text.
        """
        if not edit.values:
            raise PatchError.invalid_edit("no values to write", kind=str(edit.kind))
        values = {key: format_value(value) for key, value in edit.values.items()}
        tree = parse_blocks(clean_text(text))

        if edit.kind is EntityKind.PROJECT:
            projects = [b for b in tree.find("project") if b.body_span is not None]
            if not projects:
                return _new_project(edit.identity, values)
            return _rewrite_project(text, projects[0], values).minimized(text)

        if not edit.identity:
            raise PatchError.invalid_edit("missing entity name", kind=str(edit.kind))
        block = _find_block(tree, str(edit.kind), edit.identity)
        if block is None:
            raise PatchError.target_not_found(str(edit.kind), edit.identity)
        return _rewrite_settings(text, block, values).minimized(text)

    def preview(self, text: str, edit: SchemaEdit) -> str:
        """The text after applying edit. Raises PatchError like plan()."""
        return self.plan(text, edit).apply(text)

    def apply(self, document: Document, edit: SchemaEdit) -> bool:
        """Commit edit to document as a single splice.

        Returns False, after logging, when the document is not writable,
        the target is gone, or the write fails. Never raises.
        """
        if not document.is_writable():
            logger.warning("patch_dropped", reason="not_writable", kind=str(edit.kind))
            return False
        try:
            text = document.read_text()
            splice = self.plan(text, edit)
            if splice.text or not splice.is_insert:
                document.replace_range(splice.start, splice.end, splice.text)
        except PatchError as exc:
            logger.warning(
                "patch_dropped",
                reason=exc.error_name,
                kind=str(edit.kind),
                identity=edit.identity,
                message=exc.message,
            )
            return False
        except OSError as exc:
            logger.warning(
                "patch_dropped",
                reason="io_error",
                kind=str(edit.kind),
                identity=edit.identity,
                error=str(exc),
            )
            return False
        logger.debug(
            "patch_applied",
            kind=str(edit.kind),
            identity=edit.identity,
            start=splice.start,
            end=splice.end,
        )
        return True

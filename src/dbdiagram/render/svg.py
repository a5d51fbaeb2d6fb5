"""Static SVG export of a Scene.

Headless counterpart of the interactive preview: tables, sticky notes,
routed connection paths with their cardinality glyphs and anchor dots,
and the background grid, in the light or dark palette.
"""

from __future__ import annotations

from dataclasses import dataclass

from dbdiagram.config.models import LayoutConfig
from dbdiagram.layout.geometry import Rect
from dbdiagram.render.scene import NoteBox, Scene, TableBox

_MARGIN = 40
_FONT_SANS = "Segoe UI, Arial, sans-serif"
_FONT_MONO = "Consolas, Courier New, monospace"


@dataclass(frozen=True, slots=True)
class Palette:
    background: str
    grid: str
    table_fill: str
    table_stroke: str
    header_fill: str
    header_text: str
    row_text: str
    type_text: str
    line: str
    label: str
    error: str


PALETTES = {
    "light": Palette(
        background="#f3f6fb",
        grid="#e1e7f0",
        table_fill="#ffffff",
        table_stroke="#556b8a",
        header_fill="#dae7f8",
        header_text="#1a2a44",
        row_text="#27374d",
        type_text="#7a8699",
        line="#1f5a95",
        label="#1f5a95",
        error="#b3261e",
    ),
    "dark": Palette(
        background="#1e1f22",
        grid="#2b2d31",
        table_fill="#2b2d30",
        table_stroke="#6f7b8f",
        header_fill="#3c4a5e",
        header_text="#e8edf5",
        row_text="#d0d6e0",
        type_text="#8b95a5",
        line="#6fa8dc",
        label="#9cc3ea",
        error="#f2b8b5",
    ),
}


def _xml_escape(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _num(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _bounds(scene: Scene) -> Rect:
    rects = [box.rect for box in scene.tables] + [box.rect for box in scene.notes]
    for path in scene.routing.paths:
        for cmd in path.commands:
            rects.extend(Rect(p.x, p.y, 0, 0) for p in cmd.points)
    if not rects:
        return Rect(0, 0, 400, 200)
    bounds = rects[0]
    for rect in rects[1:]:
        bounds = bounds.union(rect)
    return Rect(0, 0, max(bounds.right, 0) + _MARGIN, max(bounds.bottom, 0) + _MARGIN)


def _grid(lines: list[str], size: int, width: float, height: float, palette: Palette) -> None:
    lines.append(
        f'  <defs><pattern id="grid" width="{size}" height="{size}" '
        f'patternUnits="userSpaceOnUse"><path d="M {size} 0 L 0 0 0 {size}" '
        f'fill="none" stroke="{palette.grid}" stroke-width="1" /></pattern></defs>'
    )
    lines.append(
        f'  <rect x="0" y="0" width="{_num(width)}" height="{_num(height)}" fill="url(#grid)" />'
    )


def _table(lines: list[str], box: TableBox, layout: LayoutConfig, palette: Palette) -> None:
    table, rect = box.table, box.rect
    x, y, w = _num(rect.x), _num(rect.y), _num(rect.width)
    header = palette.header_fill if not table.color else _xml_escape(table.color)
    lines.append(f'  <g class="db-table" id="{_xml_escape(table.anchor_id)}">')
    lines.append(
        f'    <rect x="{x}" y="{y}" width="{w}" height="{_num(rect.height)}" '
        f'fill="{palette.table_fill}" stroke="{palette.table_stroke}" stroke-width="2" />'
    )
    lines.append(
        f'    <rect x="{x}" y="{y}" width="{w}" height="{_num(layout.header_height)}" '
        f'fill="{header}" stroke="{palette.table_stroke}" stroke-width="2" />'
    )
    lines.append(
        f'    <text x="{_num(rect.x + 8)}" y="{_num(rect.y + layout.header_height / 2 + 5)}" '
        f'font-family="{_FONT_SANS}" font-size="13" font-weight="bold" '
        f'fill="{palette.header_text}">{_xml_escape(table.name)}</text>'
    )
    for row, field in enumerate(table.fields):
        top = rect.y + layout.header_height + row * layout.row_height
        baseline = top + layout.row_height / 2 + 4
        marks = []
        if field.is_pk:
            marks.append("PK")
        if field.is_fk:
            marks.append("FK")
        name = field.name + (f" ({', '.join(marks)})" if marks else "")
        weight = ' font-weight="bold"' if field.is_pk else ""
        lines.append(
            f'    <text id="{_xml_escape(table.column_anchor(field.name))}" '
            f'x="{_num(rect.x + 8)}" y="{_num(baseline)}" font-family="{_FONT_MONO}" '
            f'font-size="11"{weight} fill="{palette.row_text}">{_xml_escape(name)}</text>'
        )
        lines.append(
            f'    <text x="{_num(rect.right - 8)}" y="{_num(baseline)}" text-anchor="end" '
            f'font-family="{_FONT_MONO}" font-size="11" '
            f'fill="{palette.type_text}">{_xml_escape(field.type)}</text>'
        )
    lines.append("  </g>")


def _note(lines: list[str], box: NoteBox, palette: Palette) -> None:
    note, rect = box.note, box.rect
    lines.append(f'  <g class="sticky-note" id="note-{_xml_escape(note.id)}">')
    lines.append(
        f'    <rect x="{_num(rect.x)}" y="{_num(rect.y)}" width="{_num(rect.width)}" '
        f'height="{_num(rect.height)}" fill="{_xml_escape(note.color)}" stroke="#d4c36a" />'
    )
    y = rect.y + 20
    for text_line in note.content.splitlines() or [""]:
        lines.append(
            f'    <text x="{_num(rect.x + 10)}" y="{_num(y)}" font-family="{_FONT_SANS}" '
            f'font-size="12" fill="#3b3b3b">{_xml_escape(text_line)}</text>'
        )
        y += 16
    lines.append("  </g>")


def _connections(lines: list[str], scene: Scene, palette: Palette) -> None:
    for path in scene.routing.paths:
        stroke = _xml_escape(path.color) if path.color else palette.line
        lines.append(
            f'  <path class="connection" id="{path.key}" d="{path.d}" fill="none" '
            f'stroke="{stroke}" stroke-width="2" />'
        )
        for label in (path.start_label, path.end_label):
            if label is None:
                continue
            lines.append(
                f'  <text x="{_num(label.position.x)}" y="{_num(label.position.y - 4)}" '
                f'text-anchor="middle" font-family="{_FONT_SANS}" font-size="11" '
                f'font-weight="bold" fill="{palette.label}">{_xml_escape(label.text)}</text>'
            )
    for marker in scene.routing.anchors:
        lines.append(
            f'  <circle cx="{_num(marker.position.x)}" cy="{_num(marker.position.y)}" r="3" '
            f'fill="{palette.line}" />'
        )


def build_svg(scene: Scene, *, layout: LayoutConfig | None = None) -> str:
    """Serialize scene as a standalone SVG document."""
    layout = layout or LayoutConfig()
    palette = PALETTES.get(scene.display.theme, PALETTES["light"])
    bounds = _bounds(scene)
    width, height = _num(bounds.width), _num(bounds.height)

    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
    )
    lines.append(
        f'  <rect x="0" y="0" width="{width}" height="{height}" fill="{palette.background}" />'
    )

    if scene.error is not None:
        lines.append(
            f'  <text class="error" x="20" y="40" font-family="{_FONT_SANS}" font-size="14" '
            f'fill="{palette.error}">Error: {_xml_escape(scene.error)}</text>'
        )
        lines.append("</svg>")
        return "\n".join(lines) + "\n"

    if scene.display.show_grid:
        _grid(lines, scene.display.grid_size, bounds.width, bounds.height, palette)
    for note in scene.notes:
        _note(lines, note, palette)
    _connections(lines, scene, palette)
    for table in scene.tables:
        _table(lines, table, layout, palette)

    lines.append("</svg>")
    return "\n".join(lines) + "\n"

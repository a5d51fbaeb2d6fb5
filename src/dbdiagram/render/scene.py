"""Render pipeline: schema text -> Scene, behind one error boundary.

render_schema() is the only entry point the preview and the CLI use. It
parses, applies Project-level display overrides, places tables, and
routes connections. Any failure along the way (unknown format key, a
bug in layout) is caught here and turned into a Scene carrying an error
message in place of the diagram; callers never see an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from dbdiagram.config.constants import DEFAULT_FORMAT, NOTE_ANCHOR_PREFIX
from dbdiagram.config.models import DiagramConfig, DisplaySettings
from dbdiagram.core.errors import DiagramError, RenderError
from dbdiagram.core.logging import render_context
from dbdiagram.layout.geometry import Rect
from dbdiagram.layout.measure import EstimatedRects, RectProvider
from dbdiagram.layout.placement import place_tables
from dbdiagram.layout.router import ConnectionRouter, RoutingResult
from dbdiagram.parser.registry import parse_schema
from dbdiagram.schema.models import Note, ProjectSettings, Schema, Table

logger = structlog.get_logger()

_MIN_GRID = 4
_MAX_GRID = 200


@dataclass(frozen=True, slots=True)
class Viewport:
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0


@dataclass(frozen=True, slots=True)
class TableBox:
    table: Table
    rect: Rect


@dataclass(frozen=True, slots=True)
class NoteBox:
    note: Note
    rect: Rect


@dataclass(frozen=True, slots=True)
class Scene:
    """Everything needed to draw one diagram, or the error that replaced it."""

    display: DisplaySettings
    viewport: Viewport = Viewport()
    schema: Schema | None = None
    tables: tuple[TableBox, ...] = ()
    notes: tuple[NoteBox, ...] = ()
    routing: RoutingResult = RoutingResult()
    error: str | None = None
    render_id: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return self.ok and not self.tables and not self.notes

    def table_box(self, table_id: str) -> TableBox | None:
        for box in self.tables:
            if box.table.id == table_id:
                return box
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "render_id": self.render_id,
            "error": self.error,
            "display": self.display.model_dump(mode="json"),
            "viewport": {
                "zoom": self.viewport.zoom,
                "pan_x": self.viewport.pan_x,
                "pan_y": self.viewport.pan_y,
            },
            "paths": [
                {
                    "key": p.key,
                    "from": p.from_anchor,
                    "to": p.to_anchor,
                    "d": p.d,
                    "start_label": p.start_label.text if p.start_label else None,
                    "end_label": p.end_label.text if p.end_label else None,
                    "color": p.color,
                }
                for p in self.routing.paths
            ],
            "unresolved": list(self.routing.unresolved),
        }


def effective_display(display: DisplaySettings, project: ProjectSettings) -> DisplaySettings:
    """Global display settings with this document's Project overrides applied."""
    updates: dict[str, Any] = {}
    if project.line_style is not None:
        updates["line_style"] = project.line_style
    if project.show_grid is not None:
        updates["show_grid"] = project.show_grid
    grid = project.grid_size
    if grid is not None and _MIN_GRID <= grid <= _MAX_GRID:
        updates["grid_size"] = grid
    return display.model_copy(update=updates) if updates else display


def viewport_for(project: ProjectSettings) -> Viewport:
    if project.zoom is None and project.pan_x is None and project.pan_y is None:
        return Viewport()
    return Viewport(
        zoom=project.zoom or 1.0,
        pan_x=project.pan_x or 0.0,
        pan_y=project.pan_y or 0.0,
    )


def build_scene(
    schema: Schema,
    *,
    config: DiagramConfig,
    display: DisplaySettings,
    rects: RectProvider | None = None,
    render_id: str | None = None,
) -> Scene:
    """Lay out and route an already parsed schema."""
    display = effective_display(display, schema.project)
    positions = place_tables(schema.tables, config.layout)
    estimated = EstimatedRects.from_schema(schema, config.layout, positions)
    provider = rects if rects is not None else estimated

    routing = ConnectionRouter(config.router).route_schema(schema, provider, display.line_style)

    tables: list[TableBox] = []
    for table in schema.tables:
        rect = provider.rect(table.anchor_id) or estimated.rect(table.anchor_id)
        if rect is not None:
            tables.append(TableBox(table, rect))
    notes: list[NoteBox] = []
    for note in schema.notes:
        rect = estimated.rect(f"{NOTE_ANCHOR_PREFIX}{note.id}")
        if rect is not None:
            notes.append(NoteBox(note, rect))

    return Scene(
        display=display,
        viewport=viewport_for(schema.project),
        schema=schema,
        tables=tuple(tables),
        notes=tuple(notes),
        routing=routing,
        render_id=render_id,
    )


def render_schema(
    text: str,
    fmt: str = DEFAULT_FORMAT,
    *,
    config: DiagramConfig | None = None,
    display: DisplaySettings | None = None,
    rects: RectProvider | None = None,
    source: str | None = None,
) -> Scene:
    """Parse and lay out text. Never raises; failures come back as Scene.error.

    source only labels log events; the text is always taken from the caller.
    """
    config = config or DiagramConfig()
    display = display or config.display
    with render_context(fmt=fmt, source=source) as render_id:
        try:
            if not text.strip():
                return Scene(display=display, render_id=render_id)
            schema = parse_schema(text, fmt)
            scene = build_scene(
                schema, config=config, display=display, rects=rects, render_id=render_id
            )
            logger.debug(
                "scene_rendered",
                tables=len(scene.tables),
                notes=len(scene.notes),
                paths=len(scene.routing.paths),
                diagnostics=len(schema.diagnostics),
            )
            return scene
        except DiagramError as e:
            logger.warning("render_failed", error=e.error_name, message=e.message)
            return Scene(display=display, error=e.message, render_id=render_id)
        except Exception as e:
            logger.exception("render_failed", error=type(e).__name__)
            error = RenderError.failed(str(e) or type(e).__name__)
            return Scene(display=display, error=error.message, render_id=render_id)

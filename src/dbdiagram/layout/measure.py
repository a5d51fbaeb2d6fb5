"""Rectangle providers keyed by anchor id.

The router never measures anything itself. It asks a RectProvider for
the rectangle of `col-<tableId>-<column>` or `table-<tableId>` and gets
back canvas coordinates, or None when nothing by that id is on screen.

MeasuredRects wraps rectangles reported by a host in screen space and
undoes the canvas zoom/pan. EstimatedRects derives rectangles from table
positions alone, for drawing without a host (CLI, SVG export).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from dbdiagram.config.constants import NOTE_ANCHOR_PREFIX, NOTE_ESTIMATED_HEIGHT
from dbdiagram.config.models import LayoutConfig
from dbdiagram.layout.geometry import Point, Rect
from dbdiagram.layout.placement import place_tables
from dbdiagram.schema.models import Schema, column_anchor_id, table_anchor_id


class RectProvider(Protocol):
    def rect(self, anchor_id: str) -> Rect | None: ...


class MeasuredRects:
    """Screen-space rectangles mapped into canvas space.

    canvas = (screen - origin) / scale, where origin is the screen
    position of the canvas' top-left corner.
    """

    def __init__(
        self,
        screen_rects: Mapping[str, Rect],
        *,
        scale: float = 1.0,
        origin: Point = Point(0.0, 0.0),
    ) -> None:
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        self._rects = dict(screen_rects)
        self.scale = scale
        self.origin = origin

    def rect(self, anchor_id: str) -> Rect | None:
        screen = self._rects.get(anchor_id)
        if screen is None:
            return None
        return Rect(
            (screen.x - self.origin.x) / self.scale,
            (screen.y - self.origin.y) / self.scale,
            screen.width / self.scale,
            screen.height / self.scale,
        )

    def __contains__(self, anchor_id: object) -> bool:
        return anchor_id in self._rects


class EstimatedRects:
    """Table, column and sticky-note rectangles from positions and row sizes."""

    def __init__(self, rects: Mapping[str, Rect]) -> None:
        self._rects = dict(rects)

    def rect(self, anchor_id: str) -> Rect | None:
        return self._rects.get(anchor_id)

    def items(self) -> list[tuple[str, Rect]]:
        return list(self._rects.items())

    @classmethod
    def from_schema(
        cls,
        schema: Schema,
        layout: LayoutConfig | None = None,
        positions: Mapping[str, Point] | None = None,
    ) -> EstimatedRects:
        layout = layout or LayoutConfig()
        positions = positions if positions is not None else place_tables(schema.tables, layout)
        rects: dict[str, Rect] = {}

        for table in schema.tables:
            corner = positions.get(table.id)
            if corner is None:
                continue
            width = table.width if table.width else layout.table_width
            height = layout.header_height + layout.row_height * len(table.fields)
            rects[table_anchor_id(table.id)] = Rect(corner.x, corner.y, width, height)
            for row, field in enumerate(table.fields):
                rects[column_anchor_id(table.id, field.name)] = Rect(
                    corner.x,
                    corner.y + layout.header_height + row * layout.row_height,
                    width,
                    layout.row_height,
                )

        for note in schema.notes:
            height = note.height if note.height is not None else NOTE_ESTIMATED_HEIGHT
            rects[f"{NOTE_ANCHOR_PREFIX}{note.id}"] = Rect(note.x, note.y, note.width, height)

        return cls(rects)

"""Default positions for tables that declare none.

A table without x (or y) takes the grid cell of its index in document
order: `origin + (i % columns) * gap_x` across and
`origin + (i // columns) * gap_y` down. Each axis falls back on its own,
so a table with only x set still gets a grid row.
"""

from __future__ import annotations

from collections.abc import Iterable

from dbdiagram.config.models import LayoutConfig
from dbdiagram.layout.geometry import Point
from dbdiagram.schema.models import Table


def grid_position(index: int, layout: LayoutConfig) -> Point:
    return Point(
        layout.origin + (index % layout.columns) * layout.gap_x,
        layout.origin + (index // layout.columns) * layout.gap_y,
    )


def place_tables(tables: Iterable[Table], layout: LayoutConfig | None = None) -> dict[str, Point]:
    """Table id -> top-left corner."""
    layout = layout or LayoutConfig()
    positions: dict[str, Point] = {}
    for index, table in enumerate(tables):
        cell = grid_position(index, layout)
        positions[table.id] = Point(
            table.x if table.x is not None else cell.x,
            table.y if table.y is not None else cell.y,
        )
    return positions

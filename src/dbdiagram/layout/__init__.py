"""Diagram layout: geometry, placement and connection routing."""

from dbdiagram.layout.geometry import Point, Rect
from dbdiagram.layout.highlight import HighlightSet, HighlightState
from dbdiagram.layout.measure import EstimatedRects, MeasuredRects, RectProvider
from dbdiagram.layout.paths import PathCommand, PathOp, build_path, to_svg
from dbdiagram.layout.placement import place_tables
from dbdiagram.layout.router import (
    AnchorMarker,
    ConnectionPath,
    ConnectionRouter,
    Label,
    RoutingResult,
    Side,
    choose_sides,
)

__all__ = [
    "AnchorMarker",
    "ConnectionPath",
    "ConnectionRouter",
    "EstimatedRects",
    "HighlightSet",
    "HighlightState",
    "Label",
    "MeasuredRects",
    "PathCommand",
    "PathOp",
    "Point",
    "Rect",
    "RectProvider",
    "RoutingResult",
    "Side",
    "build_path",
    "choose_sides",
    "place_tables",
    "to_svg",
]

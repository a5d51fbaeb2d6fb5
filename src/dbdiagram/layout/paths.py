"""Path command sequences for each line style.

Every builder takes the same four points:

    start --(horizontal run)--> p1 ... p2 <--(horizontal run)-- end

start/end are the anchors on the table edges; p1/p2 are the anchors
pushed out horizontally by the lane-adjusted offset. Every sequence
begins with a move to start and its final point is end.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from dbdiagram.config.models import LineStyle
from dbdiagram.layout.geometry import Point


class PathOp(StrEnum):
    MOVE = "M"
    LINE = "L"
    QUAD = "Q"
    CUBIC = "C"


@dataclass(frozen=True, slots=True)
class PathCommand:
    op: PathOp
    points: tuple[Point, ...]

    @property
    def end(self) -> Point:
        return self.points[-1]


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def to_svg(commands: Sequence[PathCommand]) -> str:
    """Serialize to an SVG path `d` attribute."""
    parts: list[str] = []
    for cmd in commands:
        coords = " ".join(f"{_fmt(p.x)} {_fmt(p.y)}" for p in cmd.points)
        parts.append(f"{cmd.op.value} {coords}")
    return " ".join(parts)


def first_point(commands: Sequence[PathCommand]) -> Point:
    return commands[0].points[0]


def last_point(commands: Sequence[PathCommand]) -> Point:
    return commands[-1].end


def _move(p: Point) -> PathCommand:
    return PathCommand(PathOp.MOVE, (p,))


def _line(p: Point) -> PathCommand:
    return PathCommand(PathOp.LINE, (p,))


def _quad(control: Point, p: Point) -> PathCommand:
    return PathCommand(PathOp.QUAD, (control, p))


def curve(start: Point, p1: Point, p2: Point, end: Point) -> tuple[PathCommand, ...]:
    return (_move(start), PathCommand(PathOp.CUBIC, (p1, p2, end)))


def oblique(start: Point, p1: Point, p2: Point, end: Point) -> tuple[PathCommand, ...]:
    return (_move(start), _line(p1), _line(p2), _line(end))


def round_oblique(start: Point, p1: Point, p2: Point, end: Point) -> tuple[PathCommand, ...]:
    return (_move(start), _line(p1), _quad(p1.midpoint(p2), p2), _line(end))


def _corners(start: Point, p1: Point, p2: Point, end: Point) -> tuple[Point, Point]:
    mid_x = (p1.x + p2.x) / 2
    return Point(mid_x, start.y), Point(mid_x, end.y)


def rectilinear(start: Point, p1: Point, p2: Point, end: Point) -> tuple[PathCommand, ...]:
    c1, c2 = _corners(start, p1, p2, end)
    return (_move(start), _line(c1), _line(c2), _line(end))


def round_rectilinear(
    start: Point, p1: Point, p2: Point, end: Point, *, radius: float = 15.0
) -> tuple[PathCommand, ...]:
    c1, c2 = _corners(start, p1, p2, end)
    r = min(
        radius,
        abs(c2.y - c1.y) / 2,
        abs(c1.x - start.x) / 2,
        abs(end.x - c2.x) / 2,
    )
    dir_y = 1 if end.y > start.y else -1
    dir_x1 = 1 if c1.x > start.x else -1
    dir_x2 = 1 if end.x > c2.x else -1
    return (
        _move(start),
        _line(Point(c1.x - r * dir_x1, c1.y)),
        _quad(c1, Point(c1.x, c1.y + r * dir_y)),
        _line(Point(c2.x, c2.y - r * dir_y)),
        _quad(c2, Point(c2.x + r * dir_x2, c2.y)),
        _line(end),
    )


_BUILDERS = {
    LineStyle.CURVE: curve,
    LineStyle.RECTILINEAR: rectilinear,
    LineStyle.OBLIQUE: oblique,
    LineStyle.ROUND_OBLIQUE: round_oblique,
}


def build_path(
    style: LineStyle,
    start: Point,
    p1: Point,
    p2: Point,
    end: Point,
    *,
    corner_radius: float = 15.0,
) -> tuple[PathCommand, ...]:
    if style is LineStyle.ROUND_RECTILINEAR:
        return round_rectilinear(start, p1, p2, end, radius=corner_radius)
    builder = _BUILDERS.get(style, curve)
    return builder(start, p1, p2, end)

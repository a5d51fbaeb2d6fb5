"""Plain 2-D geometry in canvas coordinates (y grows downward)."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float

    def offset(self, dx: float = 0.0, dy: float = 0.0) -> Point:
        return Point(self.x + dx, self.y + dy)

    def midpoint(self, other: Point) -> Point:
        return Point((self.x + other.x) / 2, (self.y + other.y) / 2)

    def towards(self, target: Point, distance: float) -> Point:
        """The point `distance` along the ray from self through target."""
        dx = target.x - self.x
        dy = target.y - self.y
        length = math.hypot(dx, dy) or 1.0
        ratio = distance / length
        return Point(self.x + dx * ratio, self.y + dy * ratio)


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def spans_overlap(self, other: Rect) -> bool:
        """True when the horizontal extents intersect."""
        return self.x < other.right and self.right > other.x

    def union(self, other: Rect) -> Rect:
        left = min(self.x, other.x)
        top = min(self.y, other.y)
        return Rect(
            left,
            top,
            max(self.right, other.right) - left,
            max(self.bottom, other.bottom) - top,
        )

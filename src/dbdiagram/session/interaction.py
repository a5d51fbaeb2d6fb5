"""Drag and resize of tables and sticky notes.

Pointer moves update the element's rectangle continuously (and notify
on_move so connections can be redrawn), but nothing is written until
release(), which yields exactly one SchemaEdit with integer values.
Pointer deltas are in screen pixels and are divided by the current zoom.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from dbdiagram.core.errors import PatchError
from dbdiagram.layout.geometry import Point, Rect
from dbdiagram.patcher.edits import EntityKind, SchemaEdit


class InteractionMode(StrEnum):
    NONE = "none"
    DRAG = "drag"
    RESIZE = "resize"


@dataclass(frozen=True, slots=True)
class ActiveElement:
    kind: EntityKind
    name: str
    initial: Rect
    pointer: Point


def _round(value: float) -> int:
    """Round half up, like a browser's Math.round."""
    return math.floor(value + 0.5)


class InteractionController:
    def __init__(
        self,
        *,
        min_size: float = 100.0,
        scale: float = 1.0,
        on_move: Callable[[EntityKind, str, Rect], None] | None = None,
    ) -> None:
        self.min_size = min_size
        self.scale = scale
        self.on_move = on_move
        self.mode = InteractionMode.NONE
        self._active: ActiveElement | None = None
        self._current: Rect | None = None

    @property
    def active(self) -> bool:
        return self._active is not None

    @property
    def current_rect(self) -> Rect | None:
        return self._current

    def update_scale(self, scale: float) -> None:
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        self.scale = scale

    def begin_drag(self, kind: EntityKind, name: str, rect: Rect, pointer: Point) -> None:
        self._begin(InteractionMode.DRAG, kind, name, rect, pointer)

    def begin_resize(self, kind: EntityKind, name: str, rect: Rect, pointer: Point) -> None:
        self._begin(InteractionMode.RESIZE, kind, name, rect, pointer)

    def _begin(
        self, mode: InteractionMode, kind: EntityKind, name: str, rect: Rect, pointer: Point
    ) -> None:
        if kind is EntityKind.PROJECT:
            raise PatchError.invalid_edit("the project cannot be dragged", name=name)
        self.mode = mode
        self._active = ActiveElement(kind, name, rect, pointer)
        self._current = rect

    def move(self, pointer: Point) -> Rect | None:
        """Track the pointer. Returns the element's new rectangle."""
        active = self._active
        if active is None:
            return None
        dx = (pointer.x - active.pointer.x) / self.scale
        dy = (pointer.y - active.pointer.y) / self.scale
        start = active.initial

        if self.mode is InteractionMode.DRAG:
            rect = Rect(start.x + dx, start.y + dy, start.width, start.height)
        else:
            width = max(self.min_size, start.width + dx)
            height = start.height
            if active.kind is EntityKind.NOTE:
                height = max(self.min_size, start.height + dy)
            rect = Rect(start.x, start.y, width, height)

        self._current = rect
        if self.on_move is not None:
            self.on_move(active.kind, active.name, rect)
        return rect

    def release(self) -> SchemaEdit | None:
        """Finish the gesture and return the edit to commit."""
        active, rect = self._active, self._current
        self.cancel()
        if active is None or rect is None:
            return None
        x, y = _round(rect.x), _round(rect.y)
        width, height = _round(rect.width), _round(rect.height)
        if active.kind is EntityKind.NOTE:
            return SchemaEdit.move_note(active.name, x, y, width, height)
        return SchemaEdit.move_table(active.name, x, y, width)

    def cancel(self) -> None:
        self.mode = InteractionMode.NONE
        self._active = None
        self._current = None

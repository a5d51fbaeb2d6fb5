"""Render pipeline and SVG export."""

from dbdiagram.render.scene import (
    NoteBox,
    Scene,
    TableBox,
    Viewport,
    build_scene,
    effective_display,
    render_schema,
)
from dbdiagram.render.svg import build_svg

__all__ = [
    "NoteBox",
    "Scene",
    "TableBox",
    "Viewport",
    "build_scene",
    "build_svg",
    "effective_display",
    "render_schema",
]

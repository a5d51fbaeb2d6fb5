"""Semantic edits produced by diagram interaction."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

Scalar = int | float | bool | str


class EntityKind(StrEnum):
    TABLE = "table"
    NOTE = "note"
    PROJECT = "project"


@dataclass(frozen=True, slots=True)
class SchemaEdit:
    """One change to write back into the source.

    identity is the entity's name as written in the source (quotes and
    whitespace are ignored when matching). For PROJECT it names the block
    to create when the document has none and may be None.
    values keeps insertion order; appended keys are written in that order.
    """

    kind: EntityKind
    identity: str | None
    values: Mapping[str, Scalar] = field(default_factory=dict)

    @classmethod
    def move_table(
        cls, name: str, x: float, y: float, width: float | None = None
    ) -> SchemaEdit:
        values: dict[str, Scalar] = {"x": x, "y": y}
        if width is not None:
            values["width"] = width
        return cls(EntityKind.TABLE, name, values)

    @classmethod
    def move_note(
        cls, name: str, x: float, y: float, width: float, height: float
    ) -> SchemaEdit:
        return cls(EntityKind.NOTE, name, {"x": x, "y": y, "width": width, "height": height})

    @classmethod
    def set_project(cls, values: Mapping[str, Any], name: str | None = None) -> SchemaEdit:
        return cls(EntityKind.PROJECT, name, dict(values))

"""Hover highlight state for a routed diagram.

At most one highlight set is active. Hovering a line, a column or a
table replaces it; mouse-out clears it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from dbdiagram.layout.router import ConnectionPath, RoutingResult


@dataclass(frozen=True, slots=True)
class HighlightSet:
    """Ids to render highlighted.

    paths: path keys. elements: column and table anchor ids.
    anchors: anchor ids whose endpoint markers light up.
    """

    paths: frozenset[str] = frozenset()
    elements: frozenset[str] = frozenset()
    anchors: frozenset[str] = frozenset()

    def __contains__(self, item: object) -> bool:
        return item in self.paths or item in self.elements or item in self.anchors


def _collect(
    lines: Iterable[ConnectionPath], elements: set[str] | None = None
) -> HighlightSet:
    paths: set[str] = set()
    found = set(elements or ())
    anchors: set[str] = set()
    for line in lines:
        paths.add(line.key)
        found.update((line.from_anchor, line.to_anchor))
        anchors.update((line.from_anchor, line.to_anchor))
    return HighlightSet(frozenset(paths), frozenset(found), frozenset(anchors))


class HighlightState:
    def __init__(self, routing: RoutingResult) -> None:
        self._routing = routing
        self.active: HighlightSet | None = None

    def hover_line(self, path_key: str) -> HighlightSet | None:
        line = self._routing.path(path_key)
        self.active = _collect([line]) if line is not None else None
        return self.active

    def hover_column(self, anchor_id: str) -> HighlightSet:
        lines = [
            p for p in self._routing.paths if anchor_id in (p.from_anchor, p.to_anchor)
        ]
        self.active = _collect(lines, {anchor_id})
        return self.active

    def hover_table(self, table_anchor: str) -> HighlightSet:
        lines = [
            p
            for p in self._routing.paths
            if table_anchor in (p.from_table_anchor, p.to_table_anchor)
        ]
        self.active = _collect(lines, {table_anchor})
        return self.active

    def clear(self) -> None:
        self.active = None

    def is_highlighted(self, item: str) -> bool:
        return self.active is not None and item in self.active

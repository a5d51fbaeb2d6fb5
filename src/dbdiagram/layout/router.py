"""Connection router: relationships + measured rectangles -> drawable paths.

One path is produced per positional column pair of every relationship
whose two endpoints can be measured. Routing runs in four passes:

1. Sides. If the two rectangles overlap horizontally both ends use the
   right edge and the path bows out past both (U-turn). Otherwise the
   left rectangle exits right and the right rectangle enters left.
2. Slots. Endpoints sharing one anchor are sorted by the other end's
   center Y and spread over the row: slot i of n sits at
   `y + height * (i + 1) / (n + 1)`.
3. Lanes. Endpoints on the same side of the same table are sorted top
   to bottom (rows within 1px tie on the other end's Y). When the group
   travels downward the topmost gets the outermost lane; upward, the
   innermost.
4. Paths and labels. The horizontal run off each anchor is
   `clamp(|dx| / 3, min_straight, max_straight) + lane * lane_spacing`.
   Cardinality glyphs sit `label_offset` along that run, pushed out by
   `stagger * label_stagger` when a new glyph joins a crowded anchor.

The router is a pure function of its inputs and keeps no state between
calls.
"""

from __future__ import annotations

import functools
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

import structlog

from dbdiagram.config.models import LineStyle, RouterConfig
from dbdiagram.layout.geometry import Point, Rect
from dbdiagram.layout.measure import RectProvider
from dbdiagram.layout.paths import PathCommand, build_path, to_svg
from dbdiagram.schema.models import (
    Relationship,
    Schema,
    column_anchor_id,
    sanitize_id,
    table_anchor_id,
)

logger = structlog.get_logger()


class Side(StrEnum):
    LEFT = "left"
    RIGHT = "right"


def choose_sides(from_rect: Rect, to_rect: Rect) -> tuple[Side, Side, bool]:
    """(from side, to side, is U-turn) for one pair of rectangles."""
    if from_rect.spans_overlap(to_rect):
        return Side.RIGHT, Side.RIGHT, True
    if from_rect.x < to_rect.x:
        return Side.RIGHT, Side.LEFT, False
    return Side.LEFT, Side.RIGHT, False


@dataclass(frozen=True, slots=True)
class Label:
    text: str
    position: Point
    stagger: int = 0


@dataclass(frozen=True, slots=True)
class ConnectionPath:
    """Geometry for one drawn column pair."""

    key: str
    relationship_index: int
    pair_index: int
    from_anchor: str
    to_anchor: str
    from_table_anchor: str
    to_table_anchor: str
    start: Point
    end: Point
    control_start: Point
    control_end: Point
    commands: tuple[PathCommand, ...]
    style: LineStyle
    start_label: Label | None = None
    end_label: Label | None = None
    color: str | None = None
    from_slot: tuple[int, int] = (0, 1)
    to_slot: tuple[int, int] = (0, 1)
    from_lane: int = 0
    to_lane: int = 0
    u_turn: bool = False

    @property
    def d(self) -> str:
        return to_svg(self.commands)


@dataclass(frozen=True, slots=True)
class AnchorMarker:
    anchor_id: str
    position: Point
    path_key: str


@dataclass(frozen=True, slots=True)
class RoutingResult:
    paths: tuple[ConnectionPath, ...] = ()
    anchors: tuple[AnchorMarker, ...] = ()
    unresolved: tuple[str, ...] = ()

    def for_relationship(self, index: int) -> list[ConnectionPath]:
        return [p for p in self.paths if p.relationship_index == index]

    def path(self, key: str) -> ConnectionPath | None:
        for p in self.paths:
            if p.key == key:
                return p
        return None


@dataclass(eq=False)
class _Endpoint:
    anchor: str
    table_anchor: str
    rect: Rect
    side: Side
    other_y: float
    glyph: str
    slot: int = 0
    slot_total: int = 1
    lane: int = 0
    label: str | None = None
    stagger: int = 0


@dataclass(eq=False)
class _Entry:
    key: str
    relationship_index: int
    pair_index: int
    relationship: Relationship
    source: _Endpoint
    target: _Endpoint
    u_turn: bool


def _compare_lane_order(a: _Endpoint, b: _Endpoint) -> float:
    if abs(a.rect.y - b.rect.y) > 1:
        return a.rect.y - b.rect.y
    return a.other_y - b.other_y


class ConnectionRouter:
    """Computes paths for relationships against a rectangle provider."""

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config = config or RouterConfig()

    def route_schema(
        self,
        schema: Schema,
        rects: RectProvider,
        style: LineStyle = LineStyle.CURVE,
    ) -> RoutingResult:
        return self.route(schema.relationships, rects, style, schema=schema)

    def route(
        self,
        relationships: Sequence[Relationship],
        rects: RectProvider,
        style: LineStyle = LineStyle.CURVE,
        *,
        schema: Schema | None = None,
    ) -> RoutingResult:
        entries, unresolved = self._collect(relationships, rects, schema)
        self._assign_slots(entries)
        self._assign_lanes(entries)
        paths, anchors = self._draw(entries, style)

        logger.debug(
            "connections_routed",
            relationships=len(relationships),
            paths=len(paths),
            unresolved=len(unresolved),
            style=style.value,
        )
        return RoutingResult(
            paths=tuple(paths),
            anchors=tuple(anchors),
            unresolved=tuple(unresolved),
        )

    # -------------------------------------------------------------------------
    # Pass 0: resolve anchors
    # -------------------------------------------------------------------------

    @staticmethod
    def _table_id(name: str, schema: Schema | None) -> str:
        if schema is not None:
            table_id = schema.table_id(name)
            if table_id is not None:
                return table_id
        return sanitize_id(name)

    @staticmethod
    def _measure(rects: RectProvider, table_id: str, column: str) -> tuple[str, Rect | None]:
        anchor = column_anchor_id(table_id, column)
        rect = rects.rect(anchor)
        if rect is None:
            rect = rects.rect(table_anchor_id(table_id))
        return anchor, rect

    def _collect(
        self,
        relationships: Sequence[Relationship],
        rects: RectProvider,
        schema: Schema | None,
    ) -> tuple[list[_Entry], list[str]]:
        entries: list[_Entry] = []
        unresolved: list[str] = []

        for rel_index, rel in enumerate(relationships):
            from_id = self._table_id(rel.from_table, schema)
            to_id = self._table_id(rel.to_table, schema)
            from_glyph, to_glyph = rel.cardinality.glyphs

            for pair_index, (from_col, to_col) in enumerate(rel.pairs):
                key = f"rel-{rel_index}-{pair_index}"
                from_anchor, from_rect = self._measure(rects, from_id, from_col)
                to_anchor, to_rect = self._measure(rects, to_id, to_col)
                if from_rect is None or to_rect is None:
                    unresolved.append(key)
                    continue

                from_side, to_side, u_turn = choose_sides(from_rect, to_rect)
                first = pair_index == 0
                entries.append(
                    _Entry(
                        key=key,
                        relationship_index=rel_index,
                        pair_index=pair_index,
                        relationship=rel,
                        source=_Endpoint(
                            anchor=from_anchor,
                            table_anchor=table_anchor_id(from_id),
                            rect=from_rect,
                            side=from_side,
                            other_y=to_rect.center_y,
                            glyph=from_glyph if first else "",
                        ),
                        target=_Endpoint(
                            anchor=to_anchor,
                            table_anchor=table_anchor_id(to_id),
                            rect=to_rect,
                            side=to_side,
                            other_y=from_rect.center_y,
                            glyph=to_glyph if first else "",
                        ),
                        u_turn=u_turn,
                    )
                )

        return entries, unresolved

    # -------------------------------------------------------------------------
    # Pass 1: vertical slots and label staggering per shared anchor
    # -------------------------------------------------------------------------

    @staticmethod
    def _assign_slots(entries: list[_Entry]) -> None:
        groups: dict[str, list[_Endpoint]] = defaultdict(list)
        for entry in entries:
            groups[entry.source.anchor].append(entry.source)
            groups[entry.target.anchor].append(entry.target)

        for group in groups.values():
            group.sort(key=lambda ep: ep.other_y)
            seen: set[str] = set()
            counter = 0
            for index, ep in enumerate(group):
                ep.slot = index
                ep.slot_total = len(group)
                if not ep.glyph:
                    continue
                ep.label = ep.glyph
                if ep.glyph in seen:
                    ep.stagger = 0
                else:
                    seen.add(ep.glyph)
                    ep.stagger = counter
                    counter += 1

    # -------------------------------------------------------------------------
    # Pass 2: horizontal lanes per table side
    # -------------------------------------------------------------------------

    @staticmethod
    def _assign_lanes(entries: list[_Entry]) -> None:
        groups: dict[tuple[str, Side], list[_Endpoint]] = defaultdict(list)
        for entry in entries:
            for ep in (entry.source, entry.target):
                groups[(ep.table_anchor, ep.side)].append(ep)

        for group in groups.values():
            if len(group) <= 1:
                continue
            mean_own = sum(ep.rect.y for ep in group) / len(group)
            mean_other = sum(ep.other_y for ep in group) / len(group)
            going_down = mean_other > mean_own

            group.sort(key=functools.cmp_to_key(_compare_lane_order))
            last = len(group) - 1
            for index, ep in enumerate(group):
                ep.lane = last - index if going_down else index

    # -------------------------------------------------------------------------
    # Pass 3: geometry
    # -------------------------------------------------------------------------

    def _anchor_point(self, ep: _Endpoint) -> Point:
        x = ep.rect.right if ep.side is Side.RIGHT else ep.rect.left
        y = ep.rect.y + ep.rect.height * (ep.slot + 1) / (ep.slot_total + 1)
        return Point(x, y)

    def _label(self, ep: _Endpoint, anchor: Point, toward: Point) -> Label | None:
        if ep.label is None:
            return None
        distance = self.config.label_offset + ep.stagger * self.config.label_stagger
        return Label(text=ep.label, position=anchor.towards(toward, distance), stagger=ep.stagger)

    def _draw(
        self, entries: list[_Entry], style: LineStyle
    ) -> tuple[list[ConnectionPath], list[AnchorMarker]]:
        cfg = self.config
        paths: list[ConnectionPath] = []
        anchors: list[AnchorMarker] = []

        for entry in entries:
            src, dst = entry.source, entry.target
            start = self._anchor_point(src)
            end = self._anchor_point(dst)

            base = max(cfg.min_straight, min(cfg.max_straight, abs(end.x - start.x) / 3))
            if entry.u_turn:
                bow = max(cfg.u_turn_min, abs(end.y - start.y) * cfg.u_turn_ratio)
                lane = max(src.lane, dst.lane)
                x = max(start.x, end.x) + bow + lane * cfg.lane_spacing
                p1 = Point(x, start.y)
                p2 = Point(x, end.y)
            else:
                dir_start = 1 if src.side is Side.RIGHT else -1
                dir_end = 1 if dst.side is Side.RIGHT else -1
                p1 = start.offset(dx=(base + src.lane * cfg.lane_spacing) * dir_start)
                p2 = end.offset(dx=(base + dst.lane * cfg.lane_spacing) * dir_end)

            commands = build_path(style, start, p1, p2, end, corner_radius=cfg.corner_radius)
            paths.append(
                ConnectionPath(
                    key=entry.key,
                    relationship_index=entry.relationship_index,
                    pair_index=entry.pair_index,
                    from_anchor=src.anchor,
                    to_anchor=dst.anchor,
                    from_table_anchor=src.table_anchor,
                    to_table_anchor=dst.table_anchor,
                    start=start,
                    end=end,
                    control_start=p1,
                    control_end=p2,
                    commands=commands,
                    style=style,
                    start_label=self._label(src, start, p1),
                    end_label=self._label(dst, end, p2),
                    color=entry.relationship.color,
                    from_slot=(src.slot, src.slot_total),
                    to_slot=(dst.slot, dst.slot_total),
                    from_lane=src.lane,
                    to_lane=dst.lane,
                    u_turn=entry.u_turn,
                )
            )
            anchors.append(AnchorMarker(anchor_id=src.anchor, position=start, path_key=entry.key))
            anchors.append(AnchorMarker(anchor_id=dst.anchor, position=end, path_key=entry.key))

        return paths, anchors

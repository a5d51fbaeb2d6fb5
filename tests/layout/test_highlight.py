"""Tests for hover highlight state."""

from dbdiagram.layout.geometry import Rect
from dbdiagram.layout.highlight import HighlightState
from dbdiagram.layout.measure import EstimatedRects
from dbdiagram.layout.router import ConnectionRouter, RoutingResult
from dbdiagram.schema.models import Relationship


def _routing() -> RoutingResult:
    rects = EstimatedRects(
        {
            "col-users-id": Rect(0, 30, 200, 30),
            "col-posts-user_id": Rect(400, 290, 200, 20),
            "col-comments-user_id": Rect(400, 90, 200, 20),
        }
    )
    return ConnectionRouter().route(
        [
            Relationship("users", ("id",), "posts", ("user_id",)),
            Relationship("users", ("id",), "comments", ("user_id",)),
        ],
        rects,
    )


class TestHighlightState:
    """Hover behavior tests."""

    def test_given_line_hover_when_highlighted_then_both_ends_lit(self) -> None:
        state = HighlightState(_routing())

        active = state.hover_line("rel-0-0")

        assert active is not None
        assert active.paths == frozenset({"rel-0-0"})
        assert active.anchors == frozenset({"col-users-id", "col-posts-user_id"})
        assert state.is_highlighted("col-posts-user_id")
        assert not state.is_highlighted("rel-1-0")

    def test_given_column_hover_when_highlighted_then_all_its_lines(self) -> None:
        state = HighlightState(_routing())

        active = state.hover_column("col-users-id")

        assert active.paths == frozenset({"rel-0-0", "rel-1-0"})
        assert "col-comments-user_id" in active.elements

    def test_given_table_hover_when_highlighted_then_lines_touching_table(self) -> None:
        state = HighlightState(_routing())

        active = state.hover_table("table-posts")

        assert active.paths == frozenset({"rel-0-0"})
        assert "table-posts" in active.elements

    def test_given_new_hover_when_highlighted_then_previous_replaced(self) -> None:
        state = HighlightState(_routing())
        state.hover_line("rel-0-0")

        state.hover_line("rel-1-0")

        assert state.is_highlighted("rel-1-0")
        assert not state.is_highlighted("rel-0-0")

    def test_given_clear_when_highlighted_then_nothing_lit(self) -> None:
        state = HighlightState(_routing())
        state.hover_column("col-users-id")

        state.clear()

        assert state.active is None
        assert not state.is_highlighted("rel-0-0")

    def test_given_unknown_line_when_hovered_then_cleared(self) -> None:
        state = HighlightState(_routing())

        assert state.hover_line("rel-9-0") is None
        assert state.active is None

"""Tests for the live preview session."""

import asyncio
from pathlib import Path

import pytest

from dbdiagram.config.models import DiagramConfig, LineStyle, PreviewConfig
from dbdiagram.config.store import SettingsStore
from dbdiagram.layout.geometry import Point, Rect
from dbdiagram.patcher.document import Document, FileDocument, TextDocument
from dbdiagram.patcher.edits import EntityKind, SchemaEdit
from dbdiagram.render.scene import Scene
from dbdiagram.session.preview import PreviewSession

SOURCE = "Table users {\n  id int [pk]\n}\nTable posts {\n  user_id int [ref: > users.id]\n}\n"


def _session(
    document: Document, scenes: list[Scene], store: SettingsStore | None = None
) -> PreviewSession:
    config = DiagramConfig(preview=PreviewConfig(debounce_sec=0.01))
    return PreviewSession(document, config=config, store=store, on_render=scenes.append)


class TestPreviewSession:
    """Render scheduling and write-back tests."""

    @pytest.mark.asyncio
    async def test_given_document_when_rendered_then_scene_delivered(self) -> None:
        scenes: list[Scene] = []
        session = _session(TextDocument(SOURCE), scenes)

        scene = session.render_now()

        assert scene is not None
        assert scenes == [scene]
        assert [box.table.name for box in scene.tables] == ["users", "posts"]
        assert len(scene.routing.paths) == 1
        await session.dispose()

    @pytest.mark.asyncio
    async def test_given_typing_burst_when_changed_then_one_render(self) -> None:
        # Given
        scenes: list[Scene] = []
        session = _session(TextDocument(SOURCE), scenes)

        # When
        for _ in range(4):
            session.text_changed()
        assert session.render_pending
        await asyncio.sleep(0.15)

        # Then
        assert session.renders == 1
        await session.dispose()

    @pytest.mark.asyncio
    async def test_given_settings_change_when_updated_then_immediate_render(self) -> None:
        scenes: list[Scene] = []
        store = SettingsStore()
        session = _session(TextDocument(SOURCE), scenes, store)

        store.update(line_style="Oblique")

        assert session.renders == 1
        assert scenes[0].display.line_style == LineStyle.OBLIQUE
        await session.dispose()

    @pytest.mark.asyncio
    async def test_given_drag_when_released_then_document_patched(self) -> None:
        # Given
        document = TextDocument(SOURCE)
        session = _session(document, [])
        session.interaction.begin_drag(
            EntityKind.TABLE, "users", Rect(50, 50, 220, 64), Point(0, 0)
        )
        session.interaction.move(Point(30.4, 20.6))

        # When
        committed = session.release()

        # Then
        assert committed
        assert document.read_text().startswith("Table users [x: 80, y: 71, width: 220] {")
        await session.dispose()

    @pytest.mark.asyncio
    async def test_given_pending_render_when_flushed_then_rendered(self) -> None:
        config = DiagramConfig(preview=PreviewConfig(debounce_sec=10.0))
        session = PreviewSession(TextDocument(SOURCE), config=config)
        session.text_changed()

        await session.flush()

        assert session.renders == 1
        assert session.scene is not None
        await session.dispose()

    @pytest.mark.asyncio
    async def test_given_disposed_when_used_then_inert(self) -> None:
        """After dispose nothing renders and nothing is written."""
        # Given
        document = TextDocument(SOURCE)
        store = SettingsStore()
        session = _session(document, [], store)
        session.text_changed()

        # When
        await session.dispose()
        session.text_changed()
        store.update(show_grid=False)
        await asyncio.sleep(0.05)

        # Then
        assert session.disposed
        assert session.renders == 0
        assert session.render_now() is None
        assert not session.commit(SchemaEdit.move_table("users", 1, 2))
        assert document.revision == 0

    @pytest.mark.asyncio
    async def test_given_broken_text_when_rendered_then_error_scene(self) -> None:
        config = DiagramConfig()
        session = PreviewSession(TextDocument(SOURCE), fmt="xyz", config=config)

        scene = session.render_now()

        assert scene is not None
        assert scene.error == "Unsupported format: xyz"
        await session.dispose()

    @pytest.mark.asyncio
    async def test_given_deleted_file_when_rendered_then_error_scene(self, tmp_path: Path) -> None:
        """A source file that vanished mid-session renders as an error, not an exception."""
        # Given
        path = tmp_path / "shop.dbml"
        path.write_text(SOURCE, encoding="utf-8")
        scenes: list[Scene] = []
        session = _session(FileDocument(path), scenes)
        assert session.render_now() is not None
        path.unlink()

        # When
        scene = session.render_now()

        # Then
        assert scene is not None
        assert scene.error is not None
        assert scene.error.startswith("Error rendering diagram: cannot read source")
        assert scenes[-1] is scene
        assert session.renders == 2
        await session.dispose()

    @pytest.mark.asyncio
    async def test_given_undecodable_file_when_rendered_then_error_scene(
        self, tmp_path: Path
    ) -> None:
        path = tmp_path / "shop.dbml"
        path.write_bytes(b"Table \xff\xfe {\n}\n")
        session = PreviewSession(FileDocument(path))

        scene = session.render_now()

        assert scene is not None
        assert not scene.ok
        await session.dispose()

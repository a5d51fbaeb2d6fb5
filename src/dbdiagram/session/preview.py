"""Live preview session for one schema document.

Ties the pieces an editor integration needs together:

- text changes re-render through a Debouncer,
- global display setting changes re-render immediately,
- a finished drag/resize is committed as one patch to the document.

The host reports text changes (including the ones our own commits cause)
by calling text_changed(). After dispose() the session renders nothing
and commits nothing.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from dbdiagram.config.constants import DEFAULT_FORMAT
from dbdiagram.config.models import DiagramConfig
from dbdiagram.config.store import SettingsChanged, SettingsStore
from dbdiagram.core.errors import RenderError
from dbdiagram.layout.measure import RectProvider
from dbdiagram.patcher.document import Document
from dbdiagram.patcher.edits import SchemaEdit
from dbdiagram.patcher.patcher import SourcePatcher
from dbdiagram.render.scene import Scene, render_schema
from dbdiagram.session.debounce import Debouncer
from dbdiagram.session.interaction import InteractionController

logger = structlog.get_logger()


class PreviewSession:
    def __init__(
        self,
        document: Document,
        *,
        fmt: str = DEFAULT_FORMAT,
        config: DiagramConfig | None = None,
        store: SettingsStore | None = None,
        on_render: Callable[[Scene], None] | None = None,
        source: str | None = None,
    ) -> None:
        self.document = document
        self.fmt = fmt
        self.source = source
        self.config = config or DiagramConfig()
        self.store = store or SettingsStore(self.config.display)
        self.on_render = on_render
        self.patcher = SourcePatcher()
        self.interaction = InteractionController(min_size=self.config.preview.min_size)
        self.rects: RectProvider | None = None
        self.scene: Scene | None = None
        self.renders = 0
        self._disposed = False
        self._debouncer = Debouncer(self.render_now, delay=self.config.preview.debounce_sec)
        self._unsubscribe = self.store.subscribe(self._on_settings_changed)

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def render_pending(self) -> bool:
        return self._debouncer.pending

    def text_changed(self) -> None:
        """Schedule a re-render after the quiet period."""
        if self._disposed:
            return
        self._debouncer.trigger()

    def render_now(self) -> Scene | None:
        if self._disposed:
            return None
        try:
            text = self.document.read_text()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("source_unreadable", error=type(e).__name__, detail=str(e))
            error = RenderError.failed(f"cannot read source ({e})")
            scene = Scene(display=self.store.current, error=error.message)
        else:
            scene = render_schema(
                text,
                self.fmt,
                config=self.config,
                display=self.store.current,
                rects=self.rects,
                source=self.source,
            )
        self.scene = scene
        self.renders += 1
        if self.on_render is not None:
            self.on_render(scene)
        return scene

    async def flush(self) -> None:
        """Render now if a debounced render is waiting."""
        await self._debouncer.flush()

    def commit(self, edit: SchemaEdit) -> bool:
        """Write edit to the document. False when dropped."""
        if self._disposed:
            logger.debug("patch_dropped", reason="session_disposed", kind=str(edit.kind))
            return False
        return self.patcher.apply(self.document, edit)

    def release(self) -> bool:
        """End the current drag/resize and commit its edit."""
        edit = self.interaction.release()
        if edit is None:
            return False
        return self.commit(edit)

    def _on_settings_changed(self, event: SettingsChanged) -> None:
        logger.debug("preview_settings_changed", changed=sorted(event.changed))
        self.render_now()

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._unsubscribe()
        self.interaction.cancel()
        await self._debouncer.dispose()

"""dbd watch command - re-render a schema file to SVG whenever it changes."""

import asyncio
import contextlib
from pathlib import Path

import click
import structlog
from watchfiles import awatch

from dbdiagram.cli.utils import get_config
from dbdiagram.config.models import DiagramConfig
from dbdiagram.core.progress import status
from dbdiagram.parser.registry import format_for_path
from dbdiagram.patcher.document import FileDocument
from dbdiagram.render.scene import Scene
from dbdiagram.render.svg import build_svg
from dbdiagram.session.preview import PreviewSession

logger = structlog.get_logger()


async def watch_file(
    source: Path,
    output: Path,
    config: DiagramConfig,
    *,
    stop_event: asyncio.Event | None = None,
) -> int:
    """Render source to output now and after every change until stopped.

    Returns the number of renders performed.
    """
    stop_event = stop_event or asyncio.Event()

    def write_svg(scene: Scene) -> None:
        output.write_text(build_svg(scene, layout=config.layout), encoding="utf-8")
        if scene.error is not None:
            status(f"{source.name}: {scene.error}", style="error")
        else:
            status(f"Rendered {source.name} -> {output.name}", style="success")

    session = PreviewSession(
        FileDocument(source),
        fmt=format_for_path(source),
        config=config,
        on_render=write_svg,
        source=str(source),
    )
    session.render_now()
    logger.info("watch_started", source=str(source), output=str(output))

    try:
        async for changes in awatch(
            source.parent,
            watch_filter=lambda _change, path: Path(path).name == source.name,
            recursive=False,
            stop_event=stop_event,
            debounce=50,
        ):
            logger.debug("source_changed", count=len(changes))
            if source.exists():
                session.text_changed()
        await session.flush()
    finally:
        renders = session.renders
        await session.dispose()
        logger.info("watch_stopped", source=str(source), renders=renders)
    return renders


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="SVG file to keep up to date",
)
@click.pass_context
def watch_command(ctx: click.Context, file: Path, output: Path) -> None:
    """Watch FILE and re-render it to OUTPUT on every change. Ctrl-C stops."""
    config = get_config(ctx)
    status(f"Watching {file} (Ctrl-C to stop)", style="info")
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(watch_file(file, output, config))

"""dbd render command - export a schema file as SVG."""

from pathlib import Path

import click

from dbdiagram.cli.utils import get_config, parse_line_style, read_source
from dbdiagram.config.models import LineStyle
from dbdiagram.core.progress import pluralize, spinner, status
from dbdiagram.render.scene import render_schema
from dbdiagram.render.svg import build_svg


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="SVG file to write (default: FILE with an .svg suffix)",
)
@click.option(
    "--line-style",
    callback=parse_line_style,
    default=None,
    help="Connection style: Curve, Rectilinear, RoundRectilinear, Oblique, RoundOblique",
)
@click.option("--theme", type=click.Choice(["light", "dark"]), default=None, help="Color theme")
@click.pass_context
def render_command(
    ctx: click.Context,
    file: Path,
    output: Path | None,
    line_style: LineStyle | None,
    theme: str | None,
) -> None:
    """Render FILE to an SVG diagram.

    Tables without a position are laid out on a grid. A line style or
    grid setting in the file's Project block still overrides --line-style.
    """
    config = get_config(ctx)
    updates: dict[str, object] = {}
    if line_style is not None:
        updates["line_style"] = line_style
    if theme is not None:
        updates["theme"] = theme
    display = config.display.model_copy(update=updates) if updates else config.display

    text, fmt = read_source(file)
    with spinner(f"Rendering {file.name}"):
        scene = render_schema(text, fmt, config=config, display=display, source=str(file))
        svg = build_svg(scene, layout=config.layout)

    target = output or file.with_suffix(".svg")
    target.write_text(svg, encoding="utf-8")

    if scene.error is not None:
        raise click.ClickException(scene.error)
    status(
        f"Wrote {target} ({pluralize(len(scene.tables), 'table')}, "
        f"{pluralize(len(scene.routing.paths), 'connection')})",
        style="success",
    )

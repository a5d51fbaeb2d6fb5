"""dbd routes command - print routed connection paths as JSON."""

import json
from pathlib import Path

import click

from dbdiagram.cli.utils import get_config, parse_line_style, read_source
from dbdiagram.config.models import LineStyle
from dbdiagram.render.scene import render_schema


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--line-style",
    callback=parse_line_style,
    default=None,
    help="Connection style: Curve, Rectilinear, RoundRectilinear, Oblique, RoundOblique",
)
@click.pass_context
def routes_command(ctx: click.Context, file: Path, line_style: LineStyle | None) -> None:
    """Route the connections of FILE and print one JSON record per path."""
    config = get_config(ctx)
    display = config.display
    if line_style is not None:
        display = display.model_copy(update={"line_style": line_style})

    text, fmt = read_source(file)
    scene = render_schema(text, fmt, config=config, display=display, source=str(file))
    if scene.error is not None:
        raise click.ClickException(scene.error)
    click.echo(json.dumps(scene.to_dict(), indent=2))
